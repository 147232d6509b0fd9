from __future__ import annotations

from dataclasses import dataclass
from typing import MutableMapping

from .auth.client import AuthClient
from .auth.mysql_account_repository import MySQLAccountRepository
from .auth.profiles import DocumentProfileRepository
from .auth.repository import AccountRepository, ProfileRepository
from .auth.service import SessionManager
from .core.constants import DEFAULT_APP_NAMESPACE
from .database.connection import DBConfig, DatabaseConnection
from .documents.change_feed import ChangeFeed
from .documents.mysql_document_store import MySQLDocumentStore
from .documents.store import DocumentStore
from .export.excel_exporter import PandasExcelExporter
from .export.exporter import SpreadsheetExporter
from .payroll.ranking import TeamRanking
from .payroll.record_store import PayrollRecordStore
from .status.board import StatusBoard


@dataclass(frozen=True)
class Container:
    documents: DocumentStore
    accounts_repo: AccountRepository
    profiles_repo: ProfileRepository

    record_store: PayrollRecordStore
    exporter: SpreadsheetExporter

    enumeration_protection: bool = True

    def auth_client(self, state: MutableMapping) -> AuthClient:
        return AuthClient(self.accounts_repo, state, enumeration_protection=self.enumeration_protection)

    def session_manager(self, state: MutableMapping) -> SessionManager:
        return SessionManager(self.auth_client(state), self.profiles_repo, StatusBoard(state))


def build_container(
    *,
    db_config: dict,
    namespace: str = DEFAULT_APP_NAMESPACE,
    team_order: str = "",
    export_enabled: bool = True,
    enumeration_protection: bool = True,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))
    feed = ChangeFeed()
    documents = MySQLDocumentStore(conn, feed)

    return Container(
        documents=documents,
        accounts_repo=MySQLAccountRepository(conn),
        profiles_repo=DocumentProfileRepository(documents),
        record_store=PayrollRecordStore(documents, namespace=namespace, ranking=TeamRanking.from_setting(team_order)),
        exporter=PandasExcelExporter(enabled=export_enabled),
        enumeration_protection=enumeration_protection,
    )
