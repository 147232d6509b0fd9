from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Account
from .repository import AccountRepository


def _to_account(row: dict) -> Account:
    return Account(
        uid=str(row["uid"]),
        email=row["email"],
        password_hash=row["password_hash"],
        is_active=bool(row.get("is_active", True)),
    )


class MySQLAccountRepository(AccountRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_email(self, email: str) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT uid, email, password_hash, is_active
                FROM accounts
                WHERE email=%s
                """,
                (email,),
            )
            row = fetchone(cur)
            return _to_account(row) if row else None

    def create_account(self, *, uid: str, email: str, password_hash: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO accounts(uid, email, password_hash, is_active)
                VALUES(%s,%s,%s,1)
                ON DUPLICATE KEY UPDATE email=VALUES(email), password_hash=VALUES(password_hash), is_active=1
                """,
                (uid, email, password_hash),
            )
