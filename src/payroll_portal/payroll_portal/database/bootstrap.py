from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from ..auth.model import UserProfile
from ..core.enums import Role
from .connection import DBConfig, DatabaseConnection

DEMO_ACCOUNTS = (
    # uid, email, password, profile
    ("demo-admin", "admin@example.com", "admin123", UserProfile(role=Role.ADMIN)),
    ("demo-team-0", "team0@example.com", "team123", UserProfile(role=Role.TEAM, team_id="0")),
    ("demo-team-1", "team1@example.com", "team123", UserProfile(role=Role.TEAM, team_id="1")),
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _without_comments(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_mapping(db_config)
    conn = DatabaseConnection(target).connect(database="")
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(_without_comments(Path(schema_path).read_text(encoding="utf-8")))

    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_demo_accounts(db_config: dict) -> list[str]:
    """Create (or reset) the demo admin/team accounts and their profiles."""
    from ..auth.mysql_account_repository import MySQLAccountRepository
    from ..auth.profiles import DocumentProfileRepository
    from ..documents.change_feed import ChangeFeed
    from ..documents.mysql_document_store import MySQLDocumentStore

    conn = DatabaseConnection(DBConfig.from_mapping(db_config))
    accounts = MySQLAccountRepository(conn)
    profiles = DocumentProfileRepository(MySQLDocumentStore(conn, ChangeFeed()))

    emails = []
    for uid, email, password, profile in DEMO_ACCOUNTS:
        accounts.create_account(uid=uid, email=email, password_hash=generate_password_hash(password))
        profiles.put(uid, profile)
        emails.append(email)
    return emails


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
