from __future__ import annotations

import copy
import itertools
import json
from datetime import datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.payroll_portal.payroll_portal.auth.model import Account, UserProfile
from src.payroll_portal.payroll_portal.core.exceptions import ExportPreconditionError, StoreError
from src.payroll_portal.payroll_portal.documents.change_feed import ChangeFeed
from src.payroll_portal.payroll_portal.documents.model import DocumentSnapshot
from src.payroll_portal.payroll_portal.export.exporter import ExportFile
from src.payroll_portal.payroll_portal.payroll.record_store import PayrollRecordStore
from src.payroll_portal.payroll_portal.status.board import StatusBoard


class InMemoryDocumentStore:
    """Document store fake; change notification goes through the real ChangeFeed."""

    def __init__(self):
        self.feed = ChangeFeed()
        self.docs: dict[tuple[str, str], dict] = {}
        self.fail_reads = False
        self.fail_writes = False

    def get(self, collection, doc_id):
        if self.fail_reads:
            raise StoreError("permission denied")
        raw = self.docs.get((collection, doc_id))
        return DocumentSnapshot(collection, doc_id, copy.deepcopy(raw) if raw is not None else None)

    def set(self, collection, doc_id, data):
        if self.fail_writes:
            raise StoreError("permission denied")
        # JSON round trip, like a real backend
        self.docs[(collection, doc_id)] = json.loads(json.dumps(dict(data), default=str))
        self.feed.publish(collection, doc_id)

    def query(self, collection, filters):
        if self.fail_reads:
            raise StoreError("permission denied")
        return [
            DocumentSnapshot(c, d, copy.deepcopy(v))
            for (c, d), v in sorted(self.docs.items())
            if c == collection and all(v.get(k) == val for k, val in filters.items())
        ]

    def watch(self, collection, doc_id, on_snapshot, on_error):
        return self.feed.listen(collection, doc_id, lambda: self.get(collection, doc_id), on_snapshot, on_error)

    def watch_query(self, collection, filters, on_snapshot, on_error):
        return self.feed.listen(collection, None, lambda: self.query(collection, filters), on_snapshot, on_error)


class InMemoryAccounts:
    def __init__(self):
        self.by_email: dict[str, Account] = {}

    def add(self, uid, email, password):
        self.by_email[email] = Account(
            uid=uid, email=email, password_hash=generate_password_hash(password, method="pbkdf2:sha256:1000")
        )

    def get_by_email(self, email) -> Optional[Account]:
        return self.by_email.get(email)

    def create_account(self, *, uid, email, password_hash):
        self.by_email[email] = Account(uid=uid, email=email, password_hash=password_hash)


class InMemoryProfiles:
    def __init__(self, profiles: Optional[dict] = None):
        self.profiles: dict[str, UserProfile] = dict(profiles or {})
        self.fail = False

    def get(self, uid) -> Optional[UserProfile]:
        if self.fail:
            raise StoreError("permission denied")
        return self.profiles.get(uid)


class FakeExporter:
    def __init__(self, ready=True):
        self._ready = ready
        self.calls = []

    @property
    def ready(self):
        return self._ready

    def export(self, rows, *, columns, sheet_name, filename, column_widths):
        if not self._ready:
            raise ExportPreconditionError("not ready")
        self.calls.append({"rows": list(rows), "columns": list(columns), "sheet_name": sheet_name, "filename": filename})
        return ExportFile(filename=filename, content=b"xlsx-bytes", mimetype="application/octet-stream")


@pytest.fixture
def documents():
    return InMemoryDocumentStore()


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def records(documents, id_factory):
    return PayrollRecordStore(documents, namespace="test-ns", id_factory=id_factory)


@pytest.fixture
def status_storage():
    return {}


@pytest.fixture
def status(status_storage):
    return StatusBoard(status_storage)


@pytest.fixture
def fixed_now():
    return datetime(2024, 5, 20, 9, 30, 0)


@pytest.fixture
def accounts():
    return InMemoryAccounts()


@pytest.fixture
def exporter():
    return FakeExporter()


@pytest.fixture
def unready_exporter():
    return FakeExporter(ready=False)


@pytest.fixture
def profiles():
    return InMemoryProfiles()
