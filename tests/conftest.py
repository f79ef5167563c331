# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.

`fake_supabase` is an in-memory double of the supabase-py client surface the
stores use (table().select/insert/update/delete/eq/order/limit/maybe_single,
auth, storage, postgrest). Auth and storage are plain Mocks so tests can
script them.
"""

import itertools
from types import SimpleNamespace
from typing import Generator
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from core.persistence import MemoryStateStorage, get_state_storage
from core.rate_limiter import reset_rate_limits
from dependencies.auth import get_session
from main import create_app
from models.enums import Role
from stores.session import SessionStatus, SessionStore, SessionUser


# ============================================================
# In-memory Supabase double
# ============================================================
class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters: list[tuple[str, object]] = []
        self.ordering = None
        self.row_limit = None
        self.single = False

    # builders ------------------------------------------------
    def select(self, columns="*"):
        self.op = "select"
        return self

    def insert(self, payload, returning="representation"):
        self.op, self.payload = "insert", payload
        return self

    def update(self, payload, returning="representation"):
        self.op, self.payload = "update", payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, key, value):
        self.filters.append((key, value))
        return self

    def order(self, field, desc=False):
        self.ordering = (field, desc)
        return self

    def limit(self, n):
        self.row_limit = n
        return self

    def maybe_single(self):
        self.single = True
        return self

    # execution ----------------------------------------------
    def _matches(self, row):
        return all(row.get(k) == v for k, v in self.filters)

    def execute(self):
        self.db.calls.append((self.table, self.op, self.payload, list(self.filters)))
        if (self.table, self.op) in self.db.failures:
            raise Exception(self.db.failures[(self.table, self.op)])

        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "insert":
            row = {"id": f"{self.table}-{next(self.db.ids)}", **self.payload}
            rows.append(row)
            return SimpleNamespace(data=[dict(row)] if self.db.return_representation else [])

        if self.op == "update":
            changed = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    changed.append(dict(row))
            return SimpleNamespace(data=changed if self.db.return_representation else [])

        if self.op == "delete":
            removed = [r for r in rows if self._matches(r)]
            self.db.tables[self.table] = [r for r in rows if not self._matches(r)]
            return SimpleNamespace(data=removed)

        found = [dict(r) for r in rows if self._matches(r)]
        if self.ordering:
            field, desc = self.ordering
            found.sort(key=lambda r: (r.get(field) is None, r.get(field) or ""), reverse=desc)
        if self.row_limit is not None:
            found = found[: self.row_limit]
        if self.single:
            return SimpleNamespace(data=found[0] if found else None)
        return SimpleNamespace(data=found)


class FakeSupabase:
    def __init__(self, tables=None):
        self.tables = {name: [dict(r) for r in rows] for name, rows in (tables or {}).items()}
        self.failures: dict[tuple[str, str], str] = {}
        self.calls: list[tuple] = []
        self.ids = itertools.count(1)
        self.return_representation = True

        self.auth = Mock()
        self.auth.get_session.return_value = None
        self.postgrest = Mock()

        self.bucket = Mock()
        self.bucket.get_public_url.side_effect = lambda path: f"https://storage.test/{path}"
        self.storage = Mock()
        self.storage.from_.return_value = self.bucket

    def table(self, name):
        return FakeQuery(self, name)

    def fail(self, table, op, message="backend unavailable"):
        self.failures[(table, op)] = message

    def calls_for(self, table, op=None):
        return [c for c in self.calls if c[0] == table and (op is None or c[1] == op)]


# ============================================================
# Fixtures
# ============================================================
@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def state_storage():
    return MemoryStateStorage()


@pytest.fixture(scope="function")
def app(state_storage):
    """Create a test FastAPI application instance."""
    app = create_app()
    app.dependency_overrides[get_state_storage] = lambda: state_storage
    yield app
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


def make_session(client, role=None, user_id=None, verified=True, **profile) -> SessionStore:
    """A session already past initialize(): anonymous when role is None."""
    session = SessionStore(client)
    if role is None:
        session.status = SessionStatus.anonymous
        return session

    role = Role(role)
    session.user = SessionUser(
        id=user_id or f"{role.value}-1",
        email=f"{role.value}@example.com",
        role=role,
        full_name=profile.pop("full_name", f"Test {role.value.title()}"),
        verified=verified,
        **profile,
    )
    session.access_token = "test-token"
    session.status = SessionStatus.authenticated
    return session


@pytest.fixture
def login_as(app, fake_supabase):
    """Override the request session: login_as("owner"), login_as(None) for anonymous."""
    def _login(role=None, **kwargs):
        session = make_session(fake_supabase, role, **kwargs)
        app.dependency_overrides[get_session] = lambda: session
        return session
    return _login


@pytest.fixture(autouse=True)
def reset_limits():
    """Reset login rate limits before each test."""
    reset_rate_limits()
    yield
    reset_rate_limits()


@pytest.fixture
def session_factory():
    """make_session as a fixture, for store-level tests."""
    return make_session
