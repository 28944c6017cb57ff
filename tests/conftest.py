"""
Shared fixtures: an in-memory stand-in for the Supabase backend plus
signed-in contexts for each role.
"""

from __future__ import annotations

import copy
import itertools

import pytest

from core.config import Settings
from core.errors import RemoteCallError
from services.persistence.cache import QueryCache
from services.persistence.supabase import AuthSession, SignUpResult
from services.session import AppContext

CITIZEN_ID = "u-citizen"
STAFF_ID = "u-staff"
ADMIN_ID = "u-admin"


def seed_tables() -> dict[str, list[dict]]:
    return {
        "profiles": [
            {"id": CITIZEN_ID, "name": "Asha Patil", "email": "asha@example.com", "role": "citizen"},
            {"id": STAFF_ID, "name": "Ravi Kumar", "email": "ravi@example.com", "role": "staff"},
            {"id": ADMIN_ID, "name": "Meera Rao", "email": "meera@example.com", "role": "admin"},
        ],
        "services": [
            {
                "id": "svc-birth",
                "name": "Birth Certificate",
                "description": "Certificate for newborns",
                "documents_required": ["ID Proof", "Hospital Certificate"],
                "fee": 100,
                "processing_time": "7-10 days",
            },
            {
                "id": "svc-tax",
                "name": "Property Tax",
                "description": "Pay property tax",
                "documents_required": "Property Documents",
                "fee": 0,
                "processing_time": "Immediate",
            },
        ],
        "applications": [
            {
                "id": "app-1",
                "user_id": CITIZEN_ID,
                "service_id": "svc-birth",
                "status": "pending",
                "documents": ["ID Proof", "Hospital Certificate"],
                "created_at": "2024-01-02T10:00:00+00:00",
                "updated_at": "2024-01-02T10:00:00+00:00",
            },
            {
                "id": "app-2",
                "user_id": CITIZEN_ID,
                "service_id": "svc-tax",
                "status": "approved",
                "processed_by": STAFF_ID,
                "documents": None,
                "created_at": "2024-01-01T10:00:00+00:00",
                "updated_at": "2024-01-03T10:00:00+00:00",
            },
        ],
        "notifications": [
            {
                "id": "n-1",
                "user_id": CITIZEN_ID,
                "title": "Application Submitted",
                "message": "Your application for Birth Certificate has been submitted.",
                "is_read": False,
                "created_at": "2024-01-02T10:00:00+00:00",
            },
        ],
    }


class FakeBackend:
    """Tables, accounts and issued tokens shared by every gateway built on it."""

    def __init__(self, tables: dict[str, list[dict]] | None = None):
        self.tables = tables if tables is not None else seed_tables()
        self.reachable = True
        self.confirm_email = False
        self.accounts = {
            "asha@example.com": ("secret1", CITIZEN_ID),
            "ravi@example.com": ("secret1", STAFF_ID),
            "meera@example.com": ("secret1", ADMIN_ID),
        }
        self.tokens: dict[str, str] = {}
        self.failures: dict[str, str] = {}
        self.calls: list[str] = []
        self.last_sign_up: dict | None = None
        self._ids = itertools.count(1)

    def fail(self, operation: str, reason: str = "boom") -> None:
        """Make ``operation`` (e.g. ``"insert notifications"``) raise from now on."""
        self.failures[operation] = reason

    def record(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.failures:
            raise RemoteCallError(operation, self.failures[operation])

    def issue_token(self, user_id: str) -> str:
        token = f"token-{user_id}"
        self.tokens[token] = user_id
        return token

    def next_id(self, table: str) -> str:
        return f"{table}-{next(self._ids)}"

    def writes(self) -> list[str]:
        return [c for c in self.calls if c.split(" ")[0] in {"insert", "update", "delete"}]


def _matches(row: dict, eq: dict | None, in_, not_null: str | None) -> bool:
    if any(row.get(k) != v for k, v in (eq or {}).items()):
        return False
    if in_ is not None and row.get(in_[0]) not in set(in_[1]):
        return False
    if not_null is not None and row.get(not_null) is None:
        return False
    return True


class FakeGateway:
    """Drop-in for ``SupabaseGateway`` backed by a ``FakeBackend``."""

    def __init__(self, backend: FakeBackend, access_token: str | None = None):
        self.backend = backend
        self.access_token = access_token
        self.session: AuthSession | None = None
        self.listeners = []

    def probe(self) -> bool:
        self.backend.calls.append("probe")
        return self.backend.reachable

    def get_session(self) -> AuthSession | None:
        if self.access_token:
            user_id = self.backend.tokens.get(self.access_token)
            return AuthSession(user_id, self.access_token) if user_id else None
        return self.session

    def sign_in(self, email: str, password: str) -> AuthSession:
        self.backend.record("sign in")
        account = self.backend.accounts.get(email)
        if account is None or account[0] != password:
            raise RemoteCallError("sign in", "Invalid login credentials")
        self.session = AuthSession(account[1], self.backend.issue_token(account[1]))
        return self.session

    def sign_up(self, email, password, metadata, redirect_to=None) -> SignUpResult:
        self.backend.record("sign up")
        user_id = self.backend.next_id("user")
        self.backend.accounts[email] = (password, user_id)
        self.backend.tables["profiles"].append({"id": user_id, "email": email, **metadata})
        self.backend.last_sign_up = {"email": email, "metadata": metadata, "redirect_to": redirect_to}
        return SignUpResult(user_id, has_session=not self.backend.confirm_email)

    def sign_out(self) -> None:
        self.backend.record("sign out")
        self.session = None

    def on_auth_state_change(self, callback):
        self.listeners.append(callback)
        return lambda: self.listeners.remove(callback)

    def emit(self, event: str, session: AuthSession | None) -> None:
        for cb in list(self.listeners):
            cb(event, session)

    def select(self, table, columns="*", *, eq=None, in_=None, not_null=None, order=None,
               desc=False, limit=None, single=False):
        self.backend.record(f"select {table}")
        rows = [copy.deepcopy(r) for r in self.backend.tables[table] if _matches(r, eq, in_, not_null)]
        if order is not None:
            rows.sort(key=lambda r: str(r.get(order) or ""), reverse=desc)
        if limit is not None:
            rows = rows[:limit]
        if single:
            return rows[0] if rows else None
        return rows

    def insert(self, table, row):
        self.backend.record(f"insert {table}")
        stored = {"id": self.backend.next_id(table), "created_at": "2024-02-01T10:00:00+00:00", **row}
        self.backend.tables[table].append(stored)
        return copy.deepcopy(stored)

    def update(self, table, values, *, eq):
        self.backend.record(f"update {table}")
        hit = [r for r in self.backend.tables[table] if _matches(r, eq, None, None)]
        for r in hit:
            r.update(values)
        return copy.deepcopy(hit)

    def delete(self, table, *, eq):
        self.backend.record(f"delete {table}")
        self.backend.tables[table] = [
            r for r in self.backend.tables[table] if not _matches(r, eq, None, None)
        ]


@pytest.fixture()
def backend():
    return FakeBackend()


@pytest.fixture()
def cfg():
    return Settings(SUPABASE_URL="http://supabase.test", SUPABASE_JWT_SECRET="test-secret")


@pytest.fixture()
def make_ctx(backend, cfg):
    """Build an initialized context, signed in as ``user_id`` when given."""

    def _make(user_id: str | None = None, reachable: bool = True) -> AppContext:
        backend.reachable = reachable
        gateway = FakeGateway(backend)
        if user_id is not None:
            gateway.session = AuthSession(user_id, backend.issue_token(user_id))
        ctx = AppContext(gateway, cfg=cfg, cache=QueryCache()).initialize(subscribe=False)
        backend.calls.clear()
        return ctx

    return _make


@pytest.fixture()
def citizen_ctx(make_ctx):
    return make_ctx(CITIZEN_ID)


@pytest.fixture()
def staff_ctx(make_ctx):
    return make_ctx(STAFF_ID)


@pytest.fixture()
def admin_ctx(make_ctx):
    return make_ctx(ADMIN_ID)


@pytest.fixture()
def offline_ctx(make_ctx):
    return make_ctx(reachable=False)
