"""Service test fixtures with in-memory fake repos."""

from __future__ import annotations

import os

# Cheap hashes for tests; must be set before the settings module is imported.
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import SimpleNamespace
from typing import Any

import pytest
from fastapi.testclient import TestClient

from puantaj_service.auth.deps import get_session_store
from puantaj_service.auth.models import Role, role_satisfies
from puantaj_service.auth.passwords import hash_password
from puantaj_service.auth.sessions import InMemorySessionStore
from puantaj_service.db.deps import (
    get_contractors_repo,
    get_notes_repo,
    get_notifications_repo,
    get_payments_repo,
    get_personnel_repo,
    get_projects_repo,
    get_timesheets_repo,
    get_transactions_repo,
    get_users_repo,
)
from puantaj_service.db.repositories.ledger import PAYMENT_CATEGORY
from puantaj_service.rest.app import create_app

from _helpers import bearer, register


def _row(**fields: Any) -> SimpleNamespace:
    fields.setdefault("id", uuid.uuid4())
    fields.setdefault("created_at", datetime.now(UTC))
    return SimpleNamespace(**fields)


class FakeUsersRepo:
    """In-memory users repository for testing."""

    def __init__(self):
        self.users: dict[uuid.UUID, SimpleNamespace] = {}
        self.orgs: dict[uuid.UUID, str] = {}

    async def create_user(self, email, password, first_name, last_name, org_name, role="USER"):
        org_id = uuid.uuid4()
        self.orgs[org_id] = org_name
        user = _row(
            org_id=org_id,
            email=email,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            role=role,
            subscription_tier="free",
            is_active=True,
            is_verified=False,
        )
        self.users[user.id] = user
        return user

    async def get_by_id(self, user_id):
        return self.users.get(user_id)

    async def get_by_email(self, email):
        return next((u for u in self.users.values() if u.email == email), None)

    async def update(self, user_id, **fields):
        user = self.users.get(user_id)
        if user is None:
            return None
        for key, value in fields.items():
            setattr(user, key, value)
        return user

    async def list(self, limit=50, offset=0):
        users = list(self.users.values())
        return users[offset : offset + limit], len(users)

    async def list_active_ids(self):
        return [u.id for u in self.users.values() if u.is_active]

    async def stats(self):
        users = list(self.users.values())
        return {
            "total_users": len(users),
            "active_users": sum(1 for u in users if u.is_active),
            "verified_users": sum(1 for u in users if u.is_verified),
            "admin_users": sum(1 for u in users if role_satisfies(u.role, Role.ADMIN)),
        }


class FakeTenantRepo:
    """In-memory org-scoped CRUD."""

    defaults: dict[str, Any] = {}

    def __init__(self):
        self.rows: dict[uuid.UUID, SimpleNamespace] = {}

    async def list(self, org_id):
        return [r for r in self.rows.values() if r.org_id == org_id]

    async def get(self, org_id, record_id):
        row = self.rows.get(record_id)
        if row is None or row.org_id != org_id:
            return None
        return row

    async def create(self, org_id, **fields):
        row = _row(org_id=org_id, **{**self.defaults, **fields})
        self.rows[row.id] = row
        return row

    async def update(self, org_id, record_id, **fields):
        row = await self.get(org_id, record_id)
        if row is None:
            return None
        for key, value in fields.items():
            setattr(row, key, value)
        return row

    async def delete(self, org_id, record_id):
        if await self.get(org_id, record_id) is None:
            return False
        del self.rows[record_id]
        return True


class FakePersonnelRepo(FakeTenantRepo):
    defaults = {"phone": None, "email": None, "is_active": True}


class FakeContractorsRepo(FakeTenantRepo):
    defaults = {"company": None, "phone": None, "email": None}


class FakeTimesheetsRepo(FakeTenantRepo):
    defaults = {"notes": None}

    async def list_by_personnel(self, org_id, personnel_id):
        return [r for r in await self.list(org_id) if r.personnel_id == personnel_id]


class FakePaymentsRepo(FakeTenantRepo):
    """Payments that book their expense transaction into ``transactions``."""

    def __init__(self, transactions: FakeTenantRepo):
        super().__init__()
        self.transactions = transactions

    async def list_by_personnel(self, org_id, personnel_id):
        return [r for r in await self.list(org_id) if r.personnel_id == personnel_id]

    async def create_with_transaction(
        self,
        org_id,
        personnel_id,
        personnel_name,
        amount,
        payment_date,
        payment_type,
        description=None,
        notes=None,
    ):
        txn = await self.transactions.create(
            org_id,
            type="expense",
            amount=amount,
            description=description or f"Personnel payment ({payment_type}): {personnel_name}",
            category=PAYMENT_CATEGORY,
            date=payment_date,
        )
        return await self.create(
            org_id,
            personnel_id=personnel_id,
            transaction_id=txn.id,
            amount=amount,
            payment_date=payment_date,
            payment_type=payment_type,
            description=description,
            notes=notes,
        )

    async def delete_with_transaction(self, org_id, payment_id):
        payment = await self.get(org_id, payment_id)
        if payment is None:
            return False
        self.transactions.rows.pop(payment.transaction_id, None)
        del self.rows[payment_id]
        return True


class FakeNotificationsRepo:
    def __init__(self):
        self.rows: list[SimpleNamespace] = []

    async def list_for_user(self, user_id, unread_only=False, limit=50):
        rows = [n for n in self.rows if n.user_id == user_id]
        if unread_only:
            rows = [n for n in rows if not n.is_read]
        return rows[:limit]

    async def mark_read(self, user_id, notification_id):
        row = next(
            (n for n in self.rows if n.id == notification_id and n.user_id == user_id), None
        )
        if row is not None:
            row.is_read = True
        return row

    async def create_many(self, user_ids, title, message, type="info"):
        created = [
            _row(user_id=uid, title=title, message=message, type=type, is_read=False)
            for uid in user_ids
        ]
        self.rows.extend(created)
        return len(created)


@dataclass
class Backend:
    users: FakeUsersRepo = field(default_factory=FakeUsersRepo)
    personnel: FakePersonnelRepo = field(default_factory=FakePersonnelRepo)
    projects: FakeTenantRepo = field(default_factory=FakeTenantRepo)
    timesheets: FakeTimesheetsRepo = field(default_factory=FakeTimesheetsRepo)
    contractors: FakeContractorsRepo = field(default_factory=FakeContractorsRepo)
    notes: FakeTenantRepo = field(default_factory=FakeTenantRepo)
    transactions: FakeTenantRepo = field(default_factory=FakeTenantRepo)
    notifications: FakeNotificationsRepo = field(default_factory=FakeNotificationsRepo)
    sessions: InMemorySessionStore = field(default_factory=InMemorySessionStore)
    payments: FakePaymentsRepo = field(init=False)

    def __post_init__(self):
        self.payments = FakePaymentsRepo(self.transactions)


@pytest.fixture
def backend() -> Backend:
    return Backend()


@pytest.fixture
def app(backend):
    """The real application with every repository swapped for a fake."""
    app = create_app()
    app.dependency_overrides[get_users_repo] = lambda: backend.users
    app.dependency_overrides[get_personnel_repo] = lambda: backend.personnel
    app.dependency_overrides[get_projects_repo] = lambda: backend.projects
    app.dependency_overrides[get_timesheets_repo] = lambda: backend.timesheets
    app.dependency_overrides[get_contractors_repo] = lambda: backend.contractors
    app.dependency_overrides[get_notes_repo] = lambda: backend.notes
    app.dependency_overrides[get_transactions_repo] = lambda: backend.transactions
    app.dependency_overrides[get_payments_repo] = lambda: backend.payments
    app.dependency_overrides[get_notifications_repo] = lambda: backend.notifications
    app.dependency_overrides[get_session_store] = lambda: backend.sessions
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def user_token(client) -> str:
    resp = register(client)
    assert resp.status_code == 201, resp.text
    return resp.json()["token"]


@pytest.fixture
def auth(user_token) -> dict[str, str]:
    return bearer(user_token)
