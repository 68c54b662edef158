# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Sets up environment variables before the application is imported, then
# provides:
# - in-memory doubles for the repositories (service tests)
# - an in-memory SQLite database and a TestClient (API tests)
# =============================================================================

import os
import uuid

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import todo_api.models  # noqa: F401  (registers tables on Base.metadata)
from main import app
from todo_api.core.exceptions import EmailDeliveryError
from todo_api.core.security import PasswordService, Principal, TokenService
from todo_api.database import Base, get_db
from todo_api.dependencies import get_auth_service
from todo_api.models.tenant import Tenant
from todo_api.models.todo import Todo
from todo_api.models.user import User, UserRole
from todo_api.services.auth import AuthService

API = "/api/v1"
PASSWORD = "correct-horse-battery"


# =============================================================================
# Test doubles
# =============================================================================

class Clock:
    """Controllable replacement for utcnow."""

    def __init__(self, start=None):
        self.current = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.current

    def advance(self, **kwargs):
        self.current = self.current + timedelta(**kwargs)


class SequenceIds:
    """Deterministic identifier generator."""

    def __init__(self, prefix="id"):
        self.prefix = prefix
        self.count = 0

    def generate(self):
        self.count += 1
        return f"{self.prefix}{self.count:08d}-0000-0000-0000-000000000000"


class RecordingSender:
    def __init__(self):
        self.sent = []
        self.fail = False

    def send_verification_email(self, email, token):
        if self.fail:
            raise EmailDeliveryError()
        self.sent.append((email, token))

    def token_for(self, email):
        return [t for e, t in self.sent if e == email][-1]


class FakeSession:
    """Just enough of a Session for services running on fake repositories."""

    def __init__(self):
        self.info = {}
        self.commits = 0
        self.rollbacks = 0

    def in_transaction(self):
        return False

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1


class FakeTenantRepo:
    def __init__(self, clock):
        self.clock = clock
        self.rows = {}

    def get(self, db, tenant_id):
        return self.rows.get(tenant_id)

    def get_by_slug(self, db, slug):
        return next((t for t in self.rows.values() if t.slug == slug), None)

    def create(self, db, *, id, name, slug, commit=True):
        if self.get_by_slug(db, slug) is not None:
            raise IntegrityError("INSERT INTO tenants", {}, Exception("duplicate slug"))
        tenant = Tenant(id=id, name=name, slug=slug, created_at=self.clock(), updated_at=self.clock())
        self.rows[id] = tenant
        return tenant


class FakeUserRepo:
    def __init__(self, clock):
        self.clock = clock
        self.rows = {}

    def get(self, db, id, tenant_id):
        user = self.rows.get(id)
        if user is None or user.tenant_id != tenant_id:
            return None
        return user

    def get_by_email(self, db, tenant_id, email):
        return next((u for u in self.rows.values() if u.tenant_id == tenant_id and u.email == email), None)

    def get_by_verification_token(self, db, token):
        return next((u for u in self.rows.values() if u.verification_token == token), None)

    def create(self, db, *, obj_in, commit=True):
        user = User(**obj_in, created_at=self.clock(), updated_at=self.clock())
        self.rows[user.id] = user
        return user

    def update(self, db, *, db_obj, obj_in):
        for field, value in obj_in.items():
            setattr(db_obj, field, value)
        db_obj.updated_at = self.clock()
        return db_obj


class FakeTodoRepo:
    def __init__(self, clock):
        self.clock = clock
        self.rows = {}

    def get(self, db, id, tenant_id):
        todo = self.rows.get(id)
        if todo is None or todo.tenant_id != tenant_id:
            return None
        return todo

    def get_multi_by_user(self, db, *, tenant_id, user_id):
        todos = [t for t in self.rows.values() if t.tenant_id == tenant_id and t.user_id == user_id]
        return sorted(todos, key=lambda t: t.created_at, reverse=True)

    def get_multi_public(self, db, *, tenant_id):
        todos = [t for t in self.rows.values() if t.tenant_id == tenant_id and t.is_public]
        return sorted(todos, key=lambda t: t.created_at, reverse=True)

    def create(self, db, *, obj_in, commit=True):
        # Each insert is one second after the previous one
        self.clock.advance(seconds=1)
        todo = Todo(**obj_in, created_at=self.clock(), updated_at=self.clock())
        self.rows[todo.id] = todo
        return todo

    def update(self, db, *, db_obj, obj_in):
        for field, value in obj_in.items():
            setattr(db_obj, field, value)
        db_obj.updated_at = self.clock()
        return db_obj

    def delete(self, db, *, db_obj):
        del self.rows[db_obj.id]


def make_principal(user_id, tenant_id, role="member"):
    return Principal(user_id=user_id, tenant_id=tenant_id, email=f"{user_id}@example.com", role=role)


# =============================================================================
# Service fixtures
# =============================================================================

@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def fake_db():
    return FakeSession()


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def token_service():
    return TokenService(secret_key="unit-test-secret")


@pytest.fixture
def password_service():
    return PasswordService()


@pytest.fixture
def ids():
    return SequenceIds()


@pytest.fixture
def tenant_repo(clock):
    return FakeTenantRepo(clock)


@pytest.fixture
def user_repo(clock):
    return FakeUserRepo(clock)


@pytest.fixture
def todo_repo(clock):
    return FakeTodoRepo(clock)


@pytest.fixture
def principal():
    """Factory for authenticated callers."""
    return make_principal


# =============================================================================
# API fixtures
# =============================================================================

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory, sender):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_auth_service] = lambda: AuthService(sender=sender)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def signup(client, sender):
    """Register, verify and log in a fresh account; returns its credentials."""

    def _signup(email, name="Test User", password=PASSWORD):
        res = client.post(f"{API}/auth/register", json={"email": email, "password": password, "name": name})
        assert res.status_code == 201, res.text
        registered = res.json()

        res = client.post(f"{API}/auth/verify-email", json={"token": sender.token_for(email)})
        assert res.status_code == 200, res.text

        res = client.post(
            f"{API}/auth/login",
            json={"tenant_slug": registered["tenant_slug"], "email": email, "password": password},
        )
        assert res.status_code == 200, res.text
        body = res.json()
        return {
            "user_id": registered["user_id"],
            "tenant_id": registered["tenant_id"],
            "tenant_slug": registered["tenant_slug"],
            "access_token": body["access_token"],
            "refresh_token": body["refresh_token"],
            "headers": {"Authorization": f"Bearer {body['access_token']}"},
        }

    return _signup


@pytest.fixture
def add_member(client, db_session):
    """Insert a verified member into an existing tenant and log them in."""

    def _add_member(tenant_slug, tenant_id, email, name="Member"):
        db_session.add(User(
            id=str(uuid.uuid4()),
            tenant_id=tenant_id,
            email=email,
            password_hash=PasswordService().hash(PASSWORD),
            name=name,
            role=UserRole.MEMBER,
            email_verified=True,
        ))
        db_session.commit()

        res = client.post(
            f"{API}/auth/login",
            json={"tenant_slug": tenant_slug, "email": email, "password": PASSWORD},
        )
        assert res.status_code == 200, res.text
        body = res.json()
        return {
            "user_id": body["user"]["id"],
            "headers": {"Authorization": f"Bearer {body['access_token']}"},
        }

    return _add_member
