from __future__ import annotations

import os

# Set test environment BEFORE importing notevault modules.
# notevault.db creates the engine at module level using get_settings().db_url,
# so we must override the env vars before any notevault imports.
os.environ.setdefault("DB_URL", "sqlite://")
os.environ.setdefault("PASSWORD_HASH_COST", "4")

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from notevault.db import get_session
from notevault.main import app as fastapi_app
from notevault.models.user import Account, User
from notevault.services.credential_store import CredentialStore
from notevault.services.sessions import SessionIssuer
from notevault.utils.crypto import hash_auth_key, hash_password

TEST_EMAIL = "alice@example.com"
TEST_SALT = "s1"
TEST_ITERATION = 100000
TEST_AUTH_KEY = "k1"
TEST_CIPHER_KEY_ENC = "Y2lwaGVyLWtleS1ibG9i"


# ── Database fixtures ─────────────────────────────────────────────────


@pytest.fixture(name="engine")
def engine_fixture():
    """Create an in-memory SQLite engine for testing.

    Uses StaticPool so every connection shares the same in-memory database.
    Recreates tables per test for full isolation.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    """Provide a fresh session per test."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="store")
def store_fixture(session) -> CredentialStore:
    return CredentialStore(session)


# ── Account fixtures ──────────────────────────────────────────────────


def _make_user(
    session: Session,
    email: str | None = TEST_EMAIL,
    *,
    classic: bool = True,
    auth_key: str = TEST_AUTH_KEY,
    salt: str = TEST_SALT,
    iteration: int = TEST_ITERATION,
    cipher_key_enc: str = TEST_CIPHER_KEY_ENC,
    password: str | None = None,
    name: str = "Alice",
    encrypted: bool = True,
) -> tuple[User, Account]:
    """Create a user with an account in classic or legacy mode."""
    user = User(name=name, api_key="api-key-1", cloud=True, encrypted=encrypted)
    session.add(user)
    session.commit()
    session.refresh(user)

    account = Account(
        user_id=user.id,
        email=email,
        email_verified=True,
        provider="",
        nickname="alice-gh",
        account_id="gh-42",
    )
    if classic:
        account.salt = salt
        account.auth_key_hash = hash_auth_key(auth_key, salt, iteration)
        account.cipher_key_enc = cipher_key_enc
        account.client_kdf_iteration = iteration
        account.server_kdf_iteration = iteration
    if password is not None:
        account.password = hash_password(password, 4)
    session.add(account)
    session.commit()
    session.refresh(account)
    return user, account


@pytest.fixture(name="make_user")
def make_user_fixture(session):
    """Factory creating users in the test database. Same options as _make_user."""

    def _factory(email: str | None = TEST_EMAIL, **kwargs) -> tuple[User, Account]:
        return _make_user(session, email, **kwargs)

    return _factory


@pytest.fixture(name="classic_user")
def classic_user_fixture(session) -> tuple[User, Account]:
    return _make_user(session)


@pytest.fixture(name="legacy_user")
def legacy_user_fixture(session) -> tuple[User, Account]:
    return _make_user(
        session, "bob@example.com", classic=False, password="hunter22", name="Bob"
    )


# ── HTTP client fixtures ──────────────────────────────────────────────


@pytest.fixture(name="client")
def client_fixture(session):
    """FastAPI TestClient with overridden DB session and no credentials."""

    def _get_session_override():
        yield session

    fastapi_app.dependency_overrides[get_session] = _get_session_override
    with TestClient(fastapi_app) as client:
        yield client
    fastapi_app.dependency_overrides.clear()


@pytest.fixture(name="auth_client")
def auth_client_fixture(client, store, classic_user):
    """TestClient carrying a real bearer session for the classic user."""
    user, _ = classic_user
    issued = SessionIssuer(timedelta(days=30)).issue(store, user.id)
    client.headers["Authorization"] = f"Bearer {issued.key}"
    client.user_id = user.id  # for assertions in tests
    return client
