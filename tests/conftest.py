"""
Shared pytest fixtures for the VaultShare test suite.

Every test gets its own in-memory SQLite database:
  - ``db``          -> a session bound to that database, for service tests
  - ``client``      -> a TestClient whose ``get_db`` uses the same database
  - ``make_user``   -> inserts an active user and returns the ORM row
  - ``auth_headers``-> signs a bearer token for a user
  - ``fail_flush_when`` -> makes matching flushes on ``db`` raise
"""

import itertools
import os

# Settings are read at import time, so the environment must be in place first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
# base64 of 32 ASCII "0" bytes
os.environ.setdefault("MASTER_ENCRYPTION_KEY", "MDAwMDAwMDAwMDAwMDAwMDAwMDAwMDAwMDAwMDAwMDA=")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "1000")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from database import Base, get_db  # noqa: E402
import models.user  # noqa: F401, E402
import models.vault  # noqa: F401, E402
import models.category  # noqa: F401, E402
import models.credential_item  # noqa: F401, E402
import models.vault_permission  # noqa: F401, E402
import models.revoked_token  # noqa: F401, E402
from core.security import create_access_token, hash_password  # noqa: E402
from models.user import User  # noqa: E402

DEFAULT_PASSWORD = "Secret123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    """FastAPI test client with ``get_db`` pointed at the test database."""
    from main import app

    def _get_test_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_test_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    def _make(email=None, role="user", password=DEFAULT_PASSWORD, is_active=True, full_name=None):
        n = next(counter)
        password_hash, salt = hash_password(password)
        user = User(
            email=email or f"user{n}@example.com",
            full_name=full_name or f"User {n}",
            password_hash=password_hash,
            salt=salt,
            role=role,
            is_active=is_active,
            force_password_change=False,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user):
        token = create_access_token({"sub": user.email, "user_id": user.id, "role": user.role})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def fail_flush_when(db):
    """Arm a ``before_flush`` hook on ``db`` that raises while *predicate(session)* holds."""
    armed = []

    def _arm(predicate):
        def _before_flush(session, flush_context, instances):
            if predicate(session):
                raise RuntimeError("flush failed")

        event.listen(db, "before_flush", _before_flush)
        armed.append(_before_flush)

    yield _arm
    for listener in armed:
        event.remove(db, "before_flush", listener)
