"""Pytest fixtures: in-memory SQLite database and a TestClient bound to it."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import rbac_admin.models  # noqa: F401
from rbac_admin.core.security import Identity, create_access_token
from rbac_admin.db.base import Base
from rbac_admin.db.session import get_db
from rbac_admin.main import app
from rbac_admin.models.permission import Permission

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    """Fresh schema per test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(db):
    """Session factory bound to the test database."""
    return TestingSessionLocal


@pytest.fixture
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def actor():
    return Identity(user_id=1, email="admin@example.com")


@pytest.fixture
def auth_headers():
    token = create_access_token({"sub": "1", "email": "admin@example.com"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def permissions(db):
    """Three catalogue permissions with ids 1..3."""
    items = [Permission(name=n) for n in ("Crear rol", "Borrar rol", "Listar roles")]
    db.add_all(items)
    db.commit()
    return [p.id for p in items]
