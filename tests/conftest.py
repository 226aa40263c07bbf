# tests/conftest.py

import os

# Must be set before the application modules read their settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from tasktracker.database import Base, get_db
from tasktracker.models import Department, User, UserRole
from tasktracker.services.auth_service import issue_token
from tasktracker.utils.security import hash_password

PASSWORD = "secret123"


@pytest.fixture()
def engine():
    """In-memory SQLite shared by every session in one test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def departments(db):
    names = ["Engineering", "Marketing", "Human Resources"]
    db.add_all([Department(name=name) for name in names])
    db.commit()
    return names


def _make_user(db, name, email, department, role=UserRole.EMPLOYEE):
    user = User(
        name=name,
        email=email,
        hashed_password=hash_password(PASSWORD),
        department=department,
        role=role.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture()
def admin(db, departments):
    return _make_user(db, "Ada Admin", "admin@example.com", "Human Resources", UserRole.ADMIN)


@pytest.fixture()
def alice(db, departments):
    return _make_user(db, "Alice Engineer", "alice@example.com", "Engineering")


@pytest.fixture()
def bob(db, departments):
    return _make_user(db, "Bob Marketer", "bob@example.com", "Marketing")


@pytest.fixture()
def headers_for():
    """Build an Authorization header for a user"""
    def _headers(user):
        return {"Authorization": f"Bearer {issue_token(user)}"}
    return _headers
