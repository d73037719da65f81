# tests/conftest.py
"""
Shared fixtures: an in-memory SQLite database with the full schema (and seeds),
a session on it, admin principals, and a TestClient wired to the same database.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Settings are read at import time: configure before importing dealership.*
os.environ["JWT_SECRET"] = "test-secret"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DEFAULT_ADMIN_USERNAME"] = "admin"
os.environ["DEFAULT_ADMIN_ACCESS_KEY"] = "admin-key"
os.environ["WEBHOOK_URL"] = ""
os.environ["DISCORD_WEBHOOK_URL"] = ""

import pytest
from datetime import datetime
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dealership.database import create_tables, get_db
from dealership.main import app
from dealership.middleware.auth import AdminPrincipal, create_access_token
from dealership.models.admin_user import AdminUser
from dealership.models.vehicle import Vehicle
from dealership.permissions import FULL_PERMISSIONS, default_permissions


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def admin_user(db):
    """The bootstrap admin seeded by create_tables()."""
    return db.query(AdminUser).filter(AdminUser.username == "admin").one()


@pytest.fixture
def admin(admin_user):
    return AdminPrincipal(
        id=admin_user.id,
        username=admin_user.username,
        permissions=FULL_PERMISSIONS,
        ip="127.0.0.1",
        user_agent="pytest",
    )


def make_user(db, username, permissions=None, unique_id=None, access_key="key-123") -> AdminUser:
    user = AdminUser(
        username=username,
        access_key=access_key,
        unique_id=unique_id,
        permissions=permissions if permissions is not None else default_permissions(),
        created_at=datetime.utcnow(),
        updated_at=datetime.utcnow(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def principal_for(user: AdminUser) -> AdminPrincipal:
    return AdminPrincipal(id=user.id, username=user.username, unique_id=user.unique_id,
                          permissions=user.permissions, ip="127.0.0.1")


def auth_headers(user: AdminUser) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


def add_vehicle(db, name="Adder", category="Super", price=1000000, **extra) -> Vehicle:
    values = dict(trunk_weight=50, image_url="https://img/adder.png", seats=2)
    values.update(extra)
    vehicle = Vehicle(name=name, category=category, price=price,
                      created_at=datetime.utcnow(), updated_at=datetime.utcnow(), **values)
    db.add(vehicle)
    db.commit()
    db.refresh(vehicle)
    return vehicle


@pytest.fixture
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


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user)
