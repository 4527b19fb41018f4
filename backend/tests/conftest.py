"""Shared fixtures: an in-memory database reset per test, users, projects and a client."""

import os
from datetime import datetime, timedelta, timezone

# Must be set before anything imports app.config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["ADMIN_EMAIL"] = ""
os.environ["ADMIN_PASSWORD"] = ""

import pytest
from fastapi.testclient import TestClient

from app.database import Base, SessionLocal, engine
from app.lifecycle import ProjectStatus
from app.main import app
from app.middleware.auth import AdminContext, AdminIdentity, create_access_token
from app.models.project import Project
from app.models.user import User

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


def _make_user(db, email: str, role: str) -> User:
    user = User(
        email=email,
        password_hash="not-a-real-hash",
        role=role,
        display_name=email.split("@")[0],
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _headers(user: User) -> dict:
    token = create_access_token({"sub": user.id, "email": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_user(db):
    return _make_user(db, "admin@directory.test", "admin")


@pytest.fixture
def second_admin(db):
    return _make_user(db, "admin2@directory.test", "admin")


@pytest.fixture
def member_user(db):
    return _make_user(db, "member@directory.test", "member")


@pytest.fixture
def admin_headers(admin_user):
    return _headers(admin_user)


@pytest.fixture
def member_headers(member_user):
    return _headers(member_user)


@pytest.fixture
def admin_ctx(db, admin_user):
    return AdminContext(identity=AdminIdentity(id=admin_user.id, email=admin_user.email), db=db)


@pytest.fixture
def make_project(db):
    """Factory inserting a project; each call is one second newer than the last."""
    counter = {"n": 0}

    def _make(**overrides) -> Project:
        n = counter["n"]
        counter["n"] += 1
        fields = {
            "name": f"Project {n}",
            "type": "real-estate",
            "blockchain": "Ethereum",
            "roi": 8.0,
            "tvl": "$1M",
            "description": "Tokenized rental income from residential property.",
            "website": f"https://project{n}.example.com",
            "contact_email": f"owner{n}@example.com",
            "status": ProjectStatus.PENDING.value,
            "created_at": BASE_TIME + timedelta(seconds=n),
        }
        fields.update(overrides)
        if isinstance(fields["status"], ProjectStatus):
            fields["status"] = fields["status"].value
        project = Project(**fields)
        db.add(project)
        db.commit()
        db.refresh(project)
        return project

    return _make
