"""
PyTest configuration for the directory API.
Runs against SQLite with a fresh schema per test and a temporary upload root.
"""
import os
import tempfile

# Settings are read at import time, so the test environment goes first
TEST_DATABASE_URL = os.getenv(
    "TEST_DATABASE_URL",
    "sqlite:///" + os.path.join(tempfile.gettempdir(), "directory_test.db"))
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ.setdefault("JWT_SECRET", "test-secret-key")

import pytest
from fastapi.testclient import TestClient

from shared.core.database import Base, SessionLocal, engine, get_db
from shared.helpers.asset_store import AssetStore, get_asset_store
from shared.helpers.email_helper import EmailHelper, get_email_helper
from directory_service.app.main import app


class RecordingMailer:
    """Stands in for the SMTP client and keeps what would have been sent."""

    def __init__(self):
        self.sent = []

    def send_email(self, sender, recipients, subject, text_body, html_body=None):
        self.sent.append({"to": recipients, "subject": subject, "body": text_body})
        return True


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database for each test.
    """
    Base.metadata.create_all(bind=engine)

    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(tmp_path):
    return AssetStore(tmp_path / "uploads")


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture(scope="function")
def client(db_session, store, mailer):
    """
    FastAPI TestClient with the database, asset store and mailer overridden.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_asset_store] = lambda: store
    app.dependency_overrides[get_email_helper] = lambda: EmailHelper(client=mailer)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def signup(client):
    """Factory that registers an account through the API and returns the response data."""

    def _signup(email="a@x.com", password="secret123", user_type="company", **extra):
        body = {
            "email": email,
            "password": password,
            "fullName": extra.pop("fullName", "Test Account"),
            "userType": user_type,
            **extra,
        }
        response = client.post("/api/auth/signup", json=body)
        assert response.status_code == 201, response.json()
        return response.json()["data"]

    return _signup


@pytest.fixture
def company(signup):
    data = signup(companyInfo={"name": "Acme", "Category": "Food"})
    return {"id": data["user"]["id"], "headers": bearer(data["token"])}
