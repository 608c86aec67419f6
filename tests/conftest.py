"""
Shared fixtures: a throwaway SQLite database, a live TestClient, and helpers
for logging in as admin / editor / regular users.
"""
import os
import tempfile

_db_dir = tempfile.mkdtemp(prefix="catalog-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ["ADMIN_EMAILS"] = '["admin@example.org"]'
os.environ["ALLOWED_EMAIL_DOMAINS"] = '["school.org"]'

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from catalog.db import engine  # noqa: E402
from catalog.email_verify import EmailSender, EmailVerifier  # noqa: E402
from catalog.main import app  # noqa: E402
from catalog.models import Base  # noqa: E402

ADMIN_EMAIL = "admin@example.org"
PASSWORD = "hunter2hunter2"


class RecordingSender(EmailSender):
    """Keeps verification links instead of mailing them."""

    def __init__(self):
        self.sent = []

    async def send_verification(self, email, action, link):
        self.sent.append({"email": email, "action": action, "link": link})

    def last_path(self):
        """Path part of the most recent link, ready for the TestClient."""
        link = self.sent[-1]["link"]
        return link[link.index("/api/verify/"):]


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def client(sender):
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with TestClient(app) as test_client:
        app.state.verifier = EmailVerifier(sender=sender, base_url="http://testserver")
        yield test_client


def auth(token):
    return {"Authorization": f"Bearer {token}"}


def sign_up_verified(client, sender, email, password=PASSWORD):
    """Sign up a regular user through the emailed link; returns the response data."""
    response = client.post("/api/users", json={"email": email, "password": password})
    assert response.json() == {"type": "success"}
    response = client.get(sender.last_path())
    assert response.status_code == 200
    return response.json()["data"]


@pytest.fixture
def admin_token(client):
    response = client.post("/api/users", json={"email": ADMIN_EMAIL, "password": PASSWORD})
    return response.json()["data"]["token"]


@pytest.fixture
def user(client, sender):
    return sign_up_verified(client, sender, "staff@school.org")


@pytest.fixture
def editor_token(client, sender, admin_token):
    data = sign_up_verified(client, sender, "editor@school.org")
    response = client.patch(
        f"/api/users/{data['id']}", json={"isEditor": True}, headers=auth(admin_token)
    )
    assert response.status_code == 200
    return data["token"]
