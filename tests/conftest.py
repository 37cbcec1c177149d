"""Shared test fixtures and helpers."""

from datetime import datetime

import pytest

from app import create_app
from models import db

# 2031-01-06 is a Monday (day_of_week=1)
NOW = datetime(2030, 12, 1, 8, 0)
MONDAY = "2031-01-06"


class FakeMailer:
    def __init__(self, fail: bool = False):
        self.sent = []
        self.fail = fail

    def send(self, to_email, subject, html):
        if self.fail:
            return False, "SMTP down"
        self.sent.append((to_email, subject, html))
        return True, None


class ApiClient:
    """Test client that remembers the CSRF token issued at login."""

    def __init__(self, client):
        self.client = client
        self.csrf = None

    def _headers(self):
        return {"X-CSRF-Token": self.csrf} if self.csrf else {}

    def get(self, path, **kwargs):
        return self.client.get(path, **kwargs)

    def post(self, path, json=None):
        return self.client.post(path, json=json, headers=self._headers())

    def put(self, path, json=None):
        return self.client.put(path, json=json, headers=self._headers())

    def delete(self, path):
        return self.client.delete(path, headers=self._headers())

    def register(self, email, password="s3cret-pass", role="CUSTOMER", name=None):
        return self.client.post("/auth/register", json={
            "email": email, "password": password, "role": role, "name": name or email.split("@")[0],
        })

    def login(self, email, password="s3cret-pass"):
        resp = self.client.post("/auth/login", json={"email": email, "password": password})
        cookie = self.client.get_cookie("csrf_token")
        self.csrf = cookie.value if cookie else None
        return resp


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def app(tmp_path, mailer):
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'test.db'}",
            "AUTO_CREATE_TABLES": True,
            "BCRYPT_ROUNDS": 4,
            "LOG_LEVEL": "WARNING",
        },
        mailer=mailer,
        clock=lambda: NOW,
    )
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


def _user(app, email, role):
    api = ApiClient(app.test_client())
    assert api.register(email, role=role).status_code == 201
    assert api.login(email).status_code == 200
    return api


@pytest.fixture
def provider(app):
    return _user(app, "provider@example.com", "PROVIDER")


@pytest.fixture
def customer(app):
    return _user(app, "customer@example.com", "CUSTOMER")


@pytest.fixture
def other_customer(app):
    return _user(app, "other@example.com", "CUSTOMER")


@pytest.fixture
def haircut(provider):
    """A 60 minute service with a Monday 09:00-17:00 window."""
    resp = provider.post("/services", json={"name": "Haircut", "duration": 60, "price": 45})
    assert resp.status_code == 201
    assert provider.post("/availability", json={
        "day_of_week": 1, "start_time": "09:00", "end_time": "17:00",
    }).status_code == 201
    return resp.get_json()
