"""Tests for /register, /login and /api/me."""

from __future__ import annotations

import pytest

from studyspace.core.security import create_access_token
from studyspace.models.user import User


def test_register_then_login(client, db):
    r = client.post(
        "/register",
        json={"username": "alice", "email": "alice@example.com", "password": "s3cret-pass"},
    )
    assert r.status_code == 201
    assert r.json() == {"message": "User registered successfully"}

    user = db.query(User).filter(User.username == "alice").one()
    assert user.password_hash != "s3cret-pass"

    r = client.post("/login", json={"username": "alice", "password": "s3cret-pass"})
    assert r.status_code == 200
    token = r.json()["token"]

    r = client.get("/api/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    body = r.json()
    assert body["username"] == "alice"
    assert body["email"] == "alice@example.com"
    assert body["id"] == user.user_id


@pytest.mark.parametrize(
    "username,email",
    [("alice", "other@example.com"), ("other", "alice@example.com")],
)
def test_register_duplicate(client, make_user, username, email):
    make_user("alice", email="alice@example.com")

    r = client.post("/register", json={"username": username, "email": email, "password": "x"})

    assert r.status_code == 400
    assert r.json() == {"detail": "user already exists"}


def test_register_rejects_invalid_email(client):
    r = client.post("/register", json={"username": "a", "email": "not-an-email", "password": "x"})
    assert r.status_code == 422


def test_register_rejects_password_over_72_bytes(client):
    r = client.post(
        "/register",
        json={"username": "alice", "email": "alice@example.com", "password": "ñ" * 40},
    )
    assert r.status_code == 400


def test_login_wrong_password(client, make_user):
    make_user("alice")
    r = client.post("/login", json={"username": "alice", "password": "wrong"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid username or password"


def test_login_unknown_user(client):
    r = client.post("/login", json={"username": "nobody", "password": "x"})
    assert r.status_code == 401


def test_login_with_fixture_password(client, make_user, password):
    make_user("alice")
    r = client.post("/login", json={"username": "alice", "password": password})
    assert r.status_code == 200


class TestMe:
    def test_missing_token(self, client):
        r = client.get("/api/me")
        assert r.status_code == 401
        assert r.json()["detail"] == "Missing Bearer token"

    def test_garbage_token(self, client):
        r = client.get("/api/me", headers={"Authorization": "Bearer not.a.token"})
        assert r.status_code == 401
        assert r.json()["detail"] == "Invalid or expired token"

    def test_expired_token(self, client, make_user):
        make_user("alice")
        token = create_access_token("alice", expires_minutes=-1)
        r = client.get("/api/me", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 401

    def test_token_of_removed_user(self, client, headers):
        r = client.get("/api/me", headers=headers("ghost"))
        assert r.status_code == 401
        assert r.json()["detail"] == "User does not exist"
