import pytest
from jose import JWTError, jwt

from app.core.config import settings
from app.core.security import ALGORITHM, create_access_token, decode_access_token
from app.db import crud
from conftest import auth_header


def _register(client, email="u1@example.com", name="Marta"):
    return client.post("/api/auth/register", json={"name": name, "email": email, "password": "password123"})


def test_register_and_me(client):
    r = _register(client)
    assert r.status_code == 201, r.text
    token = r.json()["access_token"]
    assert token

    r2 = client.get("/api/me", headers=auth_header(token))
    assert r2.status_code == 200, r2.text
    body = r2.json()
    assert body["email"] == "u1@example.com"
    assert body["name"] == "Marta"
    assert body["role"] == "USER"
    assert "password" not in body and "passwordHash" not in body


def test_register_duplicate_email_409(client):
    r1 = _register(client, email="dup@example.com")
    assert r1.status_code == 201

    r2 = _register(client, email="DUP@example.com")
    assert r2.status_code == 409
    assert r2.json()["code"] == "CONFLICT"


def test_register_requires_name_400(client):
    r = client.post("/api/auth/register", json={"email": "x@example.com", "password": "password123"})
    assert r.status_code == 400
    assert r.json()["code"] == "VALIDATION_ERROR"


def test_login_invalid_credentials_401(client):
    r = client.post("/api/auth/token", data={"username": "nope@example.com", "password": "password123"})
    assert r.status_code == 401


def test_login_success(client):
    _register(client, email="u2@example.com")
    r = client.post("/api/auth/token", data={"username": "u2@example.com", "password": "password123"})
    assert r.status_code == 200, r.text
    assert "access_token" in r.json()

    wrong = client.post("/api/auth/token", data={"username": "u2@example.com", "password": "wrongpass"})
    assert wrong.status_code == 401


def test_garbage_token_401(client):
    r = client.get("/api/me", headers=auth_header("not-a-jwt"))
    assert r.status_code == 401


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_token_claims_round_trip():
    claims = decode_access_token(create_access_token(7, role="ADMIN"))
    assert claims.user_id == 7
    assert claims.role == "ADMIN"


def test_token_with_foreign_subject_rejected(client):
    forged = jwt.encode({"sub": "someone@example.com"}, settings.app_secret_key, algorithm=ALGORITHM)
    with pytest.raises(JWTError):
        decode_access_token(forged)
    assert client.get("/api/me", headers=auth_header(forged)).status_code == 401


def test_expired_token_401(client, user):
    token = create_access_token(user.id, role=user.role, expires_minutes=-1)
    assert client.get("/api/me", headers=auth_header(token)).status_code == 401


def test_token_for_deleted_user_401(client, db, user):
    token = create_access_token(user.id, role=user.role)
    crud.delete_user_cascade(db, user.id)
    assert client.get("/api/me", headers=auth_header(token)).status_code == 401
