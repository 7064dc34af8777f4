from datetime import timedelta

import pytest

from app.core.config import settings
from app.core.security import hash_reset_code, utcnow
from app.models.user import User

API = "/api/v1"
PASSWORD = "secret123"


def login(client, email="user@example.com", password=PASSWORD):
    return client.post(f"{API}/auth/login", json={"email": email, "password": password})


@pytest.fixture()
def sent_codes(monkeypatch):
    sent = []

    def fake_send(email, code):
        sent.append((email, code))

    monkeypatch.setattr("app.api.v1.auth.send_password_reset_email", fake_send)
    return sent


def test_register_returns_user_without_hash(client):
    response = client.post(f"{API}/auth/register", json={
        "name": "Maria", "email": "Maria@Example.com", "password": "abcdef"
    })

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["email"] == "maria@example.com"
    assert data["role"] == "user"
    assert "password_hash" not in data
    assert "password" not in data


def test_register_duplicate_email_conflicts(client, user):
    response = client.post(f"{API}/auth/register", json={
        "name": "Outro", "email": "user@example.com", "password": "abcdef"
    })

    assert response.status_code == 409
    assert response.json()["success"] is False


def test_register_blank_name_is_rejected(client, db):
    response = client.post(f"{API}/auth/register", json={
        "name": "   ", "email": "branco@example.com", "password": "abcdef"
    })

    assert response.status_code == 422
    assert response.json()["error"]["type"] == "validation_error"
    assert db.query(User).filter(User.email == "branco@example.com").first() is None


def test_register_short_password_is_rejected(client):
    response = client.post(f"{API}/auth/register", json={
        "name": "Maria", "email": "maria@example.com", "password": "abc"
    })

    assert response.status_code == 422
    body = response.json()
    assert body["error"]["type"] == "validation_error"
    assert body["error"]["details"]


def test_login_success_returns_token_and_resets_counters(client, db, user):
    user.failed_login_attempts = 3
    db.commit()

    response = login(client)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["token_type"] == "bearer"
    assert data["expires_in"] == settings.jwt_access_token_expire_minutes * 60
    assert data["user"]["email"] == "user@example.com"

    db.expire_all()
    refreshed = db.get(User, user.id)
    assert refreshed.failed_login_attempts == 0
    assert refreshed.last_login is not None

    me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "user@example.com"


def test_login_unknown_email(client):
    response = login(client, email="nobody@example.com")

    assert response.status_code == 401


def test_wrong_password_increments_attempts(client, db, user):
    response = login(client, password="wrong-password")

    assert response.status_code == 401
    db.expire_all()
    assert db.get(User, user.id).failed_login_attempts == 1


def test_account_locks_after_max_attempts(client, db, user):
    for _ in range(settings.login_max_attempts):
        assert login(client, password="wrong-password").status_code == 401

    db.expire_all()
    locked = db.get(User, user.id)
    assert locked.failed_login_attempts == 0
    assert locked.locked_until is not None
    assert locked.locked_until > utcnow()

    # Même le bon mot de passe est refusé pendant le blocage
    response = login(client)
    assert response.status_code == 429
    assert response.json()["error"]["type"] == "account_locked"


def test_expired_lock_allows_login(client, db, user):
    user.locked_until = utcnow() - timedelta(minutes=1)
    db.commit()

    response = login(client)

    assert response.status_code == 200
    db.expire_all()
    assert db.get(User, user.id).locked_until is None


def test_login_deactivated_account(client, make_user):
    make_user(email="off@example.com", is_active=False)

    response = login(client, email="off@example.com")

    assert response.status_code == 400


def test_password_recovery_unknown_email(client, sent_codes):
    response = client.post(f"{API}/auth/password-recovery", json={"email": "nobody@example.com"})

    assert response.status_code == 404
    assert sent_codes == []


def test_password_recovery_and_reset(client, db, user, sent_codes):
    response = client.post(f"{API}/auth/password-recovery", json={"email": "user@example.com"})

    assert response.status_code == 200
    assert "token" not in response.text
    assert len(sent_codes) == 1
    email, code = sent_codes[0]
    assert email == "user@example.com"
    assert len(code) == 6 and code.isdigit()

    db.expire_all()
    stored = db.get(User, user.id)
    assert stored.reset_token_hash == hash_reset_code(code)
    assert stored.reset_token_expires_at > utcnow()

    response = client.post(f"{API}/auth/password-reset", json={
        "token": code, "new_password": "new-secret"
    })
    assert response.status_code == 200

    db.expire_all()
    assert db.get(User, user.id).reset_token_hash is None
    assert login(client, password="new-secret").status_code == 200
    assert login(client, password=PASSWORD).status_code == 401


def test_password_reset_clears_lock(client, db, user, sent_codes):
    user.locked_until = utcnow() + timedelta(minutes=10)
    db.commit()
    client.post(f"{API}/auth/password-recovery", json={"email": "user@example.com"})
    code = sent_codes[0][1]

    client.post(f"{API}/auth/password-reset", json={"token": code, "new_password": "new-secret"})

    assert login(client, password="new-secret").status_code == 200


def test_password_reset_with_invalid_code(client, user):
    response = client.post(f"{API}/auth/password-reset", json={
        "token": "000000", "new_password": "new-secret"
    })

    assert response.status_code == 400


def test_password_reset_with_expired_code(client, db, user):
    user.reset_token_hash = hash_reset_code("123456")
    user.reset_token_expires_at = utcnow() - timedelta(minutes=1)
    db.commit()

    response = client.post(f"{API}/auth/password-reset", json={
        "token": "123456", "new_password": "new-secret"
    })

    assert response.status_code == 400


def test_change_password(client, auth_headers):
    response = client.post(f"{API}/auth/change-password", json={
        "current_password": PASSWORD, "new_password": "another-secret"
    }, headers=auth_headers)

    assert response.status_code == 200
    assert login(client, password="another-secret").status_code == 200


def test_change_password_requires_current_password(client, auth_headers):
    response = client.post(f"{API}/auth/change-password", json={
        "current_password": "wrong", "new_password": "another-secret"
    }, headers=auth_headers)

    assert response.status_code == 400


def test_change_password_must_differ(client, auth_headers):
    response = client.post(f"{API}/auth/change-password", json={
        "current_password": PASSWORD, "new_password": PASSWORD
    }, headers=auth_headers)

    assert response.status_code == 400


def test_protected_route_requires_token(client):
    response = client.get(f"{API}/products/")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == 401


def test_invalid_token_is_rejected(client):
    response = client.get(f"{API}/products/", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
