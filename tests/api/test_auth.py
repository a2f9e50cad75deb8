from datetime import datetime, timedelta, timezone

import jwt
from sqlalchemy import func, select

from filevault.config import settings
from filevault.models.user import User
from filevault.services.jwt import validate_access_token
from tests.constants import URLs
from tests.helpers import auth_headers, signup


def test_signup_success(client):
    response = client.post(
        URLs.SIGNUP,
        json={"username": "alice", "email": "alice@example.com", "password": "secret1"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    assert data["data"]["token_type"] == "bearer"
    assert data["data"]["user"]["email"] == "alice@example.com"
    assert data["data"]["user"]["username"] == "alice"
    assert "id" in data["data"]["user"]
    assert "created_at" in data["data"]["user"]


def test_signup_never_returns_password_hash(client):
    data = signup(client)
    assert "hashed_password" not in data["user"]
    assert "password" not in data["user"]


def test_signup_stores_hash_not_plaintext(client, db):
    signup(client, email="hash@example.com", password="secret1")

    user = db.execute(select(User).where(User.email == "hash@example.com")).scalar_one()
    assert user.hashed_password != "secret1"
    assert user.hashed_password.startswith("$2")


def test_signup_duplicate_email(client, db):
    signup(client, email="dup@example.com", password="password123")

    response = client.post(
        URLs.SIGNUP,
        json={"email": "dup@example.com", "password": "password456"},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Email already exists"

    count = db.execute(
        select(func.count(User.id)).where(User.email == "dup@example.com")
    ).scalar_one()
    assert count == 1


def test_signup_missing_password(client):
    response = client.post(URLs.SIGNUP, json={"email": "test@example.com"})
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_signup_missing_email(client):
    response = client.post(URLs.SIGNUP, json={"password": "password123"})
    assert response.status_code == 400


def test_signup_empty_password(client):
    response = client.post(URLs.SIGNUP, json={"email": "test@example.com", "password": ""})
    assert response.status_code == 400


def test_signup_invalid_email_format(client):
    response = client.post(URLs.SIGNUP, json={"email": "invalid-email", "password": "password123"})
    assert response.status_code == 400


def test_signup_password_over_bcrypt_limit(client):
    response = client.post(
        URLs.SIGNUP,
        json={"email": "long@example.com", "password": "a" * 100},
    )
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_signup_password_limit_counts_bytes(client):
    # 40 two-byte characters: under 72 characters, over 72 bytes
    response = client.post(
        URLs.SIGNUP,
        json={"email": "bytes@example.com", "password": "\u00e9" * 40},
    )
    assert response.status_code == 400

    accepted = client.post(
        URLs.SIGNUP,
        json={"email": "bytes@example.com", "password": "a" * 72},
    )
    assert accepted.status_code == 201


def test_signup_username_is_optional(client):
    data = signup(client, username=None)
    assert data["user"]["username"] is None


def test_signup_sets_informational_storage_limit(client):
    data = signup(client)
    assert data["user"]["storage_limit_bytes"] == settings.DEFAULT_STORAGE_LIMIT_BYTES


# Login tests


def test_login_success_token_subject_matches_user(client):
    created = signup(client, email="login@example.com", password="password123")

    response = client.post(
        URLs.LOGIN,
        json={"email": "login@example.com", "password": "password123"},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["id"] == created["user"]["id"]
    assert validate_access_token(data["token"]) == created["user"]["id"]


def test_login_invalid_password(client):
    signup(client, email="login@example.com", password="password123")

    response = client.post(
        URLs.LOGIN,
        json={"email": "login@example.com", "password": "wrongpassword"},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid credentials"


def test_login_nonexistent_user_same_answer_as_wrong_password(client):
    signup(client, email="login@example.com", password="password123")

    wrong_password = client.post(
        URLs.LOGIN,
        json={"email": "login@example.com", "password": "nope"},
    )
    unknown_user = client.post(
        URLs.LOGIN,
        json={"email": "nouser@example.com", "password": "password123"},
    )
    assert unknown_user.status_code == wrong_password.status_code == 400
    assert unknown_user.json() == wrong_password.json()


def test_login_overlong_password_same_answer_as_wrong_password(client):
    signup(client, email="login@example.com", password="password123")

    response = client.post(
        URLs.LOGIN,
        json={"email": "login@example.com", "password": "b" * 100},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid credentials"


def test_login_email_is_case_sensitive(client):
    signup(client, email="Case@example.com", password="password123")

    response = client.post(
        URLs.LOGIN,
        json={"email": "case@example.com", "password": "password123"},
    )
    assert response.status_code == 400


# Current user tests


def test_me_success(client):
    created = signup(client, email="me@example.com")

    response = client.get(URLs.ME, headers=auth_headers(created["token"]))
    assert response.status_code == 200
    assert response.json()["data"]["email"] == "me@example.com"
    assert response.json()["data"]["id"] == created["user"]["id"]


def test_me_without_token(client):
    response = client.get(URLs.ME)
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token"


def test_me_malformed_token(client):
    response = client.get(URLs.ME, headers=auth_headers("not-a-jwt"))
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token"


def test_me_expired_token_same_answer_as_malformed(client):
    created = signup(client)
    issued = datetime.now(timezone.utc) - timedelta(hours=2)
    expired = jwt.encode(
        {"sub": str(created["user"]["id"]), "iat": issued, "exp": issued + timedelta(minutes=1)},
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
    )

    expired_response = client.get(URLs.ME, headers=auth_headers(expired))
    malformed_response = client.get(URLs.ME, headers=auth_headers("garbage"))
    assert expired_response.status_code == 401
    assert expired_response.json() == malformed_response.json()


def test_me_wrong_signature(client):
    created = signup(client)
    now = datetime.now(timezone.utc)
    forged = jwt.encode(
        {"sub": str(created["user"]["id"]), "iat": now, "exp": now + timedelta(minutes=5)},
        "some-other-secret-key-that-is-long-enough-too",
        algorithm="HS256",
    )

    response = client.get(URLs.ME, headers=auth_headers(forged))
    assert response.status_code == 401


def test_me_user_deleted_after_token_issued(client, db):
    created = signup(client, email="gone@example.com")

    user = db.get(User, created["user"]["id"])
    db.delete(user)
    db.commit()

    response = client.get(URLs.ME, headers=auth_headers(created["token"]))
    assert response.status_code == 404
