"""
Tests for registration, login, tokens and profile endpoints
"""
from datetime import timedelta

import jwt
import pytest

from storefront.exceptions import AuthError
from storefront.schemas.auth import TokenIdentity
from storefront.security import create_token, decode_token, hash_password, verify_password
from tests.conftest import PASSWORD


def register(client, username="newplayer", email=None, password="hunter22", **extra):
    payload = {
        "username": username,
        "email": email or f"{username}@example.com",
        "password": password,
        **extra
    }
    return client.post("/auth/register", json=payload)


def test_register_returns_token_and_profile(client):
    response = register(client, gameUsername="Rusty")

    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "User registered successfully"
    assert data["user"]["username"] == "newplayer"
    assert data["user"]["game_username"] == "Rusty"
    assert data["user"]["role"] == "user"
    assert data["user"]["loyalty_points"] == 0
    assert "password_hash" not in data["user"]
    assert decode_token(data["token"]).username == "newplayer"


def test_register_then_login_round_trip(client):
    registered = register(client).json()

    response = client.post("/auth/login", json={"username": "newplayer", "password": "hunter22"})

    assert response.status_code == 200
    identity = decode_token(response.json()["token"])
    assert identity.id == registered["user"]["id"]
    assert identity.email == "newplayer@example.com"
    assert identity.role == "user"
    assert response.json()["user"]["last_login"] is not None


def test_login_with_email(client, user):
    response = client.post("/auth/login", json={"username": user.email, "password": PASSWORD})

    assert response.status_code == 200
    assert response.json()["user"]["id"] == user.id


@pytest.mark.parametrize("field", ["username", "email"])
def test_register_duplicate_is_conflict(client, user, field):
    kwargs = {"username": "someone", "email": "someone@example.com"}
    kwargs[field] = getattr(user, field)

    response = register(client, **kwargs)

    assert response.status_code == 409
    assert response.json()["detail"] == "Username or email already exists"


def test_register_short_password_rejected(client):
    response = register(client, password="abc")

    assert response.status_code == 400
    assert "at least 6 characters" in response.json()["detail"]


def test_register_invalid_email_rejected(client):
    response = register(client, email="not-an-email")

    assert response.status_code == 400


def test_wrong_password_and_unknown_user_look_the_same(client, user):
    wrong_password = client.post("/auth/login", json={"username": user.username, "password": "nope-nope"})
    unknown_user = client.post("/auth/login", json={"username": "ghost", "password": PASSWORD})

    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json() == {"detail": "Invalid credentials"}


def test_me_requires_token(client):
    response = client.get("/auth/me")

    assert response.status_code == 401
    assert response.json()["detail"] == "Access token required"


def test_me_rejects_bad_token(client):
    response = client.get("/auth/me", headers={"Authorization": "Bearer not.a.token"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


def test_me_rejects_expired_token(client, user):
    identity = TokenIdentity(id=user.id, username=user.username, email=user.email, role=user.role)
    token = create_token(identity, expires_in=timedelta(seconds=-5))

    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Token expired"


def test_me_returns_profile(client, user, auth_headers):
    response = client.get("/auth/me", headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()["user"]["username"] == user.username


def test_update_profile(client, user, auth_headers):
    response = client.put("/auth/profile", headers=auth_headers(user), json={
        "username": "renamed",
        "email": "renamed@example.com",
        "gameUsername": "NewName"
    })

    assert response.status_code == 200
    assert response.json()["user"]["username"] == "renamed"
    assert response.json()["user"]["game_username"] == "NewName"


def test_update_profile_conflict_with_other_user(client, user, make_user, auth_headers):
    other = make_user("other")

    response = client.put("/auth/profile", headers=auth_headers(user), json={
        "username": other.username,
        "email": user.email
    })

    assert response.status_code == 409


def test_update_profile_keeping_own_values(client, user, auth_headers):
    response = client.put("/auth/profile", headers=auth_headers(user), json={
        "username": user.username,
        "email": user.email
    })

    assert response.status_code == 200


def test_change_password(client, user, auth_headers):
    response = client.put("/auth/password", headers=auth_headers(user), json={
        "currentPassword": PASSWORD,
        "newPassword": "brand-new-pass"
    })

    assert response.status_code == 200
    assert response.json()["message"] == "Password changed successfully"
    old = client.post("/auth/login", json={"username": user.username, "password": PASSWORD})
    new = client.post("/auth/login", json={"username": user.username, "password": "brand-new-pass"})
    assert old.status_code == 401
    assert new.status_code == 200


def test_change_password_requires_current_password(client, user, auth_headers):
    response = client.put("/auth/password", headers=auth_headers(user), json={
        "current_password": "wrong-password",
        "new_password": "brand-new-pass"
    })

    assert response.status_code == 401
    assert response.json()["detail"] == "Current password is incorrect"


def test_password_hashing():
    hashed = hash_password("hunter22")

    assert hashed != "hunter22"
    assert verify_password("hunter22", hashed)
    assert not verify_password("hunter23", hashed)
    assert not verify_password("hunter22", "not-a-bcrypt-hash")


def test_decode_token_signed_with_other_secret_fails(user):
    token = jwt.encode({"id": user.id, "username": "x", "email": "x@example.com", "role": "admin",
                        "exp": 9999999999}, "another-secret-entirely-32-bytes!!", algorithm="HS256")

    with pytest.raises(AuthError):
        decode_token(token)
