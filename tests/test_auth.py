from __future__ import annotations

from datetime import timedelta

import pytest
from jose import jwt

from app.core.auth import create_access_token, decode_token
from app.core.exceptions import ExpiredToken, InvalidToken


def test_decode_token_returns_identity_claim() -> None:
    token = create_access_token({"sub": "507f1f77bcf86cd799439011", "role": "student"})
    payload = decode_token(token)
    assert payload["sub"] == "507f1f77bcf86cd799439011"
    assert payload["role"] == "student"
    assert "exp" in payload


def test_decode_token_expired() -> None:
    token = create_access_token({"sub": "u1"}, expires_delta=timedelta(seconds=-30))
    with pytest.raises(ExpiredToken):
        decode_token(token)


@pytest.mark.parametrize(
    "token",
    [
        "not-a-jwt",
        jwt.encode({"sub": "u1"}, "some-other-secret", algorithm="HS256"),
        jwt.encode({"role": "student"}, "test-secret", algorithm="HS256"),
    ],
    ids=["malformed", "wrong-signature", "no-subject"],
)
def test_decode_token_invalid(token: str) -> None:
    with pytest.raises(InvalidToken):
        decode_token(token)


def test_expired_is_distinct_from_invalid() -> None:
    assert not issubclass(ExpiredToken, InvalidToken)


def test_protected_route_without_cookie(client) -> None:
    resp = client.get("/api/v1/company")
    assert resp.status_code == 401
    assert resp.json() == {"message": "Authentication required. Please log in.", "success": False}


def test_protected_route_with_expired_cookie(client) -> None:
    client.cookies.set("token", create_access_token({"sub": "u1"}, expires_delta=timedelta(minutes=-1)))
    resp = client.get("/api/v1/company")
    assert resp.status_code == 401
    assert resp.json()["message"] == "Token expired"


def test_protected_route_with_tampered_cookie(client) -> None:
    client.cookies.set("token", create_access_token({"sub": "u1"}) + "x")
    resp = client.get("/api/v1/company")
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid token"


def test_login_sets_http_only_day_long_cookie(client, make_user) -> None:
    user = make_user("student")
    resp = client.post(
        "/api/v1/user/login",
        json={"email": user["email"], "password": user["password"], "role": "student"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == f"Welcome back, {user['fullname']}"
    assert "password" not in body["user"]

    cookie = resp.headers["set-cookie"]
    assert cookie.startswith("token=")
    assert "HttpOnly" in cookie
    assert "Max-Age=86400" in cookie
    assert "SameSite=strict" in cookie
    # ENVIRONMENT=test is not production
    assert "Secure" not in cookie


def test_logout_clears_cookie_and_locks_protected_routes(client, recruiter) -> None:
    assert client.get("/api/v1/user/me").status_code == 200

    resp = client.post("/api/v1/user/logout")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Logged out successfully.", "success": True}
    assert "Max-Age=0" in resp.headers["set-cookie"]

    resp = client.get("/api/v1/user/me")
    assert resp.status_code == 401
    assert resp.json()["success"] is False
