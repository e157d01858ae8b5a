# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.

from datetime import datetime, timedelta

from jose import jwt

from lahap.models.user import PasswordResetToken
from lahap.services import account_service
from lahap.utils.auth_utils import SESSION_COOKIE, session_claims
from lahap.utils.jwt_utils import ALGORITHM, SECRET_KEY, create_access_token
from lahap.utils.password_utils import verify_password
from tests.helpers import auth_headers


def _codes(monkeypatch, *codes):
    it = iter(codes)
    monkeypatch.setattr(account_service, "generate_reset_code", lambda: next(it))


def test_request_reset_issues_code(client, db, user):
    res = client.post("/auth/request-reset", json={"email": user.email})
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert len(body["token"]) == 6 and body["token"].isdigit()
    assert body["resetPath"] == f"/auth/reset/{body['token']}"

    stored = db.query(PasswordResetToken).filter_by(token=body["token"]).one()
    assert stored.user_id == user.id
    assert stored.used is False
    assert stored.expires > datetime.utcnow()


def test_request_reset_errors(client):
    assert client.post("/auth/request-reset", json={}).json() == {"error": "Email is required."}
    unknown = client.post("/auth/request-reset", json={"email": "nobody@example.com"})
    assert unknown.status_code == 404


def test_code_collision_is_retried(client, db, user, other_user, monkeypatch):
    _codes(monkeypatch, "111111", "111111", "111111", "222222")

    assert client.post("/auth/request-reset", json={"email": user.email}).json()["token"] == "111111"
    second = client.post("/auth/request-reset", json={"email": other_user.email})

    assert second.status_code == 200
    assert second.json()["token"] == "222222"
    assert db.query(PasswordResetToken).count() == 2


def test_code_generation_gives_up_after_five_attempts(client, user, other_user, monkeypatch):
    _codes(monkeypatch, *["123456"] * 6)

    client.post("/auth/request-reset", json={"email": user.email})
    res = client.post("/auth/request-reset", json={"email": other_user.email})

    assert res.status_code == 500
    assert res.json() == {"error": "Unable to generate reset code. Try again."}


def test_reset_password_flow(client, db, user):
    token = client.post("/auth/request-reset", json={"email": user.email}).json()["token"]

    short = client.post(f"/auth/reset/{token}", json={"password": "short"})
    assert short.status_code == 400

    res = client.post(f"/auth/reset/{token}", json={"password": "brand-new-pass"})
    assert res.status_code == 200
    db.refresh(user)
    assert verify_password("brand-new-pass", user.hashed_password)

    reused = client.post(f"/auth/reset/{token}", json={"password": "another-pass"})
    assert reused.json() == {"error": "This token has already been used."}

    unknown = client.post("/auth/reset/000000", json={"password": "another-pass"})
    assert unknown.json() == {"error": "Invalid or expired token."}


def test_expired_code_rejected(client, db, user):
    db.add(PasswordResetToken(token="654321", user_id=user.id, expires=datetime.utcnow() - timedelta(minutes=1)))
    db.commit()

    res = client.post("/auth/reset/654321", json={"password": "brand-new-pass"})
    assert res.status_code == 400
    assert res.json() == {"error": "Token expired."}


def test_change_password(client, db, user):
    headers = auth_headers(user)

    wrong = client.post(
        "/profile/change-password",
        json={"oldPassword": "not-it", "newPassword": "brand-new-pass"},
        headers=headers,
    )
    assert wrong.status_code == 400
    assert wrong.json() == {"error": "Old password is incorrect."}

    ok = client.post(
        "/profile/change-password",
        json={"oldPassword": "password123", "newPassword": "brand-new-pass"},
        headers=headers,
    )
    assert ok.status_code == 200
    db.refresh(user)
    assert verify_password("brand-new-pass", user.hashed_password)

    anonymous = client.post("/profile/change-password", json={"oldPassword": "a", "newPassword": "b"})
    assert anonymous.status_code == 401


def test_invalid_session_token(client):
    res = client.get("/children", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401
    assert res.json() == {"error": "Invalid token"}


def test_session_cookie_is_accepted(client, user):
    client.cookies.set(SESSION_COOKIE, create_access_token(session_claims(user)))
    assert client.get("/children").status_code == 200


def test_non_bearer_authorization_header(client, user):
    res = client.get("/children", headers={"Authorization": "Token abc"})
    assert res.status_code == 401


def test_expired_session_token(client, user):
    token = create_access_token(session_claims(user), expires_delta=timedelta(seconds=-5))
    res = client.get("/children", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401
    assert res.json() == {"error": "Session expired"}


def test_token_from_another_issuer_rejected(client, user):
    claims = {**session_claims(user), "iss": "someone-else", "exp": datetime.utcnow() + timedelta(hours=1)}
    token = jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM)
    res = client.get("/children", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401
    assert res.json() == {"error": "Invalid token"}
