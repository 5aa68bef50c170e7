"""계정 등록/로그인/토큰 갱신 API 테스트입니다."""

from datetime import datetime, timedelta, timezone

from jose import jwt

from app.config import settings
from app.services.auth_service import create_access_token, decode_token
from tests.conftest import TEST_PASSWORD, admin_headers, officer_headers


def _register_payload(email: str, password: str = "abcdef", confirm: str | None = None) -> dict:
    return {
        "name": "New Person",
        "email": email,
        "password": password,
        "confirm_password": password if confirm is None else confirm,
    }


def test_register_admin_and_login(client):
    resp = client.post("/api/user/register", json=_register_payload("Boss@Example.com"))
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["role"] == "ADMIN"
    assert data["email"] == "boss@example.com"
    assert "password" not in data and "password_hash" not in data

    login = client.post("/api/user/login", json={"email": "boss@example.com", "password": "abcdef"})
    assert login.status_code == 200, login.text
    body = login.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["role"] == "ADMIN"

    payload = decode_token(body["access_token"])
    assert payload["sub"] == str(data["user_id"])
    assert payload["email"] == "boss@example.com"
    assert payload["role"] == "ADMIN"
    assert payload["exp"] > payload["iat"]


def test_register_officer_role(client):
    resp = client.post("/api/cfa/user/register", json=_register_payload("field@example.com"))
    assert resp.status_code == 200, resp.text
    assert resp.json()["role"] == "OFFICER"


def test_register_duplicate_email_rejected(client, seed_users):
    resp = client.post("/api/cfa/user/register", json=_register_payload("OFFICER@example.com"))
    assert resp.status_code == 400


def test_register_password_mismatch_rejected(client):
    resp = client.post("/api/cfa/user/register", json=_register_payload("x@example.com", confirm="zzzzzz"))
    assert resp.status_code == 400


def test_register_short_password_rejected(client):
    resp = client.post("/api/cfa/user/register", json=_register_payload("y@example.com", password="abc"))
    assert resp.status_code == 400


def test_register_invalid_email_rejected(client):
    resp = client.post("/api/cfa/user/register", json=_register_payload("not-an-email"))
    assert resp.status_code == 422


def test_admin_registration_can_be_disabled(client, monkeypatch):
    monkeypatch.setattr(settings, "ALLOW_ADMIN_REGISTRATION", False)
    resp = client.post("/api/user/register", json=_register_payload("boss2@example.com"))
    assert resp.status_code == 403

    officer = client.post("/api/cfa/user/register", json=_register_payload("still-ok@example.com"))
    assert officer.status_code == 200


def test_login_wrong_password(client, seed_users):
    resp = client.post("/api/user/login", json={"email": "admin@example.com", "password": "nope-nope"})
    assert resp.status_code == 400


def test_login_unknown_email(client, seed_users):
    resp = client.post("/api/cfa/user/login", json={"email": "ghost@example.com", "password": TEST_PASSWORD})
    assert resp.status_code == 400


def test_login_on_wrong_portal_forbidden(client, seed_users):
    officer_on_admin = client.post("/api/user/login", json={"email": "officer@example.com", "password": TEST_PASSWORD})
    assert officer_on_admin.status_code == 403

    admin_on_officer = client.post("/api/cfa/user/login", json={"email": "admin@example.com", "password": TEST_PASSWORD})
    assert admin_on_officer.status_code == 403


def test_officer_profile(client, seed_users):
    resp = client.get("/api/cfa/user", headers=officer_headers(client))
    assert resp.status_code == 200
    assert resp.json()["email"] == "officer@example.com"


def test_admin_me_and_user_lookup(client, seed_users):
    headers = admin_headers(client)
    me = client.get("/api/user/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["role"] == "ADMIN"

    page = client.get("/api/user?page=1&limit=2", headers=headers)
    assert page.status_code == 200
    body = page.json()
    assert body["total"] == 3
    assert len(body["items"]) == 2

    officer_id = seed_users["officer"].user_id
    one = client.get(f"/api/user/{officer_id}", headers=headers)
    assert one.status_code == 200
    assert one.json()["name"] == "Officer"

    missing = client.get("/api/user/9999", headers=headers)
    assert missing.status_code == 404


def test_user_lookup_forbidden_for_officer(client, seed_users):
    resp = client.get("/api/user", headers=officer_headers(client))
    assert resp.status_code == 403


def test_profile_unauthenticated(client):
    resp = client.get("/api/cfa/user")
    assert resp.status_code in (401, 403)  # HTTPBearer raises 401 or 403 depending on version


def test_invalid_and_expired_token_rejected(client, seed_users):
    garbage = client.get("/api/cfa/user", headers={"Authorization": "Bearer not-a-token"})
    assert garbage.status_code == 401

    expired = create_access_token(seed_users["officer"], expires_delta=timedelta(minutes=-5))
    resp = client.get("/api/cfa/user", headers={"Authorization": f"Bearer {expired}"})
    assert resp.status_code == 401


def test_refresh_expired_token_within_grace(client, seed_users):
    expired = create_access_token(seed_users["officer"], expires_delta=timedelta(minutes=-5))
    resp = client.post("/api/cfa/user/refresh", json={"access_token": expired})
    assert resp.status_code == 200, resp.text
    fresh = resp.json()["access_token"]

    profile = client.get("/api/cfa/user", headers={"Authorization": f"Bearer {fresh}"})
    assert profile.status_code == 200


def test_refresh_rejected_after_grace_or_wrong_portal(client, seed_users):
    stale = create_access_token(
        seed_users["officer"],
        expires_delta=timedelta(minutes=-(settings.TOKEN_REFRESH_GRACE_MINUTES + 5)),
    )
    resp = client.post("/api/cfa/user/refresh", json={"access_token": stale})
    assert resp.status_code == 401

    valid = create_access_token(seed_users["officer"])
    wrong_portal = client.post("/api/user/refresh", json={"access_token": valid})
    assert wrong_portal.status_code == 403


def test_deactivated_user_token_rejected(client, db, seed_users):
    officer = seed_users["officer"]
    token = create_access_token(officer)
    headers = {"Authorization": f"Bearer {token}"}
    assert client.get("/api/cfa/user", headers=headers).status_code == 200

    officer.is_active = False
    db.commit()

    assert client.get("/api/cfa/user", headers=headers).status_code == 401
    resp = client.post("/api/cfa/user/refresh", json={"access_token": token})
    assert resp.status_code == 401


def test_refresh_rejects_non_numeric_subject(client, seed_users):
    now = datetime.now(timezone.utc)
    payload = {
        "sub": "officer@example.com",
        "role": "OFFICER",
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=5)).timestamp()),
    }
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

    resp = client.post("/api/cfa/user/refresh", json={"access_token": token})
    assert resp.status_code == 401
    profile = client.get("/api/cfa/user", headers={"Authorization": f"Bearer {token}"})
    assert profile.status_code == 401


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
