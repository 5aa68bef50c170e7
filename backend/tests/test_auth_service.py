"""비밀번호 해시, 토큰 검증, 역할 판정 헬퍼 단위 테스트입니다."""

from datetime import timedelta

import pytest
from fastapi import HTTPException
from jose import jwt

from app.config import settings
from app.models.user import User
from app.services.auth_service import create_access_token, decode_token, hash_password, verify_password
from app.utils.permissions import ADMIN, OFFICER, is_role_allowed


def _user() -> User:
    return User(user_id=7, name="Tester", email="t@example.com", password_hash="x", role=OFFICER)


def test_hash_and_verify_password():
    hashed = hash_password("hunter22")
    assert hashed != "hunter22"
    assert verify_password("hunter22", hashed)
    assert not verify_password("hunter23", hashed)


def test_verify_password_with_unknown_hash_format():
    assert verify_password("hunter22", "plain-text-not-a-hash") is False


def test_decode_token_roundtrip_claims():
    payload = decode_token(create_access_token(_user()))
    assert payload["sub"] == "7"
    assert payload["role"] == OFFICER
    assert payload["email"] == "t@example.com"


def test_decode_expired_token_only_with_ignore_expiration():
    token = create_access_token(_user(), expires_delta=timedelta(seconds=-30))
    with pytest.raises(HTTPException) as exc:
        decode_token(token)
    assert exc.value.status_code == 401

    payload = decode_token(token, ignore_expiration=True)
    assert payload["sub"] == "7"


def test_decode_rejects_foreign_signature():
    payload = decode_token(create_access_token(_user()))
    forged = jwt.encode(payload, "some-other-secret", algorithm=settings.JWT_ALGORITHM)
    with pytest.raises(HTTPException) as exc:
        decode_token(forged, ignore_expiration=True)
    assert exc.value.status_code == 401


@pytest.mark.parametrize(
    "role, allowed, expected",
    [
        (ADMIN, {ADMIN}, True),
        (OFFICER, {ADMIN}, False),
        (OFFICER, (ADMIN, OFFICER), True),
        (None, {ADMIN}, False),
        ("", {OFFICER}, False),
    ],
)
def test_is_role_allowed(role, allowed, expected):
    assert is_role_allowed(role, allowed) is expected
