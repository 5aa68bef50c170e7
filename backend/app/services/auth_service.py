"""Auth Service 도메인 서비스 레이어입니다. 비밀번호 해시와 토큰 발급/검증을 담당합니다."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import HTTPException, status
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from app.config import settings
from app.models.user import User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(plain_password, password_hash)
    except (ValueError, TypeError):
        # 알 수 없는 해시 형식은 불일치로 취급
        return False


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {
        "sub": str(user.user_id),
        "email": user.email,
        "role": user.role,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str, ignore_expiration: bool = False) -> dict:
    """서명과 만료를 검증하고 payload를 돌려준다.

    ignore_expiration=True 는 refresh 처리에서만 사용한다. 이 경우에도 서명은 검증한다.
    """
    options = {"verify_exp": False} if ignore_expiration else None
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options=options,
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="유효하지 않거나 만료된 토큰입니다.",
        )


def refresh_access_token(db: Session, token: str, role: str) -> tuple[str, User]:
    payload = decode_token(token, ignore_expiration=True)
    exp = payload.get("exp")
    user_id = payload.get("sub")
    if exp is None or user_id is None or not str(user_id).isdigit():
        raise HTTPException(status_code=401, detail="토큰 정보가 올바르지 않습니다.")

    now = datetime.now(timezone.utc)
    expired_at = datetime.fromtimestamp(int(exp), tz=timezone.utc)
    if now - expired_at > timedelta(minutes=settings.TOKEN_REFRESH_GRACE_MINUTES):
        raise HTTPException(status_code=401, detail="토큰 갱신 가능 기간이 지났습니다.")

    user = db.query(User).filter(User.user_id == int(user_id), User.is_active == True).first()  # noqa: E712
    if not user:
        raise HTTPException(status_code=401, detail="사용자를 찾을 수 없거나 비활성 상태입니다.")
    if user.role != role:
        raise HTTPException(status_code=403, detail="해당 포털에서 사용할 수 없는 계정입니다.")

    logger.info("[auth] token refreshed user_id=%s role=%s", user.user_id, user.role)
    return create_access_token(user), user
