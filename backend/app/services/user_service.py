"""User Service 도메인 서비스 레이어입니다. 계정 등록, 로그인, 조회 흐름을 캡슐화합니다."""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.config import settings
from app.models.user import User
from app.schemas.user import LoginRequest, UserCreate
from app.services.auth_service import create_access_token, hash_password, verify_password
from app.utils.permissions import ADMIN, ALL_ROLES

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return str(email or "").strip().lower()


def _get_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == _normalize_email(email)).first()


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.user_id == int(user_id)).first()
    if not user:
        raise HTTPException(status_code=404, detail="사용자를 찾을 수 없습니다.")
    return user


def list_users(db: Session, *, page: int = 1, limit: int = 10) -> dict:
    query = db.query(User)
    total = query.count()
    items = (
        query.order_by(User.created_at.desc(), User.user_id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {"items": items, "total": total, "page": page, "limit": limit}


def register_user(db: Session, data: UserCreate, role: str) -> User:
    if role not in ALL_ROLES:
        raise HTTPException(status_code=400, detail="유효하지 않은 역할입니다.")
    if role == ADMIN and not settings.ALLOW_ADMIN_REGISTRATION:
        raise HTTPException(status_code=403, detail="관리자 계정 등록이 비활성화되어 있습니다.")
    if len(data.password) < settings.PASSWORD_MIN_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"비밀번호는 최소 {settings.PASSWORD_MIN_LENGTH}자 이상이어야 합니다.",
        )
    if data.password != data.confirm_password:
        raise HTTPException(status_code=400, detail="비밀번호 확인이 일치하지 않습니다.")

    email = _normalize_email(data.email)
    if _get_by_email(db, email):
        raise HTTPException(status_code=400, detail="이미 등록된 이메일입니다.")

    user = User(
        name=data.name.strip(),
        email=email,
        password_hash=hash_password(data.password),
        role=role,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("[auth] registered user_id=%s role=%s", user.user_id, user.role)
    return user


def authenticate(db: Session, data: LoginRequest, role: str) -> tuple[str, User]:
    user = _get_by_email(db, data.email)
    if not user or not user.is_active:
        logger.info("[auth] login failed: unknown account role=%s", role)
        raise HTTPException(status_code=400, detail="사용자를 찾을 수 없습니다.")
    if not verify_password(data.password, user.password_hash):
        logger.info("[auth] login failed: wrong password user_id=%s", user.user_id)
        raise HTTPException(status_code=400, detail="비밀번호가 올바르지 않습니다.")
    if user.role != role:
        logger.info("[auth] login rejected: role %s on %s portal user_id=%s", user.role, role, user.user_id)
        raise HTTPException(status_code=403, detail="해당 포털에서 사용할 수 없는 계정입니다.")

    logger.info("[auth] login user_id=%s role=%s", user.user_id, user.role)
    return create_access_token(user), user
