"""관리자 계정 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.middleware.auth_middleware import require_roles
from app.models.user import User
from app.schemas.user import (
    LoginRequest,
    RefreshRequest,
    TokenResponse,
    UserCreate,
    UserOut,
    UserPageOut,
)
from app.services import auth_service, user_service
from app.utils.permissions import ADMIN

router = APIRouter(prefix=f"{settings.API_PREFIX}/user", tags=["user - admin"])


@router.post("/register", response_model=UserOut)
def register_admin(data: UserCreate, db: Session = Depends(get_db)):
    return user_service.register_user(db, data, ADMIN)


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    token, user = user_service.authenticate(db, request, ADMIN)
    return TokenResponse(access_token=token, user=UserOut.model_validate(user))


@router.post("/refresh", response_model=TokenResponse)
def refresh(request: RefreshRequest, db: Session = Depends(get_db)):
    token, user = auth_service.refresh_access_token(db, request.access_token, ADMIN)
    return TokenResponse(access_token=token, user=UserOut.model_validate(user))


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(require_roles(ADMIN))):
    return current_user


@router.get("", response_model=UserPageOut)
def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(ADMIN)),
):
    return user_service.list_users(db, page=page, limit=limit)


@router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(ADMIN)),
):
    return user_service.get_user(db, user_id)
