"""담당관 계정 API 라우터입니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.middleware.auth_middleware import require_roles
from app.models.user import User
from app.schemas.user import LoginRequest, RefreshRequest, TokenResponse, UserCreate, UserOut
from app.services import auth_service, user_service
from app.utils.permissions import OFFICER

router = APIRouter(prefix=f"{settings.API_PREFIX}/cfa/user", tags=["user - officer"])


@router.get("", response_model=UserOut)
def get_profile(current_user: User = Depends(require_roles(OFFICER))):
    return current_user


@router.post("/register", response_model=UserOut)
def register_officer(data: UserCreate, db: Session = Depends(get_db)):
    return user_service.register_user(db, data, OFFICER)


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    token, user = user_service.authenticate(db, request, OFFICER)
    return TokenResponse(access_token=token, user=UserOut.model_validate(user))


@router.post("/refresh", response_model=TokenResponse)
def refresh(request: RefreshRequest, db: Session = Depends(get_db)):
    token, user = auth_service.refresh_access_token(db, request.access_token, OFFICER)
    return TokenResponse(access_token=token, user=UserOut.model_validate(user))
