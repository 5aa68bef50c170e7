"""설문 응답(담당관) API 라우터입니다."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.middleware.auth_middleware import require_roles
from app.models.user import User
from app.schemas.survey import SubmissionOut, SurveyOut, SurveySubmit, SurveySubmitResult
from app.services import submission_service
from app.utils.permissions import OFFICER

router = APIRouter(prefix=f"{settings.API_PREFIX}/v1/survey-cfa", tags=["survey - officer"])


@router.get("/active", response_model=List[SurveyOut])
def list_active_surveys(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(OFFICER)),
):
    return submission_service.list_active_surveys(db, current_user)


@router.post("/submit", response_model=SurveySubmitResult)
def submit_survey(
    data: SurveySubmit,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(OFFICER)),
):
    return submission_service.submit_survey(db, data=data, current_user=current_user)


@router.get("/my-submissions", response_model=List[SubmissionOut])
def list_my_submissions(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(OFFICER)),
):
    return submission_service.list_my_submissions(db, current_user)


@router.get("/submission/{response_id}", response_model=SubmissionOut)
def get_submission(
    response_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(OFFICER)),
):
    return submission_service.get_my_submission(db, response_id=response_id, current_user=current_user)
