"""설문 관리(관리자) API 라우터입니다."""

from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.middleware.auth_middleware import require_roles
from app.models.user import User
from app.schemas.survey import (
    SurveyCreate,
    SurveyOut,
    SurveyResponseOut,
    SurveySummaryOut,
)
from app.services import survey_service
from app.utils.permissions import ADMIN

router = APIRouter(prefix=f"{settings.API_PREFIX}/v1/survey", tags=["survey - admin"])


@router.post("", response_model=SurveyOut)
def create_survey(
    data: SurveyCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(ADMIN)),
):
    return survey_service.create_survey(db, data, current_user)


@router.get("", response_model=List[SurveyOut])
def list_surveys(
    include_inactive: bool = False,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(ADMIN)),
):
    return survey_service.list_surveys(db, include_inactive=include_inactive)


@router.get("/active", response_model=List[SurveyOut])
def list_active_surveys(
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(ADMIN)),
):
    return survey_service.list_active_surveys(db)


@router.get("/{survey_id}", response_model=SurveyOut)
def get_survey(
    survey_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(ADMIN)),
):
    return survey_service.get_survey(db, survey_id)


@router.put("/{survey_id}", response_model=SurveyOut)
def update_survey(
    survey_id: int,
    data: SurveyCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(ADMIN)),
):
    return survey_service.update_survey(
        db,
        survey_id=survey_id,
        data=data,
        current_user=current_user,
    )


@router.patch("/{survey_id}/toggle-status", response_model=SurveyOut)
def toggle_survey_status(
    survey_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(ADMIN)),
):
    return survey_service.toggle_survey_status(db, survey_id=survey_id, current_user=current_user)


@router.delete("/{survey_id}")
def delete_survey(
    survey_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(ADMIN)),
):
    survey_service.delete_survey(db, survey_id=survey_id, current_user=current_user)
    return {"message": "삭제되었습니다."}


@router.get("/{survey_id}/responses", response_model=List[SurveyResponseOut])
def list_responses(
    survey_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(ADMIN)),
):
    return survey_service.list_responses(db, survey_id=survey_id, current_user=current_user)


@router.get("/{survey_id}/summary", response_model=SurveySummaryOut)
def get_summary(
    survey_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(ADMIN)),
):
    return survey_service.get_summary(db, survey_id=survey_id, current_user=current_user)


@router.get("/{survey_id}/export.csv")
def export_csv(
    survey_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(ADMIN)),
):
    csv_text = survey_service.export_csv(db, survey_id=survey_id, current_user=current_user)
    return Response(
        content=csv_text,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="survey_{survey_id}.csv"'},
    )
