"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from app.models.user import User
from app.models.survey import Survey, SurveyQuestion, SurveyResponse, SurveyAnswer

__all__ = [
    "User",
    "Survey", "SurveyQuestion", "SurveyResponse", "SurveyAnswer",
]
