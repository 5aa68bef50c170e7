"""설문 도메인 SQLAlchemy 모델입니다."""

import json

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


def _load_json_list(raw: str | None) -> list[str]:
    try:
        parsed = json.loads(raw or "[]")
    except json.JSONDecodeError:
        return []
    if not isinstance(parsed, list):
        return []
    return [str(v) for v in parsed]


class Survey(Base):
    __tablename__ = "survey"

    survey_id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    description = Column(Text)
    is_active = Column(Boolean, nullable=False, default=True)
    created_by = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    creator = relationship("User", back_populates="surveys")
    questions = relationship(
        "SurveyQuestion",
        back_populates="survey",
        cascade="all, delete-orphan",
        order_by="SurveyQuestion.display_order.asc(), SurveyQuestion.question_id.asc()",
    )
    responses = relationship(
        "SurveyResponse",
        back_populates="survey",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_survey_active_created", "is_active", "created_at"),
    )

    @property
    def response_count(self) -> int:
        return len(self.responses)


class SurveyQuestion(Base):
    __tablename__ = "survey_question"

    question_id = Column(Integer, primary_key=True, autoincrement=True)
    survey_id = Column(Integer, ForeignKey("survey.survey_id", ondelete="CASCADE"), nullable=False)
    question_text = Column(String(500), nullable=False)
    question_type = Column(String(20), nullable=False, default="TEXT")
    is_required = Column(Boolean, nullable=False, default=False)
    options_json = Column(Text, nullable=True)
    display_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    survey = relationship("Survey", back_populates="questions")
    answers = relationship("SurveyAnswer", back_populates="question")

    __table_args__ = (
        Index("idx_survey_question_survey_order", "survey_id", "display_order"),
    )

    @property
    def options(self) -> list[str] | None:
        if self.options_json is None:
            return None
        return _load_json_list(self.options_json)


class SurveyResponse(Base):
    __tablename__ = "survey_response"

    response_id = Column(Integer, primary_key=True, autoincrement=True)
    survey_id = Column(Integer, ForeignKey("survey.survey_id", ondelete="CASCADE"), nullable=False)
    submitted_by = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    submitted_at = Column(DateTime, server_default=func.now())

    survey = relationship("Survey", back_populates="responses")
    submitter = relationship("User", back_populates="responses")
    answers = relationship(
        "SurveyAnswer",
        back_populates="response",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_survey_response_survey_submitted", "survey_id", "submitted_at"),
        Index("idx_survey_response_submitter", "submitted_by"),
    )


class SurveyAnswer(Base):
    __tablename__ = "survey_answer"

    answer_id = Column(Integer, primary_key=True, autoincrement=True)
    response_id = Column(Integer, ForeignKey("survey_response.response_id", ondelete="CASCADE"), nullable=False)
    question_id = Column(Integer, ForeignKey("survey_question.question_id"), nullable=False)
    # 주관식/단일선택은 문자열, 체크박스는 문자열 배열을 JSON으로 저장
    value_json = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    response = relationship("SurveyResponse", back_populates="answers")
    question = relationship("SurveyQuestion", back_populates="answers")

    @property
    def value(self) -> str | list[str]:
        try:
            parsed = json.loads(self.value_json)
        except json.JSONDecodeError:
            return self.value_json
        if isinstance(parsed, list):
            return [str(v) for v in parsed]
        return str(parsed)
