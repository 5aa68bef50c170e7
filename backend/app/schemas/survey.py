"""설문 API 스키마입니다."""

from datetime import datetime
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from app.schemas.user import UserBrief


TEXT = "TEXT"
CHECKBOX = "CHECKBOX"
RADIO = "RADIO"
DROPDOWN = "DROPDOWN"

QUESTION_TYPES = {TEXT, CHECKBOX, RADIO, DROPDOWN}
CHOICE_QUESTION_TYPES = {CHECKBOX, RADIO, DROPDOWN}
SINGLE_CHOICE_QUESTION_TYPES = {RADIO, DROPDOWN}

AnswerValue = Union[str, List[str]]


class SurveyQuestionCreate(BaseModel):
    question_text: str = Field(min_length=1, max_length=500)
    question_type: str = TEXT
    options: Optional[List[str]] = None
    is_required: bool = False
    display_order: Optional[int] = Field(default=None, ge=0)


class SurveyCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    questions: List[SurveyQuestionCreate] = Field(default_factory=list)


class SurveyQuestionOut(BaseModel):
    question_id: int
    survey_id: int
    question_text: str
    question_type: str
    options: Optional[List[str]] = None
    is_required: bool
    display_order: int

    model_config = {"from_attributes": True}


class SurveyOut(BaseModel):
    survey_id: int
    title: str
    description: Optional[str] = None
    is_active: bool
    created_by: int
    creator: Optional[UserBrief] = None
    response_count: int = 0
    created_at: datetime
    updated_at: Optional[datetime] = None
    questions: List[SurveyQuestionOut] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class SurveyBriefOut(BaseModel):
    survey_id: int
    title: str
    description: Optional[str] = None

    model_config = {"from_attributes": True}


class SurveyAnswerInput(BaseModel):
    question_id: int
    value: AnswerValue


class SurveySubmit(BaseModel):
    survey_id: int
    answers: List[SurveyAnswerInput] = Field(default_factory=list)


class SurveySubmitResult(BaseModel):
    message: str
    response_id: int


class SurveyAnswerOut(BaseModel):
    answer_id: int
    question_id: int
    response_id: int
    value: AnswerValue
    question: SurveyQuestionOut

    model_config = {"from_attributes": True}


class SurveyResponseOut(BaseModel):
    response_id: int
    survey_id: int
    submitted_by: int
    submitted_at: datetime
    submitter: Optional[UserBrief] = None
    answers: List[SurveyAnswerOut] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class SubmissionOut(BaseModel):
    response_id: int
    submitted_at: datetime
    survey: SurveyBriefOut
    answers: List[SurveyAnswerOut] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class QuestionSummaryOut(BaseModel):
    question_id: int
    question_text: str
    question_type: str
    answer_count: int = 0
    option_counts: Dict[str, int] = Field(default_factory=dict)
    text_answers: List[str] = Field(default_factory=list)


class SurveySummaryOut(BaseModel):
    survey_id: int
    title: str
    total_responses: int = 0
    questions: List[QuestionSummaryOut] = Field(default_factory=list)
