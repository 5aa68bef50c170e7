"""설문 응답 제출(담당관) 서비스 레이어입니다.

제출된 답변을 설문 문항 정의와 대조해 검증한 뒤, 응답 1건과 답변 행들을
하나의 트랜잭션으로 저장합니다. 답변 하나라도 유효하지 않으면 전체 제출이
거부되며 부분 저장은 일어나지 않습니다.
"""

import json
import logging

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from app.models.survey import Survey, SurveyAnswer, SurveyQuestion, SurveyResponse
from app.models.user import User
from app.schemas.survey import (
    CHECKBOX,
    SINGLE_CHOICE_QUESTION_TYPES,
    TEXT,
    AnswerValue,
    SurveySubmit,
)
from app.services import survey_service
from app.utils.permissions import is_officer

logger = logging.getLogger(__name__)


def _ensure_officer(current_user: User):
    if not is_officer(current_user):
        raise HTTPException(status_code=403, detail="설문 응답은 담당관만 가능합니다.")


def _is_blank(value: AnswerValue) -> bool:
    if isinstance(value, list):
        return len(value) == 0
    return not str(value or "").strip()


def _normalize_value(value: AnswerValue) -> AnswerValue:
    if isinstance(value, list):
        # 체크박스 선택지는 중복 없이 선택 순서대로 저장
        return survey_service.normalize_options(value)
    return value


def _validate_answer_value(question: SurveyQuestion, value: AnswerValue):
    options = question.options or []
    if question.question_type == CHECKBOX:
        if not isinstance(value, list):
            raise HTTPException(
                status_code=400,
                detail=f"체크박스 문항 '{question.question_text}'의 응답은 배열이어야 합니다.",
            )
        for selected in value:
            if selected not in options:
                raise HTTPException(
                    status_code=400,
                    detail=f"'{question.question_text}' 문항에 유효하지 않은 선택지 '{selected}'입니다.",
                )
    elif question.question_type in SINGLE_CHOICE_QUESTION_TYPES:
        if isinstance(value, list):
            raise HTTPException(
                status_code=400,
                detail=f"{question.question_type.lower()} 문항 '{question.question_text}'의 응답은 문자열이어야 합니다.",
            )
        if value not in options:
            raise HTTPException(
                status_code=400,
                detail=f"'{question.question_text}' 문항에 유효하지 않은 선택지 '{value}'입니다.",
            )
    elif question.question_type == TEXT:
        if isinstance(value, list):
            raise HTTPException(
                status_code=400,
                detail=f"주관식 문항 '{question.question_text}'의 응답은 문자열이어야 합니다.",
            )


def submit_survey(db: Session, *, data: SurveySubmit, current_user: User) -> dict:
    _ensure_officer(current_user)
    survey = (
        db.query(Survey)
        .options(selectinload(Survey.questions))
        .filter(Survey.survey_id == int(data.survey_id))
        .first()
    )
    if not survey:
        raise HTTPException(status_code=404, detail="설문을 찾을 수 없습니다.")
    if not survey.is_active:
        raise HTTPException(status_code=400, detail="더 이상 진행중인 설문이 아닙니다.")

    question_map = {int(q.question_id): q for q in survey.questions}
    answers = [(int(answer.question_id), _normalize_value(answer.value)) for answer in data.answers]
    answered = {qid for qid, value in answers if not _is_blank(value)}
    for question in survey.questions:
        if question.is_required and int(question.question_id) not in answered:
            raise HTTPException(
                status_code=400,
                detail=f"필수 문항 '{question.question_text}'에 응답하지 않았습니다.",
            )

    seen = set()
    for qid, value in answers:
        question = question_map.get(qid)
        if question is None:
            raise HTTPException(
                status_code=400,
                detail=f"문항(ID {qid})은 이 설문에 속하지 않습니다.",
            )
        if qid in seen:
            raise HTTPException(status_code=400, detail=f"문항(ID {qid})에 중복 응답이 있습니다.")
        seen.add(qid)
        _validate_answer_value(question, value)

    response = SurveyResponse(
        survey_id=survey.survey_id,
        submitted_by=current_user.user_id,
        answers=[
            SurveyAnswer(question_id=qid, value_json=json.dumps(value, ensure_ascii=False))
            for qid, value in answers
        ],
    )
    db.add(response)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("[submission] commit failed survey_id=%s user_id=%s", survey.survey_id, current_user.user_id)
        raise

    logger.info(
        "[submission] accepted response_id=%s survey_id=%s answers=%s user_id=%s",
        response.response_id,
        survey.survey_id,
        len(data.answers),
        current_user.user_id,
    )
    return {"message": "설문이 제출되었습니다.", "response_id": response.response_id}


def list_active_surveys(db: Session, current_user: User) -> list[Survey]:
    _ensure_officer(current_user)
    return survey_service.list_active_surveys(db)


def _submission_query(db: Session, current_user: User):
    return (
        db.query(SurveyResponse)
        .options(
            joinedload(SurveyResponse.survey),
            selectinload(SurveyResponse.answers).joinedload(SurveyAnswer.question),
        )
        .filter(SurveyResponse.submitted_by == current_user.user_id)
    )


def _serialize_submission(row: SurveyResponse) -> dict:
    return {
        "response_id": row.response_id,
        "submitted_at": row.submitted_at,
        "survey": row.survey,
        "answers": survey_service.serialize_answers(row),
    }


def list_my_submissions(db: Session, current_user: User) -> list[dict]:
    _ensure_officer(current_user)
    rows = (
        _submission_query(db, current_user)
        .order_by(SurveyResponse.submitted_at.desc(), SurveyResponse.response_id.desc())
        .all()
    )
    return [_serialize_submission(row) for row in rows]


def get_my_submission(db: Session, *, response_id: int, current_user: User) -> dict:
    _ensure_officer(current_user)
    row = _submission_query(db, current_user).filter(SurveyResponse.response_id == int(response_id)).first()
    if not row:
        raise HTTPException(status_code=404, detail="설문 응답을 찾을 수 없습니다.")
    return _serialize_submission(row)
