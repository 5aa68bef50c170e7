"""설문 관리(관리자) 서비스 레이어입니다."""

import csv
import io
import json
import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session, joinedload, selectinload

from app.models.survey import Survey, SurveyAnswer, SurveyQuestion, SurveyResponse
from app.models.user import User
from app.schemas.survey import (
    CHECKBOX,
    CHOICE_QUESTION_TYPES,
    QUESTION_TYPES,
    TEXT,
    SurveyCreate,
    SurveyQuestionCreate,
)
from app.utils.permissions import is_admin

logger = logging.getLogger(__name__)


def _ensure_admin(current_user: User, action: str):
    if not is_admin(current_user):
        raise HTTPException(status_code=403, detail=f"설문 {action}은(는) 관리자만 가능합니다.")


def normalize_options(values: list[str] | None) -> list[str]:
    rows = []
    seen = set()
    for raw in values or []:
        text = str(raw or "").strip()
        if not text or text in seen:
            continue
        seen.add(text)
        rows.append(text)
    return rows


def _require_text(value: str, label: str) -> str:
    text = str(value or "").strip()
    if not text:
        raise HTTPException(status_code=400, detail=f"{label}을(를) 입력해 주세요.")
    return text


def _build_questions(questions: list[SurveyQuestionCreate]) -> list[SurveyQuestion]:
    rows = []
    for index, data in enumerate(questions):
        question_text = _require_text(data.question_text, "문항 내용")
        question_type = str(data.question_type or TEXT).strip().upper()
        if question_type not in QUESTION_TYPES:
            raise HTTPException(
                status_code=400,
                detail=f"지원하지 않는 문항 유형입니다: {data.question_type}",
            )
        options_json = None
        if question_type in CHOICE_QUESTION_TYPES:
            options = normalize_options(data.options)
            if not options:
                raise HTTPException(
                    status_code=400,
                    detail=f"'{data.question_text}' 문항은 {question_type} 유형이므로 선택지가 필요합니다.",
                )
            options_json = json.dumps(options, ensure_ascii=False)
        rows.append(
            SurveyQuestion(
                question_text=question_text,
                question_type=question_type,
                is_required=bool(data.is_required),
                options_json=options_json,
                display_order=index if data.display_order is None else int(data.display_order),
            )
        )
    return rows


def _survey_query(db: Session):
    return db.query(Survey).options(
        selectinload(Survey.questions),
        joinedload(Survey.creator),
    )


def get_survey(db: Session, survey_id: int) -> Survey:
    row = _survey_query(db).filter(Survey.survey_id == int(survey_id)).first()
    if not row:
        raise HTTPException(status_code=404, detail=f"설문(ID {survey_id})을 찾을 수 없습니다.")
    return row


def count_responses(db: Session, survey_id: int) -> int:
    return db.query(SurveyResponse).filter(SurveyResponse.survey_id == int(survey_id)).count()


def _ensure_no_responses(db: Session, survey: Survey, message: str):
    if count_responses(db, survey.survey_id) > 0:
        logger.info("[survey] rejected change on survey_id=%s with responses", survey.survey_id)
        raise HTTPException(status_code=400, detail=message)


def list_surveys(db: Session, *, include_inactive: bool = False) -> list[Survey]:
    query = _survey_query(db)
    if not include_inactive:
        query = query.filter(Survey.is_active == True)  # noqa: E712
    return query.order_by(Survey.created_at.desc(), Survey.survey_id.desc()).all()


def list_active_surveys(db: Session) -> list[Survey]:
    return list_surveys(db, include_inactive=False)


def create_survey(db: Session, data: SurveyCreate, current_user: User) -> Survey:
    _ensure_admin(current_user, "생성")
    questions = _build_questions(data.questions)
    row = Survey(
        title=_require_text(data.title, "설문 제목"),
        description=data.description,
        is_active=True,
        created_by=current_user.user_id,
        questions=questions,
    )
    db.add(row)
    db.commit()
    logger.info("[survey] created survey_id=%s questions=%s by user_id=%s", row.survey_id, len(questions), current_user.user_id)
    return get_survey(db, row.survey_id)


def update_survey(
    db: Session,
    *,
    survey_id: int,
    data: SurveyCreate,
    current_user: User,
) -> Survey:
    _ensure_admin(current_user, "수정")
    row = get_survey(db, survey_id)
    _ensure_no_responses(
        db,
        row,
        "이미 응답이 접수된 설문은 수정할 수 없습니다. 새 설문을 생성해 주세요.",
    )
    questions = _build_questions(data.questions)

    row.title = _require_text(data.title, "설문 제목")
    if data.description is not None:
        row.description = data.description
    # 기존 문항은 delete-orphan 으로 삭제되고 새 문항으로 교체된다.
    row.questions = questions
    db.commit()
    logger.info("[survey] updated survey_id=%s questions=%s by user_id=%s", row.survey_id, len(questions), current_user.user_id)
    return get_survey(db, row.survey_id)


def toggle_survey_status(db: Session, *, survey_id: int, current_user: User) -> Survey:
    _ensure_admin(current_user, "활성화/비활성화")
    row = get_survey(db, survey_id)
    row.is_active = not bool(row.is_active)
    db.commit()
    db.refresh(row)
    logger.info("[survey] survey_id=%s is_active=%s by user_id=%s", row.survey_id, row.is_active, current_user.user_id)
    return row


def delete_survey(db: Session, *, survey_id: int, current_user: User):
    _ensure_admin(current_user, "삭제")
    row = get_survey(db, survey_id)
    _ensure_no_responses(
        db,
        row,
        "이미 응답이 접수된 설문은 삭제할 수 없습니다. 대신 비활성화해 주세요.",
    )
    db.delete(row)
    db.commit()
    logger.info("[survey] deleted survey_id=%s by user_id=%s", survey_id, current_user.user_id)


def serialize_answers(response: SurveyResponse) -> list[dict]:
    ordered = sorted(
        response.answers,
        key=lambda a: (a.question.display_order, a.question.question_id),
    )
    return [
        {
            "answer_id": answer.answer_id,
            "question_id": answer.question_id,
            "response_id": answer.response_id,
            "value": answer.value,
            "question": answer.question,
        }
        for answer in ordered
    ]


def _load_responses(db: Session, survey_id: int) -> list[SurveyResponse]:
    return (
        db.query(SurveyResponse)
        .options(
            joinedload(SurveyResponse.submitter),
            selectinload(SurveyResponse.answers).joinedload(SurveyAnswer.question),
        )
        .filter(SurveyResponse.survey_id == int(survey_id))
        .order_by(SurveyResponse.submitted_at.desc(), SurveyResponse.response_id.desc())
        .all()
    )


def list_responses(db: Session, *, survey_id: int, current_user: User) -> list[dict]:
    _ensure_admin(current_user, "응답 조회")
    survey = get_survey(db, survey_id)
    return [
        {
            "response_id": row.response_id,
            "survey_id": row.survey_id,
            "submitted_by": row.submitted_by,
            "submitted_at": row.submitted_at,
            "submitter": row.submitter,
            "answers": serialize_answers(row),
        }
        for row in _load_responses(db, survey.survey_id)
    ]


def get_summary(db: Session, *, survey_id: int, current_user: User) -> dict:
    _ensure_admin(current_user, "결과 조회")
    survey = get_survey(db, survey_id)
    responses = _load_responses(db, survey.survey_id)

    summaries = {}
    for question in survey.questions:
        summaries[question.question_id] = {
            "question_id": question.question_id,
            "question_text": question.question_text,
            "question_type": question.question_type,
            "answer_count": 0,
            "option_counts": {opt: 0 for opt in (question.options or [])},
            "text_answers": [],
        }

    for response in responses:
        for answer in response.answers:
            summary = summaries.get(answer.question_id)
            if summary is None:
                continue
            summary["answer_count"] += 1
            value = answer.value
            if summary["question_type"] == TEXT:
                summary["text_answers"].append(value if isinstance(value, str) else ", ".join(value))
                continue
            selected = value if isinstance(value, list) else [value]
            for opt in selected:
                summary["option_counts"][opt] = summary["option_counts"].get(opt, 0) + 1

    return {
        "survey_id": survey.survey_id,
        "title": survey.title,
        "total_responses": len(responses),
        "questions": [summaries[q.question_id] for q in survey.questions],
    }


def export_csv(db: Session, *, survey_id: int, current_user: User) -> str:
    _ensure_admin(current_user, "결과 내보내기")
    survey = get_survey(db, survey_id)
    questions = list(survey.questions)
    output = io.StringIO()
    writer = csv.writer(output)
    header = ["response_id", "submitted_by", "email", "submitted_at"] + [q.question_text for q in questions]
    writer.writerow(header)
    for response in _load_responses(db, survey.survey_id):
        by_question = {answer.question_id: answer.value for answer in response.answers}
        values = [
            response.response_id,
            response.submitter.name if response.submitter else "",
            response.submitter.email if response.submitter else "",
            response.submitted_at.isoformat() if response.submitted_at else "",
        ]
        for question in questions:
            value = by_question.get(question.question_id, "")
            if question.question_type == CHECKBOX and isinstance(value, list):
                value = "|".join(value)
            elif isinstance(value, list):
                value = ", ".join(value)
            values.append(value)
        writer.writerow(values)
    return output.getvalue()
