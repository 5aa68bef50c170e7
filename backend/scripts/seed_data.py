"""Seed the database with demo accounts and a sample survey."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import json

from app.database import SessionLocal, engine, Base
import app.models  # noqa: F401

from app.models.user import User
from app.models.survey import Survey, SurveyQuestion
from app.services.auth_service import hash_password
from app.utils.permissions import ADMIN, OFFICER

DEMO_PASSWORD = "password123"


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(User).count() > 0:
            print("Database already seeded. Skipping.")
            return

        admin = User(name="관리자", email="admin@example.com", password_hash=hash_password(DEMO_PASSWORD), role=ADMIN)
        officers = [
            User(name="담당관 김민수", email="officer1@example.com", password_hash=hash_password(DEMO_PASSWORD), role=OFFICER),
            User(name="담당관 이지은", email="officer2@example.com", password_hash=hash_password(DEMO_PASSWORD), role=OFFICER),
        ]
        db.add(admin)
        db.add_all(officers)
        db.flush()

        survey = Survey(
            title="현장 점검 만족도 조사",
            description="이번 분기 현장 점검 업무에 대한 의견을 남겨 주세요.",
            is_active=True,
            created_by=admin.user_id,
            questions=[
                SurveyQuestion(
                    question_text="점검 일정은 적절했습니까?",
                    question_type="RADIO",
                    options_json=json.dumps(["예", "아니오"], ensure_ascii=False),
                    is_required=True,
                    display_order=0,
                ),
                SurveyQuestion(
                    question_text="지원이 필요했던 항목을 모두 선택해 주세요.",
                    question_type="CHECKBOX",
                    options_json=json.dumps(["장비", "교육", "인력", "차량"], ensure_ascii=False),
                    display_order=1,
                ),
                SurveyQuestion(
                    question_text="담당 지역",
                    question_type="DROPDOWN",
                    options_json=json.dumps(["서울", "경기", "강원", "충청", "전라", "경상", "제주"], ensure_ascii=False),
                    is_required=True,
                    display_order=2,
                ),
                SurveyQuestion(
                    question_text="기타 의견",
                    question_type="TEXT",
                    display_order=3,
                ),
            ],
        )
        db.add(survey)
        db.commit()

        print("Seed data created successfully.")
        print(f"  Admin:    admin@example.com / {DEMO_PASSWORD}")
        print(f"  Officers: officer1@example.com, officer2@example.com / {DEMO_PASSWORD}")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed()
