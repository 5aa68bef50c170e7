"""설문 플랫폼 DB 테이블을 생성합니다. --reset 지정 시 기존 테이블을 모두 삭제 후 재생성합니다."""
import argparse
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.config import settings
from app.database import engine, Base
import app.models  # noqa: F401 - registers all models


def init_db(reset: bool = False):
    if reset:
        print(f"Dropping survey tables on {settings.DATABASE_URL} ...")
        Base.metadata.drop_all(bind=engine)
    print("Creating survey tables: " + ", ".join(sorted(Base.metadata.tables)))
    Base.metadata.create_all(bind=engine)
    print("Database initialized successfully.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--reset", action="store_true", help="drop all tables before creating them")
    args = parser.parse_args()
    init_db(reset=args.reset)
