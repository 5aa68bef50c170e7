"""FastAPI 애플리케이션 진입점. 미들웨어, API 라우터, 정적 프론트엔드 서빙을 등록합니다."""

import logging
import os
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from app.config import settings
from app.database import Base, engine
import app.models  # noqa: F401 - 모델 import로 metadata 등록
from app.routers import cfa_users, survey_cfa, surveys, users

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="설문 플랫폼",
    description="관리자 설문 작성/결과 조회와 담당관 설문 응답을 위한 API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register all routers
app.include_router(users.router)
app.include_router(cfa_users.router)
app.include_router(surveys.router)
app.include_router(survey_cfa.router)


@app.on_event("startup")
def ensure_schema():
    # 누락된 테이블을 자동 생성합니다.
    Base.metadata.create_all(bind=engine)


@app.get(f"{settings.API_PREFIX}/health")
def health_check():
    return {"status": "ok", "service": "survey-platform"}


# Serve frontend static files
for console in ("common", "admin", "officer"):
    console_dir = os.path.join(settings.FRONTEND_DIR, console)
    if os.path.exists(console_dir):
        app.mount(f"/{console}", StaticFiles(directory=console_dir, html=True), name=f"frontend-{console}")
