import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.database import Base, get_db
from app.main import app
from app.models.user import User
from app.services.auth_service import hash_password

TEST_DB_URL = "sqlite:///./test_survey.db"
TEST_PASSWORD = "secret123"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_users(db):
    users = {
        "admin": User(name="Admin", email="admin@example.com", password_hash=hash_password(TEST_PASSWORD), role="ADMIN"),
        "officer": User(name="Officer", email="officer@example.com", password_hash=hash_password(TEST_PASSWORD), role="OFFICER"),
        "officer2": User(name="Officer Two", email="officer2@example.com", password_hash=hash_password(TEST_PASSWORD), role="OFFICER"),
    }
    for u in users.values():
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


def get_token(client, email: str, portal: str = "admin") -> str:
    path = "/api/user/login" if portal == "admin" else "/api/cfa/user/login"
    resp = client.post(path, json={"email": email, "password": TEST_PASSWORD})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def auth_headers(client, email: str, portal: str = "admin") -> dict:
    return {"Authorization": f"Bearer {get_token(client, email, portal)}"}


def admin_headers(client) -> dict:
    return auth_headers(client, "admin@example.com", "admin")


def officer_headers(client, email: str = "officer@example.com") -> dict:
    return auth_headers(client, email, "officer")


def create_survey(client, headers: dict, questions: list[dict], title: str = "Field survey") -> dict:
    resp = client.post(
        "/api/v1/survey",
        json={"title": title, "description": "desc", "questions": questions},
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    return resp.json()
