import os

# Settings are read once, on first import of the app
os.environ["JWT_ACCESS_SECRET"] = "test-access-secret"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from main import app

ACCESS_SECRET = os.environ["JWT_ACCESS_SECRET"]
REFRESH_SECRET = os.environ["JWT_REFRESH_SECRET"]


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def student_payload(**overrides):
    student = {
        "regNo": "21CS-1042",
        "name": "Asha Rao",
        "phone": "9876543210",
        "year": "2",
        "branch": "CSE",
        "section": "B",
    }
    student.update(overrides.pop("student", {}))
    payload = {
        "email": "asha@example.com",
        "password": "secret123",
        "role": "STUDENT",
        "student": student,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def registered_student(client):
    payload = student_payload()
    response = client.post("/auth/register", json=payload)
    assert response.status_code == 200, response.text
    return payload
