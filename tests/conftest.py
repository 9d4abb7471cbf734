import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import main
from config.settings import settings
from database.db import get_db, init_db

SCANNER_TOKEN = "test-scanner-token"


@pytest.fixture()
def engine():
    # 테스트마다 새 in-memory SQLite (모든 세션이 같은 연결 공유)
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(session_factory, monkeypatch):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    monkeypatch.setattr(settings, "SCANNER_INTERNAL_TOKEN", SCANNER_TOKEN)
    main.app.dependency_overrides[get_db] = override_get_db
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


@pytest.fixture()
def scanner_headers():
    return {"Authorization": f"Bearer {SCANNER_TOKEN}"}


@pytest.fixture()
def make_user(client):
    counter = {"n": 0}

    def _make_user(role="student", **fields):
        counter["n"] += 1
        payload = {
            "email": f"{role}{counter['n']}@school.com",
            "fullName": f"{role.title()} {counter['n']}",
            "role": role,
        }
        payload.update(fields)
        res = client.post("/v1/users", json=payload)
        assert res.status_code == 201, res.json()
        return res.json()

    return _make_user


@pytest.fixture()
def make_class(client):
    def _make_class(name="Grade 9-A", grade_level=9, teacher_id=None):
        payload = {"name": name, "gradeLevel": grade_level}
        if teacher_id is not None:
            payload["teacherId"] = teacher_id
        res = client.post("/v1/classes", json=payload)
        assert res.status_code == 201, res.json()
        return res.json()

    return _make_class
