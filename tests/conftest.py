"""
Shared pytest fixtures.

Uses a SQLite file database so no Postgres is required for tests.
"""
import os

SQLITE_URL = "sqlite:///./test_aviary.db"
os.environ.setdefault("DATABASE_URL", SQLITE_URL)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from aviary.db.base import Base, get_db  # noqa: E402
from aviary.main import app  # noqa: E402
from aviary.models.bird import Bird  # noqa: E402

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def empty_birds():
    yield
    db = TestingSessionLocal()
    try:
        db.query(Bird).delete()
        db.commit()
    finally:
        db.close()


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def ruby(client):
    """A saved bird to show / update / destroy."""
    r = client.post("/birds", json={"name": "Ruby", "species": "Archilochus colubris"})
    assert r.status_code == 201
    return r.json()
