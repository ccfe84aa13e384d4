from __future__ import annotations

import os
import tempfile
from pathlib import Path

_DB_DIR = Path(tempfile.mkdtemp(prefix="careflow-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR / 'careflow-test.sqlite'}"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["ANTHROPIC_API_KEY"] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from careflow import models  # noqa: E402,F401
from careflow.db import Base, SessionLocal, engine  # noqa: E402
from helpers import ScriptedGenerator  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def generator():
    return ScriptedGenerator()


@pytest.fixture
def client(generator):
    from careflow.main import app
    from careflow.services.llm import get_generator

    app.dependency_overrides[get_generator] = lambda: generator
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
