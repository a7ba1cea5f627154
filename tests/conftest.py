from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

TEST_DATA_DIR = Path(tempfile.mkdtemp(prefix="expense_tracker_tests_"))
os.environ["EXPENSES_DATA_DIR"] = str(TEST_DATA_DIR)
os.environ["EXPENSES_HOST"] = "127.0.0.1"
os.environ["EXPENSES_ALLOW_LAN"] = "0"
os.environ.pop("EXPENSES_DB_URL", None)


@pytest.fixture(autouse=True)
def clean_expenses():
    from expense_tracker.db.base import Base, engine
    from expense_tracker.db.models import Expense

    Base.metadata.create_all(bind=engine)
    yield
    with engine.begin() as conn:
        conn.execute(Expense.__table__.delete())


@pytest.fixture()
def db():
    from expense_tracker.db.base import SessionLocal

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client() -> TestClient:
    from expense_tracker.main import app

    with TestClient(app) as c:
        yield c
