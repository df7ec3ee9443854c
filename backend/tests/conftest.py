import itertools

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ledgerbook import config
from ledgerbook.database import Base, get_db
from ledgerbook.main import app
from ledgerbook.schemas import Transaction
from ledgerbook.services.normalizer import get_clock
from ledgerbook.services.seeder import seed_categories

from helpers import ADMIN_TOKEN, TODAY, tx


@pytest.fixture
def today():
    return lambda: TODAY


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f"tx-{next(counter)}"


@pytest.fixture
def ledger() -> list[Transaction]:
    """A small ledger in insertion order (deliberately not date-sorted)."""
    return [
        tx("1", "2024-01-10", 5000000, "income", "학생회비", "2024년 1학기 학생회비"),
        tx("2", "2024-02-03", 50000, "expense", "간식", "회의 간식", receipt="https://x/r1.png"),
        tx("3", "2024-02-20", 120000, "expense", "행사", "개강 파티 대관"),
        tx("4", "2024-02-28", 30000, "income", "기타", "굿즈 판매"),
        tx("5", "2024-03-01", 15000, "expense", "간식", "간식 추가 구매"),
    ]


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = SessionLocal()
    seed_categories(db)
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def client(db_session, today, monkeypatch):
    """API client on an in-memory database with today pinned to 2024-02-15."""
    monkeypatch.setattr(config, "API_TOKEN", ADMIN_TOKEN)

    def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_clock] = lambda: today
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
