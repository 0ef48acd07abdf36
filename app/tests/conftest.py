"""
FrogTrack - test configuration and fixtures
"""
import os
from datetime import date, timedelta
from typing import Generator
import pytest
from faker import Faker
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RECORD_STORE"] = "database"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"
os.environ["CORS_ORIGINS"] = "*"

from frogtrack.main import app
from frogtrack.db.base import Base
from frogtrack.db.session import get_db
from frogtrack.models import Certification

fake = Faker()

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(bind=test_engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def today() -> date:
    return date(2026, 3, 10)


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Fresh schema for each test"""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """API client bound to the test database"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_certification(db_session: Session):
    """Insert a certification row relative to the real current date"""
    def _make(days_until_expiry: int | None = 120, **fields) -> Certification:
        expiry = date.today() + timedelta(days=days_until_expiry) if days_until_expiry is not None else None
        values = {
            "name": fake.catch_phrase(),
            "provider": "AWS",
            "category": "Cloud",
            "issue_date": date.today() - timedelta(days=365),
            "expiry_date": expiry,
            "cert_id": fake.bothify("REF-####"),
            "cert_url": fake.url(),
        }
        values.update(fields)
        cert = Certification(**values)
        db_session.add(cert)
        db_session.commit()
        db_session.refresh(cert)
        return cert

    return _make
