# backend/tests/conftest.py
"""
Shared pytest fixtures.

Each test gets a fresh in-memory SQLite database, so nothing leaks between
tests and no external services are needed. Redis is disabled, which makes the
per-teacher booking lock fail open.
"""

import os

# Settings are read at import time; configure them before any app import.
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = ""
os.environ["SECRET_KEY"] = "test-secret-key-with-at-least-32-bytes"

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Dict, Iterable, Optional, Tuple

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
import ulid

from app import models  # noqa: F401  registers mapped classes
from app.api.dependencies.database import get_db
from app.auth import create_access_token
from app.core.config import settings
from app.database import Base, _enable_sqlite_foreign_keys
from app.main import app
from app.models.booking import Booking, BookingStatus
from app.models.skill import TeachingSkill
from app.models.user import User

settings.is_testing = True
settings.redis_url = None

WEEKLY_AVAILABILITY = {
    "monday": {"available": True, "hours": ["09:00-12:00", "14:00-18:00"]},
    "tuesday": {"available": True, "hours": ["09:00-17:00"]},
    "wednesday": {"available": False, "hours": []},
    "thursday": {"available": True, "hours": ["10:00-16:00"]},
    "friday": {"available": True, "hours": ["09:00-12:00"]},
    "saturday": {"available": False, "hours": []},
    "sunday": {"available": False, "hours": []},
}


@pytest.fixture
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(test_engine, "connect", _enable_sqlite_foreign_keys)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db(engine) -> Session:
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def make_user(db: Session) -> Callable[..., User]:
    """Factory for committed users, optionally with teaching skills."""

    def _make(
        name: str = "Test User",
        role: str = "learner",
        balance: str = "100.00",
        skills: Iterable[Tuple[str, str]] = (),
        weekly_availability: Optional[Dict] = None,
        **extra,
    ) -> User:
        user = User(
            email=f"{str(ulid.ULID()).lower()}@example.com",
            name=name,
            role=role,
            balance=Decimal(balance),
            weekly_availability=weekly_availability,
            **extra,
        )
        for skill_name, rate in skills:
            user.skills.append(TeachingSkill(skill=skill_name, level="advanced", hourly_rate=Decimal(rate)))
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def student(make_user) -> User:
    return make_user(name="Sam Student", balance="100.00")


@pytest.fixture
def teacher(make_user) -> User:
    return make_user(
        name="Tara Teacher",
        role="teacher",
        balance="10.00",
        skills=[("Python", "30.00"), ("Guitar", "20.00")],
        weekly_availability=WEEKLY_AVAILABILITY,
    )


@pytest.fixture
def slot_start() -> datetime:
    """10:00 UTC two days from now."""
    day = datetime.now(timezone.utc).date() + timedelta(days=2)
    return datetime(day.year, day.month, day.day, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_booking(db: Session) -> Callable[..., Booking]:
    """Insert a booking row directly, bypassing wallet effects."""

    def _make(
        student: User,
        teacher: User,
        start_at: datetime,
        duration_minutes: int = 60,
        status: str = BookingStatus.CONFIRMED.value,
        skill: str = "Python",
        price: str = "30.00",
    ) -> Booking:
        booking = Booking(
            student_id=student.id,
            teacher_id=teacher.id,
            skill=skill,
            start_at=start_at,
            duration_minutes=duration_minutes,
            price=Decimal(price),
            status=status,
        )
        db.add(booking)
        db.commit()
        return booking

    return _make


@pytest.fixture
def auth_headers() -> Callable[[User], Dict[str, str]]:
    def _headers(user: User) -> Dict[str, str]:
        token = create_access_token({"sub": user.id})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def client(db: Session) -> TestClient:
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
