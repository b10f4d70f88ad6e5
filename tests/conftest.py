"""Shared test fixtures and helpers."""

import os

# Must be set before salon_api.config is imported
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["TELEGRAM_BOT_SECRET"] = "test-bot-secret"
os.environ.pop("TELEGRAM_BOT_TOKEN", None)

from datetime import date
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from salon_api import rate_limiter
from salon_api.database import Base, build_engine, get_db
from salon_api.main import app
from salon_api.models import Booking, BookingStatus, Service, User, UserRole
from salon_api.security_utils import create_access_token, hash_password
from salon_api.services.notification_service import get_notifier

BOT_SECRET = "test-bot-secret"
TEST_DATE = "2030-05-15"
DEFAULT_PASSWORD = "secret123"


class RecordingNotifier:
    """Stands in for the Telegram notifier and remembers what it was asked to send"""

    enabled = True

    def __init__(self):
        self.created = []
        self.status_changes = []

    async def notify_booking_created(self, notice, admin_chat_ids):
        self.created.append((notice, list(admin_chat_ids)))
        return {"user_sent": False, "admins_sent": 0, "admins_total": len(admin_chat_ids)}

    async def notify_status_changed(self, notice, new_status):
        self.status_changes.append((notice, new_status))
        return {"user_sent": False}


@pytest.fixture
def db_engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(session_factory, notifier, monkeypatch):
    # Rate limiting stays off unless Redis is configured
    monkeypatch.delenv("REDIS_URL", raising=False)
    monkeypatch.delenv("REDIS_HOST", raising=False)
    monkeypatch.setattr(rate_limiter, "redis_client", None)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(
    db,
    email: str = "anna@example.com",
    phone: str = "79001234567",
    role: UserRole = UserRole.CLIENT,
    name: str = "Anna",
    surname: str = "Ivanova",
    password: str = DEFAULT_PASSWORD,
    telegram_id: Optional[str] = None,
) -> User:
    user = User(
        name=name,
        surname=surname,
        email=email,
        phone=phone,
        password_hash=hash_password(password),
        role=role.value,
        telegram_id=telegram_id,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_admin(db, email: str = "admin@example.com", phone: str = "79000000001", **kwargs) -> User:
    return make_user(db, email=email, phone=phone, role=UserRole.ADMIN, name="Olga", surname="Admin", **kwargs)


def make_service(
    db, name: str = "Manicure", duration: Optional[int] = 60, price: float = 1500.0, category: str = "Nails"
) -> Service:
    service = Service(name=name, category=category, price=price, duration=duration)
    db.add(service)
    db.commit()
    db.refresh(service)
    return service


def make_booking(
    db,
    user: User,
    service: Service,
    time: str = "10:00",
    booking_date: str = TEST_DATE,
    status: BookingStatus = BookingStatus.PENDING,
) -> Booking:
    booking = Booking(
        user_id=user.id,
        service_id=service.id,
        booking_date=date.fromisoformat(booking_date),
        booking_time=time,
        status=status.value,
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    return booking


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email, user.role)}"}
