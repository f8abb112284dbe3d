import os
import sys

import pytest

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.dirname(CURRENT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# Test environment, set before the app reads its settings
os.environ["DATABASE_URL"] = "sqlite:///./test_melodymakers.db"
os.environ["REDIS_URL"] = "redis://localhost:6379/99"
os.environ["CACHE_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ACCESS_TOKEN_SECRET"] = "test-secret"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("DB_USER", None)
os.environ.pop("DB_PASS", None)

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from melodymakers.infrastructure.db import get_db
from melodymakers.infrastructure.models import Base, Class, User
from melodymakers.infrastructure.payments import get_payment_gateway
from melodymakers.infrastructure.security import create_access_token
from melodymakers.main import app

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


class FakeGateway:
    def __init__(self):
        self.calls = []

    def create_intent(self, price: float) -> str:
        self.calls.append(price)
        return f"pi_test_secret_{len(self.calls)}"


@pytest.fixture
def db(client):
    """Session for seeding and inspecting the test database."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def client(gateway):
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=test_engine)


def auth(email: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token(email)}"}


def add_user(db, email: str, role: str = "unassigned", name: str | None = None) -> User:
    row = User(email=email, role=role, name=name)
    db.add(row); db.commit(); db.refresh(row)
    return row


def add_class(db, name: str = "Guitar 101", *, instructor_email: str = "teacher@example.com",
              status: str = "approved", seats: int = 10, total_enrolled: int = 0,
              price: float = 49.5) -> Class:
    row = Class(name=name, instructor_email=instructor_email, status=status,
                seats=seats, total_enrolled=total_enrolled, price=price)
    db.add(row); db.commit(); db.refresh(row)
    return row
