from datetime import datetime, timedelta, timezone
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from booking_api.main import app
from booking_api.db import Base, get_db, init_database
from booking_api.utils.notifier import get_notifier

# Test database setup
engine = create_engine(
    "sqlite+pysqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create test tables
init_database(engine)


class RecordingSink:
    """Notification sink that keeps what it was asked to send."""

    def __init__(self):
        self.sent = []

    def notify(self, booking, kind, details, email):
        self.sent.append(
            {"booking": booking, "kind": kind, "details": details, "email": email}
        )


class FailingSink:
    def notify(self, booking, kind, details, email):
        raise RuntimeError("mail relay is down")


class InlineExecutor:
    """Runs submitted jobs immediately on the calling thread."""

    def submit(self, fn, *args, **kwargs):
        return fn(*args, **kwargs)

    def shutdown(self, wait=True):
        pass


# Dependency override
def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


sink = RecordingSink()

app.dependency_overrides[get_db] = override_get_db
app.dependency_overrides[get_notifier] = lambda: sink

client = TestClient(app)


def future(hours=0, days=1):
    """An aware UTC datetime ``days`` and ``hours`` from now, on a whole minute."""
    base = datetime.now(timezone.utc).replace(second=0, microsecond=0)
    return base + timedelta(days=days, hours=hours)


def parse(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


# Fixtures
@pytest.fixture(autouse=True)
def clear_db():
    """Clear all data from all tables and recorded notifications after each test"""
    with engine.connect() as conn:
        trans = conn.begin()
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())
        trans.commit()
    sink.sent.clear()


@pytest.fixture
def test_db():
    """Provide a database session for testing"""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def recording_sink():
    return sink


@pytest.fixture
def test_user_id():
    return "550e8400-e29b-41d4-a716-446655440000"


@pytest.fixture
def booking_payload(test_user_id):
    """Valid booking request two hours long starting tomorrow"""
    return {
        "room_id": "room-1",
        "user_id": test_user_id,
        "start_time": future().isoformat(),
        "end_time": future(hours=2).isoformat(),
        "purpose": "Team meeting",
        "attendees": 5,
    }
