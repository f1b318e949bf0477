"""
CEMS API - Test Configuration and Fixtures
"""
from datetime import datetime, timedelta, timezone
from itertools import count

import pytest
from faker import Faker
from werkzeug.security import generate_password_hash

from cems import create_app, db
from cems.auth import issue_token
from cems.models import Event, User
from cems.models.enums import EventCategory, EventStatus, UserRole

fake = Faker()
_sequence = count(1)

TEST_PASSWORD = "testpassword123"


@pytest.fixture
def app(tmp_path):
    """App bound to a throwaway SQLite file so threads can share it."""
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'test.db'}",
            "SQLALCHEMY_ENGINE_OPTIONS": {
                "connect_args": {"check_same_thread": False, "timeout": 30},
            },
            "JWT_SECRET_KEY": "test-jwt-secret-key-for-testing-only-0123456789",
            "RATELIMIT_ENABLED": False,
        }
    )
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make_user(role=UserRole.STUDENT, email=None, name=None):
        user = User(
            name=name or fake.name(),
            email=email or f"user{next(_sequence)}@college.edu",
            password=generate_password_hash(TEST_PASSWORD),
            role=role,
        )
        db.session.add(user)
        db.session.commit()
        return user

    return _make_user


@pytest.fixture
def student(make_user):
    return make_user(UserRole.STUDENT)


@pytest.fixture
def organizer(make_user):
    return make_user(UserRole.ORGANIZER)


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.ADMIN)


@pytest.fixture
def auth_headers(app):
    """Build bearer headers for a user."""

    def _auth_headers(user):
        return {"Authorization": f"Bearer {issue_token(user)}"}

    return _auth_headers


@pytest.fixture
def make_event(app, organizer):
    def _make_event(
        status=EventStatus.APPROVED,
        capacity=10,
        category=EventCategory.TECHNOLOGY,
        title=None,
        description=None,
        owner=None,
        starts_in=timedelta(days=7),
    ):
        start = datetime.now(timezone.utc) + starts_in
        event = Event(
            title=title or f"Event {next(_sequence)}",
            description=description or "A campus event",
            start_time=start,
            end_time=start + timedelta(hours=2),
            capacity=capacity,
            category=category,
            status=status,
            organizer_id=(owner or organizer).id,
        )
        db.session.add(event)
        db.session.commit()
        return event

    return _make_event


@pytest.fixture
def event_payload():
    start = datetime.now(timezone.utc) + timedelta(days=3)
    return {
        "title": "Tech Hackathon",
        "description": "24-hour coding competition",
        "startTime": start.isoformat(),
        "endTime": (start + timedelta(hours=24)).isoformat(),
        "capacity": 100,
        "venueId": "CS-101",
        "category": "technology",
    }
