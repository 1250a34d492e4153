"""
Pytest configuration and fixtures.

Settings are read from the environment at import time, so the test
environment is set up before anything from ``coursehub`` is imported.
"""

import os
import tempfile
from pathlib import Path

_TMP_DIR = tempfile.mkdtemp(prefix="coursehub-tests-")

os.environ.update(
    {
        "DB_URL": f"sqlite:///{Path(_TMP_DIR) / 'test.db'}",
        "LOG_FILE": "",
        "LOG_LEVEL": "warning",
        "JWT_SECRET": "test-jwt-secret",
        "PASSWORD_HASH_ROUNDS": "4",
        "RAZORPAY_KEY_ID": "rzp_test_key",
        "RAZORPAY_KEY_SECRET": "rzp_test_secret",
        "RAZORPAY_LIVE_ORDERS": "false",
        "ADMIN_EMAILS": "admin@example.com",
        "RATE_LIMIT_ENABLED": "false",
        "IDENTITY_TOKEN_SECRET": "test-identity-secret",
        "REFERRAL_DISCOUNT_PERCENT": "10",
    }
)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from coursehub.core.database import Base, SessionLocal, engine  # noqa: E402
from coursehub.core.security import jwt_manager  # noqa: E402
from coursehub.integrations.razorpay import get_payment_gateway  # noqa: E402
from coursehub.models.course import Course  # noqa: E402
from coursehub.models.course_content import CourseContent  # noqa: E402
from coursehub.models.user import User  # noqa: E402
from main import app  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    """Every test starts from empty tables."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    engine.dispose()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def gateway():
    return get_payment_gateway()


@pytest.fixture
def make_user(db):
    created = []

    def _make_user(email: str = None, role: str = "student", **fields) -> User:
        email = email or f"user{len(created) + 1}@example.com"
        user = User(
            uid=f"test:{email}",
            email=email,
            full_name=fields.pop("full_name", email.split("@")[0]),
            provider="local",
            role=role,
            is_active=fields.pop("is_active", True),
            **fields,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        created.append(user)
        return user

    return _make_user


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict:
        return {"Authorization": f"Bearer {jwt_manager.create_access_token(user)}"}

    return _auth_headers


@pytest.fixture
def student(make_user):
    return make_user("student@example.com")


@pytest.fixture
def referrer(make_user):
    return make_user("referrer@example.com")


@pytest.fixture
def admin(make_user):
    return make_user("admin@example.com", role="admin")


@pytest.fixture
def make_course(db):
    def _make_course(slug: str = "python-basics", price: int = 9900, **fields) -> Course:
        course = Course(
            slug=slug,
            title=fields.pop("title", slug.replace("-", " ").title()),
            price=price,
            is_published=fields.pop("is_published", True),
            is_featured=fields.pop("is_featured", False),
            **fields,
        )
        db.add(course)
        db.commit()
        db.refresh(course)
        return course

    return _make_course


@pytest.fixture
def course(make_course):
    return make_course()


@pytest.fixture
def lessons(db, course):
    items = [
        CourseContent(course_id=course.id, title=f"Lesson {i}", type="video", order=i)
        for i in range(1, 4)
    ]
    db.add_all(items)
    db.commit()
    for item in items:
        db.refresh(item)
    return items
