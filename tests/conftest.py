"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ["SENDGRID_API_KEY"] = ""

from unittest.mock import patch  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.database import Base, get_db  # noqa: E402
from app.models.admin import Admin  # noqa: E402
from app.models.role import Role  # noqa: E402
from app.models.user import User  # noqa: E402, F401
from app.services.auth import get_auth_service  # noqa: E402
from app.services.credentials import get_credential_store  # noqa: E402
from app.services.email import EmailService  # noqa: E402
from app.services.passwords import get_password_hasher  # noqa: E402
from app.services.session import get_session_service  # noqa: E402


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="client")
def client_fixture(db_session: Session):
    """Create a test client with overridden DB dependency and disabled rate limiting."""
    from app.rate_limit import limiter
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture(name="sent_emails")
def sent_emails_fixture():
    """Capture password reset emails instead of calling SendGrid."""
    with patch.object(EmailService, "send_password_reset", return_value=True) as mock_send:
        yield mock_send


@pytest.fixture(name="sent_welcome")
def sent_welcome_fixture():
    """Capture welcome emails instead of calling SendGrid."""
    with patch.object(EmailService, "send_welcome", return_value=True) as mock_send:
        yield mock_send


@pytest.fixture(name="test_user")
def test_user_fixture(db_session: Session):
    """Create a test user and return its data and a session token."""
    user = get_auth_service().register_user(db_session, "test@example.com", "password123", "Test", "User")
    token = get_session_service().issue(user)
    return {
        "user_id": user.id,
        "email": user.email,
        "referral_code": user.referral_code,
        "token": token,
    }


@pytest.fixture(name="make_admin")
def make_admin_fixture(db_session: Session):
    """Factory that creates an admin with the given role and returns (admin, token)."""

    def _make_admin(email: str, role: Role = Role.ADMIN, password: str = "adminpass123") -> tuple[Admin, str]:
        admin = get_credential_store().create_admin(
            db_session, email, get_password_hasher().hash(password), email.split("@")[0].title(), role
        )
        return admin, get_session_service().issue(admin)

    return _make_admin


@pytest.fixture(name="super_admin")
def super_admin_fixture(make_admin):
    admin, token = make_admin("root@example.com", Role.SUPER_ADMIN)
    return {"admin_id": admin.id, "email": admin.email, "token": token}
