"""Pytest configuration and fixtures."""

import os

# Configure the app for tests before anything from raivcoo is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"
os.environ["SUPABASE_JWT_AUDIENCE"] = "authenticated"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.pop("REDIS_URL", None)

from collections.abc import Generator  # noqa: E402
from datetime import datetime, timedelta  # noqa: E402
from typing import Any, Optional  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from jose import jwt  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from raivcoo import models  # noqa: E402
from raivcoo.database import Base, SessionLocal, engine, get_db  # noqa: E402
from raivcoo.main import app  # noqa: E402
from raivcoo.security_utils import hash_password_bcrypt  # noqa: E402


def make_token(user_id: str, email: Optional[str] = None, expires_in: int = 3600) -> str:
    """Mint an access token the way the hosted auth provider does."""
    now = datetime.utcnow()
    payload = {
        "sub": user_id,
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "iat": now,
        "exp": now + timedelta(seconds=expires_in),
    }
    return jwt.encode(payload, "test-jwt-secret", algorithm="HS256")


def auth_header(user: models.User) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user.id, user.email)}"}


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=engine)

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, Any, None]:
    """Create a test client with database session."""

    def override_get_db() -> Generator[Session, None, None]:
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ============================================================================
# Factories
# ============================================================================


def create_test_user(db: Session, user_id: str, email: str) -> models.User:
    user = models.User(id=user_id, email=email)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_test_editor(
    db: Session, user: models.User, display_name: str, **kwargs: Any
) -> models.EditorProfile:
    editor = models.EditorProfile(
        user_id=user.id,
        email=user.email,
        full_name=kwargs.pop("full_name", display_name.title()),
        display_name=display_name,
        **kwargs,
    )
    db.add(editor)
    db.commit()
    db.refresh(editor)
    return editor


def create_test_project(
    db: Session, editor: models.EditorProfile, name: str = "Wedding Film", **kwargs: Any
) -> models.Project:
    project = models.Project(editor_id=editor.id, name=name, **kwargs)
    db.add(project)
    db.commit()
    db.refresh(project)
    return project


def create_test_media(
    db: Session, project: models.Project, original_filename: str = "cut-v1.mp4", **kwargs: Any
) -> models.ProjectMedia:
    media = models.ProjectMedia(
        project_id=project.id,
        filename=kwargs.pop("filename", f"stored-{original_filename}"),
        original_filename=original_filename,
        file_type=kwargs.pop("file_type", "video"),
        mime_type=kwargs.pop("mime_type", "video/mp4"),
        file_size=kwargs.pop("file_size", 1024),
        r2_key=kwargs.pop("r2_key", f"projects/{project.id}/{original_filename}"),
        r2_url=kwargs.pop("r2_url", f"https://cdn.raivcoo.com/projects/{project.id}/{original_filename}"),
        **kwargs,
    )
    db.add(media)
    db.commit()
    db.refresh(media)
    return media


def create_test_review_link(
    db: Session,
    media: models.ProjectMedia,
    link_token: str = "reviewtoken1",
    password: Optional[str] = None,
    **kwargs: Any,
) -> models.ReviewLink:
    link = models.ReviewLink(
        project_id=media.project_id,
        media_id=media.id,
        link_token=link_token,
        requires_password=bool(password),
        password_hash=hash_password_bcrypt(password) if password else None,
        **kwargs,
    )
    db.add(link)
    db.commit()
    db.refresh(link)
    return link


def create_test_order(db: Session, user: models.User, **kwargs: Any) -> models.Order:
    order = models.Order(
        user_id=user.id,
        plan_id=kwargs.pop("plan_id", "pro"),
        plan_name=kwargs.pop("plan_name", "Pro"),
        amount=kwargs.pop("amount", 5.99),
        currency="USD",
        status=kwargs.pop("status", "pending"),
        payment_method=kwargs.pop("payment_method", "paypal"),
        order_metadata=kwargs.pop("order_metadata", {"storage_gb": 250, "billing_period": "monthly"}),
        **kwargs,
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    return order


def create_test_subscription(db: Session, user: models.User, **kwargs: Any) -> models.Subscription:
    now = datetime.utcnow()
    subscription = models.Subscription(
        user_id=user.id,
        plan_id=kwargs.pop("plan_id", "lite"),
        plan_name=kwargs.pop("plan_name", "Lite"),
        status=kwargs.pop("status", "active"),
        storage_gb=kwargs.pop("storage_gb", 50),
        billing_period=kwargs.pop("billing_period", "monthly"),
        max_upload_size_mb=kwargs.pop("max_upload_size_mb", 2048),
        current_period_start=kwargs.pop("current_period_start", now),
        current_period_end=kwargs.pop("current_period_end", now + timedelta(days=30)),
        **kwargs,
    )
    db.add(subscription)
    db.commit()
    db.refresh(subscription)
    return subscription


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def test_user(db_session: Session) -> models.User:
    return create_test_user(db_session, "auth-user-1", "maya@example.com")


@pytest.fixture
def test_editor(db_session: Session, test_user: models.User) -> models.EditorProfile:
    return create_test_editor(db_session, test_user, "maya_edits", is_published=True)


@pytest.fixture
def auth_headers(test_user: models.User) -> dict[str, str]:
    return auth_header(test_user)


@pytest.fixture
def other_user(db_session: Session) -> models.User:
    return create_test_user(db_session, "auth-user-2", "leo@example.com")


@pytest.fixture
def other_editor(db_session: Session, other_user: models.User) -> models.EditorProfile:
    return create_test_editor(db_session, other_user, "leo_cuts")


@pytest.fixture
def other_headers(other_user: models.User) -> dict[str, str]:
    return auth_header(other_user)


@pytest.fixture
def test_project(db_session: Session, test_editor: models.EditorProfile) -> models.Project:
    return create_test_project(db_session, test_editor)


@pytest.fixture
def test_media(db_session: Session, test_project: models.Project) -> models.ProjectMedia:
    return create_test_media(db_session, test_project)
