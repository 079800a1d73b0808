"""Tests for the public review endpoints."""

from datetime import datetime, timedelta

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from raivcoo import models
from raivcoo.domain.review.service import INCORRECT_PASSWORD
from tests.conftest import create_test_review_link


class TestVerifyPassword:
    def test_missing_fields(self, client: TestClient) -> None:
        response = client.post("/api/review/verify-password", json={"token": "abc"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "Token and password are required"}

    def test_unknown_token(self, client: TestClient) -> None:
        response = client.post(
            "/api/review/verify-password", json={"token": "nope", "password": "x"}
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"error": "Review link not found"}

    def test_inactive_link_is_not_found(
        self, client: TestClient, db_session: Session, test_media: models.ProjectMedia
    ) -> None:
        create_test_review_link(db_session, test_media, password="secret", is_active=False)

        response = client.post(
            "/api/review/verify-password", json={"token": "reviewtoken1", "password": "secret"}
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_wrong_password(
        self, client: TestClient, db_session: Session, test_media: models.ProjectMedia
    ) -> None:
        create_test_review_link(db_session, test_media, password="secret")

        response = client.post(
            "/api/review/verify-password", json={"token": "reviewtoken1", "password": "guess"}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"error": INCORRECT_PASSWORD}

    def test_correct_password(
        self, client: TestClient, db_session: Session, test_media: models.ProjectMedia
    ) -> None:
        create_test_review_link(db_session, test_media, password="secret")

        response = client.post(
            "/api/review/verify-password", json={"token": "reviewtoken1", "password": "secret"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True}

    def test_link_without_password_always_passes(
        self, client: TestClient, db_session: Session, test_media: models.ProjectMedia
    ) -> None:
        create_test_review_link(db_session, test_media)

        response = client.post(
            "/api/review/verify-password", json={"token": "reviewtoken1", "password": "anything"}
        )

        assert response.status_code == status.HTTP_200_OK


class TestGetReview:
    def test_open_link(
        self, client: TestClient, db_session: Session, test_media: models.ProjectMedia
    ) -> None:
        link = create_test_review_link(db_session, test_media, title="Director's cut")

        response = client.get("/api/review/reviewtoken1")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["reviewLink"]["id"] == link.id
        assert data["reviewLink"]["title"] == "Director's cut"
        assert "password_hash" not in data["reviewLink"]
        assert data["media"]["id"] == test_media.id
        assert data["media"]["r2_url"] == test_media.r2_url

    def test_unknown_token(self, client: TestClient, db_session: Session) -> None:
        response = client.get("/api/review/missing")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_expired_link(
        self, client: TestClient, db_session: Session, test_media: models.ProjectMedia
    ) -> None:
        create_test_review_link(
            db_session, test_media, expires_at=datetime.utcnow() - timedelta(minutes=1)
        )

        response = client.get("/api/review/reviewtoken1")

        assert response.status_code == status.HTTP_410_GONE
        assert response.json() == {"error": "Review link has expired"}

    def test_protected_link_requires_password(
        self, client: TestClient, db_session: Session, test_media: models.ProjectMedia
    ) -> None:
        create_test_review_link(db_session, test_media, password="secret")

        missing = client.get("/api/review/reviewtoken1")
        wrong = client.get("/api/review/reviewtoken1", headers={"X-Review-Password": "guess"})
        right = client.get("/api/review/reviewtoken1", headers={"X-Review-Password": "secret"})

        assert missing.status_code == status.HTTP_401_UNAUTHORIZED
        assert missing.json() == {"error": "Password required"}
        assert wrong.status_code == status.HTTP_401_UNAUTHORIZED
        assert wrong.json() == {"error": INCORRECT_PASSWORD}
        assert right.status_code == status.HTTP_200_OK
        assert right.json()["media"]["id"] == test_media.id
