"""Tests for checkout sessions, orders, receipts and payment provider checkouts."""

from datetime import datetime, timedelta
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from raivcoo import models
from raivcoo.services.polar_service import PolarError
from tests.conftest import create_test_order


class TestCheckoutSessions:
    """Test suite for POST /api/checkout/create-session and GET /api/checkout/sessions/{id}."""

    def test_create_session_prices_plan(
        self, client: TestClient, db_session: Session, auth_headers: dict, test_user: models.User
    ) -> None:
        response = client.post(
            "/api/checkout/create-session",
            json={"planId": "lite", "customStorage": 100, "billingPeriod": "monthly"},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        session_id = response.json()["sessionId"]

        session = db_session.query(models.CheckoutSession).filter_by(id=session_id).first()
        assert session is not None
        assert session.user_id == test_user.id
        assert session.plan_name == "Lite"
        assert session.amount == pytest.approx(4.99)
        assert session.status == "pending"
        assert session.action == "new"
        assert session.expires_at > datetime.utcnow() + timedelta(minutes=29)

    def test_create_session_unknown_plan(self, client: TestClient, auth_headers: dict) -> None:
        response = client.post(
            "/api/checkout/create-session",
            json={"planId": "enterprise", "billingPeriod": "monthly"},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "Invalid plan"}

    def test_create_session_invalid_billing_period(
        self, client: TestClient, auth_headers: dict
    ) -> None:
        response = client.post(
            "/api/checkout/create-session",
            json={"planId": "pro", "billingPeriod": "weekly"},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "billingPeriod" in response.json()["error"]

    def test_create_session_requires_auth(self, client: TestClient) -> None:
        response = client.post("/api/checkout/create-session", json={"planId": "pro"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert "error" in response.json()

    def test_get_session(self, client: TestClient, auth_headers: dict) -> None:
        created = client.post(
            "/api/checkout/create-session",
            json={"planId": "pro", "billingPeriod": "yearly"},
            headers=auth_headers,
        ).json()

        response = client.get(f"/api/checkout/sessions/{created['sessionId']}", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["plan_id"] == "pro"
        assert data["billing_period"] == "yearly"
        assert data["storage_gb"] == 250
        assert round(data["amount"], 2) == round(5.99 * 8.4, 2)

    def test_get_expired_session(
        self, client: TestClient, db_session: Session, auth_headers: dict, test_user: models.User
    ) -> None:
        session = models.CheckoutSession(
            user_id=test_user.id,
            plan_id="pro",
            plan_name="Pro",
            storage_gb=250,
            amount=5.99,
            expires_at=datetime.utcnow() - timedelta(minutes=1),
        )
        db_session.add(session)
        db_session.commit()

        response = client.get(f"/api/checkout/sessions/{session.id}", headers=auth_headers)

        assert response.status_code == status.HTTP_410_GONE

    def test_get_other_users_session(
        self, client: TestClient, auth_headers: dict, other_headers: dict
    ) -> None:
        created = client.post(
            "/api/checkout/create-session", json={"planId": "pro"}, headers=auth_headers
        ).json()

        response = client.get(f"/api/checkout/sessions/{created['sessionId']}", headers=other_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestCreateOrder:
    """Test suite for POST /api/orders/create."""

    def test_create_order_from_plan(
        self, client: TestClient, db_session: Session, auth_headers: dict
    ) -> None:
        response = client.post(
            "/api/orders/create",
            json={
                "planId": "pro",
                "planName": "Pro",
                "amount": 8.99,
                "storageGb": 350,
                "action": "new",
                "billingPeriod": "monthly",
            },
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        order = db_session.query(models.Order).filter_by(id=response.json()["orderId"]).first()
        assert order.status == "pending"
        assert order.currency == "USD"
        assert order.payment_method == "paypal"
        assert order.amount == 8.99
        assert order.order_metadata["storage_gb"] == 350
        assert order.order_metadata["billing_period"] == "monthly"

    def test_create_order_from_session(
        self, client: TestClient, db_session: Session, auth_headers: dict
    ) -> None:
        session_id = client.post(
            "/api/checkout/create-session",
            json={"planId": "lite", "customStorage": 75},
            headers=auth_headers,
        ).json()["sessionId"]

        response = client.post(
            "/api/orders/create", json={"sessionId": session_id}, headers=auth_headers
        )

        assert response.status_code == status.HTTP_200_OK
        order = db_session.query(models.Order).filter_by(id=response.json()["orderId"]).first()
        assert order.plan_id == "lite"
        assert order.amount == pytest.approx(3.99)
        assert order.order_metadata["storage_gb"] == 75

        session = db_session.query(models.CheckoutSession).filter_by(id=session_id).first()
        assert session.status == "completed"

        # A session pays for one order only
        again = client.post("/api/orders/create", json={"sessionId": session_id}, headers=auth_headers)
        assert again.status_code == status.HTTP_409_CONFLICT
        assert again.json() == {"error": "Checkout session already used"}
        assert db_session.query(models.Order).count() == 1


class TestCancelOrder:
    """Test suite for POST /api/orders/cancel."""

    def test_cancel_pending_order(
        self, client: TestClient, db_session: Session, auth_headers: dict, test_user: models.User
    ) -> None:
        order = create_test_order(db_session, test_user)

        response = client.post("/api/orders/cancel", json={"orderId": order.id}, headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["success"] is True

        db_session.refresh(order)
        assert order.status == "cancelled"
        assert order.cancelled_at is not None
        assert order.order_metadata["cancellation_reason"] == "user_cancelled"
        assert order.order_metadata["cancelled_by"] == test_user.id
        # Existing metadata is kept
        assert order.order_metadata["storage_gb"] == 250

    def test_cancel_completed_order_is_rejected_and_unchanged(
        self, client: TestClient, db_session: Session, auth_headers: dict, test_user: models.User
    ) -> None:
        completed_at = datetime(2025, 1, 2, 3, 4, 5)
        order = create_test_order(
            db_session, test_user, status="completed", completed_at=completed_at
        )

        response = client.post("/api/orders/cancel", json={"orderId": order.id}, headers=auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"error": "Order not found or already processed"}

        db_session.refresh(order)
        assert order.status == "completed"
        assert order.completed_at == completed_at
        assert order.cancelled_at is None
        assert "cancellation_reason" not in order.order_metadata

    def test_cancel_other_users_order(
        self,
        client: TestClient,
        db_session: Session,
        other_headers: dict,
        test_user: models.User,
    ) -> None:
        order = create_test_order(db_session, test_user)

        response = client.post("/api/orders/cancel", json={"orderId": order.id}, headers=other_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        db_session.refresh(order)
        assert order.status == "pending"

    def test_cancel_without_order_id(self, client: TestClient, auth_headers: dict) -> None:
        response = client.post("/api/orders/cancel", json={}, headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "Order ID required"}


class TestOrderHistoryAndReceipts:
    def test_list_orders_only_returns_own_orders(
        self,
        client: TestClient,
        db_session: Session,
        auth_headers: dict,
        test_user: models.User,
        other_user: models.User,
    ) -> None:
        mine = create_test_order(db_session, test_user)
        create_test_order(db_session, other_user)

        response = client.get("/api/orders", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        orders = response.json()["orders"]
        assert [o["id"] for o in orders] == [mine.id]
        assert orders[0]["metadata"]["storage_gb"] == 250

    def test_receipt_for_completed_order(
        self, client: TestClient, db_session: Session, auth_headers: dict, test_user: models.User
    ) -> None:
        order = create_test_order(
            db_session,
            test_user,
            status="completed",
            completed_at=datetime.utcnow(),
            transaction_id="CAPTURE-123",
        )

        response = client.get(f"/api/orders/{order.id}/receipt", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == (
            f'attachment; filename="receipt-{order.id}.pdf"'
        )
        assert response.content.startswith(b"%PDF")

    def test_receipt_for_pending_order(
        self, client: TestClient, db_session: Session, auth_headers: dict, test_user: models.User
    ) -> None:
        order = create_test_order(db_session, test_user)

        response = client.get(f"/api/orders/{order.id}/receipt", headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "Receipt only available for completed orders"}

    def test_receipt_for_unknown_order(self, client: TestClient, auth_headers: dict) -> None:
        response = client.get("/api/orders/does-not-exist/receipt", headers=auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestPaymentProviders:
    def test_polar_checkout(
        self, client: TestClient, db_session: Session, auth_headers: dict
    ) -> None:
        checkout = {"id": "polar-checkout-1", "url": "https://polar.sh/checkout/abc"}
        with patch(
            "raivcoo.services.polar_service.create_checkout", new=AsyncMock(return_value=checkout)
        ) as mock_checkout:
            response = client.post(
                "/api/payments/create-checkout",
                json={"productId": "prod_1", "planId": "pro"},
                headers=auth_headers,
            )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"checkoutUrl": "https://polar.sh/checkout/abc"}

        order = db_session.query(models.Order).filter_by(polar_checkout_id="polar-checkout-1").first()
        assert order is not None
        assert order.amount == 5.99
        assert order.payment_method == "polar"
        assert mock_checkout.await_args.kwargs["metadata"]["order_id"] == order.id

    def test_polar_checkout_unknown_plan(self, client: TestClient, auth_headers: dict) -> None:
        response = client.post(
            "/api/payments/create-checkout",
            json={"productId": "prod_1", "planId": "gold"},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_polar_checkout_provider_failure(self, client: TestClient, auth_headers: dict) -> None:
        with patch(
            "raivcoo.services.polar_service.create_checkout",
            new=AsyncMock(side_effect=PolarError("boom")),
        ):
            response = client.post(
                "/api/payments/create-checkout",
                json={"productId": "prod_1", "planId": "basic"},
                headers=auth_headers,
            )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"error": "Failed to create checkout"}

    def test_paypal_order_for_pending_order(
        self, client: TestClient, db_session: Session, auth_headers: dict, test_user: models.User
    ) -> None:
        order = create_test_order(db_session, test_user)
        paypal_order = {"id": "PAYPAL-ORDER-1", "status": "CREATED"}

        with patch(
            "raivcoo.services.paypal_service.create_order", new=AsyncMock(return_value=paypal_order)
        ):
            response = client.post(
                "/api/payments/paypal-order", json={"orderId": order.id}, headers=auth_headers
            )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"id": "PAYPAL-ORDER-1", "status": "CREATED"}
        db_session.refresh(order)
        assert order.paypal_order_id == "PAYPAL-ORDER-1"

    def test_paypal_order_for_completed_order(
        self, client: TestClient, db_session: Session, auth_headers: dict, test_user: models.User
    ) -> None:
        order = create_test_order(db_session, test_user, status="completed")

        response = client.post(
            "/api/payments/paypal-order", json={"orderId": order.id}, headers=auth_headers
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
