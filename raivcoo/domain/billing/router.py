"""Billing router - FastAPI endpoints for checkout, orders, payments and subscriptions"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .order_service import OrderService
from .schemas import (
    CheckoutSessionCreate,
    CheckoutSessionResponse,
    OrderCancel,
    OrderCreate,
    OrderResponse,
    PayPalOrderCreate,
    PolarCheckoutCreate,
    SubscriptionCancel,
    SubscriptionCreate,
    SubscriptionDowngrade,
    SubscriptionUpgrade,
    UpgradeComplete,
    VerifyProRequest,
)
from .subscription_service import SubscriptionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Billing"])


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    """Dependency injection for OrderService"""
    return OrderService(db)


def get_subscription_service(db: Session = Depends(get_db)) -> SubscriptionService:
    """Dependency injection for SubscriptionService"""
    return SubscriptionService(db)


# ============================================================================
# CHECKOUT
# ============================================================================


@router.post("/checkout/create-session")
async def create_checkout_session(
    data: CheckoutSessionCreate,
    user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """Price a plan selection and return a checkout session id"""
    session = service.create_checkout_session(data, user)
    return {"sessionId": session.id}


@router.get("/checkout/sessions/{session_id}", response_model=CheckoutSessionResponse)
async def get_checkout_session(
    session_id: str,
    user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    return service.get_checkout_session(session_id, user)


# ============================================================================
# ORDERS
# ============================================================================


@router.post("/orders/create")
async def create_order(
    data: OrderCreate,
    user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    order = service.create_order(data, user)
    return {"orderId": order.id}


@router.post("/orders/cancel")
async def cancel_order(
    data: OrderCancel,
    user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """Cancel one of the caller's pending orders"""
    order = service.cancel_order(data.orderId, user)
    return {"success": True, "message": "Order cancelled successfully", "orderId": order.id}


@router.get("/orders")
async def list_orders(
    user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    orders = service.list_orders(user)
    return {"orders": [OrderResponse.model_validate(o) for o in orders]}


@router.get("/orders/{order_id}/receipt")
async def get_order_receipt(
    order_id: str,
    user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """Download a PDF receipt for a completed order"""
    pdf_bytes = service.get_receipt(order_id, user)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="receipt-{order_id}.pdf"'},
    )


# ============================================================================
# PAYMENT PROVIDERS
# ============================================================================


@router.post("/payments/create-checkout")
async def create_polar_checkout(
    data: PolarCheckoutCreate,
    user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    checkout_url = await service.create_polar_checkout(data, user)
    return {"checkoutUrl": checkout_url}


@router.post("/payments/paypal-order")
async def create_paypal_order(
    data: PayPalOrderCreate,
    user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    return await service.create_paypal_order(data.orderId, user)


# ============================================================================
# SUBSCRIPTIONS
# ============================================================================


@router.post("/subscriptions/create")
async def create_subscription(
    data: SubscriptionCreate,
    user: User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Complete a PayPal-approved order and activate the subscription"""
    return service.create_subscription(data, user)


@router.post("/subscriptions/upgrade")
async def upgrade_subscription(
    data: SubscriptionUpgrade,
    user: User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
):
    order = service.create_upgrade_order(data, user)
    return {"orderId": order.id}


@router.post("/subscriptions/complete-upgrade")
async def complete_upgrade(
    data: UpgradeComplete,
    user: User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
):
    return service.complete_upgrade(data, user)


@router.post("/subscriptions/downgrade")
async def downgrade_subscription(
    data: SubscriptionDowngrade,
    user: User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
):
    return service.schedule_downgrade(data.subscriptionId, data.newStorageGb, user)


@router.post("/subscriptions/cancel")
async def cancel_subscription(
    data: SubscriptionCancel,
    user: User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
):
    return service.cancel_subscription(data.subscriptionId, user)


@router.get("/subscriptions/current")
async def get_current_subscription(
    user: User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
):
    return {"subscription": service.get_current_subscription(user)}


@router.post("/verify-pro")
async def verify_pro(
    data: VerifyProRequest,
    user: User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
):
    return service.verify_pro(data, user)
