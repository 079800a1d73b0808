"""Order service - checkout sessions, one-time orders, receipts and payment provider checkouts"""

import logging
from datetime import datetime, timedelta

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import SITE_URL
from ...models import CheckoutSession, Order, User
from ...services import paypal_service, polar_service
from ...services.receipt_pdf import generate_receipt_pdf
from .pricing import CHECKOUT_SESSION_TTL_MINUTES, POLAR_PLAN_PRICES, calculate_price, get_tier
from .repository import BillingRepository
from .schemas import CheckoutSessionCreate, OrderCreate, PolarCheckoutCreate

logger = logging.getLogger(__name__)


class OrderService:
    """Service layer for checkout and order business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BillingRepository()

    # ========================================================================
    # CHECKOUT SESSIONS
    # ========================================================================

    def create_checkout_session(self, data: CheckoutSessionCreate, user: User) -> CheckoutSession:
        """Price the selected plan and park it in a short-lived checkout session"""
        tier = get_tier(data.planId)
        if not tier:
            logger.warning(f"⚠️ Checkout requested for unknown plan: {data.planId}")
            raise HTTPException(status_code=400, detail="Invalid plan")

        total_storage = data.customStorage or tier["baseStorage"]
        amount = calculate_price(data.planId, total_storage, data.billingPeriod)

        try:
            session = self.repo.create_checkout_session(
                self.db,
                user_id=user.id,
                plan_id=data.planId,
                plan_name=tier["name"],
                storage_gb=total_storage,
                amount=amount,
                billing_period=data.billingPeriod,
                action=data.action or "new",
                current_subscription_id=data.currentSubId,
                expires_at=datetime.utcnow() + timedelta(minutes=CHECKOUT_SESSION_TTL_MINUTES),
                status="pending",
                features=tier["features"],
            )
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Error creating checkout session: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to create session") from e

        logger.info(
            f"🛒 Checkout session {session.id} for user {user.id}: {data.planId} "
            f"{total_storage}GB {data.billingPeriod} ${amount:.2f}"
        )
        return session

    def get_checkout_session(self, session_id: str, user: User) -> CheckoutSession:
        session = self.repo.get_checkout_session(self.db, session_id, user.id)
        if not session:
            raise HTTPException(status_code=404, detail="Checkout session not found")
        if session.expires_at <= datetime.utcnow():
            raise HTTPException(status_code=410, detail="Checkout session expired")
        return session

    # ========================================================================
    # ORDERS
    # ========================================================================

    def create_order(self, data: OrderCreate, user: User) -> Order:
        """Create a pending PayPal order from a plan selection or a checkout session"""
        if data.sessionId:
            session = self.get_checkout_session(data.sessionId, user)
            if session.status != "pending":
                raise HTTPException(status_code=409, detail="Checkout session already used")
            order_data = {
                "plan_id": session.plan_id,
                "plan_name": session.plan_name,
                "amount": session.amount,
                "storage_gb": session.storage_gb,
                "action": session.action,
                "current_subscription_id": session.current_subscription_id,
                "billing_period": session.billing_period,
            }
            # Committed together with the order below
            session.status = "completed"
        else:
            order_data = {
                "plan_id": data.planId,
                "plan_name": data.planName,
                "amount": data.amount or 0,
                "storage_gb": data.storageGb,
                "action": data.action,
                "current_subscription_id": data.currentSubId,
                "billing_period": data.billingPeriod or "monthly",
            }

        try:
            order = self.repo.create_order(
                self.db,
                user_id=user.id,
                plan_id=order_data["plan_id"],
                plan_name=order_data["plan_name"],
                amount=order_data["amount"],
                currency="USD",
                status="pending",
                payment_method="paypal",
                order_metadata={
                    "storage_gb": order_data["storage_gb"],
                    "action": order_data["action"],
                    "current_subscription_id": order_data["current_subscription_id"],
                    "billing_period": order_data["billing_period"],
                },
            )
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Error creating order: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to create order") from e

        logger.info(f"📥 Order {order.id} created for user {user.id}: ${order.amount:.2f}")
        return order

    def cancel_order(self, order_id: str, user: User) -> Order:
        if not order_id:
            raise HTTPException(status_code=400, detail="Order ID required")

        order = self.repo.cancel_pending_order(self.db, order_id, user.id)
        if not order:
            logger.info(f"ℹ️ Cancel ignored, order {order_id} not pending for user {user.id}")
            raise HTTPException(status_code=404, detail="Order not found or already processed")

        logger.info(f"🚫 Order {order.id} cancelled by user {user.id}")
        return order

    def list_orders(self, user: User) -> list[Order]:
        return self.repo.list_orders(self.db, user.id)

    def get_receipt(self, order_id: str, user: User) -> bytes:
        order = self.repo.get_order(self.db, order_id, user.id)
        if not order:
            raise HTTPException(status_code=404, detail="Order not found")
        if order.status != "completed":
            raise HTTPException(status_code=400, detail="Receipt only available for completed orders")

        try:
            return generate_receipt_pdf(order, user.email)
        except Exception as e:
            logger.error(f"❌ Error generating receipt for order {order.id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to generate receipt") from e

    # ========================================================================
    # PAYMENT PROVIDERS
    # ========================================================================

    async def create_polar_checkout(self, data: PolarCheckoutCreate, user: User) -> str:
        """Create a pending order and a hosted Polar checkout for it; returns the checkout URL"""
        amount = POLAR_PLAN_PRICES.get(data.planId or "")
        if amount is None:
            raise HTTPException(status_code=400, detail="Invalid plan")

        try:
            order = self.repo.create_order(
                self.db,
                user_id=user.id,
                plan_id=data.planId,
                amount=amount,
                currency="USD",
                status="pending",
                payment_method="polar",
            )
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Error creating order for Polar checkout: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to create order") from e

        try:
            checkout = await polar_service.create_checkout(
                product_id=data.productId,
                success_url=f"{SITE_URL}/dashboard?success=true&order_id={order.id}",
                cancel_url=f"{SITE_URL}/pricing?canceled=true",
                customer_email=user.email,
                metadata={"user_id": user.id, "order_id": order.id, "plan_id": data.planId},
            )
        except polar_service.PolarError as e:
            raise HTTPException(status_code=500, detail="Failed to create checkout") from e

        order.polar_checkout_id = checkout.get("id")
        self.db.commit()
        return checkout.get("url")

    async def create_paypal_order(self, order_id: str, user: User) -> dict:
        """Create the PayPal-side order for one of the caller's pending orders"""
        if not order_id:
            raise HTTPException(status_code=400, detail="Order ID required")

        order = self.repo.get_pending_order(self.db, order_id, user.id)
        if not order:
            raise HTTPException(status_code=404, detail="Order not found or already processed")

        try:
            paypal_order = await paypal_service.create_order(
                amount=order.amount,
                currency=order.currency or "USD",
                description=f"Raivcoo {order.plan_name or order.plan_id or 'plan'}",
                reference_id=order.id,
            )
        except Exception as e:
            logger.error(f"❌ PayPal order creation failed for {order.id}: {str(e)}")
            raise HTTPException(status_code=502, detail="Failed to create PayPal order") from e

        order.paypal_order_id = paypal_order.get("id")
        self.db.commit()
        return {"id": paypal_order.get("id"), "status": paypal_order.get("status")}
