"""Billing repository - Database operations for checkout sessions, orders and subscriptions"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import CheckoutSession, EditorProfile, Order, Subscription


class BillingRepository:
    """Repository for billing database operations"""

    # ------------------------------------------------------------------
    # Checkout sessions
    # ------------------------------------------------------------------

    @staticmethod
    def create_checkout_session(db: Session, **session_data) -> CheckoutSession:
        session = CheckoutSession(**session_data)
        db.add(session)
        db.commit()
        db.refresh(session)
        return session

    @staticmethod
    def get_checkout_session(db: Session, session_id: str, user_id: str) -> Optional[CheckoutSession]:
        return (
            db.query(CheckoutSession)
            .filter(CheckoutSession.id == session_id, CheckoutSession.user_id == user_id)
            .first()
        )

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    @staticmethod
    def create_order(db: Session, **order_data) -> Order:
        order = Order(**order_data)
        db.add(order)
        db.commit()
        db.refresh(order)
        return order

    @staticmethod
    def get_order(db: Session, order_id: str, user_id: str) -> Optional[Order]:
        return db.query(Order).filter(Order.id == order_id, Order.user_id == user_id).first()

    @staticmethod
    def get_pending_order(db: Session, order_id: str, user_id: str) -> Optional[Order]:
        return (
            db.query(Order)
            .filter(Order.id == order_id, Order.user_id == user_id, Order.status == "pending")
            .first()
        )

    @staticmethod
    def list_orders(db: Session, user_id: str) -> list[Order]:
        return (
            db.query(Order)
            .filter(Order.user_id == user_id)
            .order_by(Order.created_at.desc())
            .all()
        )

    @staticmethod
    def cancel_pending_order(db: Session, order_id: str, user_id: str) -> Optional[Order]:
        """
        Cancel an order only while it is still pending.
        The status check is part of the UPDATE so a concurrent completion wins.
        """
        now = datetime.utcnow()
        updated = (
            db.query(Order)
            .filter(Order.id == order_id, Order.user_id == user_id, Order.status == "pending")
            .update({Order.status: "cancelled", Order.cancelled_at: now})
        )
        if not updated:
            db.rollback()
            return None

        order = db.query(Order).filter(Order.id == order_id).first()
        order.order_metadata = {
            **(order.order_metadata or {}),
            "cancellation_reason": "user_cancelled",
            "cancelled_by": user_id,
        }
        db.commit()
        db.refresh(order)
        return order

    @staticmethod
    def complete_pending_order(
        db: Session, order_id: str, user_id: str, **completion
    ) -> Optional[Order]:
        """Mark a pending order completed; returns None when it is not pending for this user"""
        updated = (
            db.query(Order)
            .filter(Order.id == order_id, Order.user_id == user_id, Order.status == "pending")
            .update({Order.status: "completed", Order.completed_at: datetime.utcnow()})
        )
        if not updated:
            db.rollback()
            return None

        order = db.query(Order).filter(Order.id == order_id).first()
        metadata = completion.pop("metadata", None)
        for key, value in completion.items():
            setattr(order, key, value)
        if metadata is not None:
            order.order_metadata = {**(order.order_metadata or {}), **metadata}
        db.flush()
        return order

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    @staticmethod
    def get_subscription(db: Session, subscription_id: str, user_id: str) -> Optional[Subscription]:
        return (
            db.query(Subscription)
            .filter(Subscription.id == subscription_id, Subscription.user_id == user_id)
            .first()
        )

    @staticmethod
    def get_subscription_for_plan(db: Session, user_id: str, plan_id: str) -> Optional[Subscription]:
        return (
            db.query(Subscription)
            .filter(Subscription.user_id == user_id, Subscription.plan_id == plan_id)
            .order_by(Subscription.created_at.desc())
            .first()
        )

    @staticmethod
    def get_active_subscription(db: Session, user_id: str) -> Optional[Subscription]:
        return (
            db.query(Subscription)
            .filter(Subscription.user_id == user_id, Subscription.status == "active")
            .order_by(Subscription.created_at.desc())
            .first()
        )

    @staticmethod
    def cancel_active_subscriptions(db: Session, user_id: str) -> int:
        return (
            db.query(Subscription)
            .filter(Subscription.user_id == user_id, Subscription.status == "active")
            .update({Subscription.status: "cancelled"})
        )

    @staticmethod
    def add_subscription(db: Session, **subscription_data) -> Subscription:
        subscription = Subscription(**subscription_data)
        db.add(subscription)
        db.flush()
        return subscription

    @staticmethod
    def get_profile_for_user(db: Session, user_id: str) -> Optional[EditorProfile]:
        return db.query(EditorProfile).filter(EditorProfile.user_id == user_id).first()
