"""Subscription service - PayPal order completion and the subscription lifecycle"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Order, Subscription, User
from .pricing import default_storage_gb, max_upload_size_mb, period_days
from .repository import BillingRepository
from .schemas import (
    SubscriptionCreate,
    SubscriptionResponse,
    SubscriptionUpgrade,
    UpgradeComplete,
    VerifyProRequest,
)

logger = logging.getLogger(__name__)


def get_capture_id(paypal_order: Optional[dict[str, Any]]) -> Optional[str]:
    """First capture id of a captured PayPal order, if any"""
    try:
        return paypal_order["purchase_units"][0]["payments"]["captures"][0]["id"]
    except (KeyError, IndexError, TypeError):
        return None


class SubscriptionService:
    """Service layer for subscription business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BillingRepository()

    def _complete_order(
        self, order_id: Optional[str], user: User, paypal_order: dict, metadata: dict
    ) -> Order:
        if not order_id:
            raise HTTPException(status_code=400, detail="Pending order ID required")

        capture_id = get_capture_id(paypal_order)
        order = self.repo.complete_pending_order(
            self.db,
            order_id,
            user.id,
            paypal_order_id=paypal_order.get("id"),
            paypal_payment_id=capture_id,
            transaction_id=capture_id,
            metadata={**metadata, "paypal_order": paypal_order},
        )
        if not order:
            logger.warning(f"⚠️ Order {order_id} not pending for user {user.id}")
            raise HTTPException(status_code=404, detail="Order not found or already processed")
        return order

    # ========================================================================
    # SUBSCRIPTION CREATION
    # ========================================================================

    def create_subscription(self, data: SubscriptionCreate, user: User) -> dict:
        """
        Complete the pending order and apply it to the caller's subscriptions.

        upgrade/downgrade update `currentSubId` in place, renew reactivates the
        caller's subscription for the plan (or starts a new one), anything else
        replaces all active subscriptions with a new one.
        """
        paypal_order = data.order or {}
        action = data.action

        if action in ("upgrade", "downgrade") and not data.currentSubId:
            raise HTTPException(
                status_code=400,
                detail="Current subscription ID required for upgrade/downgrade",
            )

        try:
            order = self._complete_order(
                data.pendingOrderId,
                user,
                paypal_order,
                {
                    "storage_gb": data.storageGb,
                    "action": action,
                    "current_subscription_id": data.currentSubId,
                    "billing_period": data.billingPeriod,
                },
            )

            now = datetime.utcnow()
            subscription_fields = {
                "plan_id": data.planId,
                "plan_name": data.planName,
                "status": "active",
                "storage_gb": data.storageGb or default_storage_gb(data.planId),
                "billing_period": data.billingPeriod,
                "max_upload_size_mb": max_upload_size_mb(data.planId),
                "current_period_start": now,
                "current_period_end": now + timedelta(days=period_days(data.billingPeriod)),
                "order_id": order.id,
            }

            if action in ("upgrade", "downgrade"):
                subscription = self.repo.get_subscription(self.db, data.currentSubId, user.id)
                if not subscription:
                    raise HTTPException(status_code=404, detail="Subscription not found")
                for key, value in subscription_fields.items():
                    setattr(subscription, key, value)
                subscription.last_action = action
            elif action == "renew":
                existing = self.repo.get_subscription_for_plan(self.db, user.id, data.planId)
                if existing:
                    for key, value in subscription_fields.items():
                        if key in ("plan_id", "plan_name"):
                            continue
                        setattr(existing, key, value)
                    existing.last_action = action
                else:
                    self.repo.cancel_active_subscriptions(self.db, user.id)
                    self.repo.add_subscription(
                        self.db, user_id=user.id, last_action=action, **subscription_fields
                    )
            else:
                self.repo.cancel_active_subscriptions(self.db, user.id)
                self.repo.add_subscription(
                    self.db, user_id=user.id, last_action="new", **subscription_fields
                )

            self.db.commit()
        except HTTPException:
            self.db.rollback()
            raise
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Error processing subscription for user {user.id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Internal server error") from e

        logger.info(f"✅ Subscription {action or 'created'} for user {user.id} ({data.planId})")
        return {
            "success": True,
            "order_id": order.id,
            "subscription_status": "active",
            "action": action or "created",
        }

    # ========================================================================
    # STORAGE CHANGES
    # ========================================================================

    def create_upgrade_order(self, data: SubscriptionUpgrade, user: User) -> Order:
        """Pending pro order for additional storage on an existing subscription"""
        if not data.subscriptionId:
            raise HTTPException(status_code=400, detail="Subscription ID required")
        if data.newAmount is None:
            raise HTTPException(status_code=400, detail="New amount required")

        try:
            order = self.repo.create_order(
                self.db,
                user_id=user.id,
                plan_id="pro",
                plan_name="Pro",
                amount=float(data.newAmount),
                currency="USD",
                status="pending",
                payment_method="paypal",
                order_metadata={
                    "storage_gb": data.newStorageGb,
                    "is_upgrade": True,
                    "subscription_id": data.subscriptionId,
                },
            )
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Error creating upgrade order: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to create upgrade order") from e

        logger.info(f"⬆️ Upgrade order {order.id} for subscription {data.subscriptionId}")
        return order

    def complete_upgrade(self, data: UpgradeComplete, user: User) -> dict:
        try:
            order = self._complete_order(data.pendingOrderId, user, data.order or {}, {})

            subscription = self.repo.get_subscription(self.db, data.subscriptionId or "", user.id)
            if not subscription:
                raise HTTPException(status_code=404, detail="Subscription not found")

            now = datetime.utcnow()
            storage_gb = (order.order_metadata or {}).get("storage_gb")
            if storage_gb is not None:
                subscription.storage_gb = storage_gb
            subscription.current_period_start = now
            subscription.current_period_end = now + timedelta(days=30)
            self.db.commit()
        except HTTPException:
            self.db.rollback()
            raise
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Error processing upgrade for user {user.id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Internal server error") from e

        return {"success": True, "order_id": order.id, "subscription_status": "upgraded"}

    def schedule_downgrade(self, subscription_id: Optional[str], new_storage_gb: Optional[float], user: User) -> dict:
        subscription = self.repo.get_subscription(self.db, subscription_id or "", user.id)
        if not subscription:
            raise HTTPException(status_code=404, detail="Subscription not found")

        subscription.subscription_metadata = {
            **(subscription.subscription_metadata or {}),
            "pending_downgrade": {
                "storage_gb": new_storage_gb,
                "scheduled_for": datetime.utcnow().isoformat(),
            },
        }
        self.db.commit()
        logger.info(f"⬇️ Downgrade to {new_storage_gb}GB scheduled for subscription {subscription.id}")
        return {"success": True, "message": "Downgrade scheduled for next billing cycle"}

    def cancel_subscription(self, subscription_id: Optional[str], user: User) -> dict:
        subscription = self.repo.get_subscription(self.db, subscription_id or "", user.id)
        if not subscription:
            raise HTTPException(status_code=404, detail="Subscription not found")

        subscription.status = "cancelled"
        self.db.commit()
        logger.info(f"🚫 Subscription {subscription.id} cancelled by user {user.id}")
        return {"success": True}

    def get_current_subscription(self, user: User) -> Optional[SubscriptionResponse]:
        subscription = self.repo.get_active_subscription(self.db, user.id)
        if not subscription:
            return None

        response = SubscriptionResponse.model_validate(subscription)
        response.is_active = bool(
            subscription.current_period_end
            and subscription.current_period_end > datetime.utcnow()
        )
        return response

    # ========================================================================
    # DIRECT PAYPAL VERIFICATION
    # ========================================================================

    def verify_pro(self, data: VerifyProRequest, user: User) -> dict:
        """Record a client-captured PayPal order as a 30-day subscription and verify the profile"""
        paypal_order = data.order or {}
        if not paypal_order.get("id") or paypal_order.get("status") != "COMPLETED":
            raise HTTPException(status_code=400, detail="Invalid or incomplete order")

        profile = self.repo.get_profile_for_user(self.db, user.id)
        if not profile:
            raise HTTPException(status_code=404, detail="Profile not found")

        purchase_unit = (paypal_order.get("purchase_units") or [{}])[0]
        amount_info = purchase_unit.get("amount") or {}
        now = datetime.utcnow()
        expires_at = now + timedelta(days=30)

        try:
            subscription: Subscription = self.repo.add_subscription(
                self.db,
                user_id=user.id,
                profile_id=profile.id,
                paypal_order_id=paypal_order["id"],
                payment_status=paypal_order["status"],
                amount=float(amount_info.get("value") or 0),
                currency=amount_info.get("currency_code") or "USD",
                plan_id=data.planId or "pro",
                plan_name=data.planName,
                status="active",
                current_period_start=now,
                current_period_end=expires_at,
                max_upload_size_mb=max_upload_size_mb(data.planId),
                last_action="new",
            )
            profile.is_verified = True
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to record subscription for user {user.id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to record subscription") from e

        logger.info(f"✅ Pro verified for profile {profile.id} (subscription {subscription.id})")
        return {
            "message": "Subscription activated successfully",
            "plan": data.planId,
            "expires": expires_at.isoformat(),
        }
