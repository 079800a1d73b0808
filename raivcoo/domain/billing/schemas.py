"""Billing domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

# ============================================================================
# REQUESTS
# ============================================================================


class CheckoutSessionCreate(BaseModel):
    """Schema for pricing a plan selection"""

    planId: Optional[str] = None
    customStorage: Optional[float] = None
    billingPeriod: str = "monthly"
    action: Optional[str] = None  # new, upgrade, downgrade, renew
    currentSubId: Optional[str] = None

    @field_validator("billingPeriod")
    @classmethod
    def validate_billing_period(cls, v: str) -> str:
        if v not in {"monthly", "yearly"}:
            raise ValueError("billingPeriod must be 'monthly' or 'yearly'")
        return v


class OrderCreate(BaseModel):
    """Either a full plan selection or a checkout session id"""

    sessionId: Optional[str] = None
    planId: Optional[str] = None
    planName: Optional[str] = None
    amount: Optional[float] = None
    storageGb: Optional[float] = None
    action: Optional[str] = None
    currentSubId: Optional[str] = None
    billingPeriod: Optional[str] = "monthly"


class OrderCancel(BaseModel):
    orderId: Optional[str] = None


class PolarCheckoutCreate(BaseModel):
    productId: Optional[str] = None
    planId: Optional[str] = None


class PayPalOrderCreate(BaseModel):
    orderId: Optional[str] = None


class SubscriptionCreate(BaseModel):
    """Completion of a PayPal-approved order into a subscription"""

    order: Optional[dict[str, Any]] = None  # raw PayPal order payload
    planId: Optional[str] = None
    planName: Optional[str] = None
    amount: Optional[float] = None
    storageGb: Optional[float] = None
    pendingOrderId: Optional[str] = None
    action: Optional[str] = None
    currentSubId: Optional[str] = None
    billingPeriod: str = "monthly"


class SubscriptionUpgrade(BaseModel):
    subscriptionId: Optional[str] = None
    newStorageGb: Optional[float] = None
    newAmount: Optional[float] = None


class UpgradeComplete(BaseModel):
    order: Optional[dict[str, Any]] = None
    subscriptionId: Optional[str] = None
    pendingOrderId: Optional[str] = None


class SubscriptionDowngrade(BaseModel):
    subscriptionId: Optional[str] = None
    newStorageGb: Optional[float] = None


class SubscriptionCancel(BaseModel):
    subscriptionId: Optional[str] = None


class VerifyProRequest(BaseModel):
    order: Optional[dict[str, Any]] = None
    planId: Optional[str] = None
    planName: Optional[str] = None


# ============================================================================
# RESPONSES
# ============================================================================


class CheckoutSessionResponse(BaseModel):
    id: str
    plan_id: str
    plan_name: str
    storage_gb: float
    amount: float
    billing_period: str
    action: str
    current_subscription_id: Optional[str] = None
    status: str
    features: Optional[list[str]] = None
    expires_at: datetime
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: str
    plan_id: Optional[str] = None
    plan_name: Optional[str] = None
    amount: float
    currency: str
    status: str
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None
    paypal_order_id: Optional[str] = None
    polar_checkout_id: Optional[str] = None
    metadata: Optional[dict[str, Any]] = Field(default=None, validation_alias="order_metadata")
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SubscriptionResponse(BaseModel):
    id: str
    plan_id: str
    plan_name: Optional[str] = None
    status: str
    storage_gb: Optional[float] = None
    billing_period: Optional[str] = None
    max_upload_size_mb: Optional[int] = None
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    order_id: Optional[str] = None
    last_action: Optional[str] = None
    metadata: Optional[dict[str, Any]] = Field(
        default=None, validation_alias="subscription_metadata"
    )
    is_active: bool = False

    class Config:
        from_attributes = True
