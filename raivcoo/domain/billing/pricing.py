"""
Plan pricing and plan limits shared by checkout, orders, subscriptions and uploads.
"""

from typing import Optional

# Storage-priced plans; yearly billing charges 8.4 months (30% off)
PRICING_TIERS = {
    "free": {
        "name": "Free",
        "basePrice": 0,
        "baseStorage": 0.5,
        "additionalStoragePrice": 0,
        "additionalStorageUnit": 1,
        "maxStorage": 0.5,
        "features": [
            "Upload videos,images",
            "200MB max upload size",
            "2 Active projects",
            "2 Members per project",
            "Pin & Draw Annotations",
            "Email/App notifications",
        ],
    },
    "lite": {
        "name": "Lite",
        "basePrice": 2.99,
        "baseStorage": 50,
        "additionalStoragePrice": 1.0,
        "additionalStorageUnit": 25,
        "maxStorage": 150,
        "features": [
            "Everything in Free plan",
            "2GB max upload size",
            "Flexible storage up to 150GB",
            "5 Active projects",
            "5 Members per project",
            "Password protection for links",
            "Custom expiration dates",
            "Download controls",
        ],
    },
    "pro": {
        "name": "Pro",
        "basePrice": 5.99,
        "baseStorage": 250,
        "additionalStoragePrice": 1.5,
        "additionalStorageUnit": 50,
        "maxStorage": 2048,
        "features": [
            "Everything in Free plan",
            "5GB max upload size",
            "Flexible storage up to 2TB",
            "Unlimited projects",
            "Unlimited members",
            "Password protection for links",
            "Custom expiration dates",
            "Download controls",
            "Priority support",
        ],
    },
}

YEARLY_MULTIPLIER = 8.4

MAX_UPLOAD_SIZE_MB = {"free": 200, "lite": 2048, "pro": 5120}
DEFAULT_MAX_UPLOAD_SIZE_MB = 200

# Users without an active subscription get the free allowance
FREE_STORAGE_GB = 0.5

# Flat prices for the hosted Polar checkout
POLAR_PLAN_PRICES = {"basic": 3.99, "pro": 5.99, "premium": 9.99}

CHECKOUT_SESSION_TTL_MINUTES = 30


def get_tier(plan_id: Optional[str]) -> Optional[dict]:
    """Pricing tier for a plan id, or None for an unknown plan"""
    if not plan_id:
        return None
    return PRICING_TIERS.get(plan_id)


def calculate_price(plan_id: str, storage_gb: Optional[float], billing_period: str = "monthly") -> float:
    """
    Price for a plan with the requested storage.
    (base + extra_units * unit_price) * (8.4 if yearly else 1)
    """
    tier = PRICING_TIERS[plan_id]
    total_storage = storage_gb or tier["baseStorage"]
    additional_storage = max(0, total_storage - tier["baseStorage"])
    units = (
        additional_storage / tier["additionalStorageUnit"]
        if tier["additionalStorageUnit"] > 0
        else 0
    )
    multiplier = YEARLY_MULTIPLIER if billing_period == "yearly" else 1
    return (tier["basePrice"] + units * tier["additionalStoragePrice"]) * multiplier


def max_upload_size_mb(plan_id: Optional[str]) -> int:
    return MAX_UPLOAD_SIZE_MB.get(plan_id or "", DEFAULT_MAX_UPLOAD_SIZE_MB)


def default_storage_gb(plan_id: Optional[str]) -> float:
    if plan_id == "pro":
        return 250
    if plan_id == "lite":
        return 50
    return FREE_STORAGE_GB


def period_days(billing_period: Optional[str]) -> int:
    return 365 if billing_period == "yearly" else 30


def format_storage(gb: float) -> str:
    """Human readable storage: sub-GB amounts are shown in MB"""
    if gb < 1:
        return f"{gb * 1000:g}MB"
    return f"{gb:g}GB"
