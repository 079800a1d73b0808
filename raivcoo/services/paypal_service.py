"""
PayPal REST API client (orders v2)
"""

import logging
from typing import Any

import httpx

from ..config import PAYPAL_CLIENT_ID, PAYPAL_CLIENT_SECRET, PAYPAL_ENVIRONMENT

logger = logging.getLogger(__name__)

PAYPAL_API_BASE = (
    "https://api-m.paypal.com"
    if PAYPAL_ENVIRONMENT == "live"
    else "https://api-m.sandbox.paypal.com"
)


class PayPalError(Exception):
    """Raised when PayPal rejects a request or is unreachable"""


async def get_access_token() -> str:
    """OAuth2 client-credentials token"""
    if not PAYPAL_CLIENT_ID or not PAYPAL_CLIENT_SECRET:
        raise PayPalError("PayPal credentials are missing")

    async with httpx.AsyncClient(timeout=30.0) as http_client:
        response = await http_client.post(
            f"{PAYPAL_API_BASE}/v1/oauth2/token",
            auth=(PAYPAL_CLIENT_ID, PAYPAL_CLIENT_SECRET),
            data={"grant_type": "client_credentials"},
        )

    if response.status_code != 200:
        logger.error(f"❌ PayPal auth error: {response.status_code} - {response.text}")
        raise PayPalError(f"PayPal authentication failed: {response.status_code}")

    return response.json()["access_token"]


async def create_order(
    amount: float, currency: str, description: str, reference_id: str
) -> dict[str, Any]:
    """Create a CAPTURE-intent order and return PayPal's order payload"""
    access_token = await get_access_token()

    payload = {
        "intent": "CAPTURE",
        "purchase_units": [
            {
                "reference_id": reference_id,
                "amount": {"currency_code": currency, "value": f"{amount:.2f}"},
                "description": description,
            }
        ],
    }

    async with httpx.AsyncClient(timeout=30.0) as http_client:
        response = await http_client.post(
            f"{PAYPAL_API_BASE}/v2/checkout/orders",
            json=payload,
            headers={"Authorization": f"Bearer {access_token}"},
        )

    if response.status_code not in [200, 201]:
        logger.error(f"❌ PayPal create order error: {response.status_code} - {response.text}")
        raise PayPalError(f"Failed to create PayPal order: {response.status_code}")

    paypal_order = response.json()
    logger.info(f"✅ PayPal order created: {paypal_order.get('id')} for {reference_id}")
    return paypal_order
