"""
Polar hosted checkout
"""

import logging
from typing import Any, Optional

import httpx

from ..config import POLAR_ACCESS_TOKEN, POLAR_API_URL

logger = logging.getLogger(__name__)


class PolarError(Exception):
    """Raised when a Polar checkout cannot be created"""


async def create_checkout(
    product_id: Optional[str],
    success_url: str,
    cancel_url: str,
    customer_email: Optional[str],
    metadata: dict[str, Any],
) -> dict[str, Any]:
    """Create a checkout and return Polar's payload (contains `id` and `url`)"""
    body = {
        "product_id": product_id,
        "success_url": success_url,
        "cancel_url": cancel_url,
        "customer_email": customer_email,
        "metadata": metadata,
    }

    try:
        async with httpx.AsyncClient(timeout=30.0) as http_client:
            response = await http_client.post(
                f"{POLAR_API_URL.rstrip('/')}/checkouts/",
                json=body,
                headers={"Authorization": f"Bearer {POLAR_ACCESS_TOKEN}"},
            )
    except httpx.HTTPError as e:
        logger.error(f"❌ Polar request failed: {str(e)}")
        raise PolarError("Polar unreachable") from e

    if response.status_code not in [200, 201]:
        logger.error(f"❌ Polar checkout failed: {response.status_code} - {response.text}")
        raise PolarError(f"Polar API error: {response.status_code}")

    checkout = response.json()
    logger.info(f"✅ Polar checkout created: {checkout.get('id')}")
    return checkout
