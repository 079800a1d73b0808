"""
IP geolocation for portfolio analytics (ipapi.co)
"""

import logging

import httpx

from ..config import IPAPI_URL

logger = logging.getLogger(__name__)

UNKNOWN_LOCATION = {"country": "Unknown", "country_code": "UN", "city": "Unknown"}


async def get_location_data(ip: str) -> dict[str, str]:
    """
    Look up country and city for an IP.
    Never raises: any lookup failure yields Unknown/UN/Unknown.
    """
    if not ip or ip == "Unknown":
        return dict(UNKNOWN_LOCATION)

    try:
        async with httpx.AsyncClient(timeout=5.0) as client:
            response = await client.get(f"{IPAPI_URL.rstrip('/')}/{ip}/json/")
        data = response.json()
    except Exception as e:
        logger.warning(f"⚠️ Error detecting location for {ip}: {str(e)}")
        return dict(UNKNOWN_LOCATION)

    # ipapi answers reserved/private ranges with {"error": true, "reason": ...}
    if response.status_code != 200 or data.get("error"):
        logger.debug(f"🌍 No location for {ip}: {data.get('reason')}")
        return dict(UNKNOWN_LOCATION)

    return {
        "country": data.get("country_name") or "Unknown",
        "country_code": data.get("country_code") or "UN",
        "city": data.get("city") or "Unknown",
    }
