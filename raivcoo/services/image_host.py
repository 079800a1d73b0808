"""
ImgBB image hosting for avatars and portfolio images
"""

import logging

import httpx

from ..config import IMGBB_API_KEY

logger = logging.getLogger(__name__)

IMGBB_UPLOAD_URL = "https://api.imgbb.com/1/upload"


class ImageHostError(Exception):
    """Raised when ImgBB rejects an upload or returns no URL"""


async def upload_image(content: bytes, filename: str, content_type: str) -> str:
    """Upload an image and return its public URL"""
    if not IMGBB_API_KEY:
        logger.error("❌ IMGBB_API_KEY not configured")
        raise ImageHostError("Image hosting not configured")

    async with httpx.AsyncClient(timeout=30.0) as client:
        response = await client.post(
            IMGBB_UPLOAD_URL,
            params={"key": IMGBB_API_KEY},
            files={"image": (filename, content, content_type)},
        )

    if response.status_code != 200:
        logger.error(f"❌ ImgBB API error: {response.status_code} - {response.text}")
        raise ImageHostError(f"Upload failed: {response.status_code} {response.reason_phrase}")

    url = (response.json().get("data") or {}).get("url")
    if not url:
        raise ImageHostError("Invalid response from ImgBB")

    logger.info(f"✅ Image uploaded to ImgBB: {url}")
    return url
