"""
Cloudflare R2 object storage for project media and thumbnails
"""

import logging
from typing import Optional

import boto3
from botocore.config import Config

from ..config import (
    R2_ACCESS_KEY_ID,
    R2_ACCOUNT_ID,
    R2_BUCKET_NAME,
    R2_PUBLIC_URL,
    R2_SECRET_ACCESS_KEY,
)

logger = logging.getLogger(__name__)


def get_r2_client():
    """Get configured boto3 client for Cloudflare R2"""
    return boto3.client(
        "s3",
        endpoint_url=f"https://{R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=R2_ACCESS_KEY_ID,
        aws_secret_access_key=R2_SECRET_ACCESS_KEY,
        config=Config(signature_version="s3v4"),
        region_name="auto",
    )


def get_public_url(key: str) -> str:
    """Public CDN URL for an object key"""
    return f"{R2_PUBLIC_URL.rstrip('/')}/{key}"


def upload_object(key: str, body: bytes, content_type: str, cache: bool = False) -> str:
    """Upload bytes to R2 and return the public URL"""
    put_object_params = {
        "Bucket": R2_BUCKET_NAME,
        "Key": key,
        "Body": body,
        "ContentType": content_type,
    }
    if cache:
        put_object_params["CacheControl"] = "public, max-age=31536000"

    r2 = get_r2_client()
    r2.put_object(**put_object_params)
    logger.info(f"✅ Uploaded to R2: {key} ({len(body)} bytes)")
    return get_public_url(key)


def delete_object(key: Optional[str]) -> bool:
    """
    Delete an object from R2.
    Best effort: failures are logged and reported as False, never raised.
    """
    if not key:
        return False
    try:
        get_r2_client().delete_object(Bucket=R2_BUCKET_NAME, Key=key)
        logger.info(f"🗑️ Deleted R2 object: {key}")
        return True
    except Exception as e:
        logger.error(f"❌ Failed to delete R2 object {key}: {str(e)}")
        return False
