import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from ..auth import get_current_user
from ..models import User
from ..services import image_host

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Upload"])

AVATAR_MAX_SIZE = 5 * 1024 * 1024  # 5MB
ACCEPTED_IMAGE_TYPES = ["image/jpeg", "image/png", "image/webp"]


@router.post("/upload-image")
async def upload_image(
    image: UploadFile = File(None),
    user: User = Depends(get_current_user),
):
    """Upload an avatar or portfolio image to ImgBB and return its URL."""
    if not image:
        raise HTTPException(status_code=400, detail="No image provided")

    contents = await image.read()

    if len(contents) > AVATAR_MAX_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"File size exceeds {AVATAR_MAX_SIZE // (1024 * 1024)}MB limit",
        )

    if image.content_type not in ACCEPTED_IMAGE_TYPES:
        raise HTTPException(
            status_code=400,
            detail="Invalid file type. Only JPEG, PNG and WebP are supported",
        )

    logger.info(f"📤 Uploading image for user {user.id} ({len(contents)} bytes)")
    try:
        url = await image_host.upload_image(contents, image.filename or "image", image.content_type)
    except image_host.ImageHostError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    except Exception as e:
        logger.error(f"❌ Error in image upload: {str(e)}")
        raise HTTPException(status_code=500, detail="An unexpected error occurred") from e

    return {"url": url}
