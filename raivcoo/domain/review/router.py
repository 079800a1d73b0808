"""Public review router - no authentication, access is by link token"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from ...database import get_db
from ...rate_limiter import create_rate_limiter
from .schemas import PublicMedia, PublicReviewLink, VerifyPasswordRequest
from .service import ReviewService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/review", tags=["Review"])

verify_password_limit = create_rate_limiter(
    limit=10, window_seconds=60, key_prefix="review_verify_password"
)


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    return ReviewService(db)


@router.post("/verify-password")
async def verify_password(
    data: VerifyPasswordRequest,
    _: None = Depends(verify_password_limit),
    service: ReviewService = Depends(get_review_service),
):
    service.verify_password(data.token, data.password)
    return {"success": True}


@router.get("/{token}")
async def get_review(
    token: str,
    x_review_password: Optional[str] = Header(None),
    service: ReviewService = Depends(get_review_service),
):
    link, media = service.get_review(token, x_review_password)
    return {
        "reviewLink": PublicReviewLink.model_validate(link),
        "media": PublicMedia.model_validate(media),
    }
