"""Portfolio router - profile management, public portfolio pages and view tracking"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...rate_limiter import create_rate_limiter, get_client_ip
from .schemas import (
    ProfileResponse,
    ProfileUpdate,
    PublicProfileResponse,
    TrackViewCreate,
    TrackViewUpdate,
)
from .service import PortfolioService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Portfolio"])

track_view_limit = create_rate_limiter(limit=60, window_seconds=60, key_prefix="track_view")


def get_portfolio_service(db: Session = Depends(get_db)) -> PortfolioService:
    """Dependency injection for PortfolioService"""
    return PortfolioService(db)


# ============================================================================
# PROFILE (authenticated)
# ============================================================================


@router.get("/profile")
async def get_profile(
    user: User = Depends(get_current_user),
    service: PortfolioService = Depends(get_portfolio_service),
):
    return {"profile": ProfileResponse.model_validate(service.get_profile(user))}


@router.put("/profile")
async def save_profile(
    data: ProfileUpdate,
    user: User = Depends(get_current_user),
    service: PortfolioService = Depends(get_portfolio_service),
):
    profile = service.save_profile(data, user)
    return {
        "message": "Profile saved successfully",
        "profile": ProfileResponse.model_validate(profile),
    }


# ============================================================================
# PUBLIC ENDPOINTS
# ============================================================================


@router.get("/portfolio/{display_name}")
async def get_portfolio(
    display_name: str,
    service: PortfolioService = Depends(get_portfolio_service),
):
    profile = service.get_public_profile(display_name)
    return {"profile": PublicProfileResponse.model_validate(profile)}


@router.post("/track-view")
async def track_view(
    data: TrackViewCreate,
    request: Request,
    _: None = Depends(track_view_limit),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Record a portfolio visit; the client forwards document.referrer as originalReferrer"""
    forwarded = request.headers.get("X-Forwarded-For")
    ip = get_client_ip(request) if forwarded else "Unknown"

    view_id = await service.track_view(
        data.profileId,
        data.originalReferrer or request.headers.get("Referer"),
        request.headers.get("Host", ""),
        ip,
        request.headers.get("User-Agent"),
    )
    return {"success": True, "viewId": view_id}


@router.patch("/track-view/{view_id}")
async def update_view_duration(
    view_id: str,
    data: TrackViewUpdate,
    service: PortfolioService = Depends(get_portfolio_service),
):
    service.update_view_duration(view_id, data.duration)
    return {"success": True}
