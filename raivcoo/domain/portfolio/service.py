"""Portfolio service - editor profiles, public portfolio lookup and view tracking"""

import logging
import math
import re
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import EditorProfile, User
from ...services import geolocation
from ...shared.validators import clean_optional
from .referrer import get_device_type, get_referrer_data
from .repository import PortfolioRepository
from .schemas import ProfileUpdate

logger = logging.getLogger(__name__)

INITIAL_VIEW_DURATION = 10  # seconds

RESERVED_DISPLAY_NAMES = {
    "admin",
    "official",
    "support",
    "help",
    "mod",
    "moderator",
    "editor",
    "developers",
    "edit",
}


def validate_display_name(display_name: str) -> list[str]:
    """Return every rule the (already lowercased) display name breaks"""
    errors = []
    if len(display_name) < 3 or len(display_name) > 20:
        errors.append("Display name must be between 3 and 20 characters.")
    if not re.fullmatch(r"[a-z0-9_]+", display_name):
        errors.append("Display name can only contain letters, numbers, and underscores.")
    if "__" in display_name:
        errors.append("Display name cannot contain consecutive underscores.")
    if display_name.startswith("_") or display_name.endswith("_"):
        errors.append("Display name cannot start or end with an underscore.")
    if display_name.isdigit():
        errors.append("Display name cannot be all numbers.")
    if display_name in RESERVED_DISPLAY_NAMES:
        errors.append("This display name is reserved and cannot be used.")
    return errors


class PortfolioService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = PortfolioRepository()

    # ========================================================================
    # PROFILE
    # ========================================================================

    def get_profile(self, user: User) -> EditorProfile:
        profile = self.repo.get_profile_by_user(self.db, user.id)
        if not profile:
            raise HTTPException(status_code=404, detail="Editor profile not found")
        return profile

    def save_profile(self, data: ProfileUpdate, user: User) -> EditorProfile:
        """Create the caller's profile on first save, update it afterwards"""
        profile = self.repo.get_profile_by_user(self.db, user.id)
        is_new = profile is None
        if is_new:
            profile = EditorProfile(user_id=user.id, email=user.email)

        updates = data.model_dump(exclude_unset=True)

        if "display_name" in updates:
            display_name = (clean_optional(updates.pop("display_name")) or "").lower()
            errors = validate_display_name(display_name)
            if errors:
                raise HTTPException(status_code=400, detail=" ".join(errors))
            existing = self.repo.get_profile_by_display_name(self.db, display_name)
            if existing and existing.user_id != user.id:
                raise HTTPException(status_code=409, detail="Display name is already taken")
            profile.display_name = display_name

        for field, value in updates.items():
            if field == "is_published" and value is None:
                continue
            if isinstance(value, str):
                value = clean_optional(value)
            setattr(profile, field, value)

        try:
            profile = self.repo.save_profile(self.db, profile)
        except IntegrityError as e:
            # Lost a race for the same display name
            self.db.rollback()
            logger.warning(f"⚠️ Display name conflict for user {user.id}: {str(e)}")
            raise HTTPException(status_code=409, detail="Display name is already taken") from e

        logger.info(f"👤 Profile {'created' if is_new else 'updated'} for user {user.id}")
        return profile

    def get_public_profile(self, display_name: str) -> EditorProfile:
        profile = self.repo.get_profile_by_display_name(self.db, display_name)
        if not profile or not profile.is_published:
            raise HTTPException(status_code=404, detail="Portfolio not found")
        return profile

    # ========================================================================
    # VIEW TRACKING
    # ========================================================================

    async def track_view(
        self,
        profile_id: Optional[str],
        referrer_url: Optional[str],
        host: str,
        ip: str,
        user_agent: Optional[str],
    ) -> str:
        if not profile_id:
            raise HTTPException(status_code=400, detail="profileId is required")
        if not self.repo.get_profile_by_id(self.db, profile_id):
            raise HTTPException(status_code=404, detail="Profile not found")

        location = await geolocation.get_location_data(ip)
        view = self.repo.create_view(
            self.db,
            profile_id=profile_id,
            viewer_country=location["country"],
            viewer_country_code=location["country_code"],
            viewer_city=location["city"],
            device_type=get_device_type(user_agent),
            ip=ip,
            duration=INITIAL_VIEW_DURATION,
            referrer=get_referrer_data(referrer_url, host),
        )
        logger.debug(f"📈 View {view.id} recorded for profile {profile_id}")
        return view.id

    def update_view_duration(self, view_id: str, duration_ms: Optional[float]) -> None:
        if duration_ms is None or duration_ms < 0:
            raise HTTPException(status_code=400, detail="duration is required")

        view = self.repo.get_view(self.db, view_id)
        if not view:
            raise HTTPException(status_code=404, detail="View not found")

        view.duration = math.floor(duration_ms / 1000)
        view.updated_at = datetime.utcnow()
        self.db.commit()
