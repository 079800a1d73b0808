"""Portfolio domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel


class ProfileUpdate(BaseModel):
    """Create-or-update body for the caller's editor profile; unset fields are left alone"""

    display_name: Optional[str] = None
    full_name: Optional[str] = None
    title: Optional[str] = None
    country: Optional[str] = None
    biography: Optional[str] = None
    avatar_url: Optional[str] = None
    skills: Optional[list[str]] = None
    languages: Optional[list[dict[str, Any]]] = None
    is_published: Optional[bool] = None


class ProfileResponse(BaseModel):
    id: str
    user_id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    display_name: Optional[str] = None
    title: Optional[str] = None
    country: Optional[str] = None
    biography: Optional[str] = None
    avatar_url: Optional[str] = None
    skills: Optional[list] = None
    languages: Optional[list] = None
    is_published: bool
    is_verified: bool
    account_status: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PublicProfileResponse(BaseModel):
    """Portfolio page payload; leaves out the account email and status"""

    id: str
    full_name: Optional[str] = None
    display_name: Optional[str] = None
    title: Optional[str] = None
    country: Optional[str] = None
    biography: Optional[str] = None
    avatar_url: Optional[str] = None
    skills: Optional[list] = None
    languages: Optional[list] = None
    is_verified: bool

    class Config:
        from_attributes = True


class TrackViewCreate(BaseModel):
    profileId: Optional[str] = None
    originalReferrer: Optional[str] = None


class TrackViewUpdate(BaseModel):
    duration: Optional[float] = None  # milliseconds
