"""Project domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_email

MEMBER_ROLES = {"viewer", "reviewer", "collaborator"}


class ProjectCreate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    clientId: Optional[str] = None
    deadline: Optional[datetime] = None


class ProjectUpdate(BaseModel):
    """Partial update; explicitly sending null clears clientId, deadline or description"""

    name: Optional[str] = None
    description: Optional[str] = None
    deadline: Optional[datetime] = None
    clientId: Optional[str] = None
    passwordProtected: Optional[bool] = None
    accessPassword: Optional[str] = None


class ReviewLinkCreate(BaseModel):
    mediaId: Optional[str] = None
    title: Optional[str] = None
    password: Optional[str] = None
    expiresAt: Optional[datetime] = None


class ReviewLinkToggle(BaseModel):
    # Any so a non-boolean value reaches the explicit check instead of being coerced
    isActive: Any = None


class MemberInvite(BaseModel):
    email: Optional[str] = None
    role: str = "viewer"

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return validate_email(v)

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: str) -> str:
        if v not in MEMBER_ROLES:
            raise ValueError("role must be one of viewer, reviewer, collaborator")
        return v


class MemberUpdate(BaseModel):
    role: Optional[str] = None

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in MEMBER_ROLES:
            raise ValueError("role must be one of viewer, reviewer, collaborator")
        return v


# ============================================================================
# RESPONSES
# ============================================================================


class ProjectResponse(BaseModel):
    id: str
    editor_id: str
    client_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    deadline: Optional[datetime] = None
    status: str
    notifications_enabled: bool
    password_protected: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MediaResponse(BaseModel):
    id: str
    project_id: str
    parent_media_id: Optional[str] = None
    folder_id: Optional[str] = None
    filename: str
    original_filename: str
    file_type: str
    mime_type: str
    file_size: int
    r2_key: str
    r2_url: Optional[str] = None
    thumbnail_r2_url: Optional[str] = None
    version_number: int
    is_current_version: bool
    status: str
    uploaded_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FolderResponse(BaseModel):
    id: str
    project_id: str
    parent_folder_id: Optional[str] = None
    name: str
    color: str
    display_order: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ReviewLinkResponse(BaseModel):
    id: str
    project_id: str
    media_id: str
    link_token: str
    title: Optional[str] = None
    is_active: bool
    requires_password: bool
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MemberResponse(BaseModel):
    id: str
    project_id: str
    user_id: str
    role: str
    status: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InvitationResponse(BaseModel):
    id: str
    project_id: str
    email: str
    role: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
