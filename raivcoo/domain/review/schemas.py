"""Review domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class VerifyPasswordRequest(BaseModel):
    token: Optional[str] = None
    password: Optional[str] = None


class PublicReviewLink(BaseModel):
    """What a reviewer may see of a link (never the password hash)"""

    id: str
    project_id: str
    media_id: str
    link_token: str
    title: Optional[str] = None
    requires_password: bool
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PublicMedia(BaseModel):
    id: str
    project_id: str
    original_filename: str
    file_type: str
    mime_type: str
    file_size: int
    r2_url: Optional[str] = None
    thumbnail_r2_url: Optional[str] = None
    version_number: int
    status: str
    uploaded_at: Optional[datetime] = None

    class Config:
        from_attributes = True
