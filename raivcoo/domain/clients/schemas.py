"""Client domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_email


class ClientCreate(BaseModel):
    """Schema for creating or updating a client"""

    name: Optional[str] = None
    email: Optional[str] = None
    company: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return validate_email(v)


class ClientResponse(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    company: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ClientProjectSummary(BaseModel):
    """Project row shown on the client detail page"""

    id: str
    name: str
    status: str
    deadline: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
