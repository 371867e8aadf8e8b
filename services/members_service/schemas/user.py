"""User profile schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl


class UserSummary(BaseModel):
    """Short user projection embedded in membership, review and checkout payloads."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    image_url: Optional[str] = None


class UserProfileUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=2, max_length=50)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None
    image_url: Optional[HttpUrl] = None


class UserResponse(UserSummary):
    auth_id: str
    email: Optional[str] = None
    created_at: datetime
    updated_at: datetime
