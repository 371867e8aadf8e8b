"""Club membership schemas."""

import uuid
from datetime import datetime
from typing import Optional

from libs.common.pagination import Pagination
from pydantic import BaseModel, ConfigDict
from services.members_service.models import ClubRole
from services.members_service.schemas.user import UserSummary


class MembershipRequest(BaseModel):
    """Body of ``POST /clubs/{id}/members``.

    Only read when the caller is a club OWNER/ADMIN; a plain member's
    request always acts on their own membership.
    """

    user_id: Optional[uuid.UUID] = None
    role: Optional[ClubRole] = None


class MembershipResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    club_id: uuid.UUID
    role: ClubRole
    joined_at: datetime
    is_active: bool
    user: UserSummary


class MembershipEnvelope(BaseModel):
    data: MembershipResponse
    message: str


class MemberListResponse(BaseModel):
    data: list[MembershipResponse]
    pagination: Pagination


class MessageResponse(BaseModel):
    message: str
