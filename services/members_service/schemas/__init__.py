"""Members Service schemas package."""

from services.members_service.schemas.membership import (  # noqa: F401
    MemberListResponse,
    MembershipEnvelope,
    MembershipRequest,
    MembershipResponse,
    MessageResponse,
)
from services.members_service.schemas.user import (  # noqa: F401
    UserProfileUpdate,
    UserResponse,
    UserSummary,
)
