"""Members Service models package.

Re-exports all models and enums so that:
  - ``from services.members_service.models import ClubMember`` works
  - Alembic env.py and the test suite register every table on import
"""

from services.members_service.models.club_member import ClubMember  # noqa: F401
from services.members_service.models.enums import (  # noqa: F401
    ADMIN_ROLES,
    EQUIPMENT_ADMIN_ROLES,
    ROLE_RANK,
    ClubRole,
)
from services.members_service.models.user import User  # noqa: F401

__all__ = [
    "ADMIN_ROLES",
    "EQUIPMENT_ADMIN_ROLES",
    "ROLE_RANK",
    "ClubRole",
    "ClubMember",
    "User",
]
