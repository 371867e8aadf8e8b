"""Enum definitions for members service models."""

import enum


class ClubRole(str, enum.Enum):
    """Club roles, most privileged first. Declaration order is the rank."""

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    COACH = "COACH"
    EQUIPMENT_MANAGER = "EQUIPMENT_MANAGER"
    TREASURER = "TREASURER"
    SESSION_COORDINATOR = "SESSION_COORDINATOR"
    MEMBER = "MEMBER"


ROLE_RANK = {role: rank for rank, role in enumerate(ClubRole)}

# Roles allowed to manage the club and its membership.
ADMIN_ROLES = frozenset({ClubRole.OWNER, ClubRole.ADMIN})

# Roles allowed to manage the club's equipment and close any checkout.
EQUIPMENT_ADMIN_ROLES = frozenset(
    {ClubRole.OWNER, ClubRole.ADMIN, ClubRole.EQUIPMENT_MANAGER}
)
