"""Club membership rows: one per (user, club) pair, never hard-deleted."""

import uuid
from datetime import datetime

from libs.common.datetime_utils import utc_now
from libs.db.base import Base, enum_values
from services.members_service.models.enums import ClubRole
from sqlalchemy import Boolean, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .user import User


class ClubMember(Base):
    """A user's role within a club.

    Leaving sets ``is_active`` to False and rejoining flips it back, so the
    row (and its ``joined_at``) is kept as history.
    """

    __tablename__ = "club_members"
    __table_args__ = (
        UniqueConstraint("user_id", "club_id", name="uq_club_members_user_club"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    club_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("clubs.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    role: Mapped[ClubRole] = mapped_column(
        SAEnum(ClubRole, values_callable=enum_values, name="club_role_enum"),
        nullable=False,
        default=ClubRole.MEMBER,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    user: Mapped[User] = relationship(User, lazy="selectin")

    def __repr__(self):
        return f"<ClubMember user={self.user_id} club={self.club_id} role={self.role}>"
