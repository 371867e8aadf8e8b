"""Shared club equipment and its checkout ledger."""

import uuid
from datetime import date, datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base, enum_values
from services.equipment_service.models.enums import (
    EquipmentCondition,
    EquipmentSize,
    EquipmentType,
)
from services.members_service.models import User
from sqlalchemy import Boolean, Date, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Index, String, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

_condition_enum = SAEnum(
    EquipmentCondition,
    values_callable=enum_values,
    name="equipment_condition_enum",
)


class Equipment(Base):
    """A physical item owned by a club.

    ``is_available`` mirrors "has no open checkout" and is only written by
    the checkout and return transitions.
    """

    __tablename__ = "equipment"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    club_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("clubs.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    type: Mapped[EquipmentType] = mapped_column(
        SAEnum(EquipmentType, values_callable=enum_values, name="equipment_type_enum"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    size: Mapped[Optional[EquipmentSize]] = mapped_column(
        SAEnum(EquipmentSize, values_callable=enum_values, name="equipment_size_enum"),
        nullable=True,
    )
    condition: Mapped[EquipmentCondition] = mapped_column(
        _condition_enum, nullable=False, default=EquipmentCondition.GOOD
    )
    is_available: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true", nullable=False
    )

    serial_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    purchase_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    def __repr__(self):
        return f"<Equipment {self.type} {self.name!r}>"


class EquipmentCheckout(Base):
    """One borrowing of one item. ``returned_at IS NULL`` means still out."""

    __tablename__ = "equipment_checkouts"
    __table_args__ = (
        # At most one open checkout per item.
        Index(
            "uq_equipment_checkouts_open",
            "equipment_id",
            unique=True,
            postgresql_where=text("returned_at IS NULL"),
            sqlite_where=text("returned_at IS NULL"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    equipment_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("equipment.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    checked_out_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    due_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    returned_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    condition_out: Mapped[EquipmentCondition] = mapped_column(
        _condition_enum, nullable=False
    )
    condition_in: Mapped[Optional[EquipmentCondition]] = mapped_column(
        _condition_enum, nullable=True
    )
    photo_out_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    photo_in_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    equipment: Mapped[Equipment] = relationship(Equipment, lazy="selectin")
    user: Mapped[User] = relationship(User, lazy="selectin")

    @property
    def is_open(self) -> bool:
        return self.returned_at is None

    def __repr__(self):
        state = "open" if self.is_open else "returned"
        return f"<EquipmentCheckout equipment={self.equipment_id} {state}>"
