"""Club equipment inventory: list, create, read, update, delete."""

import uuid
from typing import Optional

from libs.common.errors import AuthorizationError, ConflictError, NotFoundError
from libs.common.logging import get_logger
from libs.common.pagination import Pagination, offset_for, paginate
from libs.db.session import atomic
from services.clubs_service.models import Club
from services.equipment_service.models import (
    Equipment,
    EquipmentCheckout,
    EquipmentCondition,
    EquipmentSize,
    EquipmentType,
)
from services.equipment_service.schemas import (
    CurrentCheckout,
    EquipmentCreate,
    EquipmentResponse,
    EquipmentUpdate,
)
from services.equipment_service.services.checkout_ops import (
    get_equipment_or_404,
    get_open_checkout,
)
from services.members_service.models import (
    ADMIN_ROLES,
    EQUIPMENT_ADMIN_ROLES,
    User,
)
from services.members_service.services.membership import has_role
from sqlalchemy import delete, exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


def to_response(
    equipment: Equipment, open_checkout: Optional[EquipmentCheckout]
) -> EquipmentResponse:
    response = EquipmentResponse.model_validate(equipment)
    # Availability is reported from the checkout ledger, not the mirror column.
    response.is_available = open_checkout is None
    if open_checkout is not None:
        response.current_checkout = CurrentCheckout.model_validate(open_checkout)
    return response


def _column_values(data: dict) -> dict:
    if data.get("image_url") is not None:
        data["image_url"] = str(data["image_url"])
    return data


def _open_checkout_exists():
    return exists().where(
        EquipmentCheckout.equipment_id == Equipment.id,
        EquipmentCheckout.returned_at.is_(None),
    )


async def _require_club(db: AsyncSession, club_id: uuid.UUID) -> Club:
    club = await db.get(Club, club_id)
    if club is None:
        raise NotFoundError("Club not found")
    return club


async def list_equipment(
    db: AsyncSession,
    club_id: uuid.UUID,
    equipment_type: Optional[EquipmentType] = None,
    size: Optional[EquipmentSize] = None,
    condition: Optional[EquipmentCondition] = None,
    is_available: Optional[bool] = None,
    page: int = 1,
    limit: int = 20,
) -> tuple[list[EquipmentResponse], Pagination]:
    await _require_club(db, club_id)

    query = select(Equipment).where(Equipment.club_id == club_id)
    if equipment_type is not None:
        query = query.where(Equipment.type == equipment_type)
    if size is not None:
        query = query.where(Equipment.size == size)
    if condition is not None:
        query = query.where(Equipment.condition == condition)
    if is_available is True:
        query = query.where(~_open_checkout_exists())
    elif is_available is False:
        query = query.where(_open_checkout_exists())

    total = await db.scalar(select(func.count()).select_from(query.subquery()))
    result = await db.execute(
        query.order_by(Equipment.type, Equipment.name, Equipment.id)
        .offset(offset_for(page, limit))
        .limit(limit)
    )
    items = list(result.scalars().all())

    open_checkouts = {}
    if items:
        rows = await db.execute(
            select(EquipmentCheckout).where(
                EquipmentCheckout.equipment_id.in_([e.id for e in items]),
                EquipmentCheckout.returned_at.is_(None),
            )
        )
        open_checkouts = {c.equipment_id: c for c in rows.scalars().all()}

    return (
        [to_response(e, open_checkouts.get(e.id)) for e in items],
        paginate(page, limit, total or 0),
    )


async def create_equipment(
    db: AsyncSession, club_id: uuid.UUID, caller: User, equipment_in: EquipmentCreate
) -> Equipment:
    await _require_club(db, club_id)
    if not await has_role(db, club_id, caller.id, EQUIPMENT_ADMIN_ROLES):
        raise AuthorizationError("You do not have permission to add equipment")

    async with atomic(db):
        equipment = Equipment(
            club_id=club_id,
            is_available=True,
            **_column_values(equipment_in.model_dump()),
        )
        db.add(equipment)

    logger.info("Equipment %s added to club %s", equipment.id, club_id)
    return equipment


async def get_equipment(db: AsyncSession, equipment_id: uuid.UUID) -> EquipmentResponse:
    equipment = await get_equipment_or_404(db, equipment_id)
    return to_response(equipment, await get_open_checkout(db, equipment_id))


async def update_equipment(
    db: AsyncSession,
    equipment_id: uuid.UUID,
    caller: User,
    equipment_in: EquipmentUpdate,
) -> EquipmentResponse:
    equipment = await get_equipment_or_404(db, equipment_id)
    if not await has_role(db, equipment.club_id, caller.id, EQUIPMENT_ADMIN_ROLES):
        raise AuthorizationError("You do not have permission to edit this equipment")

    update_data = _column_values(equipment_in.model_dump(exclude_unset=True))

    async with atomic(db):
        equipment = await get_equipment_or_404(db, equipment_id, for_update=True)
        open_checkout = await get_open_checkout(db, equipment_id)
        if (
            open_checkout is not None
            and "condition" in update_data
            and update_data["condition"] != equipment.condition
        ):
            raise ConflictError(
                "Condition cannot be changed while the equipment is checked out"
            )
        for field, value in update_data.items():
            setattr(equipment, field, value)

    await db.refresh(equipment)
    return to_response(equipment, open_checkout)


async def delete_equipment(
    db: AsyncSession, equipment_id: uuid.UUID, caller: User
) -> None:
    equipment = await get_equipment_or_404(db, equipment_id)
    if not await has_role(db, equipment.club_id, caller.id, ADMIN_ROLES):
        raise AuthorizationError("Only club owners and admins can delete equipment")

    async with atomic(db):
        if await get_open_checkout(db, equipment_id) is not None:
            raise ConflictError("Equipment is checked out and cannot be deleted")
        await db.execute(
            delete(EquipmentCheckout).where(
                EquipmentCheckout.equipment_id == equipment_id
            )
        )
        await db.execute(delete(Equipment).where(Equipment.id == equipment_id))

    logger.info("Equipment %s deleted by user %s", equipment_id, caller.id)
