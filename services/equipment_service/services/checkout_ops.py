"""Equipment checkout and return.

An item is checked out exactly when it has a checkout row with
``returned_at IS NULL``. ``Equipment.is_available`` is kept in step with
that row inside the same transaction, but decisions are always made from
the row itself.
"""

import uuid
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.common.errors import AuthorizationError, ConflictError, NotFoundError
from libs.common.logging import get_logger
from libs.common.pagination import Pagination, offset_for, paginate
from libs.db.session import atomic
from services.equipment_service.models import Equipment, EquipmentCheckout
from services.equipment_service.schemas import (
    CheckoutRequest,
    CheckoutStats,
    ReturnRequest,
)
from services.members_service.models import EQUIPMENT_ADMIN_ROLES, User
from services.members_service.services.membership import (
    has_role,
    load_caller_membership,
)
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def get_equipment_or_404(
    db: AsyncSession, equipment_id: uuid.UUID, for_update: bool = False
) -> Equipment:
    query = select(Equipment).where(Equipment.id == equipment_id)
    if for_update:
        query = query.with_for_update()
    equipment = await db.scalar(query)
    if equipment is None:
        raise NotFoundError("Equipment not found")
    return equipment


async def get_open_checkout(
    db: AsyncSession, equipment_id: uuid.UUID
) -> Optional[EquipmentCheckout]:
    return await db.scalar(
        select(EquipmentCheckout)
        .where(
            EquipmentCheckout.equipment_id == equipment_id,
            EquipmentCheckout.returned_at.is_(None),
        )
        .execution_options(populate_existing=True)
    )


async def checkout_equipment(
    db: AsyncSession,
    equipment_id: uuid.UUID,
    caller: User,
    checkout_in: CheckoutRequest,
) -> EquipmentCheckout:
    """Open a checkout for an active club member.

    The equipment row is locked for the rest of the transaction so two
    concurrent requests cannot both pass the open-checkout check; the
    partial unique index on open checkouts is the backstop.
    """
    async with atomic(db):
        equipment = await get_equipment_or_404(db, equipment_id, for_update=True)

        if await get_open_checkout(db, equipment_id) is not None:
            raise ConflictError("Equipment is already checked out")

        if await load_caller_membership(db, equipment.club_id, caller.id) is None:
            raise AuthorizationError(
                "You must be an active member of the club to check out equipment"
            )

        checkout = EquipmentCheckout(
            equipment_id=equipment.id,
            user_id=caller.id,
            due_date=checkout_in.due_date,
            condition_out=checkout_in.condition_out,
            photo_out_url=(
                str(checkout_in.photo_out_url) if checkout_in.photo_out_url else None
            ),
            notes=checkout_in.notes,
        )
        db.add(checkout)
        equipment.is_available = False

    logger.info("Equipment %s checked out by user %s", equipment_id, caller.id)
    return await _reload(db, checkout.id)


async def return_equipment(
    db: AsyncSession,
    equipment_id: uuid.UUID,
    caller: User,
    return_in: ReturnRequest,
) -> EquipmentCheckout:
    """Close the open checkout and make the item available again.

    Allowed for the borrower and for club OWNER/ADMIN/EQUIPMENT_MANAGER.
    Fails with a conflict, writing nothing, when nothing is checked out.
    """
    async with atomic(db):
        equipment = await get_equipment_or_404(db, equipment_id, for_update=True)

        checkout = await get_open_checkout(db, equipment_id)
        if checkout is None:
            raise ConflictError("Equipment is not currently checked out")

        if checkout.user_id != caller.id and not await has_role(
            db, equipment.club_id, caller.id, EQUIPMENT_ADMIN_ROLES
        ):
            raise AuthorizationError(
                "You do not have permission to return this equipment"
            )

        checkout.returned_at = utc_now()
        checkout.condition_in = return_in.condition_in
        checkout.photo_in_url = (
            str(return_in.photo_in_url) if return_in.photo_in_url else None
        )
        if return_in.notes:
            checkout.notes = f"{checkout.notes or ''}\nReturn: {return_in.notes}".strip()

        equipment.is_available = True
        equipment.condition = return_in.condition_in

    logger.info(
        "Equipment %s returned (%s) by user %s",
        equipment_id,
        return_in.condition_in.value,
        caller.id,
    )
    return await _reload(db, checkout.id)


async def checkout_history(
    db: AsyncSession, equipment_id: uuid.UUID, page: int = 1, limit: int = 20
) -> tuple[Equipment, list[EquipmentCheckout], CheckoutStats, Pagination]:
    """Checkouts newest first, with lifetime counts for the item."""
    equipment = await get_equipment_or_404(db, equipment_id)

    result = await db.execute(
        select(EquipmentCheckout)
        .where(EquipmentCheckout.equipment_id == equipment_id)
        .order_by(EquipmentCheckout.checked_out_at.desc(), EquipmentCheckout.id)
        .offset(offset_for(page, limit))
        .limit(limit)
    )
    checkouts = list(result.scalars().all())

    base = select(func.count(EquipmentCheckout.id)).where(
        EquipmentCheckout.equipment_id == equipment_id
    )
    total = await db.scalar(base) or 0
    completed = await db.scalar(
        base.where(EquipmentCheckout.returned_at.is_not(None))
    ) or 0
    overdue = await db.scalar(
        base.where(
            EquipmentCheckout.returned_at.is_(None),
            EquipmentCheckout.due_date < utc_now(),
        )
    ) or 0

    stats = CheckoutStats(
        total_checkouts=total,
        completed_checkouts=completed,
        overdue_checkouts=overdue,
        currently_checked_out=total - completed,
    )
    return equipment, checkouts, stats, paginate(page, limit, total)


async def _reload(db: AsyncSession, checkout_id: uuid.UUID) -> EquipmentCheckout:
    result = await db.execute(
        select(EquipmentCheckout)
        .where(EquipmentCheckout.id == checkout_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()
