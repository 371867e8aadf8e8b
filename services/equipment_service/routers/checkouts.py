"""Checkout, return and history routes for a single item."""

import uuid

from fastapi import APIRouter, Depends, Query, status
from libs.common.config import get_settings
from libs.db.session import get_async_db
from services.equipment_service.schemas import (
    CheckoutEnvelope,
    CheckoutHistory,
    CheckoutHistoryResponse,
    CheckoutRequest,
    CheckoutResponse,
    EquipmentRef,
    ReturnRequest,
)
from services.equipment_service.services import checkout_ops
from services.members_service.models import User
from services.members_service.services.users import get_caller
from sqlalchemy.ext.asyncio import AsyncSession

settings = get_settings()
router = APIRouter(prefix="/equipment/{equipment_id}", tags=["checkouts"])


@router.post(
    "/checkout", response_model=CheckoutEnvelope, status_code=status.HTTP_201_CREATED
)
async def checkout_equipment(
    equipment_id: uuid.UUID,
    checkout_in: CheckoutRequest,
    caller: User = Depends(get_caller),
    db: AsyncSession = Depends(get_async_db),
):
    checkout = await checkout_ops.checkout_equipment(
        db, equipment_id, caller, checkout_in
    )
    return CheckoutEnvelope(
        data=CheckoutResponse.model_validate(checkout),
        message="Equipment checked out successfully",
    )


@router.post("/return", response_model=CheckoutEnvelope)
async def return_equipment(
    equipment_id: uuid.UUID,
    return_in: ReturnRequest,
    caller: User = Depends(get_caller),
    db: AsyncSession = Depends(get_async_db),
):
    """Return the item. Open to the borrower and club equipment admins."""
    checkout = await checkout_ops.return_equipment(db, equipment_id, caller, return_in)
    return CheckoutEnvelope(
        data=CheckoutResponse.model_validate(checkout),
        message="Equipment returned successfully",
    )


@router.get("/history", response_model=CheckoutHistoryResponse)
async def equipment_history(
    equipment_id: uuid.UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_async_db),
):
    equipment, checkouts, stats, pagination = await checkout_ops.checkout_history(
        db, equipment_id, page=page, limit=limit
    )
    return CheckoutHistoryResponse(
        data=CheckoutHistory(
            equipment=EquipmentRef.model_validate(equipment),
            checkouts=[CheckoutResponse.model_validate(c) for c in checkouts],
            stats=stats,
        ),
        pagination=pagination,
    )
