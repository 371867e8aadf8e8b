"""Equipment inventory routes."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from libs.common.config import get_settings
from libs.db.session import get_async_db
from services.equipment_service.models import (
    EquipmentCondition,
    EquipmentSize,
    EquipmentType,
)
from services.equipment_service.schemas import (
    EquipmentCreate,
    EquipmentEnvelope,
    EquipmentListResponse,
    EquipmentUpdate,
    MessageResponse,
)
from services.equipment_service.services import equipment_ops
from services.members_service.models import User
from services.members_service.services.users import get_caller
from sqlalchemy.ext.asyncio import AsyncSession

settings = get_settings()
club_router = APIRouter(prefix="/clubs/{club_id}/equipment", tags=["equipment"])
router = APIRouter(prefix="/equipment", tags=["equipment"])


@club_router.get("", response_model=EquipmentListResponse)
async def list_club_equipment(
    club_id: uuid.UUID,
    equipment_type: Optional[EquipmentType] = Query(None, alias="type"),
    size: Optional[EquipmentSize] = None,
    condition: Optional[EquipmentCondition] = None,
    is_available: Optional[bool] = Query(None, alias="isAvailable"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_async_db),
):
    items, pagination = await equipment_ops.list_equipment(
        db,
        club_id,
        equipment_type=equipment_type,
        size=size,
        condition=condition,
        is_available=is_available,
        page=page,
        limit=limit,
    )
    return EquipmentListResponse(data=items, pagination=pagination)


@club_router.post(
    "", response_model=EquipmentEnvelope, status_code=status.HTTP_201_CREATED
)
async def add_club_equipment(
    club_id: uuid.UUID,
    equipment_in: EquipmentCreate,
    caller: User = Depends(get_caller),
    db: AsyncSession = Depends(get_async_db),
):
    """Add an item to the club inventory (OWNER, ADMIN or EQUIPMENT_MANAGER)."""
    equipment = await equipment_ops.create_equipment(db, club_id, caller, equipment_in)
    return EquipmentEnvelope(
        data=equipment_ops.to_response(equipment, None),
        message="Equipment added successfully",
    )


@router.get("/{equipment_id}", response_model=EquipmentEnvelope)
async def get_equipment(
    equipment_id: uuid.UUID, db: AsyncSession = Depends(get_async_db)
):
    return EquipmentEnvelope(
        data=await equipment_ops.get_equipment(db, equipment_id), message="OK"
    )


@router.patch("/{equipment_id}", response_model=EquipmentEnvelope)
async def update_equipment(
    equipment_id: uuid.UUID,
    equipment_in: EquipmentUpdate,
    caller: User = Depends(get_caller),
    db: AsyncSession = Depends(get_async_db),
):
    return EquipmentEnvelope(
        data=await equipment_ops.update_equipment(
            db, equipment_id, caller, equipment_in
        ),
        message="Equipment updated successfully",
    )


@router.delete("/{equipment_id}", response_model=MessageResponse)
async def delete_equipment(
    equipment_id: uuid.UUID,
    caller: User = Depends(get_caller),
    db: AsyncSession = Depends(get_async_db),
):
    await equipment_ops.delete_equipment(db, equipment_id, caller)
    return MessageResponse(message="Equipment deleted successfully")
