"""Pydantic schemas for club equipment and checkouts."""

import uuid
from datetime import date, datetime
from typing import Optional

from libs.common.datetime_utils import as_utc, utc_now
from libs.common.pagination import Pagination
from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator
from services.equipment_service.models import (
    EquipmentCondition,
    EquipmentSize,
    EquipmentType,
)
from services.members_service.schemas import UserSummary

# ============================================================================
# EQUIPMENT SCHEMAS
# ============================================================================


class EquipmentCreate(BaseModel):
    type: EquipmentType
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    size: Optional[EquipmentSize] = None
    condition: EquipmentCondition = EquipmentCondition.GOOD
    serial_number: Optional[str] = Field(None, max_length=100)
    purchase_date: Optional[date] = None
    image_url: Optional[HttpUrl] = None
    notes: Optional[str] = Field(None, max_length=1000)


class EquipmentUpdate(BaseModel):
    """Availability is not editable; it follows the checkout ledger."""

    type: Optional[EquipmentType] = None
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    size: Optional[EquipmentSize] = None
    condition: Optional[EquipmentCondition] = None
    serial_number: Optional[str] = Field(None, max_length=100)
    purchase_date: Optional[date] = None
    image_url: Optional[HttpUrl] = None
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("type", "name", "condition")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("May not be null")
        return value


class CurrentCheckout(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    checked_out_at: datetime
    due_date: Optional[datetime] = None
    user: UserSummary


class EquipmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    club_id: uuid.UUID
    type: EquipmentType
    name: str
    description: Optional[str] = None
    size: Optional[EquipmentSize] = None
    condition: EquipmentCondition
    is_available: bool
    serial_number: Optional[str] = None
    purchase_date: Optional[date] = None
    image_url: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    current_checkout: Optional[CurrentCheckout] = None


class EquipmentListResponse(BaseModel):
    data: list[EquipmentResponse]
    pagination: Pagination


class EquipmentEnvelope(BaseModel):
    data: EquipmentResponse
    message: str


class MessageResponse(BaseModel):
    message: str


# ============================================================================
# CHECKOUT SCHEMAS
# ============================================================================


class CheckoutRequest(BaseModel):
    condition_out: EquipmentCondition
    due_date: Optional[datetime] = None
    photo_out_url: Optional[HttpUrl] = None
    notes: Optional[str] = Field(None, max_length=500)

    @field_validator("due_date")
    @classmethod
    def due_date_in_future(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return value
        value = as_utc(value)
        if value <= utc_now():
            raise ValueError("Due date must be in the future")
        return value


class ReturnRequest(BaseModel):
    condition_in: EquipmentCondition
    photo_in_url: Optional[HttpUrl] = None
    notes: Optional[str] = Field(None, max_length=500)


class EquipmentRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    type: EquipmentType


class CheckoutResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    equipment_id: uuid.UUID
    checked_out_at: datetime
    due_date: Optional[datetime] = None
    returned_at: Optional[datetime] = None
    condition_out: EquipmentCondition
    condition_in: Optional[EquipmentCondition] = None
    photo_out_url: Optional[str] = None
    photo_in_url: Optional[str] = None
    notes: Optional[str] = None
    equipment: EquipmentRef
    user: UserSummary


class CheckoutEnvelope(BaseModel):
    data: CheckoutResponse
    message: str


class CheckoutStats(BaseModel):
    total_checkouts: int
    completed_checkouts: int
    overdue_checkouts: int
    currently_checked_out: int


class CheckoutHistory(BaseModel):
    equipment: EquipmentRef
    checkouts: list[CheckoutResponse]
    stats: CheckoutStats


class CheckoutHistoryResponse(BaseModel):
    data: CheckoutHistory
    pagination: Pagination
