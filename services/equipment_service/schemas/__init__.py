"""Equipment Service schemas package."""

from services.equipment_service.schemas.equipment import (  # noqa: F401
    CheckoutEnvelope,
    CheckoutHistory,
    CheckoutHistoryResponse,
    CheckoutRequest,
    CheckoutResponse,
    CheckoutStats,
    CurrentCheckout,
    EquipmentCreate,
    EquipmentEnvelope,
    EquipmentListResponse,
    EquipmentRef,
    EquipmentResponse,
    EquipmentUpdate,
    MessageResponse,
    ReturnRequest,
)
