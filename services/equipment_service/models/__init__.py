"""Equipment Service models package."""

from services.equipment_service.models.enums import (  # noqa: F401
    EquipmentCondition,
    EquipmentSize,
    EquipmentType,
)
from services.equipment_service.models.equipment import (  # noqa: F401
    Equipment,
    EquipmentCheckout,
)

__all__ = [
    "Equipment",
    "EquipmentCheckout",
    "EquipmentCondition",
    "EquipmentSize",
    "EquipmentType",
]
