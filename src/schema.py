"""
Schema definitions and validation utilities.

Defines the normalized vehicle record produced by the import pipeline and
validates record lists against its invariants.
"""

from typing import Any, Dict, List, Optional
from dataclasses import dataclass
from datetime import date
from enum import Enum

from config import MAX_PLATE_LENGTH, MIN_PURCHASE_YEAR


class ConditionStatus(Enum):
    """Vehicle condition vocabulary."""
    ACTIVE = "Active"
    MAINTENANCE = "Maintenance"
    DISPOSAL = "Disposal"
    UNKNOWN = "Unknown"


# Semantic fields in the order the header scan reports them
FLEET_FIELDS = (
    "plate_no",
    "vehicle_type",
    "brand",
    "engine_no",
    "asset_value",
    "department",
    "condition_status",
    "purchase_year",
)

DEFAULT_VEHICLE_TYPE = "ยานพาหนะทั่วไป"
DEFAULT_BRAND = "ไม่ระบุยี่ห้อ"
DEFAULT_ENGINE_NO = "-"
DEFAULT_DEPARTMENT = "ไม่ระบุหน่วยงาน"


@dataclass
class VehicleRecord:
    """
    A single normalized fleet vehicle.

    Attributes:
        plate_no: Registration plate, never empty
        vehicle_type: Vehicle category (sentinel when the source has none)
        brand: Make or model text (sentinel when the source has none)
        engine_no: Engine or chassis number, "-" when absent
        asset_value: Non-negative asset value
        department: Owning unit (sentinel when the source has none)
        condition_status: Folded condition vocabulary
        purchase_year: Gregorian purchase year, None when missing or implausible
    """
    plate_no: str
    vehicle_type: str = DEFAULT_VEHICLE_TYPE
    brand: str = DEFAULT_BRAND
    engine_no: str = DEFAULT_ENGINE_NO
    asset_value: float = 0.0
    department: str = DEFAULT_DEPARTMENT
    condition_status: ConditionStatus = ConditionStatus.UNKNOWN
    purchase_year: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Dashboard JSON shape (snake_case keys, enum as its string value)."""
        return {
            "plate_no": self.plate_no,
            "vehicle_type": self.vehicle_type,
            "brand": self.brand,
            "engine_no": self.engine_no,
            "asset_value": self.asset_value,
            "department": self.department,
            "condition_status": self.condition_status.value,
            "purchase_year": self.purchase_year,
        }


def validate_records(
    records: List[VehicleRecord],
    current_year: Optional[int] = None,
) -> List[str]:
    """
    Validate records against the vehicle record invariants.

    Args:
        records: Records to validate
        current_year: Reference year for the purchase year upper bound (default: today)

    Returns:
        List of validation error messages (empty if valid)
    """
    if current_year is None:
        current_year = date.today().year

    errors = []
    for i, record in enumerate(records, 1):
        if not isinstance(record.plate_no, str) or not record.plate_no.strip():
            errors.append(f"Row {i}: Missing required field 'plate_no'")
        elif len(record.plate_no.strip()) >= MAX_PLATE_LENGTH:
            errors.append(f"Row {i}, field 'plate_no': Length {len(record.plate_no)} exceeds limit")

        if not isinstance(record.asset_value, (int, float)) or record.asset_value < 0:
            errors.append(f"Row {i}, field 'asset_value': Expected non-negative number, got {record.asset_value!r}")

        if not isinstance(record.condition_status, ConditionStatus):
            errors.append(f"Row {i}, field 'condition_status': Unrecognized value {record.condition_status!r}")

        year = record.purchase_year
        if year is not None:
            if not isinstance(year, int):
                errors.append(f"Row {i}, field 'purchase_year': Expected integer, got {type(year).__name__}")
            elif year < MIN_PURCHASE_YEAR or year > current_year + 1:
                errors.append(f"Row {i}, field 'purchase_year': {year} outside {MIN_PURCHASE_YEAR}-{current_year + 1}")

    return errors
