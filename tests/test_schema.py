"""
Vehicle record invariant checks.
"""

import sys
from pathlib import Path

# Add src to path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from schema import ConditionStatus, VehicleRecord, validate_records


def test_valid_records_have_no_errors():
    records = [
        VehicleRecord(plate_no="1กก-1234", asset_value=500000.0, purchase_year=2022),
        VehicleRecord(plate_no="2ขข-5678", condition_status=ConditionStatus.ACTIVE),
    ]

    assert validate_records(records, current_year=2025) == []


def test_invariant_violations_are_reported_per_row():
    records = [
        VehicleRecord(plate_no="  "),
        VehicleRecord(plate_no="X" * 50),
        VehicleRecord(plate_no="ok", asset_value=-1.0),
        VehicleRecord(plate_no="ok", condition_status="Active"),
        VehicleRecord(plate_no="ok", purchase_year=1900),
    ]

    errors = validate_records(records, current_year=2025)

    assert len(errors) == 5
    assert errors[0].startswith("Row 1:")
    assert "plate_no" in errors[1]
    assert "asset_value" in errors[2]
    assert "condition_status" in errors[3]
    assert "1950-2026" in errors[4]


def test_to_dict_uses_status_value():
    record = VehicleRecord(plate_no="1กก-1234", condition_status=ConditionStatus.DISPOSAL)

    data = record.to_dict()

    assert data["condition_status"] == "Disposal"
    assert data["purchase_year"] is None
    assert data["engine_no"] == "-"
