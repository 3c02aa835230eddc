"""
Field value transform tests: status folding, year era, asset value parsing.
"""

import sys
from pathlib import Path

import pytest

# Add src to path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from schema import ConditionStatus
from transforms import (
    cell_text,
    clean_text,
    fold_condition_status,
    normalize_purchase_year,
    parse_asset_value,
    text_or_default,
    to_gregorian,
)


@pytest.mark.parametrize("raw, expected", [
    ("ใช้การได้", ConditionStatus.ACTIVE),
    ("ปกติ", ConditionStatus.ACTIVE),
    ("พร้อมใช้งาน", ConditionStatus.ACTIVE),
    ("Active", ConditionStatus.ACTIVE),
    ("ชำรุด", ConditionStatus.MAINTENANCE),
    ("อยู่ระหว่างซ่อม", ConditionStatus.MAINTENANCE),
    ("Under Maintenance", ConditionStatus.MAINTENANCE),
    ("เสีย", ConditionStatus.MAINTENANCE),
    ("รอจำหน่าย", ConditionStatus.DISPOSAL),
    ("DISPOSAL", ConditionStatus.DISPOSAL),
    ("ซาก", ConditionStatus.DISPOSAL),
    ("เสื่อมสภาพ", ConditionStatus.DISPOSAL),
])
def test_fold_condition_status(raw, expected):
    assert fold_condition_status(raw) == expected


def test_active_tokens_take_precedence():
    # Contains both an active token (ใช้) and a maintenance token (ซ่อม)
    assert fold_condition_status("ใช้งานได้ หลังซ่อม") == ConditionStatus.ACTIVE


@pytest.mark.parametrize("raw", [None, ""])
def test_missing_status_is_unknown(raw):
    assert fold_condition_status(raw) == ConditionStatus.UNKNOWN


@pytest.mark.parametrize("raw", ["xyz", "???", "   ", "42", 42, "n/a", "ok"])
def test_unrecognized_status_text_defaults_to_active(raw):
    assert fold_condition_status(raw) == ConditionStatus.ACTIVE


@pytest.mark.parametrize("raw", ["a", "ดี", "ซ่อม", "ขาย", "zzz", "Ready", "unknown"])
def test_status_folding_is_total(raw):
    assert fold_condition_status(raw) in {
        ConditionStatus.ACTIVE,
        ConditionStatus.MAINTENANCE,
        ConditionStatus.DISPOSAL,
    }


def test_to_gregorian_leaves_gregorian_years_unchanged():
    for year in (1, 1950, 2000, 2024, 2400):
        assert to_gregorian(year) == year


def test_to_gregorian_converts_buddhist_era():
    for year in range(1950, 2030):
        assert to_gregorian(year + 543) == year


@pytest.mark.parametrize("raw, expected", [
    ("2565", 2022),
    ("พ.ศ. 2560", 2017),
    ("2020", 2020),
    (2563, 2020),
    (2565.0, 2022),
    ("ปี 2019", 2019),
])
def test_normalize_purchase_year(raw, expected):
    assert normalize_purchase_year(raw, current_year=2025) == expected


@pytest.mark.parametrize("raw", [None, "", "n/a", "0", "1900", "2490", "9999", "2030"])
def test_implausible_or_missing_years_are_dropped(raw):
    assert normalize_purchase_year(raw, current_year=2025) is None


def test_purchase_year_upper_bound_is_next_year():
    assert normalize_purchase_year("2026", current_year=2025) == 2026
    assert normalize_purchase_year("2027", current_year=2025) is None
    assert normalize_purchase_year("1950", current_year=2025) == 1950
    assert normalize_purchase_year("1949", current_year=2025) is None


@pytest.mark.parametrize("raw, expected", [
    ("500000", 500000.0),
    ("1,250,000 บาท", 1250000.0),
    ("฿ 850,000.50", 850000.5),
    (750000, 750000.0),
    (12.5, 12.5),
    (-5, 5.0),
    ("1.2.3", 0.0),
    ("ไม่ทราบ", 0.0),
    ("", 0.0),
    (None, 0.0),
    (float("nan"), 0.0),
])
def test_parse_asset_value(raw, expected):
    assert parse_asset_value(raw) == expected


def test_oversized_year_cell_is_dropped():
    assert normalize_purchase_year("9" * 5000, current_year=2025) is None
    assert normalize_purchase_year("256500", current_year=2025) is None
    assert normalize_purchase_year("02565", current_year=2025) == 2022


@pytest.mark.parametrize("raw", ["9" * 400, 10 ** 400, float("inf")])
def test_overflowing_asset_value_is_zero(raw):
    assert parse_asset_value(raw) == 0.0


def test_text_helpers():
    assert cell_text(2565.0) == "2565"
    assert cell_text(12.5) == "12.5"
    assert cell_text(None) == ""
    assert clean_text("  Toyota ") == "Toyota"
    assert text_or_default("   ", "-") == "-"
    assert text_or_default(" Hino ", "-") == "Hino"
