"""
Header row detection and field mapping tests.
"""

import sys
from pathlib import Path

import pytest

# Add src to path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from inference import (
    HeaderScanPolicy,
    NoTableStructureError,
    find_header_row,
    is_inconclusive,
    match_row_fields,
    normalize_header_text,
    positional_fallback,
)
from mappings import get_field_keywords


KEYWORDS = get_field_keywords("fleet_keywords_v1")

ENGLISH_HEADER = ["Registration", "Type", "Brand", "Engine No", "Price", "Department", "Status", "Year"]


def test_normalize_header_text_strips_all_whitespace():
    assert normalize_header_text("  Engine  No ") == "engineno"
    assert normalize_header_text("ราคา (บาท)") == "ราคา(บาท)"
    assert normalize_header_text(None) == ""
    assert normalize_header_text(2565) == "2565"


def test_thai_header_scenario():
    rows = [["ทะเบียน", "ยี่ห้อ", "ราคา"], ["1กก-1234", "Toyota", "500000"]]

    field_map, header_row_index = find_header_row(rows, KEYWORDS)

    assert field_map == {"plate_no": 0, "brand": 1, "asset_value": 2}
    assert header_row_index == 0


def test_english_header_maps_every_field():
    field_map, header_row_index = find_header_row([ENGLISH_HEADER], KEYWORDS)

    assert header_row_index == 0
    assert field_map == {
        "plate_no": 0,
        "vehicle_type": 1,
        "brand": 2,
        "engine_no": 3,
        "asset_value": 4,
        "department": 5,
        "condition_status": 6,
        "purchase_year": 7,
    }


def test_header_below_noisy_title_rows():
    rows = [
        ["บัญชีทะเบียนยานพาหนะ สังกัด สภ.เมือง"],
        [None, None, None],
        ["ลำดับ", "เลขทะเบียน", "ประเภทรถ", "ยี่ห้อ/รุ่น", "ราคา (บาท)"],
        [1, "1กข-1234", "รถกระบะ", "Toyota", 850000],
    ]

    field_map, header_row_index = find_header_row(rows, KEYWORDS)

    assert header_row_index == 2
    assert field_map == {"plate_no": 1, "vehicle_type": 2, "brand": 3, "asset_value": 4}


def test_leftmost_plate_column_wins():
    rows = [["Plate", "Registration", "Brand"], ["AB-1", "XY-2", "Ford"]]

    field_map, _ = find_header_row(rows, KEYWORDS)

    assert field_map["plate_no"] == 0
    assert field_map["brand"] == 2


def test_one_cell_can_claim_several_fields():
    field_map = match_row_fields(["Vehicle No"], KEYWORDS)

    assert field_map == {"plate_no": 0, "vehicle_type": 0}


def test_row_without_anchor_field_is_never_a_candidate():
    # Four fields but neither plate_no nor brand
    rows = [["Type", "Price", "Department", "Status"], ["Pickup", "1", "HQ", "ok"]]

    field_map, header_row_index = find_header_row(rows, KEYWORDS)

    assert header_row_index == -1
    assert field_map == {}


def test_strictly_higher_count_required_to_replace_candidate():
    rows = [
        ["ทะเบียน", "ยี่ห้อ"],
        ["ทะเบียน", "ยี่ห้อ"],
        ["ทะเบียน", "ยี่ห้อ", "ราคา"],
    ]

    _, header_row_index = find_header_row(rows, KEYWORDS)

    assert header_row_index == 2

    _, header_row_index = find_header_row(rows[:2], KEYWORDS)
    assert header_row_index == 0


def test_early_exit_stops_at_first_good_row():
    rows = [
        ["ทะเบียน", "ประเภท", "ยี่ห้อ", "ราคา"],
        ENGLISH_HEADER,
    ]

    field_map, header_row_index = find_header_row(rows, KEYWORDS)

    # Row 1 maps more fields, but row 0 already satisfies the early exit
    assert header_row_index == 0
    assert len(field_map) == 4


def test_early_exit_needs_plate():
    rows = [
        ["ยี่ห้อ", "ประเภท", "ราคา", "สถานะ"],
        ENGLISH_HEADER,
    ]

    _, header_row_index = find_header_row(rows, KEYWORDS)

    assert header_row_index == 1


def test_scan_limit_is_respected():
    rows = [["x", "y"]] * 5 + [["ทะเบียน", "ยี่ห้อ"]]

    _, found = find_header_row(rows, KEYWORDS)
    _, limited = find_header_row(rows, KEYWORDS, HeaderScanPolicy(max_scan_rows=5))

    assert found == 5
    assert limited == -1


def test_custom_early_exit_threshold():
    rows = [["ทะเบียน", "ยี่ห้อ"], ["ทะเบียน", "ยี่ห้อ", "ราคา"]]

    _, header_row_index = find_header_row(rows, KEYWORDS, HeaderScanPolicy(early_exit_matches=2))

    assert header_row_index == 0


def test_detection_is_deterministic():
    rows = [
        ["รายงาน"],
        ["ทะเบียน", "ยี่ห้อ", "สภาพ", "ปี"],
        ["1กก-1234", "Toyota", "ดี", "2565"],
    ]

    first = find_header_row(rows, KEYWORDS)
    second = find_header_row(rows, KEYWORDS)

    assert first == second
    assert first[1] == 1


def test_non_sequence_rows_are_ignored():
    rows = [None, "not a row", ["ทะเบียน", "ยี่ห้อ"]]

    _, header_row_index = find_header_row(rows, KEYWORDS)

    assert header_row_index == 2


def test_is_inconclusive():
    assert is_inconclusive({}, -1)
    assert is_inconclusive({"plate_no": 0}, 0)
    assert not is_inconclusive({"plate_no": 0, "brand": 1}, 0)
    assert is_inconclusive({"plate_no": 0, "brand": 1}, 0, HeaderScanPolicy(min_mapped_fields=3))


def test_positional_fallback():
    rows = [["1กก-1234", "รถกระบะ"], ["2ขข-5678", "รถตู้"]]

    assert positional_fallback(rows) == ({"plate_no": 0, "vehicle_type": 1}, -1)


@pytest.mark.parametrize("rows", [
    [],
    [["1กก-1234", "รถกระบะ"]],
    [["a", "b"], ["only one cell"]],
])
def test_positional_fallback_requires_two_columns_in_second_row(rows):
    with pytest.raises(NoTableStructureError):
        positional_fallback(rows)
