"""
Value transforms applied to raw grid cells during record extraction.

Each transform takes a raw cell value (str, int, float or None) and returns
the normalized value for one vehicle field. Transforms never raise on bad
input; they fall back to the field's default.
"""

import math
import re
from datetime import date
from typing import Any, Optional

from config import MIN_PURCHASE_YEAR
from schema import ConditionStatus

BUDDHIST_ERA_OFFSET = 543
BUDDHIST_ERA_THRESHOLD = 2400

# Checked in this order; first token set with a hit wins
ACTIVE_TOKENS = ("ดี", "active", "ใช้", "ปกติ", "พร้อม")
MAINTENANCE_TOKENS = ("ซ่อม", "maint", "ชำรุด", "เสีย")
DISPOSAL_TOKENS = ("จำหน่าย", "disposal", "ขาย", "เสื่อม", "ซาก")

# Longest digit string that can still hold a Buddhist Era year
MAX_YEAR_DIGITS = 5

_NON_DIGITS = re.compile(r"[^0-9]")
_NON_NUMERIC = re.compile(r"[^0-9.]")


def cell_text(value: Any) -> str:
    """
    Render a raw cell as text.

    Integral floats (as spreadsheets store whole numbers) lose the trailing
    ".0" so "2565.0" does not become the digit string "25650".
    """
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value)


def clean_text(value: Any) -> str:
    """Trimmed text for a cell, empty string for None/whitespace."""
    return cell_text(value).strip()


def text_or_default(value: Any, default: str) -> str:
    """Trimmed cell text, or default when the cell is blank."""
    text = clean_text(value)
    return text if text else default


def fold_condition_status(value: Any) -> ConditionStatus:
    """
    Fold free-text condition into the four-value status vocabulary.

    Missing or empty input is Unknown. Text matching none of the token sets is treated
    as Active.
    """
    text = cell_text(value).lower()
    if not text:
        return ConditionStatus.UNKNOWN

    if any(token in text for token in ACTIVE_TOKENS):
        return ConditionStatus.ACTIVE
    if any(token in text for token in MAINTENANCE_TOKENS):
        return ConditionStatus.MAINTENANCE
    if any(token in text for token in DISPOSAL_TOKENS):
        return ConditionStatus.DISPOSAL

    return ConditionStatus.ACTIVE


def to_gregorian(year: int) -> int:
    """Convert a Buddhist Era year to Gregorian; years <= 2400 pass through."""
    if year > BUDDHIST_ERA_THRESHOLD:
        return year - BUDDHIST_ERA_OFFSET
    return year


def normalize_purchase_year(value: Any, current_year: Optional[int] = None) -> Optional[int]:
    """
    Parse a purchase year cell into a Gregorian year.

    Non-digit characters are stripped first ("พ.ศ. 2565" -> 2565 -> 2022).

    Returns:
        Year within [MIN_PURCHASE_YEAR, current_year + 1], or None
    """
    digits = _NON_DIGITS.sub("", cell_text(value)).lstrip("0")
    if not digits or len(digits) > MAX_YEAR_DIGITS:
        return None

    year = to_gregorian(int(digits))
    if year == 0:
        return None

    if current_year is None:
        current_year = date.today().year

    if year < MIN_PURCHASE_YEAR or year > current_year + 1:
        return None

    return year


def parse_asset_value(value: Any) -> float:
    """
    Parse an asset value cell ("1,250,000 บาท" -> 1250000.0).

    Everything except digits and the decimal point is stripped; anything that
    still fails to parse (e.g. two decimal points) or overflows is 0.0.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        try:
            number = abs(float(value))
        except OverflowError:
            return 0.0
        return number if math.isfinite(number) else 0.0

    cleaned = _NON_NUMERIC.sub("", cell_text(value))
    try:
        number = float(cleaned)
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0
