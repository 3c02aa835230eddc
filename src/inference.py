"""
Header inference for messy fleet tables.

Finds the header row of a raw 2D grid by matching header cells against the
bilingual field keyword dictionary, and provides the positional fallback used
when no header row can be found with confidence.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from config import HEADER_EARLY_EXIT_MATCHES, HEADER_MIN_FIELDS, HEADER_SCAN_ROWS

logger = logging.getLogger(__name__)

FieldMap = Dict[str, int]


class NoTableStructureError(Exception):
    """Raised when neither a header row nor a usable positional layout exists."""
    pass


@dataclass(frozen=True)
class HeaderScanPolicy:
    """
    Thresholds for the header row scan.

    Attributes:
        max_scan_rows: Only the first N rows are considered as header candidates
        early_exit_matches: Stop scanning once a row maps this many fields (including early_exit_field)
        min_mapped_fields: A best candidate mapping fewer fields is inconclusive
        anchor_fields: A candidate must map at least one of these
        early_exit_field: Field required for the early exit
    """
    max_scan_rows: int = HEADER_SCAN_ROWS
    early_exit_matches: int = HEADER_EARLY_EXIT_MATCHES
    min_mapped_fields: int = HEADER_MIN_FIELDS
    anchor_fields: Tuple[str, ...] = ("plate_no", "brand")
    early_exit_field: str = "plate_no"


DEFAULT_POLICY = HeaderScanPolicy()


def normalize_header_text(cell: Any) -> str:
    """Lowercase a header cell and remove all whitespace."""
    if cell is None:
        return ""
    return "".join(str(cell).lower().split())


def match_row_fields(row: Sequence[Any], keywords: Dict[str, List[str]]) -> FieldMap:
    """
    Map fields to columns for one candidate row.

    Cells are visited left to right; the first column whose text contains one
    of a field's keywords claims that field. One cell may claim several fields.
    """
    field_map: FieldMap = {}
    for col_idx, cell in enumerate(row):
        cell_text = normalize_header_text(cell)
        if not cell_text:
            continue

        for field, field_keywords in keywords.items():
            if field in field_map:
                continue
            if any(keyword in cell_text for keyword in field_keywords):
                field_map[field] = col_idx

    return field_map


def find_header_row(
    rows: Sequence[Any],
    keywords: Dict[str, List[str]],
    policy: Optional[HeaderScanPolicy] = None,
) -> Tuple[FieldMap, int]:
    """
    Scan the top of the grid for the row that best matches the keywords.

    A row replaces the current best only with a strictly higher match count
    and only if it maps one of the anchor fields. Ties keep the earlier row.

    Args:
        rows: Raw 2D grid
        keywords: Field -> normalized keyword list
        policy: Scan thresholds (default: DEFAULT_POLICY)

    Returns:
        Tuple of (field_map, header_row_index); ({}, -1) when nothing qualifies
    """
    policy = policy or DEFAULT_POLICY

    best_map: FieldMap = {}
    best_index = -1
    best_count = 0

    for row_idx in range(min(len(rows), policy.max_scan_rows)):
        row = rows[row_idx]
        if not isinstance(row, (list, tuple)):
            continue

        current_map = match_row_fields(row, keywords)
        match_count = len(current_map)

        has_anchor = any(field in current_map for field in policy.anchor_fields)
        if match_count > best_count and has_anchor:
            best_map = current_map
            best_index = row_idx
            best_count = match_count
            logger.debug(f"[Header] Row {row_idx} is best candidate so far ({match_count} fields: {sorted(current_map)})")

        if match_count >= policy.early_exit_matches and policy.early_exit_field in current_map:
            logger.debug(f"[Header] Early exit at row {row_idx}")
            break

    return dict(best_map), best_index


def is_inconclusive(
    field_map: FieldMap,
    header_row_index: int,
    policy: Optional[HeaderScanPolicy] = None,
) -> bool:
    """True when the header scan did not produce a trustworthy field map."""
    policy = policy or DEFAULT_POLICY
    return header_row_index == -1 or len(field_map) < policy.min_mapped_fields


def positional_fallback(rows: Sequence[Any]) -> Tuple[FieldMap, int]:
    """
    Blind column layout for grids without a recognizable header.

    Assumes column 0 is the plate and column 1 the vehicle type. Row 0 is
    skipped as an unrecognized header, so data starts at row 1.

    Raises:
        NoTableStructureError: If there is no second row with at least 2 cells
    """
    if len(rows) >= 2 and isinstance(rows[1], (list, tuple)) and len(rows[1]) >= 2:
        logger.debug("[Header] Using positional fallback: plate_no=0, vehicle_type=1")
        return {"plate_no": 0, "vehicle_type": 1}, -1

    raise NoTableStructureError(
        "No readable table structure found (expected header columns such as 'ทะเบียน' or 'ยี่ห้อ')"
    )
