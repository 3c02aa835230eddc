"""
Fleet import normalizer.

Runs the import pipeline for one document:
    source document -> raw 2D grid -> header row + field map -> vehicle records

Row-level problems never stop an import; they are skipped and counted. Only an
unreadable document (DecodeError) or a grid without any usable table layout
(NoTableStructureError) fails the import.
"""

from typing import Any, Dict, List, Optional, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
import argparse
import asyncio
import json
import logging
import sys

from config import MAX_PLATE_LENGTH
from schema import (
    DEFAULT_BRAND,
    DEFAULT_DEPARTMENT,
    DEFAULT_ENGINE_NO,
    DEFAULT_VEHICLE_TYPE,
    VehicleRecord,
    validate_records,
)
from mappings import get_field_keywords
from inference import (
    FieldMap,
    HeaderScanPolicy,
    NoTableStructureError,
    find_header_row,
    is_inconclusive,
    positional_fallback,
)
from sources import DecodeError, Source, SourceType, extract_from_source
from transforms import (
    clean_text,
    fold_condition_status,
    normalize_purchase_year,
    parse_asset_value,
    text_or_default,
)

logger = logging.getLogger(__name__)

NO_RECORDS_DETAIL = "no rows matched a plate number"


class LogStatus(Enum):
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class DiagnosticEntry:
    step: str
    status: LogStatus = LogStatus.PENDING
    detail: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        entry = {"step": self.step, "status": self.status.value}
        if self.detail is not None:
            entry["detail"] = self.detail
        return entry


class ImportDiagnostics:
    """
    Append-only log of import steps.

    Every entry is also written to the module logger, so the trail shows up
    in application logs as well as in the returned result.
    """

    def __init__(self):
        self._entries: List[DiagnosticEntry] = []

    def add(
        self,
        step: str,
        status: LogStatus = LogStatus.PENDING,
        detail: Optional[str] = None,
        warn: bool = False,
    ) -> DiagnosticEntry:
        """Append a step; errors and warn=True steps are logged as warnings."""
        entry = DiagnosticEntry(step=step, status=status, detail=detail)
        self._entries.append(entry)

        message = f"[Import] {step}" + (f" ({detail})" if detail else "")
        if warn or status == LogStatus.ERROR:
            logger.warning(message)
        else:
            logger.info(message)
        return entry

    @property
    def entries(self) -> List[DiagnosticEntry]:
        return list(self._entries)

    @property
    def has_errors(self) -> bool:
        return any(entry.status == LogStatus.ERROR for entry in self._entries)

    def to_list(self) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))


@dataclass
class ImportResult:
    """
    Outcome of one import.

    Attributes:
        records: Normalized vehicle records, in source row order
        diagnostics: Step-by-step log of the import
        field_map: Field -> column index used for extraction
        header_row_index: Row the header was found on, -1 for the positional fallback
        rows_scanned: Number of data rows examined
        rows_skipped: Data rows that produced no record
    """
    records: List[VehicleRecord]
    diagnostics: ImportDiagnostics
    field_map: FieldMap = field(default_factory=dict)
    header_row_index: int = -1
    rows_scanned: int = 0
    rows_skipped: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.records

    @property
    def is_partial(self) -> bool:
        return bool(self.records) and self.rows_skipped > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "records": [record.to_dict() for record in self.records],
            "diagnostics": self.diagnostics.to_list(),
            "field_map": dict(self.field_map),
            "header_row_index": self.header_row_index,
            "rows_scanned": self.rows_scanned,
            "rows_skipped": self.rows_skipped,
        }


def _is_blank_row(row: Any) -> bool:
    if not row or not isinstance(row, (list, tuple)):
        return True
    return all(not clean_text(cell) for cell in row)


def _cell(row: Sequence[Any], field_map: FieldMap, field_name: str) -> Any:
    col_idx = field_map.get(field_name)
    if col_idx is None or col_idx >= len(row):
        return None
    return row[col_idx]


def build_record(
    row: Sequence[Any],
    field_map: FieldMap,
    header_row_index: int,
    current_year: Optional[int] = None,
) -> Optional[VehicleRecord]:
    """
    Build one vehicle record from a data row.

    Returns:
        VehicleRecord, or None if the row has no usable plate number
    """
    plate_value = _cell(row, field_map, "plate_no")
    if "plate_no" not in field_map and header_row_index == -1 and row:
        plate_value = row[0]

    plate_no = clean_text(plate_value)
    if not plate_no or len(plate_no) >= MAX_PLATE_LENGTH:
        return None

    return VehicleRecord(
        plate_no=plate_no,
        vehicle_type=text_or_default(_cell(row, field_map, "vehicle_type"), DEFAULT_VEHICLE_TYPE),
        brand=text_or_default(_cell(row, field_map, "brand"), DEFAULT_BRAND),
        engine_no=text_or_default(_cell(row, field_map, "engine_no"), DEFAULT_ENGINE_NO),
        asset_value=parse_asset_value(_cell(row, field_map, "asset_value")),
        department=text_or_default(_cell(row, field_map, "department"), DEFAULT_DEPARTMENT),
        condition_status=fold_condition_status(_cell(row, field_map, "condition_status")),
        purchase_year=normalize_purchase_year(_cell(row, field_map, "purchase_year"), current_year),
    )


def data_rows(rows: Sequence[Any], header_row_index: int) -> Sequence[Any]:
    """
    Rows holding vehicle data.

    With a located header, everything after it. With the positional fallback
    (header_row_index == -1) row 0 is still skipped, so data starts at row 1.
    """
    if header_row_index == -1:
        return rows[1:]
    return rows[header_row_index + 1:]


def extract_records(
    rows: Sequence[Any],
    field_map: FieldMap,
    header_row_index: int,
    current_year: Optional[int] = None,
) -> ImportResult:
    """
    Extract vehicle records from the data rows of a grid.

    Args:
        rows: Raw 2D grid
        field_map: Field -> column index
        header_row_index: Header row, or -1 for the positional fallback
        current_year: Reference year for purchase year plausibility (default: today)

    Returns:
        ImportResult with records and skip counts (diagnostics left empty)
    """
    records: List[VehicleRecord] = []
    scanned = 0
    skipped = 0
    first_data_row = 1 if header_row_index == -1 else header_row_index + 1

    for offset, row in enumerate(data_rows(rows, header_row_index)):
        if _is_blank_row(row):
            continue
        scanned += 1

        record = build_record(row, field_map, header_row_index, current_year)
        if record is None:
            skipped += 1
            logger.debug(f"[Import] Skipping row {first_data_row + offset}: no usable plate number")
            continue
        records.append(record)

    problems = validate_records(records, current_year=current_year)
    for problem in problems:
        logger.warning(f"[Import] Invariant violation: {problem}")

    return ImportResult(
        records=records,
        diagnostics=ImportDiagnostics(),
        field_map=dict(field_map),
        header_row_index=header_row_index,
        rows_scanned=scanned,
        rows_skipped=skipped,
    )


def normalize_grid(
    rows: Sequence[Any],
    keywords: Optional[Dict[str, List[str]]] = None,
    policy: Optional[HeaderScanPolicy] = None,
    diagnostics: Optional[ImportDiagnostics] = None,
    current_year: Optional[int] = None,
) -> ImportResult:
    """
    Locate the header of a raw grid and extract normalized vehicle records.

    Args:
        rows: Raw 2D grid from a Grid Reader
        keywords: Field -> keyword list (default: configured keyword dictionary)
        policy: Header scan thresholds
        diagnostics: Existing diagnostics log to append to
        current_year: Reference year for purchase year plausibility

    Returns:
        ImportResult

    Raises:
        NoTableStructureError: If no header is found and the positional fallback does not apply
    """
    if keywords is None:
        keywords = get_field_keywords()
    if diagnostics is None:
        diagnostics = ImportDiagnostics()

    field_map, header_row_index = find_header_row(rows, keywords, policy)

    if is_inconclusive(field_map, header_row_index, policy):
        try:
            field_map, header_row_index = positional_fallback(rows)
        except NoTableStructureError as e:
            diagnostics.add("import failed", LogStatus.ERROR, str(e))
            raise
        diagnostics.add(
            "no clear header row, using positional column layout",
            LogStatus.PENDING,
            "column 1 = plate number, column 2 = vehicle type",
            warn=True,
        )
    else:
        diagnostics.add(
            f"header found at row {header_row_index + 1} ({len(field_map)} columns)",
            LogStatus.SUCCESS,
        )

    result = extract_records(rows, field_map, header_row_index, current_year)
    result.diagnostics = diagnostics

    if result.records:
        diagnostics.add(
            f"mapped {len(field_map)} columns, extracted {len(result.records)} records",
            LogStatus.SUCCESS,
            f"{result.rows_skipped} rows skipped" if result.rows_skipped else None,
        )
    else:
        diagnostics.add("no vehicle records found", LogStatus.ERROR, NO_RECORDS_DETAIL)

    return result


def import_document(
    source: Source,
    source_type: Optional[SourceType] = None,
    keywords: Optional[Dict[str, List[str]]] = None,
    policy: Optional[HeaderScanPolicy] = None,
    max_pages: Optional[int] = None,
    current_year: Optional[int] = None,
) -> ImportResult:
    """
    Import a document into normalized vehicle records.

    Args:
        source: File path or raw document bytes
        source_type: Explicit document kind (auto-detected if not provided)
        keywords: Field -> keyword list (default: configured keyword dictionary)
        policy: Header scan thresholds
        max_pages: PDF only, maximum number of pages to read
        current_year: Reference year for purchase year plausibility

    Returns:
        ImportResult

    Raises:
        DecodeError: If the document cannot be read
        NoTableStructureError: If the document holds no usable table
    """
    diagnostics = ImportDiagnostics()
    name = Path(source).name if isinstance(source, (str, Path)) else "uploaded document"
    diagnostics.add(f"opening {name}")

    try:
        rows = extract_from_source(source, source_type=source_type, max_pages=max_pages)
    except DecodeError as e:
        diagnostics.add("import failed", LogStatus.ERROR, str(e))
        raise

    diagnostics.add(f"read {len(rows)} rows", LogStatus.SUCCESS)

    return normalize_grid(
        rows,
        keywords=keywords,
        policy=policy,
        diagnostics=diagnostics,
        current_year=current_year,
    )


async def import_document_async(source: Source, **kwargs) -> ImportResult:
    """Run import_document in a worker thread for async callers."""
    return await asyncio.to_thread(import_document, source, **kwargs)


def main(argv: Optional[List[str]] = None) -> int:
    from fleet_metrics import compute_dashboard_metrics

    parser = argparse.ArgumentParser(description="Import a fleet register into normalized vehicle records")
    parser.add_argument("file", type=Path, help="Spreadsheet, CSV, PDF, Word or text file")
    parser.add_argument("--type", choices=[t.value for t in SourceType if t != SourceType.UNKNOWN],
                        help="Document kind (default: from the file extension)")
    parser.add_argument("--keywords", help="Keyword mapping id")
    parser.add_argument("--max-pages", type=int, help="PDF pages to read")
    parser.add_argument("--metrics", action="store_true", help="Include dashboard metrics in the output")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        result = import_document(
            args.file,
            source_type=SourceType(args.type) if args.type else None,
            keywords=get_field_keywords(args.keywords) if args.keywords else None,
            max_pages=args.max_pages,
        )
    except (DecodeError, NoTableStructureError) as e:
        print(f"Import failed: {e}", file=sys.stderr)
        return 1

    output = {
        "records": [record.to_dict() for record in result.records],
        "diagnostics": result.diagnostics.to_list(),
    }
    if args.metrics:
        output["metrics"] = compute_dashboard_metrics(result.records).to_dict()

    print(json.dumps(output, ensure_ascii=False, indent=2))
    return 2 if result.is_empty else 0


if __name__ == "__main__":
    sys.exit(main())
