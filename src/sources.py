"""
Source detection and grid extraction utilities.

Supports the document kinds the fleet import accepts: XLSX, CSV, PDF,
Word (.docx) and raw tab-separated text. Every reader returns the same
shape: a list of rows, each a list of raw cell values (str, int, float or None).
"""

from typing import Any, List, Optional, Union
from pathlib import Path
from enum import Enum
from datetime import date, datetime
import csv
import io
import logging
import math
import zipfile

import numpy as np
import pandas as pd
from docx import Document
from docx.table import Table

from ocr import extract_text_from_pdf, blocks_to_grid

logger = logging.getLogger(__name__)

CellValue = Union[str, int, float, None]
Grid = List[List[CellValue]]
Source = Union[str, Path, bytes]

TEXT_ENCODINGS = ("utf-8-sig", "cp874")

# Legacy Excel workbooks are OLE2 compound files
OLE2_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


class DecodeError(Exception):
    """Raised when a source cannot be read as the declared kind."""

    def __init__(self, message: str, source_type: Optional["SourceType"] = None):
        super().__init__(message)
        self.source_type = source_type


class SourceType(Enum):
    """Supported document kinds."""
    XLSX = "xlsx_file"
    XLS = "xls_file"
    CSV = "csv"
    PDF = "pdf"
    DOCX = "docx"
    RAW_TEXT = "raw_text"
    UNKNOWN = "unknown"


EXTENSION_TYPES = {
    ".xlsx": SourceType.XLSX,
    ".xlsm": SourceType.XLSX,
    ".xls": SourceType.XLS,
    ".csv": SourceType.CSV,
    ".pdf": SourceType.PDF,
    ".docx": SourceType.DOCX,
    ".txt": SourceType.RAW_TEXT,
    ".tsv": SourceType.RAW_TEXT,
}

EXCEL_ENGINES = {
    SourceType.XLSX: "openpyxl",
    SourceType.XLS: "xlrd",
}


def _sniff_bytes(data: bytes) -> SourceType:
    if data.startswith(b"%PDF"):
        return SourceType.PDF
    if data.startswith(OLE2_SIGNATURE):
        return SourceType.XLS
    if data.startswith(b"PK"):
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as z:
                names = z.namelist()
        except zipfile.BadZipFile:
            return SourceType.UNKNOWN
        if any(name.startswith("word/") for name in names):
            return SourceType.DOCX
        if any(name.startswith("xl/") for name in names):
            return SourceType.XLSX
    return SourceType.UNKNOWN


def detect_source_type(source: Source) -> SourceType:
    """
    Detect the type of a document.

    Args:
        source: File path / file name, or raw bytes (sniffed by signature)

    Returns:
        SourceType enum value
    """
    if isinstance(source, (bytes, bytearray)):
        return _sniff_bytes(bytes(source))

    suffix = Path(str(source)).suffix.lower()
    return EXTENSION_TYPES.get(suffix, SourceType.UNKNOWN)


def _read_bytes(source: Source) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    file_path = Path(source)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")
    return file_path.read_bytes()


def _decode_text(data: bytes) -> str:
    for encoding in TEXT_ENCODINGS:
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise UnicodeDecodeError("text", data, 0, len(data), f"not decodable as any of {TEXT_ENCODINGS}")


def _clean_cell(value: Any) -> CellValue:
    """Convert a spreadsheet cell to a plain Python value."""
    if isinstance(value, np.generic):
        value = value.item()
    if value is None:
        return None
    if isinstance(value, float):
        if math.isnan(value):
            return None
        return int(value) if value.is_integer() else value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (int, str)):
        return value
    if pd.isna(value):
        return None
    return str(value)


def rows_from_text(text: str) -> Grid:
    """
    Split plain text into a grid: one row per non-blank line, cells on tabs.
    """
    rows: Grid = []
    for line in text.splitlines():
        if not line.strip():
            continue
        rows.append(line.split("\t"))
    return rows


def _extract_excel(source: Source, source_type: SourceType) -> Grid:
    data = _read_bytes(source)
    # header=None keeps every row; the header row is located later
    df = pd.read_excel(io.BytesIO(data), sheet_name=0, header=None, dtype=object, engine=EXCEL_ENGINES[source_type])
    return [[_clean_cell(value) for value in row] for row in df.itertuples(index=False, name=None)]


def _extract_csv(source: Source) -> Grid:
    text = _decode_text(_read_bytes(source))
    reader = csv.reader(io.StringIO(text))
    return [row for row in reader]


def _extract_pdf(source: Source, max_pages: Optional[int]) -> Grid:
    data = _read_bytes(source)
    text_blocks, metadata = extract_text_from_pdf(data, max_pages=max_pages)
    grid = blocks_to_grid(text_blocks)
    logger.debug(f"[PDF] {metadata.pages_read}/{metadata.page_count} pages -> {len(grid)} rows")
    return grid


def _extract_docx(source: Source) -> Grid:
    document = Document(io.BytesIO(_read_bytes(source)))
    rows: Grid = []

    for item in document.iter_inner_content():
        if isinstance(item, Table):
            for table_row in item.rows:
                rows.append([cell.text.strip() for cell in table_row.cells])
        else:
            rows.extend(rows_from_text(item.text))

    return rows


def extract_from_source(
    source: Source,
    source_type: Optional[SourceType] = None,
    max_pages: Optional[int] = None,
) -> Grid:
    """
    Extract a raw 2D grid from a document.

    Args:
        source: File path, or the document's raw bytes
        source_type: Optional explicit source type (auto-detected if not provided)
        max_pages: PDF only, maximum number of pages to read

    Returns:
        2D list of values (rows x columns)

    Raises:
        DecodeError: If the type is unsupported or the document cannot be read
    """
    if source_type is None:
        source_type = detect_source_type(source)

    logger.debug(f"[Source] Reading {source_type.value} source")

    try:
        if source_type in EXCEL_ENGINES:
            return _extract_excel(source, source_type)
        elif source_type == SourceType.CSV:
            return _extract_csv(source)
        elif source_type == SourceType.PDF:
            return _extract_pdf(source, max_pages)
        elif source_type == SourceType.DOCX:
            return _extract_docx(source)
        elif source_type == SourceType.RAW_TEXT:
            return rows_from_text(_decode_text(_read_bytes(source)))
    except Exception as e:
        raise DecodeError(f"Cannot read {source_type.value} source: {e}", source_type) from e

    raise DecodeError(
        "Unsupported file type (use .xlsx, .xls, .csv, .pdf, .docx or .txt)",
        source_type,
    )
