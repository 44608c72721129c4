"""Workbook and CSV codecs for bulk import and export."""

import csv
import logging
from datetime import date
from io import BytesIO, StringIO
from pathlib import Path
from typing import Any, Optional, Sequence

import openpyxl
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from .models import EXPORT_COLUMNS, JobApplicationRecord

logger = logging.getLogger(__name__)

DEFAULT_SHEET_NAME = "Job Entries"


class ImportParseError(Exception):
    """Raised when an import file cannot be decoded."""


def read_rows(content: bytes) -> list[dict[str, Any]]:
    """Decode the first worksheet into one dict per data row.

    The first row holds the headers. Columns without a header and fully
    blank rows are skipped.
    """
    try:
        wb = openpyxl.load_workbook(BytesIO(content), data_only=True)
    except Exception as e:
        raise ImportParseError(f"Failed to parse Excel file: {e}") from e

    try:
        ws = wb.worksheets[0]
        rows = ws.iter_rows(values_only=True)
        header_row = next(rows, None)
        if header_row is None:
            logger.info("Workbook has no header row")
            return []

        headers = [str(cell).strip() if cell is not None else None for cell in header_row]

        result = []
        for values in rows:
            row = {
                header: value
                for header, value in zip(headers, values)
                if header and value is not None
            }
            if row:
                result.append(row)
    finally:
        wb.close()

    logger.info(f"Read {len(result)} rows from worksheet {ws.title!r}")
    return result


def read_csv_rows(content: bytes) -> list[dict[str, Any]]:
    """Decode UTF-8 CSV text into one dict per data row.

    Same shape as ``read_rows``: header keys are stripped, blank cells and
    fully blank rows are dropped.
    """
    try:
        text = content.decode("utf-8-sig")
        reader = csv.DictReader(StringIO(text, newline=""))
        result = []
        for raw in reader:
            row = {
                key.strip(): value
                for key, value in raw.items()
                if key and key.strip() and isinstance(value, str) and value.strip()
            }
            if row:
                result.append(row)
    except (UnicodeDecodeError, csv.Error) as e:
        raise ImportParseError(f"Failed to parse CSV file: {e}") from e

    logger.info(f"Read {len(result)} rows from CSV")
    return result


def read_file_rows(path: Path) -> list[dict[str, Any]]:
    """Pick the decoder by file suffix; anything other than ``.csv`` is a workbook."""
    path = Path(path)
    content = path.read_bytes()
    if path.suffix.lower() == ".csv":
        return read_csv_rows(content)
    return read_rows(content)


def _cell_value(value: Any) -> Any:
    if isinstance(value, str):
        # openpyxl refuses control characters that XML cannot carry
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


def write_rows(
    records: Sequence[JobApplicationRecord], sheet_name: str = DEFAULT_SHEET_NAME
) -> bytes:
    """Encode ``records`` as a single-sheet workbook keyed by stored field names.

    Every string is written as a literal text cell, so values such as
    ``=follow up`` are never stored as formulas.
    """
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = sheet_name

    rows = [EXPORT_COLUMNS] + [record.to_row() for record in records]
    for row_idx, values in enumerate(rows, start=1):
        for col_idx, value in enumerate(values, start=1):
            cell = ws.cell(row=row_idx, column=col_idx, value=_cell_value(value))
            if isinstance(value, str):
                cell.data_type = "s"

    buffer = BytesIO()
    wb.save(buffer)
    logger.info(f"Wrote {len(records)} rows to worksheet {sheet_name!r}")
    return buffer.getvalue()


def export_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"job_tracker_export_{today.isoformat()}.xlsx"
