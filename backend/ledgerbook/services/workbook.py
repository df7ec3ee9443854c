"""Spreadsheet file I/O using openpyxl.

Public surface:
    read_rows(content: bytes) -> list[dict]
        First worksheet, first row = headers, one dict per following row.
        Fully blank rows are skipped; the codec decides what else is valid.
    write_rows(rows, headers, sheet_title) -> bytes
        A single-sheet .xlsx with a bold header row.
    export_filename(org, day) -> str
"""

import io
import zipfile
from datetime import date
from typing import Any, Iterable, Mapping, Sequence

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

EXPORT_SHEET = "거래내역"
TEMPLATE_SHEET = "템플릿"

BOLD = Font(bold=True)


def _norm_header(v: Any) -> str:
    return "" if v is None else str(v).strip()


def _norm_cell(v: Any) -> Any:
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


def read_rows(content: bytes) -> list[dict[str, Any]]:
    """Decode an .xlsx file into header-keyed rows.

    Raises ValueError when the bytes are not a readable workbook.
    """
    try:
        wb = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as exc:
        raise ValueError(f"not a readable .xlsx workbook: {exc}") from exc

    try:
        ws = wb.worksheets[0] if wb.worksheets else None
        if ws is None:
            return []
        rows_iter = ws.iter_rows(values_only=True)
        header_row = next(rows_iter, None)
        if header_row is None:
            return []
        headers = [_norm_header(h) for h in header_row]

        rows: list[dict[str, Any]] = []
        for values in rows_iter:
            cells = [_norm_cell(v) for v in values]
            if all(c is None for c in cells):
                continue
            rows.append({h: c for h, c in zip(headers, cells) if h})
        return rows
    finally:
        wb.close()


def write_rows(
    rows: Iterable[Mapping[str, Any]],
    headers: Sequence[str],
    sheet_title: str = EXPORT_SHEET,
) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title

    ws.append(list(headers))
    for c in range(1, len(headers) + 1):
        ws.cell(row=1, column=c).font = BOLD

    for r in rows:
        ws.append([r.get(h, "") for h in headers])

    for c, h in enumerate(headers, start=1):
        ws.column_dimensions[get_column_letter(c)].width = max(12, len(h) * 2 + 4)

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def export_filename(org: str, day: date) -> str:
    """``<org>_<YYYY-MM-DD>.xlsx``"""
    return f"{org}_{day.isoformat()}.xlsx"
