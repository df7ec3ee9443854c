"""Spreadsheet codec: canonical transactions ⇄ rows keyed by Korean headers.

Public entry points:

  to_rows(transactions)   – export rows, input order preserved
  from_rows(rows)         – import rows → ImportResult (normalized, filtered)
  template_rows()         – example rows for the downloadable import template

Rows are plain dicts; reading and writing actual ``.xlsx`` bytes is
``workbook``'s job.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Mapping, Sequence

from ..schemas import Transaction
from .normalizer import (
    DEFAULT_CATEGORY,
    Clock,
    IdFactory,
    new_transaction_id,
    normalize,
    parse_amount,
    parse_type,
    recover_date,
    system_today,
    type_label,
)

logger = logging.getLogger(__name__)

Row = dict[str, Any]

# ─────────────────────────────────────────────────────────────────────────────
# Header layout
# ─────────────────────────────────────────────────────────────────────────────

COL_DATE = "날짜"
COL_TYPE = "유형"
COL_CATEGORY = "카테고리"
COL_DESCRIPTION = "내역"
COL_AMOUNT = "금액"
COL_RECEIPT = "영수증 유무"

EXPORT_HEADERS = [COL_DATE, COL_TYPE, COL_CATEGORY, COL_DESCRIPTION, COL_AMOUNT, COL_RECEIPT]

RECEIPT_YES = "O"
RECEIPT_NO = "X"


def format_locale_date(iso: str) -> str:
    """``2024-01-05`` → ``2024. 1. 5.`` (Korean locale short date)."""
    try:
        d = date.fromisoformat(iso)
    except ValueError:
        return iso
    return f"{d.year:04d}. {d.month}. {d.day}."


def _amount_cell(amount: float) -> int | float:
    return int(amount) if float(amount).is_integer() else amount


# ─────────────────────────────────────────────────────────────────────────────
# Export
# ─────────────────────────────────────────────────────────────────────────────


def to_row(t: Transaction) -> Row:
    return {
        COL_DATE: format_locale_date(t.date),
        COL_TYPE: type_label(t.type),
        COL_CATEGORY: t.category,
        COL_DESCRIPTION: t.description,
        COL_AMOUNT: _amount_cell(t.amount),
        COL_RECEIPT: RECEIPT_YES if t.receipt else RECEIPT_NO,
    }


def to_rows(transactions: Iterable[Transaction]) -> list[Row]:
    """Map transactions to export rows.  Callers sort beforehand if needed."""
    return [to_row(t) for t in transactions]


# ─────────────────────────────────────────────────────────────────────────────
# Import
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ImportResult:
    transactions: tuple[Transaction, ...]
    total_rows: int

    @property
    def accepted(self) -> int:
        return len(self.transactions)

    @property
    def skipped(self) -> int:
        return self.total_rows - len(self.transactions)

    @property
    def is_empty(self) -> bool:
        """True when no row survived the validity filter ("no valid rows")."""
        return not self.transactions


def row_to_raw(row: Mapping[str, Any], today: Clock = system_today) -> dict[str, Any]:
    """Translate one spreadsheet row into a store-shaped raw record.

    The receipt column only signals presence, so no receipt is carried over.
    """
    return {
        "date": recover_date(row.get(COL_DATE), today),
        "type": parse_type(row.get(COL_TYPE)),
        "category": row.get(COL_CATEGORY) or DEFAULT_CATEGORY,
        "description": row.get(COL_DESCRIPTION) or "",
        "amount": parse_amount(row.get(COL_AMOUNT)),
    }


def from_rows(
    rows: Sequence[Mapping[str, Any]],
    *,
    today: Clock = system_today,
    id_factory: IdFactory = new_transaction_id,
) -> ImportResult:
    """Convert spreadsheet rows into canonical transactions.

    Rows whose amount is not strictly positive are dropped (blank rows,
    header artefacts, ``0`` and negative amounts).  Ids are assigned by the
    normalizer.
    """
    accepted: list[Transaction] = []
    for index, row in enumerate(rows):
        raw = row_to_raw(row, today)
        if raw["amount"] <= 0:
            logger.debug("row %d dropped: amount %r", index, row.get(COL_AMOUNT))
            continue
        accepted.append(normalize(raw, today=today, id_factory=id_factory))

    result = ImportResult(transactions=tuple(accepted), total_rows=len(rows))
    logger.info("spreadsheet import: %d of %d rows accepted", result.accepted, result.total_rows)
    return result


# ─────────────────────────────────────────────────────────────────────────────
# Import template
# ─────────────────────────────────────────────────────────────────────────────


def template_rows() -> list[Row]:
    return [
        {
            COL_DATE: "2024-01-15",
            COL_TYPE: "지출",
            COL_CATEGORY: "간식",
            COL_DESCRIPTION: "학생회 회의 간식",
            COL_AMOUNT: 50000,
            COL_RECEIPT: RECEIPT_YES,
        },
        {
            COL_DATE: "2024-01-10",
            COL_TYPE: "수입",
            COL_CATEGORY: "학생회비",
            COL_DESCRIPTION: "2024년 1학기 학생회비",
            COL_AMOUNT: 5000000,
            COL_RECEIPT: RECEIPT_NO,
        },
    ]
