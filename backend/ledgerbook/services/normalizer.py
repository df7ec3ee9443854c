"""Record normalization shared by every ingest path.

Covers:
  - Field-alias resolution (store rows use ``data``/``desc``/``receipt_url``)
  - Amount coercion (numbers, numeric strings, ``₩50,000``, garbage → 0)
  - Type coercion (``income`` / ``수입`` → income, everything else → expense)
  - Date recovery (``2024.1.5``, ``2024. 1. 5.``, date cells, clock fallback)

``normalize`` is total: any mapping yields a fully populated Transaction.
"""

import logging
import math
import numbers
import re
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Iterable, Mapping

from ..schemas import Transaction, TxType

logger = logging.getLogger(__name__)

Clock = Callable[[], date]
IdFactory = Callable[[], str]

DEFAULT_CATEGORY = "기타"
INCOME_WORD = "수입"
EXPENSE_WORD = "지출"

# ─────────────────────────────────────────────────────────────────────────────
# Field aliases  (canonical field → raw keys, first present wins)
# ─────────────────────────────────────────────────────────────────────────────

FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "id":          ("id",),
    "date":        ("date", "data"),
    "category":    ("category",),
    "amount":      ("amount",),
    "description": ("description", "desc"),
    "type":        ("type",),
    "receipt":     ("receipt", "receipt_url"),
}


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def resolve_field(raw: Mapping[str, Any], field: str) -> Any:
    """Return the first present value among *field*'s aliases, or None."""
    for key in FIELD_ALIASES[field]:
        value = raw.get(key)
        if _is_present(value):
            return value
    return None


def system_today() -> date:
    return date.today()


def new_transaction_id() -> str:
    return uuid.uuid4().hex


def get_clock() -> Clock:
    """FastAPI dependency providing the clock; tests override it to pin today."""
    return system_today


# ─────────────────────────────────────────────────────────────────────────────
# Date recovery
# ─────────────────────────────────────────────────────────────────────────────

# 2024-01-15 | 2024.1.5 | 2024. 1. 5. | 2024-01-15T09:30:00Z
_DATE_RE = re.compile(r"(\d{4})\s*[.\-]\s*(\d{1,2})\s*[.\-]\s*(\d{1,2})")


def recover_date(value: Any, today: Clock = system_today) -> str:
    """Return a zero-padded YYYY-MM-DD string for *value*.

    Unmatched or impossible dates fall back to ``today()``.  This is a lossy
    recovery: a bad cell is silently re-dated instead of failing the row.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        m = _DATE_RE.search(value)
        if m:
            year, month, day = (int(g) for g in m.groups())
            try:
                return date(year, month, day).isoformat()
            except ValueError:
                pass
    fallback = today().isoformat()
    logger.debug("unrecognised date %r, using %s", value, fallback)
    return fallback


# ─────────────────────────────────────────────────────────────────────────────
# Amount coercion
# ─────────────────────────────────────────────────────────────────────────────

_AMOUNT_NOISE_RE = re.compile(r"[,\s₩원]")


def parse_amount(value: Any) -> float:
    """Parse a numeric cell without clamping.

    Handles:
      50000  |  50000.5  |  Decimal("5000")  |  "50,000"  |  "₩50,000"  |  "50,000원"
    Returns 0.0 for anything that is not a finite number.
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, str):
        value = _AMOUNT_NOISE_RE.sub("", value)
    elif not isinstance(value, (numbers.Real, Decimal)):
        return 0.0
    try:
        number = float(value)
    except (OverflowError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def coerce_amount(value: Any) -> float:
    """Canonical amount: parsed, with negatives clamped to 0."""
    amount = parse_amount(value)
    if amount < 0:
        logger.debug("negative amount %r clamped to 0", value)
        return 0.0
    return amount


# ─────────────────────────────────────────────────────────────────────────────
# Type coercion
# ─────────────────────────────────────────────────────────────────────────────


def parse_type(value: Any) -> TxType:
    if isinstance(value, str):
        v = value.strip()
        if v == INCOME_WORD or v.casefold() == "income":
            return "income"
    return "expense"


def type_label(tx_type: TxType) -> str:
    """Localized word for a transaction type (``수입`` / ``지출``)."""
    return INCOME_WORD if tx_type == "income" else EXPENSE_WORD


# ─────────────────────────────────────────────────────────────────────────────
# Record normalization
# ─────────────────────────────────────────────────────────────────────────────


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def normalize(
    raw: Mapping[str, Any],
    *,
    today: Clock = system_today,
    id_factory: IdFactory = new_transaction_id,
) -> Transaction:
    """Coerce a loosely-shaped record into a canonical Transaction.

    Never raises for a mapping input: malformed fields degrade to
    ``amount=0``, ``type='expense'``, ``description=''``,
    ``category='기타'`` and today's date.
    """
    raw_id = resolve_field(raw, "id")
    receipt = resolve_field(raw, "receipt")

    return Transaction(
        id=_text(raw_id) if raw_id is not None else id_factory(),
        date=recover_date(resolve_field(raw, "date"), today),
        category=_text(resolve_field(raw, "category")) or DEFAULT_CATEGORY,
        amount=coerce_amount(resolve_field(raw, "amount")),
        description=_text(resolve_field(raw, "description")),
        type=parse_type(resolve_field(raw, "type")),
        receipt=str(receipt) if receipt is not None else None,
    )


def normalize_all(
    raws: Iterable[Mapping[str, Any]],
    *,
    today: Clock = system_today,
    id_factory: IdFactory = new_transaction_id,
) -> list[Transaction]:
    return [normalize(r, today=today, id_factory=id_factory) for r in raws]
