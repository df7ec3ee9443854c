"""Filter/search over canonical transactions.

All active predicates are AND-combined.  The result keeps the input order;
list views sort with ``reporter.sort_by_date`` before filtering.
"""

import calendar
import re
from typing import Iterable, Literal, Optional

from pydantic import BaseModel, field_validator

from ..schemas import Summary, Transaction
from .reporter import totals

ALL = "all"

_BOUND_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])(-\d{2})?$")


def _expand_from(s: str) -> str:
    """YYYY-MM → YYYY-MM-01; YYYY-MM-DD passes through."""
    return f"{s}-01" if len(s) == 7 else s


def _expand_to(s: str) -> str:
    """YYYY-MM → YYYY-MM-{last_day}; YYYY-MM-DD passes through."""
    if len(s) != 7:
        return s
    y, m = int(s[:4]), int(s[5:7])
    return f"{s}-{calendar.monthrange(y, m)[1]:02d}"


class FilterCriteria(BaseModel):
    text: Optional[str] = None
    category: str = ALL
    type: Literal["all", "income", "expense"] = ALL
    date_from: Optional[str] = None   # inclusive, YYYY-MM-DD or YYYY-MM
    date_to: Optional[str] = None     # inclusive, YYYY-MM-DD or YYYY-MM
    search_category: bool = False     # also match text against the category

    @field_validator("date_from", "date_to")
    @classmethod
    def _check_bound(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        v = v.strip()
        if not _BOUND_RE.match(v):
            raise ValueError(f"invalid date bound {v!r}, expected YYYY-MM-DD or YYYY-MM")
        return v

    def bounds(self) -> tuple[Optional[str], Optional[str]]:
        lo = _expand_from(self.date_from) if self.date_from else None
        hi = _expand_to(self.date_to) if self.date_to else None
        return lo, hi


def _matches(
    t: Transaction,
    c: FilterCriteria,
    needle: str,
    lo: Optional[str],
    hi: Optional[str],
) -> bool:
    if c.category != ALL and t.category != c.category:
        return False
    if c.type != ALL and t.type != c.type:
        return False
    if lo and t.date < lo:
        return False
    if hi and t.date > hi:
        return False
    if needle:
        haystacks = [t.description]
        if c.search_category:
            haystacks.append(t.category)
        if not any(needle in h.casefold() for h in haystacks):
            return False
    return True


def filter_transactions(
    txs: Iterable[Transaction],
    criteria: Optional[FilterCriteria] = None,
) -> list[Transaction]:
    c = criteria or FilterCriteria()
    needle = (c.text or "").strip().casefold()
    lo, hi = c.bounds()
    return [t for t in txs if _matches(t, c, needle, lo, hi)]


def summarize(filtered: list[Transaction]) -> Summary:
    """Count and income/expense sums via the same path as the dashboard."""
    t = totals(filtered)
    return Summary(count=len(filtered), income=t.income, expense=t.expense)


def distinct_categories(txs: Iterable[Transaction]) -> list[str]:
    """Categories in use, first-seen order."""
    seen: dict[str, None] = {}
    for t in txs:
        seen.setdefault(t.category, None)
    return list(seen)
