from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

TxType = Literal["income", "expense"]


# ─────────────────────────────────────────────────────────────────────────────
# Health
# ─────────────────────────────────────────────────────────────────────────────


class HealthResponse(BaseModel):
    status: str
    version: str


# ─────────────────────────────────────────────────────────────────────────────
# Canonical transaction
# ─────────────────────────────────────────────────────────────────────────────


class Transaction(BaseModel):
    """The canonical ledger record every engine component operates on.

    Instances are frozen; corrections are modelled as delete + re-create.
    ``amount`` is always non-negative, the direction lives in ``type``.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    date: str                      # YYYY-MM-DD
    category: str
    amount: float = Field(ge=0)
    description: str = ""
    type: TxType
    receipt: Optional[str] = None


class TransactionCreate(BaseModel):
    """Expense-form payload.  Category, amount and description are mandatory."""

    date: Optional[str] = None
    type: TxType = "expense"
    category: str = Field(min_length=1)
    amount: float = Field(gt=0)
    description: str = Field(min_length=1)
    receipt_url: Optional[str] = None

    @field_validator("category", "description")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


class Summary(BaseModel):
    count: int
    income: float
    expense: float


class TransactionListResponse(BaseModel):
    summary: Summary
    items: list[Transaction]


# ─────────────────────────────────────────────────────────────────────────────
# Reports
# ─────────────────────────────────────────────────────────────────────────────


class Totals(BaseModel):
    income: float
    expense: float
    balance: float


class CategorySlice(BaseModel):
    name: str
    value: float
    percent: float


class DashboardResponse(BaseModel):
    month: str
    totals: Totals
    budget: int
    budget_usage_pct: float
    categories: list[CategorySlice]
    recent: list[Transaction]
    transaction_count: int


class MonthTotals(BaseModel):
    month: str
    income: float
    expense: float
    balance: float


# ─────────────────────────────────────────────────────────────────────────────
# Spreadsheet import
# ─────────────────────────────────────────────────────────────────────────────


class ImportResponse(BaseModel):
    filename: str
    total_rows: int
    inserted: int
    skipped: int


# ─────────────────────────────────────────────────────────────────────────────
# Known categories
# ─────────────────────────────────────────────────────────────────────────────


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class CategorySchema(BaseModel):
    model_config = {"from_attributes": True}
    id: int
    name: str
    is_default: bool
    created_at: datetime
