"""Reports router: monthly dashboard and per-month totals."""

import re
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from .. import config
from ..database import get_db
from ..schemas import DashboardResponse, MonthTotals
from ..services import store
from ..services.normalizer import Clock, get_clock
from ..services.reporter import dashboard, monthly_totals

router = APIRouter(prefix="/reports", tags=["reports"])

_MONTH_RE = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")


@router.get("/dashboard", response_model=DashboardResponse, summary="This month's dashboard")
def get_dashboard(
    month: Optional[str] = Query(default=None, description="YYYY-MM (defaults to the current month)"),
    recent: int = Query(default=5, ge=0, le=50),
    db: Session = Depends(get_db),
    today: Clock = Depends(get_clock),
):
    if month is None:
        d = today()
        year, mon = d.year, d.month
    else:
        m = _MONTH_RE.match(month)
        if not m:
            raise HTTPException(status_code=422, detail=f"month must be YYYY-MM, got {month!r}")
        year, mon = int(m.group(1)), int(m.group(2))

    txs = store.load_transactions(db, today=today)
    return dashboard(txs, year=year, month=mon, budget=config.MONTHLY_BUDGET, recent=recent)


@router.get("/monthly", response_model=list[MonthTotals], summary="Income and expense per month")
def get_monthly(db: Session = Depends(get_db), today: Clock = Depends(get_clock)):
    return monthly_totals(store.load_transactions(db, today=today))
