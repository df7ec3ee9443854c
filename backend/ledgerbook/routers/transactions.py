from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import Transaction, TransactionCreate, TransactionListResponse
from ..security import RequireAdmin
from ..services import store
from ..services.filters import FilterCriteria, distinct_categories, filter_transactions, summarize
from ..services.normalizer import Clock, get_clock

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("/", response_model=TransactionListResponse, summary="List transactions")
def list_transactions(
    q: Optional[str] = Query(default=None, description="Search text (description)"),
    category: str = Query(default="all", description="Category name or 'all'"),
    tx_type: Literal["all", "income", "expense"] = Query(default="all", alias="type"),
    date_from: Optional[str] = Query(default=None, description="From date (YYYY-MM-DD or YYYY-MM)"),
    date_to: Optional[str] = Query(default=None, description="To date (YYYY-MM-DD or YYYY-MM)"),
    search_category: bool = Query(default=False, description="Also match search text against category"),
    db: Session = Depends(get_db),
    today: Clock = Depends(get_clock),
):
    try:
        criteria = FilterCriteria(
            text=q,
            category=category,
            type=tx_type,
            date_from=date_from,
            date_to=date_to,
            search_category=search_category,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False))

    # load_transactions returns newest-first; filtering keeps that order
    items = filter_transactions(store.load_transactions(db, today=today), criteria)
    return {"summary": summarize(items), "items": items}


@router.get("/categories", response_model=list[str], summary="Categories currently in use")
def list_used_categories(db: Session = Depends(get_db), today: Clock = Depends(get_clock)):
    return distinct_categories(store.load_transactions(db, today=today))


@router.post(
    "/",
    response_model=Transaction,
    status_code=201,
    dependencies=[RequireAdmin],
    summary="Record an income or expense",
)
def create_transaction(
    payload: TransactionCreate,
    db: Session = Depends(get_db),
    today: Clock = Depends(get_clock),
):
    return store.create_transaction(db, payload, today=today)


@router.delete(
    "/{tx_id}",
    status_code=204,
    dependencies=[RequireAdmin],
    summary="Permanently delete a transaction",
)
def delete_transaction(tx_id: str, db: Session = Depends(get_db)):
    if not store.delete_transaction(db, tx_id):
        raise HTTPException(status_code=404, detail="Transaction not found")
