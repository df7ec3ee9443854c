"""Store adapter: stored rows ⇄ raw records ⇄ canonical transactions.

Stored rows are read back as raw records and pushed through the normalizer
like any other source, so whatever the table holds surfaces in canonical
form.
"""

import logging
from typing import Any, Iterable

from sqlalchemy.orm import Session

from ..models import LedgerEntry
from ..schemas import Transaction, TransactionCreate
from .normalizer import Clock, IdFactory, new_transaction_id, normalize, normalize_all, system_today
from .reporter import sort_by_date

logger = logging.getLogger(__name__)


def row_to_raw(entry: LedgerEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "date": entry.date,
        "category": entry.category,
        "amount": entry.amount,
        "description": entry.description,
        "type": entry.type,
        "receipt_url": entry.receipt_url,
    }


def to_entry(t: Transaction) -> LedgerEntry:
    return LedgerEntry(
        id=t.id,
        date=t.date,
        category=t.category,
        amount=t.amount,
        description=t.description,
        type=t.type,
        receipt_url=t.receipt,
    )


def load_transactions(db: Session, *, today: Clock = system_today) -> list[Transaction]:
    """All stored transactions, newest date first (ties: most recently created first).

    Ordering uses the normalized date, so stored strings like ``2024.1.5``
    or blanks sort where they surface.
    """
    entries = db.query(LedgerEntry).order_by(LedgerEntry.created_at.desc()).all()
    return sort_by_date(normalize_all([row_to_raw(e) for e in entries], today=today))


def create_transaction(
    db: Session,
    payload: TransactionCreate,
    *,
    today: Clock = system_today,
    id_factory: IdFactory = new_transaction_id,
) -> Transaction:
    raw = payload.model_dump()
    tx = normalize(raw, today=today, id_factory=id_factory)
    db.add(to_entry(tx))
    db.commit()
    logger.info("transaction %s created (%s %s)", tx.id, tx.type, tx.amount)
    return tx


def insert_transactions(db: Session, txs: Iterable[Transaction]) -> int:
    inserted = 0
    try:
        for t in txs:
            db.add(to_entry(t))
            inserted += 1
        db.commit()
    except Exception:
        db.rollback()
        raise
    return inserted


def delete_transaction(db: Session, tx_id: str) -> bool:
    """Remove a transaction by id.  Returns False when no such id exists."""
    entry = db.get(LedgerEntry, tx_id)
    if entry is None:
        return False
    db.delete(entry)
    db.commit()
    logger.info("transaction %s deleted", tx_id)
    return True
