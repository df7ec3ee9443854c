from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, Text

from .database import Base


class LedgerEntry(Base):
    """Stored transaction row.  Read back through the normalizer, never directly."""

    __tablename__ = "transactions"

    id = Column(String(64), primary_key=True)
    date = Column(String(10), nullable=False, index=True)        # YYYY-MM-DD
    category = Column(String(100), nullable=False)
    amount = Column(Float, nullable=False, default=0)
    description = Column(Text, nullable=False, default="")
    type = Column(String(10), nullable=False, default="expense")  # income | expense
    receipt_url = Column(Text, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))


class KnownCategory(Base):
    """Suggested category labels for the entry form.  Not a constraint."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
