"""Database seeder: idempotent default category suggestions."""

from sqlalchemy.orm import Session

from ..models import KnownCategory

_DEFAULT_CATEGORIES = ["간식", "행사", "회의비", "물품구매", "학생회비", "기타"]


def seed_categories(db: Session) -> int:
    """Insert any missing default categories.  Returns the number added."""
    existing = {name for (name,) in db.query(KnownCategory.name).all()}
    added = 0
    for name in _DEFAULT_CATEGORIES:
        if name in existing:
            continue
        db.add(KnownCategory(name=name, is_default=True))
        added += 1
    if added:
        db.commit()
    return added
