import logging
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import Engine, create_engine, inspect
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from . import config

logger = logging.getLogger(__name__)

Base = declarative_base()

# Alembic script directory, used when running migrations programmatically
ALEMBIC_DIR = config.BACKEND_DIR / "alembic"

_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def make_engine(db_url: str) -> Engine:
    return create_engine(db_url, connect_args={"check_same_thread": False})


def get_engine() -> Engine:
    global _engine, _SessionLocal
    if _engine is None:
        _engine = make_engine(config.DATABASE_URL)
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_engine)
    return _engine


def _run_alembic_upgrade(db_url: str, *, is_new_db: bool = False) -> None:
    """Run Alembic migrations to head for the given SQLite DB URL.

    - Brand-new DBs: ``create_all`` already built the current schema, so the
      DB is only stamped at head.
    - Existing DBs with an ``alembic_version`` table: ``upgrade head``.
    - Existing DBs without one (created by ``create_all`` alone): stamp the
      baseline revision, then upgrade.
    """
    from alembic import command
    from alembic.config import Config

    alembic_cfg = Config()
    alembic_cfg.set_main_option("script_location", str(ALEMBIC_DIR))
    alembic_cfg.set_main_option("sqlalchemy.url", db_url)

    if is_new_db:
        command.stamp(alembic_cfg, "head")
        return

    tmp_engine = make_engine(db_url)
    try:
        has_alembic_version = "alembic_version" in inspect(tmp_engine).get_table_names()
    finally:
        tmp_engine.dispose()

    if not has_alembic_version:
        command.stamp(alembic_cfg, "0001")

    command.upgrade(alembic_cfg, "head")


def init_db(db_path: Optional[Path] = None) -> None:
    """Create tables, run migrations and seed the known-category registry."""
    from . import models  # noqa: F401  register tables on Base.metadata
    from .services.seeder import seed_categories

    path = db_path or config.DB_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    db_url = f"sqlite:///{path}"
    is_new_db = not path.exists()

    engine = get_engine() if path == config.DB_PATH else make_engine(db_url)
    try:
        Base.metadata.create_all(bind=engine)
        _run_alembic_upgrade(db_url, is_new_db=is_new_db)

        db = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
        try:
            seed_categories(db)
        finally:
            db.close()
    finally:
        if engine is not _engine:
            engine.dispose()
    logger.info("database ready at %s", path)


def get_db() -> Generator[Session, None, None]:
    get_engine()
    db = _SessionLocal()
    try:
        yield db
    finally:
        db.close()
