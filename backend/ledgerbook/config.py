"""Runtime settings and logging setup.

Settings are plain module attributes read from ``LEDGERBOOK_*`` environment
variables at import time.  Code that needs a setting reads it through the
module (``config.API_TOKEN``) rather than importing the value.
"""

import logging
import os
import sys
from pathlib import Path
from typing import IO, Optional

_PKG_LOGGER_NAME = "ledgerbook"
_CONFIGURED = False

# backend/ lives one level above the package
BACKEND_DIR = Path(__file__).parent.parent


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if not raw:
        return default
    return [part.strip() for part in raw.split(",") if part.strip()]


# ── Storage ───────────────────────────────────────────────────────────────────

DB_PATH = Path(os.getenv("LEDGERBOOK_DB_PATH", str(BACKEND_DIR / "data" / "ledgerbook.db")))
DATABASE_URL = f"sqlite:///{DB_PATH}"

# ── Access ────────────────────────────────────────────────────────────────────

# Bearer token required for mutating endpoints when set.
API_TOKEN: Optional[str] = os.getenv("LEDGERBOOK_API_TOKEN") or None

CORS_ORIGINS = _env_list(
    "LEDGERBOOK_CORS_ORIGINS",
    ["http://localhost:5173", "http://127.0.0.1:5173"],
)

# ── Ledger ────────────────────────────────────────────────────────────────────

ORG_NAME = os.getenv("LEDGERBOOK_ORG_NAME", "학생회_회계")
MONTHLY_BUDGET = _env_int("LEDGERBOOK_MONTHLY_BUDGET", 5_000_000)
MAX_UPLOAD_BYTES = _env_int("LEDGERBOOK_MAX_UPLOAD_BYTES", 10 * 1024 * 1024)

LOG_LEVEL = os.getenv("LEDGERBOOK_LOG_LEVEL", "INFO")


# ── Logging ───────────────────────────────────────────────────────────────────


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        name = level.strip().upper()
        if name.isdigit():
            return int(name)
        numeric = getattr(logging, name, None)
        if isinstance(numeric, int):
            return numeric
    return logging.INFO


def configure_logging(level: int | str | None = None, *, stream: IO[str] = sys.stderr) -> None:
    """Attach one stream handler to the ``ledgerbook`` logger, once per process.

    Library modules only call ``logging.getLogger(__name__)``; this is the
    single place handlers are installed.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    resolved = _parse_level(level if level is not None else LOG_LEVEL)
    logger = logging.getLogger(_PKG_LOGGER_NAME)
    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True
