from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .database import init_db
from .routers import categories, reports, spreadsheets, transactions
from .schemas import HealthResponse

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # ── Startup ───────────────────────────────────────────────────────────────
    config.configure_logging()
    init_db()
    yield
    # ── Shutdown (nothing needed for SQLite) ──────────────────────────────────


app = FastAPI(
    title="Ledgerbook",
    description="Student council ledger with spreadsheet import/export and a monthly dashboard.",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(transactions.router)
app.include_router(reports.router)
app.include_router(spreadsheets.router)
app.include_router(categories.router)


@app.get("/health", response_model=HealthResponse, tags=["meta"])
def health():
    return {"status": "ok", "version": VERSION}
