import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from .. import config
from ..database import get_db
from ..schemas import ImportResponse
from ..security import RequireAdmin
from ..services import store, workbook
from ..services.normalizer import Clock, get_clock
from ..services.spreadsheet import EXPORT_HEADERS, from_rows, template_rows, to_rows

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/spreadsheets", tags=["spreadsheets"])

_XLSX_EXTENSIONS = (".xlsx", ".xlsm")


def _download(content: bytes, filename: str) -> StreamingResponse:
    # header values must stay latin-1; the real name goes in filename* (RFC 5987)
    disposition = f"attachment; filename=\"ledger.xlsx\"; filename*=UTF-8''{quote(filename)}"
    return StreamingResponse(
        iter([content]),
        media_type=workbook.XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": disposition},
    )


def _require_xlsx(file: UploadFile) -> None:
    name = (file.filename or "").lower()
    if not name.endswith(_XLSX_EXTENSIONS):
        raise HTTPException(status_code=422, detail="Only .xlsx files are accepted.")


def _require_size(content: bytes) -> None:
    if not content:
        raise HTTPException(status_code=422, detail="Uploaded file is empty.")
    if len(content) > config.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=422,
            detail=f"File exceeds the {config.MAX_UPLOAD_BYTES // (1024 * 1024)} MB limit.",
        )


@router.get("/export", summary="Download every transaction as .xlsx")
def export_workbook(db: Session = Depends(get_db), today: Clock = Depends(get_clock)):
    txs = store.load_transactions(db, today=today)
    content = workbook.write_rows(to_rows(txs), EXPORT_HEADERS, workbook.EXPORT_SHEET)
    return _download(content, workbook.export_filename(config.ORG_NAME, today()))


@router.get("/template", summary="Download the import template")
def download_template():
    content = workbook.write_rows(template_rows(), EXPORT_HEADERS, workbook.TEMPLATE_SHEET)
    return _download(content, f"{config.ORG_NAME}_템플릿.xlsx")


@router.post(
    "/import",
    response_model=ImportResponse,
    dependencies=[RequireAdmin],
    summary="Import transactions from an .xlsx ledger",
)
async def import_workbook(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    today: Clock = Depends(get_clock),
):
    _require_xlsx(file)
    content = await file.read()
    _require_size(content)

    try:
        rows = workbook.read_rows(content)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    result = from_rows(rows, today=today)
    if result.is_empty:
        raise HTTPException(status_code=422, detail="유효한 데이터가 없습니다")

    inserted = store.insert_transactions(db, result.transactions)
    logger.info("imported %d transactions from %s", inserted, file.filename)
    return ImportResponse(
        filename=file.filename or "upload.xlsx",
        total_rows=result.total_rows,
        inserted=inserted,
        skipped=result.skipped,
    )
