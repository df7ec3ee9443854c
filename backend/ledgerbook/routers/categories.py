from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import KnownCategory
from ..schemas import CategoryCreate, CategorySchema
from ..security import RequireAdmin

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("/", response_model=list[CategorySchema], summary="List known categories")
def list_categories(db: Session = Depends(get_db)):
    return db.query(KnownCategory).order_by(KnownCategory.id).all()


@router.post(
    "/",
    response_model=CategorySchema,
    status_code=201,
    dependencies=[RequireAdmin],
    summary="Add a known category",
)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=422, detail="Category name must not be blank.")
    if db.query(KnownCategory).filter(KnownCategory.name == name).first():
        raise HTTPException(status_code=409, detail=f"Category '{name}' already exists.")
    cat = KnownCategory(name=name, is_default=False)
    db.add(cat)
    db.commit()
    db.refresh(cat)
    return cat
