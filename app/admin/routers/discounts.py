"""İndirim yönetimi: admin JSON CRUD ve sipariş tamamlanınca kullanım sayacı."""
import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from sqlmodel import Session, select

from app.core.database import get_db
from app.models import Discount
from app.schemas import AdminDiscountResponse, DiscountCreate, DiscountFields, DiscountUpdate
from app.services.discount_catalog import to_rule

router = APIRouter()
log = logging.getLogger("app.discounts.admin")

# Şema alanı -> tablo sütunu
_COLUMNS = {
    "discount_code": "code",
    "discount_name": "name",
    "discount_description": "description",
    "type": "discount_type",
    "discount_amount": "amount",
    "max_discount_amount": "max_discount_amount",
    "target_type": "target_type",
    "product_ids": "product_ids",
    "category_names": "category_names",
    "customer_ids": "customer_ids",
    "min_order_amount": "min_order_amount",
    "is_first_purchase_only": "is_first_purchase_only",
    "is_automatic": "is_automatic",
    "usage_limit": "usage_limit",
    "status": "status",
    "priority": "priority",
    "start_date": "start_date",
    "end_date": "end_date",
}


def _to_response(row: Discount) -> AdminDiscountResponse:
    view = AdminDiscountResponse.from_rule(to_rule(row))
    view.usage_limit = row.usage_limit
    view.usage_count = row.usage_count or 0
    view.created_at = row.created_at
    view.updated_at = row.updated_at
    return view


def _row_fields(row: Discount) -> dict:
    return {field: getattr(row, column) for field, column in _COLUMNS.items()}


def _apply(row: Discount, data: DiscountFields) -> None:
    for field, column in _COLUMNS.items():
        setattr(row, column, getattr(data, field))


def _ensure_code_free(db: Session, code: str | None, discount_id: int | None = None) -> None:
    if not code:
        return
    stmt = select(Discount).where(Discount.code == code)
    if discount_id is not None:
        stmt = stmt.where(Discount.id != discount_id)
    if db.exec(stmt).first():
        raise HTTPException(status_code=409, detail="This discount code already exists.")


def _get_or_404(db: Session, discount_id: int) -> Discount:
    row = db.get(Discount, discount_id)
    if not row:
        raise HTTPException(status_code=404, detail="Discount not found.")
    return row


@router.get("", response_model=list[AdminDiscountResponse])
def discounts_list(db: Session = Depends(get_db)):
    rows = db.exec(select(Discount).order_by(Discount.id.desc())).all()
    return [_to_response(r) for r in rows]


@router.post("", response_model=AdminDiscountResponse, status_code=201)
def discount_create(data: DiscountCreate, db: Session = Depends(get_db)):
    _ensure_code_free(db, data.discount_code)
    row = Discount(
        discount_type=data.type,
        amount=data.discount_amount,
        start_date=data.start_date,
        end_date=data.end_date,
    )
    _apply(row, data)
    db.add(row)
    db.commit()
    db.refresh(row)
    log.info("Discount created: id=%s code=%s automatic=%s", row.id, row.code, row.is_automatic)
    return _to_response(row)


@router.get("/{discount_id:int}", response_model=AdminDiscountResponse)
def discount_detail(discount_id: int, db: Session = Depends(get_db)):
    return _to_response(_get_or_404(db, discount_id))


@router.put("/{discount_id:int}", response_model=AdminDiscountResponse)
def discount_update(discount_id: int, data: DiscountUpdate, db: Session = Depends(get_db)):
    row = _get_or_404(db, discount_id)
    merged = _row_fields(row)
    merged.update(data.model_dump(exclude_unset=True))
    # Hedef türü değişince eski hedef listesi taşınmasın
    if "target_type" in data.model_fields_set:
        for field in ("product_ids", "category_names", "customer_ids"):
            if field not in data.model_fields_set:
                merged[field] = None
    try:
        fields = DiscountFields.model_validate(merged)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e.errors()[0].get("msg")))
    _ensure_code_free(db, fields.discount_code, discount_id)
    _apply(row, fields)
    row.updated_at = datetime.utcnow()
    db.add(row)
    db.commit()
    db.refresh(row)
    return _to_response(row)


@router.delete("/{discount_id:int}")
def discount_delete(discount_id: int, db: Session = Depends(get_db)):
    row = _get_or_404(db, discount_id)
    db.delete(row)
    db.commit()
    log.info("Discount deleted: id=%s", discount_id)
    return {"ok": True}


@router.post("/{discount_id:int}/redemptions", response_model=AdminDiscountResponse)
def discount_redeem(discount_id: int, db: Session = Depends(get_db)):
    """Kullanım sayacını artırır (sipariş tamamlandığında çağrılır; doğrulama çağırmaz)."""
    row = _get_or_404(db, discount_id)
    row.usage_count = (row.usage_count or 0) + 1
    db.add(row)
    db.commit()
    db.refresh(row)
    return _to_response(row)
