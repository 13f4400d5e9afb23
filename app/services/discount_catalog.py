"""İndirim kataloğu: veritabanı satırlarını DiscountRule'a çevirir. Sadece okuma."""
import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.models import Discount
from app.services.discount_types import (
    AllTarget,
    CategoryTarget,
    CustomerTarget,
    DiscountKind,
    DiscountRule,
    DiscountStatus,
    ProductTarget,
)

log = logging.getLogger("app.discounts.catalog")


class CatalogUnavailable(Exception):
    """Depoya ulaşılamadı; çağıran bunu geçici hata olarak ele alır."""


def _target_for(row: Discount):
    if row.target_type == "products":
        return ProductTarget(product_ids=frozenset(row.product_ids or ()))
    if row.target_type == "categories":
        return CategoryTarget(category_names=frozenset(row.category_names or ()))
    if row.target_type == "customers":
        return CustomerTarget(customer_ids=frozenset(row.customer_ids or ()))
    return AllTarget()


def to_rule(row: Discount) -> DiscountRule:
    return DiscountRule(
        id=row.id,
        code=row.code,
        name=row.name or "",
        description=row.description,
        kind=DiscountKind(row.discount_type),
        amount=row.amount,
        max_discount_amount=row.max_discount_amount,
        target=_target_for(row),
        min_order_amount=row.min_order_amount,
        is_first_purchase_only=bool(row.is_first_purchase_only),
        is_automatic=bool(row.is_automatic),
        usage_limit=row.usage_limit,
        usage_count=row.usage_count or 0,
        status=DiscountStatus(row.status),
        priority=row.priority,
        start_date=row.start_date,
        end_date=row.end_date,
    )


class DiscountCatalog:
    """SQLModel oturumu üzerinde indirim okuma yolu."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_code(self, code: str) -> DiscountRule | None:
        """Tam eşleşme (büyük/küçük harf duyarlı). Bulunamazsa None döner."""
        try:
            row = self.db.exec(select(Discount).where(Discount.code == code)).first()
        except SQLAlchemyError as e:
            log.warning("Discount lookup failed: code=%s error=%s", code, e)
            raise CatalogUnavailable(str(e)) from e
        if row is None:
            return None
        try:
            return to_rule(row)
        except ValueError as e:
            log.warning("Discount row unreadable: id=%s error=%s", row.id, e)
            raise CatalogUnavailable(str(e)) from e

    def list_automatic_candidates(self, now: datetime) -> list[DiscountRule]:
        """Otomatik, aktif ve `now` anında tarih aralığında olan indirimler."""
        stmt = select(Discount).where(
            Discount.is_automatic == True,  # noqa: E712
            Discount.status == DiscountStatus.ACTIVE.value,
            Discount.start_date <= now,
            Discount.end_date >= now,
        )
        try:
            rows = list(self.db.exec(stmt).all())
        except SQLAlchemyError as e:
            log.warning("Automatic discount listing failed: %s", e)
            raise CatalogUnavailable(str(e)) from e
        rules = []
        for row in rows:
            try:
                rules.append(to_rule(row))
            except ValueError as e:
                # Bozuk satır sadece kendisini düşürür
                log.warning("Automatic discount skipped, row unreadable: id=%s error=%s", row.id, e)
        return rules
