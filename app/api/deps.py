from datetime import datetime

from fastapi import Depends
from sqlmodel import Session

from app.core.database import get_db
from app.services.discount_catalog import DiscountCatalog
from app.services.discount_evaluator import DiscountEvaluator


def get_evaluation_time() -> datetime:
    """Değerlendirme anı (naive UTC). Testlerde dependency_overrides ile sabitlenir."""
    return datetime.utcnow()


def get_discount_catalog(db: Session = Depends(get_db)) -> DiscountCatalog:
    return DiscountCatalog(db)


def get_discount_evaluator(
    catalog: DiscountCatalog = Depends(get_discount_catalog),
) -> DiscountEvaluator:
    return DiscountEvaluator(catalog)
