"""Vitrin/ödeme tarafı indirim uçları: kod doğrulama ve otomatik indirimler."""
from datetime import datetime

from fastapi import APIRouter, Depends, Request

from app.api.deps import get_discount_evaluator, get_evaluation_time
from app.core.rate_limit import DEFAULT_LIMIT, VALIDATE_LIMIT, limiter
from app.schemas import (
    AutomaticDiscountsRequest,
    AutomaticDiscountsResponse,
    DiscountView,
    ValidateDiscountRequest,
    ValidateDiscountResponse,
)
from app.services.discount_evaluator import DiscountEvaluator
from app.services.discount_types import EligibleDiscount, Evaluation, Rejection

router = APIRouter(prefix="/discounts", tags=["discounts"])


def _validate_response(result: Evaluation) -> ValidateDiscountResponse:
    manual = result.manual
    automatic = result.automatic
    applied = result.applied
    source = applied.source.value if applied else None
    body = ValidateDiscountResponse(
        valid=isinstance(manual, EligibleDiscount),
        automatic_discounts=[DiscountView.from_eligible(d) for d in automatic.discounts],
        automatic_discount_amount=automatic.total_amount,
        total_discount_amount=applied.amount if applied else 0,
        better_discount_type=source,
        applied_discount_source=source,
    )
    if isinstance(manual, Rejection):
        body.error_message = manual.message
        body.error_code = manual.reason.value
    elif isinstance(manual, EligibleDiscount):
        body.discount = DiscountView.from_eligible(manual)
        # Otomatik kazansa da kodun tutarı bilgi için döner; uygulanan tutar totalDiscountAmount
        body.discount_amount = manual.discount_amount
        body.applied_to_products = list(manual.applied_to_products)
        body.applicable_amount = manual.applicable_amount
    return body


@router.post("/validate", response_model=ValidateDiscountResponse, response_model_exclude_none=True)
@limiter.limit(VALIDATE_LIMIT)
def validate_discount(
    request: Request,
    body: ValidateDiscountRequest,
    evaluator: DiscountEvaluator = Depends(get_discount_evaluator),
    now: datetime = Depends(get_evaluation_time),
):
    """Girilen kodu doğrular, otomatik indirimlerle karşılaştırır ve tek sonucu döner."""
    result = evaluator.evaluate(body.code, body.to_cart(), now)
    return _validate_response(result)


@router.post("/automatic", response_model=AutomaticDiscountsResponse)
@limiter.limit(DEFAULT_LIMIT)
def automatic_discounts(
    request: Request,
    body: AutomaticDiscountsRequest,
    evaluator: DiscountEvaluator = Depends(get_discount_evaluator),
    now: datetime = Depends(get_evaluation_time),
):
    """Sadece otomatik yol: uygun indirimler priority sırasıyla, tutarları toplanmış."""
    result = evaluator.resolve_automatic(body.to_cart(), now)
    return AutomaticDiscountsResponse(
        success=result.catalog_available,
        discounts=[DiscountView.from_eligible(d) for d in result.discounts],
        total_discount_amount=result.total_amount,
    )
