"""
Uygunluk kontrolü ve tutar hesabı (manuel ve otomatik yol ortak kullanır).

Kontroller sırayla yapılır ve ilk başarısızlıkta durur; bir çağrıda sadece tek
bir neden raporlanır.
"""
from datetime import datetime

from app.services.discount_types import (
    AllTarget,
    Applicability,
    CartContext,
    CategoryTarget,
    CustomerTarget,
    DiscountKind,
    DiscountRule,
    DiscountStatus,
    EligibleDiscount,
    ProductTarget,
    Rejection,
    RejectionReason,
)


def _status_rejection(rule: DiscountRule, now: datetime) -> RejectionReason | None:
    if rule.status == DiscountStatus.EXPIRED:
        return RejectionReason.EXPIRED
    if rule.status != DiscountStatus.ACTIVE:
        return RejectionReason.INACTIVE
    if now < rule.start_date:
        return RejectionReason.NOT_STARTED
    if now > rule.end_date:
        return RejectionReason.EXPIRED
    return None


def _priced_base(matched: tuple[str, ...], cart: CartContext) -> Applicability | None:
    if not matched:
        return None
    if cart.product_prices is None:
        # Fiyat bilgisi yoksa tüm sepet taban kabul edilir
        base = cart.order_amount
    else:
        base = sum(cart.product_prices.get(pid, 0.0) for pid in matched)
    if base <= 0:
        return None
    return Applicability(base=base, product_ids=matched)


def _product_base(ids: frozenset[str], cart: CartContext) -> Applicability | None:
    return _priced_base(tuple(pid for pid in dict.fromkeys(cart.product_ids) if pid in ids), cart)


def _category_base(names: frozenset[str], cart: CartContext) -> Applicability | None:
    if cart.product_categories is not None:
        matched = tuple(
            pid
            for pid in dict.fromkeys(cart.product_ids)
            if names.intersection(cart.product_categories.get(pid, ()))
        )
        return _priced_base(matched, cart)
    # Ürün bazında kategori yoksa düz listeyle eşleşme tüm sepeti kapsar
    if names.intersection(cart.category_names) and cart.order_amount > 0:
        return Applicability(base=cart.order_amount)
    return None


def applicable_base(rule: DiscountRule, cart: CartContext) -> Applicability | RejectionReason:
    """Hedef türüne göre indirimin hesaplanacağı taban. Sıfır taban uygunsuzdur."""
    target = rule.target
    if isinstance(target, AllTarget):
        if cart.order_amount <= 0:
            return RejectionReason.NO_MATCHING_PRODUCTS
        return Applicability(base=cart.order_amount)
    if isinstance(target, ProductTarget):
        found = _product_base(target.product_ids, cart)
        return found if found else RejectionReason.NO_MATCHING_PRODUCTS
    if isinstance(target, CategoryTarget):
        found = _category_base(target.category_names, cart)
        return found if found else RejectionReason.NO_MATCHING_CATEGORIES
    if isinstance(target, CustomerTarget):
        if cart.customer_id is None or cart.customer_id not in target.customer_ids:
            return RejectionReason.INELIGIBLE_CUSTOMER
        if cart.order_amount <= 0:
            return RejectionReason.NO_MATCHING_PRODUCTS
        return Applicability(base=cart.order_amount)
    raise TypeError(f"Unknown discount target: {target!r}")


def discount_amount(rule: DiscountRule, base: float) -> float:
    if rule.kind == DiscountKind.PERCENTAGE:
        raw = base * rule.amount / 100
        if rule.max_discount_amount is not None:
            raw = min(raw, rule.max_discount_amount)
        return round(raw, 2)
    return round(min(rule.amount, base), 2)


def evaluate_rule(rule: DiscountRule, cart: CartContext, now: datetime) -> EligibleDiscount | Rejection:
    """Tüm kontrolleri sırayla uygular; uygunsa tutarı hesaplar."""
    reason = _status_rejection(rule, now)
    if reason is None and rule.usage_limit is not None and rule.usage_count >= rule.usage_limit:
        reason = RejectionReason.EXHAUSTED
    if reason is None and rule.min_order_amount is not None and cart.order_amount < rule.min_order_amount:
        reason = RejectionReason.MIN_ORDER_NOT_MET
    if reason is None and rule.is_first_purchase_only and not cart.is_first_purchase:
        reason = RejectionReason.FIRST_PURCHASE_ONLY
    if reason is not None:
        return Rejection(reason=reason, discount=rule)

    found = applicable_base(rule, cart)
    if isinstance(found, RejectionReason):
        return Rejection(reason=found, discount=rule)
    return EligibleDiscount(
        rule=rule,
        applicable_amount=round(found.base, 2),
        applied_to_products=found.product_ids,
        discount_amount=discount_amount(rule, found.base),
    )
