"""
İndirim değerlendirici: manuel kod, otomatik indirimler ve ikisi arasındaki seçim.

Değerlendirme durumsuzdur ve hiçbir kaydı değiştirmez (usage_count dahil); aynı
girdiyle tekrar çağrılabilir.
"""
import logging
from datetime import datetime
from typing import Protocol

from app.services.discount_catalog import CatalogUnavailable
from app.services.discount_eligibility import evaluate_rule
from app.services.discount_types import (
    Applied,
    AutomaticResult,
    CartContext,
    DiscountRule,
    DiscountSource,
    EligibleDiscount,
    Evaluation,
    ManualResult,
    Rejection,
    RejectionReason,
)

log = logging.getLogger("app.discounts.evaluator")


class DiscountReader(Protocol):
    def find_by_code(self, code: str) -> DiscountRule | None: ...

    def list_automatic_candidates(self, now: datetime) -> list[DiscountRule]: ...


class DiscountEvaluator:
    def __init__(self, catalog: DiscountReader):
        self.catalog = catalog

    def resolve_manual(self, code: str | None, cart: CartContext, now: datetime) -> ManualResult:
        if not code or not code.strip():
            return Rejection(reason=RejectionReason.EMPTY_CODE)
        try:
            rule = self.catalog.find_by_code(code)
        except CatalogUnavailable:
            return Rejection(reason=RejectionReason.TRANSIENT)
        if rule is None:
            return Rejection(reason=RejectionReason.NOT_FOUND)
        result = evaluate_rule(rule, cart, now)
        if isinstance(result, Rejection):
            log.debug("Discount code rejected: id=%s reason=%s", rule.id, result.reason.value)
        return result

    def resolve_automatic(self, cart: CartContext, now: datetime) -> AutomaticResult:
        try:
            candidates = self.catalog.list_automatic_candidates(now)
        except CatalogUnavailable:
            return AutomaticResult(catalog_available=False)
        eligible: list[EligibleDiscount] = []
        for rule in candidates:
            # Katalog filtresine güvenilmez; aynı kontroller burada tekrar yapılır
            if not rule.is_automatic:
                continue
            result = evaluate_rule(rule, cart, now)
            if isinstance(result, Rejection):
                log.debug("Automatic discount skipped: id=%s reason=%s", rule.id, result.reason.value)
                continue
            eligible.append(result)
        eligible.sort(key=lambda d: d.rule.sort_key())
        return AutomaticResult(discounts=tuple(eligible))

    def evaluate(self, code: str | None, cart: CartContext, now: datetime) -> Evaluation:
        """
        Manuel ve otomatik yolu çalıştırıp tek bir sonuç seçer.

        - Kod verilmediyse sadece otomatik sonuç uygulanır.
        - Kod geçerliyse tutarlar karşılaştırılır; eşitlikte otomatik kazanır.
        - Kod geçersizse otomatik sonuç uygulanır, manuel hata nedeni yine raporlanır.
        """
        manual = self.resolve_manual(code, cart, now) if code is not None else None
        automatic = self.resolve_automatic(cart, now)
        applied = select_outcome(manual, automatic)
        log.info(
            "Discount evaluated: code=%s manual=%s automatic_total=%.2f applied=%s",
            code,
            _describe_manual(manual),
            automatic.total_amount,
            f"{applied.source.value}:{applied.amount:.2f}" if applied else "none",
        )
        return Evaluation(manual=manual, automatic=automatic, applied=applied)


def select_outcome(manual: ManualResult | None, automatic: AutomaticResult) -> Applied | None:
    auto_total = automatic.total_amount
    if isinstance(manual, EligibleDiscount) and manual.discount_amount > auto_total:
        return Applied(source=DiscountSource.MANUAL, amount=manual.discount_amount)
    if automatic.discounts:
        return Applied(source=DiscountSource.AUTOMATIC, amount=auto_total)
    return None


def _describe_manual(manual: ManualResult | None) -> str:
    if manual is None:
        return "none"
    if isinstance(manual, Rejection):
        return f"rejected:{manual.reason.value}"
    return f"{manual.discount_amount:.2f}"
