"""İndirim API şemaları. JSON anahtarları camelCase, Python alanları snake_case."""
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.services.discount_types import (
    CartContext,
    CategoryTarget,
    CustomerTarget,
    DiscountRule,
    EligibleDiscount,
    ProductTarget,
)


class CamelModel(BaseModel):
    # Infinity/NaN JSON literalleri reddedilir
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)


def _naive_utc(v: datetime | None) -> datetime | None:
    # Veritabanında saat dilimi olmadan UTC tutulur
    if v is not None and v.tzinfo is not None:
        return v.astimezone(timezone.utc).replace(tzinfo=None)
    return v


class CartFacts(CamelModel):
    order_amount: float = Field(ge=0)
    product_ids: list[str] = Field(default_factory=list)
    product_prices: dict[str, float] | None = None
    category_names: list[str] = Field(default_factory=list)
    product_categories: dict[str, list[str]] | None = None
    customer_id: str | None = None
    is_first_purchase: bool | None = None

    @field_validator("product_prices")
    @classmethod
    def prices_not_negative(cls, v: dict[str, float] | None) -> dict[str, float] | None:
        if v and any(p < 0 for p in v.values()):
            raise ValueError("product prices must not be negative")
        return v

    def to_cart(self) -> CartContext:
        return CartContext(
            order_amount=self.order_amount,
            product_ids=tuple(self.product_ids),
            product_prices=dict(self.product_prices) if self.product_prices is not None else None,
            category_names=tuple(self.category_names),
            product_categories=(
                {pid: tuple(names) for pid, names in self.product_categories.items()}
                if self.product_categories is not None
                else None
            ),
            customer_id=self.customer_id,
            is_first_purchase=self.is_first_purchase,
        )


class ValidateDiscountRequest(CartFacts):
    code: str


class AutomaticDiscountsRequest(CartFacts):
    pass


class DiscountView(CamelModel):
    """Müşteriye dönen indirim görünümü."""

    id: int
    discount_code: str | None = None
    discount_name: str = ""
    discount_description: str | None = None
    type: str
    discount_amount: float
    max_discount_amount: float | None = None
    target_type: str
    product_ids: list[str] | None = None
    category_names: list[str] | None = None
    customer_ids: list[str] | None = None
    min_order_amount: float | None = None
    is_first_purchase_only: bool = False
    is_automatic: bool = False
    start_date: datetime
    end_date: datetime
    status: str
    priority: int | None = None
    applied_amount: float | None = None
    applied_to_products: list[str] | None = None
    applicable_amount: float | None = None

    @classmethod
    def from_rule(cls, rule: DiscountRule, eligible: EligibleDiscount | None = None) -> "DiscountView":
        target = rule.target
        return cls(
            id=rule.id,
            discount_code=rule.code,
            discount_name=rule.name,
            discount_description=rule.description,
            type=rule.kind.value,
            discount_amount=rule.amount,
            max_discount_amount=rule.max_discount_amount,
            target_type=rule.target_type,
            product_ids=sorted(target.product_ids) if isinstance(target, ProductTarget) else None,
            category_names=sorted(target.category_names) if isinstance(target, CategoryTarget) else None,
            customer_ids=sorted(target.customer_ids) if isinstance(target, CustomerTarget) else None,
            min_order_amount=rule.min_order_amount,
            is_first_purchase_only=rule.is_first_purchase_only,
            is_automatic=rule.is_automatic,
            start_date=rule.start_date,
            end_date=rule.end_date,
            status=rule.status.value,
            priority=rule.priority,
            applied_amount=eligible.discount_amount if eligible else None,
            applied_to_products=list(eligible.applied_to_products) if eligible else None,
            applicable_amount=eligible.applicable_amount if eligible else None,
        )

    @classmethod
    def from_eligible(cls, eligible: EligibleDiscount) -> "DiscountView":
        return cls.from_rule(eligible.rule, eligible)


class ValidateDiscountResponse(CamelModel):
    valid: bool
    error_message: str | None = None
    error_code: str | None = None
    discount: DiscountView | None = None
    discount_amount: float | None = None
    automatic_discounts: list[DiscountView] = Field(default_factory=list)
    automatic_discount_amount: float = 0
    total_discount_amount: float = 0
    better_discount_type: Literal["manual", "automatic"] | None = None
    applied_discount_source: Literal["manual", "automatic"] | None = None
    applied_to_products: list[str] | None = None
    applicable_amount: float | None = None


class AutomaticDiscountsResponse(CamelModel):
    success: bool
    discounts: list[DiscountView] = Field(default_factory=list)
    total_discount_amount: float = 0


# --- Admin ---

DiscountTypeLiteral = Literal["percentage", "fixed"]
TargetTypeLiteral = Literal["all", "products", "categories", "customers"]
StatusLiteral = Literal["active", "inactive", "expired"]

_TARGET_FIELDS = {
    "products": "product_ids",
    "categories": "category_names",
    "customers": "customer_ids",
}


class DiscountFields(CamelModel):
    discount_code: str | None = None
    discount_name: str = ""
    discount_description: str | None = None
    type: DiscountTypeLiteral
    discount_amount: float = Field(gt=0)
    max_discount_amount: float | None = Field(default=None, gt=0)
    target_type: TargetTypeLiteral = "all"
    product_ids: list[str] | None = None
    category_names: list[str] | None = None
    customer_ids: list[str] | None = None
    min_order_amount: float | None = Field(default=None, ge=0)
    is_first_purchase_only: bool = False
    is_automatic: bool = False
    usage_limit: int | None = Field(default=None, ge=0)
    status: StatusLiteral = "active"
    priority: int | None = None
    start_date: datetime
    end_date: datetime

    @field_validator("discount_code")
    @classmethod
    def strip_code(cls, v: str | None) -> str | None:
        # Kod büyük/küçük harf duyarlı; sadece baş/son boşluk temizlenir
        return (v or "").strip() or None

    @field_validator("start_date", "end_date")
    @classmethod
    def to_naive_utc(cls, v: datetime) -> datetime:
        return _naive_utc(v)

    @model_validator(mode="after")
    def check_consistency(self) -> "DiscountFields":
        if self.type == "percentage" and self.discount_amount > 100:
            raise ValueError("percentage discount must be between 0 and 100")
        if self.type == "fixed" and self.max_discount_amount is not None:
            raise ValueError("maxDiscountAmount only applies to percentage discounts")
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        if not self.is_automatic and not self.discount_code:
            raise ValueError("manual discounts require a discountCode")
        expected = _TARGET_FIELDS.get(self.target_type)
        for target_type, field in _TARGET_FIELDS.items():
            values = getattr(self, field)
            if field == expected:
                if not values:
                    raise ValueError(f"targetType '{target_type}' requires a non-empty {to_camel(field)}")
            elif values:
                raise ValueError(f"{to_camel(field)} is not allowed for targetType '{self.target_type}'")
        return self


class DiscountCreate(DiscountFields):
    pass


class DiscountUpdate(CamelModel):
    """Kısmi güncelleme; birleştirilen kayıt DiscountFields ile yeniden doğrulanır."""

    discount_code: str | None = None
    discount_name: str | None = None
    discount_description: str | None = None
    type: DiscountTypeLiteral | None = None
    discount_amount: float | None = None
    max_discount_amount: float | None = None
    target_type: TargetTypeLiteral | None = None
    product_ids: list[str] | None = None
    category_names: list[str] | None = None
    customer_ids: list[str] | None = None
    min_order_amount: float | None = None
    is_first_purchase_only: bool | None = None
    is_automatic: bool | None = None
    usage_limit: int | None = None
    status: StatusLiteral | None = None
    priority: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


class AdminDiscountResponse(DiscountView):
    usage_limit: int | None = None
    usage_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


__all__ = [
    "AdminDiscountResponse",
    "AutomaticDiscountsRequest",
    "AutomaticDiscountsResponse",
    "DiscountCreate",
    "DiscountFields",
    "DiscountUpdate",
    "DiscountView",
    "ValidateDiscountRequest",
    "ValidateDiscountResponse",
]
