"""
İndirim motorunun iç tipleri.

DiscountRule, veritabanı satırından bağımsız, değişmez bir görünümdür. Hedefleme
`target` alanında etiketli bir birleşim olarak tutulur: her hedef türü sadece
kendi kümesini taşır, "all" hiçbirini taşımaz.
"""
from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class DiscountKind(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class DiscountStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    EXPIRED = "expired"


class DiscountSource(str, Enum):
    MANUAL = "manual"
    AUTOMATIC = "automatic"


class RejectionReason(str, Enum):
    EMPTY_CODE = "empty_code"
    NOT_FOUND = "not_found"
    INACTIVE = "inactive"
    NOT_STARTED = "not_started"
    EXPIRED = "expired"
    EXHAUSTED = "exhausted"
    MIN_ORDER_NOT_MET = "min_order_not_met"
    FIRST_PURCHASE_ONLY = "first_purchase_only"
    NO_MATCHING_PRODUCTS = "no_matching_products"
    NO_MATCHING_CATEGORIES = "no_matching_categories"
    INELIGIBLE_CUSTOMER = "ineligible_customer"
    TRANSIENT = "transient"


REJECTION_MESSAGES: dict[RejectionReason, str] = {
    RejectionReason.EMPTY_CODE: "Please enter a discount code.",
    RejectionReason.NOT_FOUND: "Discount code not found.",
    RejectionReason.INACTIVE: "This discount code is not active.",
    RejectionReason.NOT_STARTED: "This discount code is not active yet.",
    RejectionReason.EXPIRED: "This discount code has expired.",
    RejectionReason.EXHAUSTED: "This discount code has reached its usage limit.",
    RejectionReason.MIN_ORDER_NOT_MET: "Your order does not reach the minimum amount for this discount.",
    RejectionReason.FIRST_PURCHASE_ONLY: "This discount code is only valid on a first purchase.",
    RejectionReason.NO_MATCHING_PRODUCTS: "This discount code does not apply to any product in your cart.",
    RejectionReason.NO_MATCHING_CATEGORIES: "This discount code does not apply to any category in your cart.",
    RejectionReason.INELIGIBLE_CUSTOMER: "This discount code is not available for your account.",
    RejectionReason.TRANSIENT: "Could not validate discount, please try again.",
}


class AllTarget(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["all"] = "all"


class ProductTarget(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["products"] = "products"
    product_ids: frozenset[str]


class CategoryTarget(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["categories"] = "categories"
    category_names: frozenset[str]


class CustomerTarget(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["customers"] = "customers"
    customer_ids: frozenset[str]


Target = Annotated[
    Union[AllTarget, ProductTarget, CategoryTarget, CustomerTarget],
    Field(discriminator="kind"),
]


class DiscountRule(BaseModel):
    """Değerlendirmede kullanılan indirim. Motor bu nesneyi asla değiştirmez."""

    model_config = ConfigDict(frozen=True)

    id: int
    code: str | None = None
    name: str = ""
    description: str | None = None
    kind: DiscountKind
    amount: float
    max_discount_amount: float | None = None
    target: Target = Field(default_factory=AllTarget)
    min_order_amount: float | None = None
    is_first_purchase_only: bool = False
    is_automatic: bool = False
    usage_limit: int | None = None
    usage_count: int = 0
    status: DiscountStatus = DiscountStatus.ACTIVE
    priority: int | None = None
    start_date: datetime
    end_date: datetime

    @property
    def target_type(self) -> str:
        return self.target.kind

    def sort_key(self) -> tuple[int, int]:
        # priority büyükten küçüğe, sonra id küçükten büyüğe
        return (-(self.priority or 0), self.id)


class CartContext(BaseModel):
    """Sepetten okunan bilgiler. Fiyatlar satır toplamıdır (birim fiyat x adet)."""

    model_config = ConfigDict(frozen=True)

    order_amount: float
    product_ids: tuple[str, ...] = ()
    product_prices: dict[str, float] | None = None
    category_names: tuple[str, ...] = ()
    product_categories: dict[str, tuple[str, ...]] | None = None
    customer_id: str | None = None
    is_first_purchase: bool | None = None


class Applicability(BaseModel):
    """Hedeflemeden çıkan uygulanabilir taban ve eşleşen ürünler."""

    model_config = ConfigDict(frozen=True)

    base: float
    product_ids: tuple[str, ...] = ()


class EligibleDiscount(BaseModel):
    model_config = ConfigDict(frozen=True)

    rule: DiscountRule
    applicable_amount: float
    applied_to_products: tuple[str, ...] = ()
    discount_amount: float


class Rejection(BaseModel):
    model_config = ConfigDict(frozen=True)

    reason: RejectionReason
    discount: DiscountRule | None = None

    @property
    def message(self) -> str:
        return REJECTION_MESSAGES[self.reason]


ManualResult = Union[EligibleDiscount, Rejection]


class AutomaticResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    discounts: tuple[EligibleDiscount, ...] = ()
    catalog_available: bool = True

    @property
    def total_amount(self) -> float:
        return round(sum(d.discount_amount for d in self.discounts), 2)


class Applied(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: DiscountSource
    amount: float


class Evaluation(BaseModel):
    """
    Tek bir ödeme için çözümlenmiş sonuç.

    `applied` None ise hiçbir indirim uygulanmaz. Manuel kod ile otomatik indirimler
    üst üste binmez; kaybeden tarafın tutarı sadece bilgi için raporlanır.
    """

    model_config = ConfigDict(frozen=True)

    manual: ManualResult | None = None
    automatic: AutomaticResult = Field(default_factory=AutomaticResult)
    applied: Applied | None = None
