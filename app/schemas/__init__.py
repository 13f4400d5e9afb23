from .discount import (
    AdminDiscountResponse,
    AutomaticDiscountsRequest,
    AutomaticDiscountsResponse,
    DiscountCreate,
    DiscountFields,
    DiscountUpdate,
    DiscountView,
    ValidateDiscountRequest,
    ValidateDiscountResponse,
)

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
