from .discount import Discount

__all__ = [
    "Discount",
]
