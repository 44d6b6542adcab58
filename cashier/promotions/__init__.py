"""
Promotions — per-product discounts with validity windows.

    from cashier import promotions as PR

    resolver = PR.PromotionResolver(backend)
    match await resolver.resolve_many([ProductId(1), ProductId(2)]):
        case Ok(promos): ...  # {ProductId: PromotionDescriptor | None}
"""

from cashier.promotions._types import PromotionDescriptor
from cashier.promotions._resolver import PromotionResolver

__all__ = ("PromotionDescriptor", "PromotionResolver")
