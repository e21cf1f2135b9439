"""Pack catalog normalization and pricing-tier selection."""

from __future__ import annotations

import logging
import math
from typing import Iterable

from barplan.core.models import PackOption, PackTier, PricingTier

logger = logging.getLogger(__name__)

# Event pricing tier -> pack tier tags offered to it. None is an untagged pack.
TIER_PACK_TAGS: dict[PricingTier, frozenset[PackTier | None]] = {
    PricingTier.FIRST_CLASS: frozenset({PackTier.FIRST_CLASS, PackTier.PREMIUM}),
    PricingTier.BUSINESS: frozenset({PackTier.BUSINESS}),
    PricingTier.ECONOMY: frozenset({PackTier.ECONOMY, PackTier.BUDGET, None}),
    PricingTier.BUDGET: frozenset({PackTier.ECONOMY, PackTier.BUDGET, None}),
}


def is_usable(option: PackOption) -> bool:
    """A pack is usable when its size is positive and finite and its price non-negative and finite."""
    size = option.pack_size
    price = option.pack_price
    if size is None or price is None:
        return False
    if not math.isfinite(size) or size <= 0:
        return False
    if not math.isfinite(price) or price < 0:
        return False
    return True


def _prefer(candidate: PackOption, current: PackOption) -> bool:
    if candidate.pack_price != current.pack_price:
        return candidate.pack_price < current.pack_price
    return bool(candidate.purchase_url) and not current.purchase_url


def normalize_pack_options(options: Iterable[PackOption]) -> list[PackOption]:
    """
    Drop unusable packs and deduplicate by (tier, pack_size).

    The cheapest pack of each (tier, pack_size) survives; on equal price the
    one carrying a purchase URL wins. The result is ordered by pack size
    descending, then price ascending.
    """
    kept: dict[tuple[PackTier | None, float], PackOption] = {}
    for option in options:
        if not is_usable(option):
            logger.debug("Dropping unusable pack option %r", option)
            continue
        key = (option.tier, float(option.pack_size))
        current = kept.get(key)
        if current is None or _prefer(option, current):
            kept[key] = option

    return sorted(kept.values(), key=lambda o: (-o.pack_size, o.pack_price, not o.purchase_url))


def parse_pack_tier(value: str | None) -> PackTier | None:
    """Map a raw tier string to a PackTier; blank or unknown tags are untagged."""
    text = (value or "").strip().lower()
    if not text:
        return None
    try:
        return PackTier(text)
    except ValueError:
        logger.debug("Unknown pack tier %r treated as untagged", value)
        return None


def parse_pricing_tier(value: str | None) -> PricingTier:
    """Map a raw event pricing tier, defaulting to economy."""
    text = (value or "").strip().lower()
    try:
        return PricingTier(text) if text else PricingTier.ECONOMY
    except ValueError:
        logger.debug("Unknown pricing tier %r, using economy", value)
        return PricingTier.ECONOMY


def filter_for_pricing_tier(
    options: Iterable[PackOption],
    pricing_tier: PricingTier,
) -> list[PackOption]:
    """Keep the packs whose tier tag is offered to the given event pricing tier."""
    allowed = TIER_PACK_TAGS[pricing_tier]
    return [option for option in options if option.tier in allowed]
