"""Tests for pack catalog normalization and tier selection."""

import math

import pytest

from barplan.core.models import PackOption, PackTier, PricingTier
from barplan.core.pack_catalog import (
    filter_for_pricing_tier,
    is_usable,
    normalize_pack_options,
    parse_pack_tier,
    parse_pricing_tier,
)


@pytest.mark.parametrize(
    "option",
    [
        PackOption(pack_size=0, pack_price=5),
        PackOption(pack_size=-700, pack_price=5),
        PackOption(pack_size=math.nan, pack_price=5),
        PackOption(pack_size=math.inf, pack_price=5),
        PackOption(pack_size=700, pack_price=-1),
        PackOption(pack_size=700, pack_price=math.inf),
        PackOption(pack_size=700, pack_price=math.nan),
    ],
)
def test_unusable_options_are_dropped(option: PackOption) -> None:
    assert not is_usable(option)
    assert normalize_pack_options([option]) == []


def test_free_pack_is_usable() -> None:
    assert is_usable(PackOption(pack_size=700, pack_price=0))


def test_dedupe_keeps_cheapest_per_tier_and_size() -> None:
    options = [
        PackOption(pack_size=700, pack_price=30),
        PackOption(pack_size=700, pack_price=25),
        PackOption(pack_size=700, pack_price=28),
    ]
    result = normalize_pack_options(options)
    assert result == [PackOption(pack_size=700, pack_price=25)]


def test_dedupe_prefers_purchase_url_on_equal_price() -> None:
    options = [
        PackOption(pack_size=700, pack_price=25),
        PackOption(pack_size=700, pack_price=25, purchase_url="https://shop.example/gin"),
    ]
    result = normalize_pack_options(options)
    assert len(result) == 1
    assert result[0].purchase_url == "https://shop.example/gin"


def test_same_size_different_tiers_are_kept() -> None:
    options = [
        PackOption(pack_size=700, pack_price=25, tier=PackTier.BUDGET),
        PackOption(pack_size=700, pack_price=45, tier=PackTier.PREMIUM),
    ]
    assert len(normalize_pack_options(options)) == 2


def test_normalized_order_is_size_descending_then_price() -> None:
    options = [
        PackOption(pack_size=200, pack_price=3),
        PackOption(pack_size=1000, pack_price=9, tier=PackTier.PREMIUM),
        PackOption(pack_size=1000, pack_price=8),
        PackOption(pack_size=500, pack_price=6),
    ]
    sizes_prices = [(o.pack_size, o.pack_price) for o in normalize_pack_options(options)]
    assert sizes_prices == [(1000, 8), (1000, 9), (500, 6), (200, 3)]


def test_parse_pack_tier() -> None:
    assert parse_pack_tier(" Premium ") == PackTier.PREMIUM
    assert parse_pack_tier("first_class") == PackTier.FIRST_CLASS
    assert parse_pack_tier("") is None
    assert parse_pack_tier(None) is None
    assert parse_pack_tier("gold") is None


def test_parse_pricing_tier_defaults_to_economy() -> None:
    assert parse_pricing_tier(None) == PricingTier.ECONOMY
    assert parse_pricing_tier("unknown") == PricingTier.ECONOMY
    assert parse_pricing_tier("BUSINESS") == PricingTier.BUSINESS


def test_filter_for_pricing_tier() -> None:
    options = [
        PackOption(pack_size=700, pack_price=20, tier=None),
        PackOption(pack_size=700, pack_price=22, tier=PackTier.ECONOMY),
        PackOption(pack_size=700, pack_price=21, tier=PackTier.BUDGET),
        PackOption(pack_size=700, pack_price=30, tier=PackTier.BUSINESS),
        PackOption(pack_size=700, pack_price=45, tier=PackTier.PREMIUM),
        PackOption(pack_size=700, pack_price=50, tier=PackTier.FIRST_CLASS),
    ]

    def prices(tier: PricingTier) -> list[float]:
        return [o.pack_price for o in filter_for_pricing_tier(options, tier)]

    assert prices(PricingTier.ECONOMY) == [20, 22, 21]
    assert prices(PricingTier.BUDGET) == [20, 22, 21]
    assert prices(PricingTier.BUSINESS) == [30]
    assert prices(PricingTier.FIRST_CLASS) == [45, 50]
