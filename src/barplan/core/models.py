"""Core immutable data models for ingredient aggregation and pack planning."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional


class IngredientCategory(str, Enum):
    """Physical ingredient category as stored with the ingredient."""

    LIQUOR = "liquor"
    MIXER = "mixer"
    JUICE = "juice"
    SYRUP = "syrup"
    GARNISH = "garnish"
    ICE = "ice"
    GLASSWARE = "glassware"


class PackTier(str, Enum):
    """Tier tag carried by a purchasable pack."""

    BUDGET = "budget"
    PREMIUM = "premium"
    ECONOMY = "economy"
    BUSINESS = "business"
    FIRST_CLASS = "first_class"


class PricingTier(str, Enum):
    """Pricing tier chosen for an event; selects which packs are offered."""

    ECONOMY = "economy"
    BUSINESS = "business"
    FIRST_CLASS = "first_class"
    BUDGET = "budget"


@dataclass(frozen=True)
class PackOption:
    """
    A purchasable package of an ingredient.

    pack_size is expressed in the ingredient's unit (e.g. 700 ml, 1000 g, 12 pc).
    """

    pack_size: float
    pack_price: float
    purchase_url: Optional[str] = None
    tier: Optional[PackTier] = None
    retailer: Optional[str] = None
    search_url: Optional[str] = None
    search_query: Optional[str] = None


@dataclass(frozen=True)
class UsageLine:
    """
    One ingredient's consumption contributed by one (recipe, servings) selection.

    Produced by an adapter that has already flattened event -> recipe ->
    recipe ingredient -> ingredient joins.
    """

    ingredient_id: str
    """Merge key: every line sharing it contributes to one IngredientTotal."""

    name: str
    category: IngredientCategory

    amount_per_serving: float = 0.0
    """Quantity per serving, in the ingredient's unit."""

    servings: int = 0

    unit: Optional[str] = None
    """Unit string; 'ml' when absent."""

    pack_size: Optional[float] = None
    """Legacy single default pack size in the ingredient's unit."""

    price: Optional[float] = None
    """Price of one default-size pack."""

    pack_options: tuple[PackOption, ...] = ()
    purchase_url: Optional[str] = None


@dataclass(frozen=True)
class PackPlanLine:
    """All packs of one size within a plan."""

    pack_size: float
    count: int
    pack_price: float
    purchase_url: Optional[str] = None

    @property
    def subtotal(self) -> float:
        return self.count * self.pack_price


@dataclass(frozen=True)
class PackPlan:
    """Minimum-cost multiset of packs covering a requirement."""

    lines: tuple[PackPlanLine, ...]
    """Grouped by pack size, largest first."""

    total_cost: float
    covered: float
    """Quantity the packs actually hold; may exceed required."""

    required: int

    @property
    def pack_count(self) -> int:
        return sum(line.count for line in self.lines)


@dataclass(frozen=True)
class IngredientTotal:
    """Finalized, purchasable requirement for one ingredient."""

    ingredient_id: str
    name: str
    category: IngredientCategory
    unit: str
    raw_total: float
    """Sum of amount_per_serving x servings over all usage lines."""

    buffered_total: float
    """raw_total with the safety margin applied, before rounding."""

    total: int
    """Rounded purchasable quantity."""

    pack_size: Optional[float] = None
    packs_needed: Optional[int] = None
    """Count of default-size packs (legacy single-size path)."""

    pack_plan: Optional[PackPlan] = None
    """Multi-size plan, when a pack catalog was available."""

    total_cost: Optional[float] = None
    purchase_url: Optional[str] = None
    price: Optional[float] = None


@dataclass
class IngredientAccumulator:
    """Mutable running state for one ingredient while usage lines are folded."""

    ingredient_id: str
    name: str
    category: IngredientCategory
    unit: str
    raw_total: float = 0.0
    pack_size: Optional[float] = None
    price: Optional[float] = None
    purchase_url: Optional[str] = None
    pack_options: list[PackOption] = field(default_factory=list)


@dataclass(frozen=True)
class EventHeader:
    """Event details shown above an order list."""

    title: Optional[str] = None
    event_date: Optional[date] = None
    guest_count: Optional[int] = None
    pricing_tier: PricingTier = PricingTier.ECONOMY
    drinks_count: int = 0
    """Total servings across the event's cocktail selections."""
