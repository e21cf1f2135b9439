"""Safety buffer and purchasable rounding rules."""

from __future__ import annotations

import math

from barplan.core.models import IngredientCategory
from barplan.core.policy import PlannerPolicy

DEFAULT_UNIT = "ml"

# Binary float noise (400 * 1.1 == 440.00000000000006) must not push a ceiling up.
_CEIL_PRECISION = 9


def normalize_unit(unit: str | None) -> str:
    """Trim and lower-case a unit, defaulting to 'ml'."""
    return (unit or DEFAULT_UNIT).strip().lower() or DEFAULT_UNIT


def ceil_whole(value: float) -> int:
    return math.ceil(round(value, _CEIL_PRECISION))


def ceil_to_multiple(value: float, increment: int) -> int:
    """Round value up to the nearest multiple of increment (whole-unit ceiling if increment <= 0)."""
    if increment <= 0:
        return ceil_whole(value)
    return ceil_whole(value / increment) * increment


def apply_buffer(amount: float, policy: PlannerPolicy) -> float:
    return amount * (1 + policy.buffer_rate)


def round_by_unit_and_category(
    buffered: float,
    unit: str,
    category: IngredientCategory,
    policy: PlannerPolicy,
) -> int:
    """
    Round a buffered amount to a purchasable quantity.

    Rules, first match wins:
    - glassware: up to the glassware increment, never below the glassware minimum
    - piece units: up to a whole piece
    - garnish in grams: up to the garnish gram increment
    - anything else: up to a whole unit
    """
    normalized = normalize_unit(unit)

    if category == IngredientCategory.GLASSWARE:
        return max(
            policy.glassware_minimum,
            ceil_to_multiple(buffered, policy.glassware_increment),
        )

    if normalized in policy.piece_units:
        return ceil_whole(buffered)

    if category == IngredientCategory.GARNISH and normalized in policy.gram_units:
        return ceil_to_multiple(buffered, policy.garnish_gram_increment)

    return ceil_whole(buffered)
