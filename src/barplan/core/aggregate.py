"""Fold usage lines into per-ingredient totals and finalize them into purchasable quantities."""

from __future__ import annotations

import logging
import math
from typing import Iterable, Optional

from barplan.core.interfaces import PackPlanner
from barplan.core.models import (
    IngredientAccumulator,
    IngredientCategory,
    IngredientTotal,
    PackOption,
    UsageLine,
)
from barplan.core.pack_planner import DynamicPackPlanner, legacy_pack_count
from barplan.core.policy import PlannerPolicy
from barplan.core.rounding import (
    apply_buffer,
    ceil_whole,
    normalize_unit,
    round_by_unit_and_category,
)

logger = logging.getLogger(__name__)

LIQUOR_UNIT = "ml"


def merge_pack_size(
    recorded: Optional[float],
    incoming: Optional[float],
    category: IngredientCategory,
    default_bottle_size: float,
) -> Optional[float]:
    """Last explicit pack size wins; liquor falls back to the default bottle size."""
    if incoming is not None:
        return incoming
    if recorded is None and category == IngredientCategory.LIQUOR:
        return default_bottle_size
    return recorded


def merge_price(recorded: Optional[float], incoming: Optional[float]) -> Optional[float]:
    """First finite price wins; later prices are ignored."""
    if recorded is not None:
        return recorded
    if incoming is None or not math.isfinite(incoming):
        return None
    return incoming


def merge_purchase_url(recorded: Optional[str], incoming: Optional[str]) -> Optional[str]:
    return recorded or incoming or None


def _new_accumulator(line: UsageLine) -> IngredientAccumulator:
    return IngredientAccumulator(
        ingredient_id=line.ingredient_id,
        name=line.name,
        category=line.category,
        unit=normalize_unit(line.unit),
    )


def fold_usage_lines(
    lines: Iterable[UsageLine],
    policy: PlannerPolicy | None = None,
) -> list[IngredientAccumulator]:
    """
    Accumulate usage lines per ingredient id, in first-seen order.

    Name, category and unit come from the first line of an ingredient; pack
    size, price and purchase URL follow merge_pack_size, merge_price and
    merge_purchase_url; pack options from every line are concatenated.
    """
    policy = policy or PlannerPolicy()
    totals: dict[str, IngredientAccumulator] = {}

    for line in lines:
        acc = totals.get(line.ingredient_id)
        if acc is None:
            acc = _new_accumulator(line)
            totals[line.ingredient_id] = acc

        acc.raw_total += line.amount_per_serving * line.servings
        acc.pack_size = merge_pack_size(
            acc.pack_size, line.pack_size, acc.category, policy.default_bottle_size
        )
        acc.price = merge_price(acc.price, line.price)
        acc.purchase_url = merge_purchase_url(acc.purchase_url, line.purchase_url)
        acc.pack_options.extend(line.pack_options)

    return list(totals.values())


def _legacy_cost(packs_needed: Optional[int], price: Optional[float]) -> Optional[float]:
    if packs_needed is None or price is None:
        return None
    return packs_needed * price


def finalize_total(
    acc: IngredientAccumulator,
    planner: PackPlanner,
) -> IngredientTotal:
    """Buffer, round and pack-plan one accumulated ingredient."""
    policy = planner.policy
    buffered = apply_buffer(acc.raw_total, policy)
    options: list[PackOption] = acc.pack_options

    if acc.category == IngredientCategory.LIQUOR:
        unit = LIQUOR_UNIT
        total = ceil_whole(buffered)
        pack_size = acc.pack_size if acc.pack_size is not None else policy.default_bottle_size
    else:
        unit = acc.unit
        total = round_by_unit_and_category(buffered, acc.unit, acc.category, policy)
        pack_size = acc.pack_size

    plan = planner.plan(total, options) if options else None

    if plan is not None:
        packs_needed = None
        total_cost: Optional[float] = plan.total_cost
    else:
        if options:
            logger.debug("No pack plan for %s; using single pack size", acc.ingredient_id)
        packs_needed = legacy_pack_count(total, pack_size)
        total_cost = _legacy_cost(packs_needed, acc.price)

    return IngredientTotal(
        ingredient_id=acc.ingredient_id,
        name=acc.name,
        category=acc.category,
        unit=unit,
        raw_total=acc.raw_total,
        buffered_total=buffered,
        total=total,
        pack_size=pack_size,
        packs_needed=packs_needed,
        pack_plan=plan,
        total_cost=total_cost,
        purchase_url=acc.purchase_url,
        price=acc.price,
    )


def build_ingredient_totals(
    lines: Iterable[UsageLine],
    policy: PlannerPolicy | None = None,
    planner: PackPlanner | None = None,
) -> list[IngredientTotal]:
    """
    Turn usage lines into one finalized IngredientTotal per ingredient.

    Args:
        lines: Flattened usage lines
        policy: Purchasing policy; packaged defaults when omitted
        planner: Pack planner; a DynamicPackPlanner over policy when omitted

    Returns:
        Totals in first-seen ingredient order
    """
    policy = planner.policy if planner else (policy or PlannerPolicy())
    planner = planner or DynamicPackPlanner(policy)
    return [finalize_total(acc, planner) for acc in fold_usage_lines(lines, policy)]
