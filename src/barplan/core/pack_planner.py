"""Minimum-cost pack planning over a catalog of discrete pack sizes."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

from barplan.core.models import PackOption, PackPlan, PackPlanLine
from barplan.core.pack_catalog import normalize_pack_options
from barplan.core.policy import PlannerPolicy
from barplan.core.rounding import ceil_whole

logger = logging.getLogger(__name__)

COST_TOLERANCE = 1e-9
NO_CHOICE = -1


@dataclass
class CostTable:
    """
    Unbounded coin-change table indexed by amount.

    cost[a] is the cheapest way to reach exactly a; choice[a] is the option
    index used last and previous[a] the amount it was added to. preferred[a]
    and packs[a] count the preferred-size packs and all packs on that path.
    """

    cost: list[float]
    choice: list[int]
    previous: list[int]
    preferred: list[int]
    packs: list[int]

    @property
    def max_amount(self) -> int:
        return len(self.cost) - 1

    def is_reachable(self, amount: int) -> bool:
        return math.isfinite(self.cost[amount])


@dataclass(frozen=True)
class Completion:
    """One feasible way to cover the requirement, as recorded in the table."""

    amount: int
    cost: float
    preferred_count: int
    pack_count: int


def pack_step(option: PackOption) -> int:
    """Whole-unit step a pack occupies in the table."""
    return int(math.floor(option.pack_size + COST_TOLERANCE))


def _improves(
    cost: float, preferred: int, packs: int, best_cost: float, best_preferred: int, best_packs: int
) -> bool:
    if cost < best_cost - COST_TOLERANCE:
        return True
    if cost > best_cost + COST_TOLERANCE:
        return False
    return (-preferred, packs) < (-best_preferred, best_packs)


def fill_cost_table(
    steps: Sequence[int],
    prices: Sequence[float],
    max_amount: int,
    is_preferred: Sequence[bool] | None = None,
) -> CostTable:
    """
    Fill the cost table for amounts 0..max_amount.

    Each amount keeps its cheapest path; among paths of equal cost, the one
    with more preferred-size packs, then fewer packs. Options are tried in
    the given order and a full tie keeps the earlier option.
    """
    flags = list(is_preferred) if is_preferred is not None else [False] * len(steps)
    cost = [math.inf] * (max_amount + 1)
    choice = [NO_CHOICE] * (max_amount + 1)
    previous = [NO_CHOICE] * (max_amount + 1)
    preferred = [0] * (max_amount + 1)
    packs = [0] * (max_amount + 1)
    cost[0] = 0.0

    for amount in range(1, max_amount + 1):
        for index, step in enumerate(steps):
            before = amount - step
            if step <= 0 or before < 0 or not math.isfinite(cost[before]):
                continue
            candidate = cost[before] + prices[index]
            candidate_preferred = preferred[before] + (1 if flags[index] else 0)
            candidate_packs = packs[before] + 1
            if _improves(
                candidate,
                candidate_preferred,
                candidate_packs,
                cost[amount],
                preferred[amount],
                packs[amount],
            ):
                cost[amount] = candidate
                choice[amount] = index
                previous[amount] = before
                preferred[amount] = candidate_preferred
                packs[amount] = candidate_packs

    return CostTable(cost=cost, choice=choice, previous=previous, preferred=preferred, packs=packs)


def reconstruct_packs(table: CostTable, amount: int) -> list[int]:
    """Walk predecessor pointers from amount back to zero, returning option indices."""
    if not table.is_reachable(amount):
        raise ValueError(f"Amount {amount} is not reachable")

    indices: list[int] = []
    cursor = amount
    while cursor > 0:
        indices.append(table.choice[cursor])
        cursor = table.previous[cursor]
    return indices


def feasible_completions(table: CostTable, required: int) -> Iterator[Completion]:
    """Every reachable amount from required up to the table bound, without rebuilding paths."""
    for amount in range(required, table.max_amount + 1):
        if table.is_reachable(amount):
            yield Completion(
                amount=amount,
                cost=table.cost[amount],
                preferred_count=table.preferred[amount],
                pack_count=table.packs[amount],
            )


def is_preferred_size(option: PackOption, preferred_pack_size: float) -> bool:
    return math.isclose(option.pack_size, preferred_pack_size)


def select_completion(completions: Iterable[Completion]) -> Completion | None:
    """
    Pick the winning completion.

    Order: lowest cost, then most preferred-size packs, then least covered
    amount, then fewest packs. Costs within COST_TOLERANCE are equal.
    """
    candidates = list(completions)
    if not candidates:
        return None

    cheapest = min(c.cost for c in candidates)
    tied = [c for c in candidates if c.cost <= cheapest + COST_TOLERANCE]
    return min(tied, key=lambda c: (-c.preferred_count, c.amount, c.pack_count))


def group_plan_lines(
    option_indices: Iterable[int], options: Sequence[PackOption]
) -> tuple[PackPlanLine, ...]:
    """Group chosen packs by size, largest first, keeping the first pack's URL per size."""
    counts: dict[float, int] = {}
    first: dict[float, PackOption] = {}
    for index in option_indices:
        option = options[index]
        size = float(option.pack_size)
        counts[size] = counts.get(size, 0) + 1
        first.setdefault(size, option)

    return tuple(
        PackPlanLine(
            pack_size=size,
            count=counts[size],
            pack_price=first[size].pack_price,
            purchase_url=first[size].purchase_url,
        )
        for size in sorted(counts, reverse=True)
    )


def legacy_pack_count(required: float, pack_size: float | None) -> int | None:
    """Number of default-size packs covering required, or None without a usable size."""
    if not pack_size or pack_size <= 0:
        return None
    return ceil_whole(max(0.0, required) / pack_size)


class DynamicPackPlanner:
    """
    Bounded coin-change planner.

    Searches amounts up to required + headroom_factor x largest pack so that
    a slight overshoot can win when it is cheaper than an exact cover.
    """

    def __init__(self, policy: PlannerPolicy | None = None) -> None:
        self.policy = policy or PlannerPolicy()

    def search_bound(self, required: int, options: Sequence[PackOption]) -> int:
        largest = max(pack_step(o) for o in options)
        return required + self.policy.headroom_factor * largest

    def plan(self, requested: float, options: Iterable[PackOption]) -> PackPlan | None:
        """
        Find the cheapest pack multiset whose capacity covers requested.

        Returns:
            PackPlan, or None when nothing is required, no usable pack exists,
            or the search would exceed the configured bound
        """
        required = ceil_whole(max(0.0, requested))
        if required == 0:
            return None

        catalog = [o for o in normalize_pack_options(options) if pack_step(o) >= 1]
        if not catalog:
            logger.debug("No usable pack options for required=%s", required)
            return None

        max_amount = self.search_bound(required, catalog)
        if max_amount > self.policy.max_search_amount:
            logger.warning(
                "Pack search bound %s exceeds limit %s; falling back to single pack size",
                max_amount,
                self.policy.max_search_amount,
            )
            return None

        table = fill_cost_table(
            [pack_step(o) for o in catalog],
            [o.pack_price for o in catalog],
            max_amount,
            [is_preferred_size(o, self.policy.preferred_pack_size) for o in catalog],
        )
        winner = select_completion(feasible_completions(table, required))
        if winner is None:
            return None

        lines = group_plan_lines(reconstruct_packs(table, winner.amount), catalog)
        return PackPlan(
            lines=lines,
            total_cost=sum(line.subtotal for line in lines),
            covered=sum(line.count * line.pack_size for line in lines),
            required=required,
        )
