"""Pipeline orchestration: wires adapter and planning stages together with dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from barplan.core.aggregate import build_ingredient_totals
from barplan.core.interfaces import Adapter, PackPlanner
from barplan.core.models import EventHeader, IngredientTotal, UsageLine
from barplan.core.pack_planner import DynamicPackPlanner
from barplan.core.policy import PlannerPolicy


@dataclass
class PipelineResult:
    header: EventHeader
    usage_lines: list[UsageLine]
    totals: list[IngredientTotal]


class PipelineRunner:
    """
    Orchestrates the planning pipeline: adapt -> aggregate -> buffer/round -> pack-plan.

    All stages are injected, so implementations can be swapped at runtime.
    """

    def __init__(
        self,
        adapters: list[Adapter] | None = None,
        policy: Optional[PlannerPolicy] = None,
        planner: Optional[PackPlanner] = None,
    ) -> None:
        self.adapters = adapters or []
        self.planner = planner or DynamicPackPlanner(policy or PlannerPolicy())
        self.policy = self.planner.policy

    def run(self, usage_lines: list[UsageLine]) -> list[IngredientTotal]:
        """Run aggregation and planning on already-flattened usage lines."""
        return build_ingredient_totals(usage_lines, planner=self.planner)

    def process_with_adapter(self, raw_bytes: bytes, metadata: dict[str, Any]) -> PipelineResult:
        """Full pipeline: find adapter -> parse -> aggregate -> plan."""
        adapter = next((a for a in self.adapters if a.can_parse(metadata)), None)
        if not adapter:
            raise ValueError(f"No adapter found for metadata: {metadata}")
        lines = adapter.parse(raw_bytes, metadata)
        return PipelineResult(
            header=adapter.parse_header(raw_bytes, metadata),
            usage_lines=lines,
            totals=self.run(lines),
        )

    def run_pipeline(self, raw_bytes: bytes, metadata: dict[str, Any]) -> PipelineResult:
        """Stable integration entrypoint for external packages."""
        return self.process_with_adapter(raw_bytes, metadata)

