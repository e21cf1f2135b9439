"""barplan: ingredient aggregation and cost-optimal pack planning for cocktail events."""

__version__ = "0.1.0"

# Core exports
from barplan.core.models import (
    EventHeader,
    IngredientCategory,
    IngredientTotal,
    PackOption,
    PackPlan,
    PackPlanLine,
    PackTier,
    PricingTier,
    UsageLine,
)
from barplan.core.interfaces import Adapter, PackPlanner
from barplan.core.policy import PlannerPolicy, load_policy
from barplan.core.aggregate import build_ingredient_totals
from barplan.core.pack_planner import DynamicPackPlanner
from barplan.core.pipeline import PipelineRunner, PipelineResult
from barplan.adapters.event_rows import EventRowsAdapter

__all__ = [
    "EventHeader",
    "IngredientCategory",
    "IngredientTotal",
    "PackOption",
    "PackPlan",
    "PackPlanLine",
    "PackTier",
    "PricingTier",
    "UsageLine",
    "Adapter",
    "PackPlanner",
    "PlannerPolicy",
    "load_policy",
    "build_ingredient_totals",
    "DynamicPackPlanner",
    "PipelineRunner",
    "PipelineResult",
    "EventRowsAdapter",
]
