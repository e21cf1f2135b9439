"""Pipeline integration smoke tests."""

from pathlib import Path

import pytest

from barplan.adapters.event_rows import EventRowsAdapter
from barplan.core.models import IngredientCategory, UsageLine
from barplan.core.pipeline import PipelineRunner
from barplan.core.policy import PlannerPolicy


FIXTURE = (
    Path(__file__).resolve().parents[1]
    / "src"
    / "barplan"
    / "adapters"
    / "event_rows"
    / "fixtures"
    / "garden_party.json"
)


def test_pipeline_end_to_end() -> None:
    runner = PipelineRunner(adapters=[EventRowsAdapter()])
    result = runner.run_pipeline(FIXTURE.read_bytes(), {"source": "event_rows"})

    assert result.header.drinks_count == 15
    assert len(result.usage_lines) == 5
    totals = {t.ingredient_id: t for t in result.totals}
    assert list(totals) == ["ing-gin", "ing-tonic", "ing-highball", "ing-mint"]

    gin = totals["ing-gin"]
    assert gin.raw_total == 650
    assert gin.total == 715
    assert gin.packs_needed == 2
    assert gin.total_cost == 70

    tonic = totals["ing-tonic"]
    assert tonic.total == 1320
    assert tonic.pack_plan is not None
    assert [(l.pack_size, l.count) for l in tonic.pack_plan.lines] == [(500, 2), (200, 2)]
    assert tonic.pack_plan.lines[1].purchase_url == "https://shop.example/tonic-200"
    assert tonic.total_cost == 18

    assert totals["ing-highball"].total == 24
    assert totals["ing-mint"].total == 30


def test_first_class_tier_uses_premium_packs() -> None:
    runner = PipelineRunner(adapters=[EventRowsAdapter()])
    result = runner.run_pipeline(
        FIXTURE.read_bytes(), {"source": "event_rows", "pricing_tier": "first_class"}
    )
    tonic = next(t for t in result.totals if t.ingredient_id == "ing-tonic")
    assert tonic.pack_plan is not None
    assert [(l.pack_size, l.count) for l in tonic.pack_plan.lines] == [(1500, 1)]
    assert tonic.total_cost == 9


def test_run_accepts_usage_lines_and_policy() -> None:
    runner = PipelineRunner(policy=PlannerPolicy(buffer_rate=0.0))
    [gin] = runner.run(
        [UsageLine(ingredient_id="gin", name="Gin", category=IngredientCategory.LIQUOR,
                   amount_per_serving=35, servings=20)]
    )
    assert gin.total == 700
    assert gin.packs_needed == 1


def test_missing_adapter_raises() -> None:
    runner = PipelineRunner()
    with pytest.raises(ValueError, match="No adapter found"):
        runner.run_pipeline(b"[]", {"source": "spreadsheet"})
