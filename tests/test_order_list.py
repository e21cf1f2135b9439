"""Tests for order-list rendering."""

from datetime import date

from barplan.core.models import (
    EventHeader,
    IngredientCategory,
    IngredientTotal,
    PackPlan,
    PackPlanLine,
)
from barplan.formatting.order_list import (
    escape_html,
    format_number,
    format_order_list_html,
    format_order_list_text,
    format_order_summary_html,
    format_order_summary_text,
    format_pack_breakdown,
    format_quantity_line,
)


def _total(**kwargs) -> IngredientTotal:
    defaults = dict(
        ingredient_id="ing",
        name="Tonic Water",
        category=IngredientCategory.MIXER,
        unit="ml",
        raw_total=818.0,
        buffered_total=899.8,
        total=900,
    )
    defaults.update(kwargs)
    return IngredientTotal(**defaults)


def _plan() -> PackPlan:
    return PackPlan(
        lines=(
            PackPlanLine(pack_size=200.0, count=2, pack_price=3.0),
            PackPlanLine(pack_size=500.0, count=1, pack_price=6.0),
        ),
        total_cost=12.0,
        covered=900.0,
        required=900,
    )


def test_escape_html() -> None:
    assert escape_html("<a href=\"x\">Tom & Jerry's</a>") == (
        "&lt;a href=&quot;x&quot;&gt;Tom &amp; Jerry&#039;s&lt;/a&gt;"
    )


def test_format_number() -> None:
    assert format_number(500.0) == "500"
    assert format_number(24) == "24"
    assert format_number(0.5) == "0.5"


def test_plan_breakdown_is_sorted_largest_first() -> None:
    total = _total(pack_plan=_plan())
    assert format_pack_breakdown(total) == "1 × 500ml + 2 × 200ml"
    assert format_quantity_line(total) == "900 ml · 1 × 500ml + 2 × 200ml"


def test_single_size_breakdown() -> None:
    total = _total(
        name="Gin",
        category=IngredientCategory.LIQUOR,
        total=440,
        pack_size=700.0,
        packs_needed=1,
    )
    assert format_pack_breakdown(total) == "1 × 700ml"


def test_no_breakdown() -> None:
    assert format_pack_breakdown(_total()) == ""
    assert format_pack_breakdown(_total(pack_size=700.0, packs_needed=0)) == ""
    assert format_quantity_line(_total()) == "900 ml"


def test_html_rows_escape_values() -> None:
    html = format_order_list_html([_total(name="Lime <fresh> & co")])
    assert html.startswith('<table style="width:100%;border-collapse:collapse"><tr>')
    assert "<strong>Lime &lt;fresh&gt; &amp; co</strong>" in html
    assert ">mixer</span>" in html
    assert "900 ml</td>" in html


def test_text_rows() -> None:
    text = format_order_list_text([_total(pack_plan=_plan()), _total(name="Mint", unit="g", total=30)])
    assert text.splitlines() == [
        "Tonic Water (mixer): 900 ml · 1 × 500ml + 2 × 200ml",
        "Mint (mixer): 30 g",
    ]


def test_summary_html() -> None:
    header = EventHeader(title="Tom & Ana", event_date=date(2026, 11, 14), guest_count=40, drinks_count=15)
    html = format_order_summary_html(header, [_total()])
    assert "<strong>Title:</strong> Tom &amp; Ana" in html
    assert "<strong>Date:</strong> 2026-11-14" in html
    assert "<strong>Number of drinks:</strong> 15" in html
    assert "<strong>Number of guests:</strong> 40" in html
    assert "<table" in html


def test_summary_html_defaults() -> None:
    html = format_order_summary_html(EventHeader(), [])
    assert "Cocktail request" in html
    assert "Date TBD" in html
    assert "<em>(not provided)</em>" in html
    assert "(Order list unavailable)" in html


def test_summary_text() -> None:
    header = EventHeader(title="Garden Party", drinks_count=3)
    text = format_order_summary_text(header, [_total()])
    assert text.splitlines() == [
        "Title: Garden Party",
        "Date: Date TBD",
        "Number of drinks: 3",
        "Number of guests: ",
        "Order list:",
        "Tonic Water (mixer): 900 ml",
    ]
