"""Render ingredient totals as an order list for booking emails."""

from __future__ import annotations

from typing import Sequence

from barplan.core.models import EventHeader, IngredientTotal

ROW_CELL_STYLE = "padding:8px 10px;border-bottom:1px solid #eee"
UNAVAILABLE_HTML = '<p style="margin:0;color:#666">(Order list unavailable)</p>'


def escape_html(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#039;")
    )


def format_number(value: float | int) -> str:
    """Whole numbers without a trailing '.0'; others as Python prints them."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_pack_breakdown(total: IngredientTotal) -> str:
    """
    Describe how the total is bought.

    Multi-size plans render as '<count> × <size><unit>' joined by ' + ',
    largest size first; the single-size path as one such segment; no
    packaging information as an empty string.
    """
    if total.pack_plan is not None and total.pack_plan.lines:
        lines = sorted(total.pack_plan.lines, key=lambda line: line.pack_size, reverse=True)
        return " + ".join(
            f"{line.count} × {format_number(line.pack_size)}{total.unit}" for line in lines
        )
    if total.packs_needed and total.pack_size:
        return f"{total.packs_needed} × {format_number(total.pack_size)}{total.unit}"
    return ""


def format_quantity_line(total: IngredientTotal) -> str:
    quantity = f"{format_number(total.total)} {total.unit}"
    pack = format_pack_breakdown(total)
    return f"{quantity} · {pack}" if pack else quantity


def format_order_list_html(totals: Sequence[IngredientTotal]) -> str:
    rows = "".join(
        f"""<tr>
  <td style="{ROW_CELL_STYLE}"><strong>{escape_html(t.name)}</strong><br/><span style="color:#666;font-size:12px">{escape_html(t.category.value)}</span></td>
  <td style="{ROW_CELL_STYLE};text-align:right;white-space:nowrap">{escape_html(format_quantity_line(t))}</td>
</tr>"""
        for t in totals
    )
    return f'<table style="width:100%;border-collapse:collapse">{rows}</table>'


def format_order_list_text(totals: Sequence[IngredientTotal]) -> str:
    return "\n".join(
        f"{t.name} ({t.category.value}): {format_quantity_line(t)}" for t in totals
    )


def _date_label(header: EventHeader) -> str:
    return header.event_date.isoformat() if header.event_date else "Date TBD"


def format_order_summary_html(
    header: EventHeader,
    totals: Sequence[IngredientTotal],
) -> str:
    """Event details followed by the order list, as an HTML email body fragment."""
    title = escape_html(header.title or "Cocktail request")
    guests = (
        escape_html(str(header.guest_count))
        if header.guest_count
        else "<em>(not provided)</em>"
    )
    order_list = format_order_list_html(totals) if totals else UNAVAILABLE_HTML
    return f"""<div style="font-family:system-ui,-apple-system,Segoe UI,Roboto,Arial,sans-serif;line-height:1.5">
  <p style="margin:0 0 8px 0"><strong>Title:</strong> {title}</p>
  <p style="margin:0 0 8px 0"><strong>Date:</strong> {escape_html(_date_label(header))}</p>
  <p style="margin:0 0 8px 0"><strong>Number of drinks:</strong> {escape_html(str(header.drinks_count))}</p>
  <p style="margin:0 0 8px 0"><strong>Number of guests:</strong> {guests}</p>
  <h3 style="margin:16px 0 8px 0">Order list</h3>
  {order_list}
</div>"""


def format_order_summary_text(
    header: EventHeader,
    totals: Sequence[IngredientTotal],
) -> str:
    parts = [
        f"Title: {header.title or ''}",
        f"Date: {_date_label(header)}",
        f"Number of drinks: {header.drinks_count}",
        f"Number of guests: {header.guest_count or ''}",
        "Order list:",
        format_order_list_text(totals) if totals else "(Order list unavailable)",
    ]
    return "\n".join(parts)
