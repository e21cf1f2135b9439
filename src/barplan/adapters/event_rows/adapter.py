"""Adapter for already-fetched event rows (event -> recipes -> recipe ingredients -> ingredients)."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import replace
from datetime import date
from typing import Any

from dateutil import parser as date_parser

from barplan.core.models import (
    EventHeader,
    IngredientCategory,
    PackOption,
    PricingTier,
    UsageLine,
)
from barplan.core.pack_catalog import filter_for_pricing_tier, parse_pack_tier, parse_pricing_tier

logger = logging.getLogger(__name__)


def as_list(value: Any) -> list[Any]:
    """Resolve a one-or-many relationship: None -> [], object -> [object], list -> list."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def as_records(value: Any) -> list[dict[str, Any]]:
    """as_list, keeping only mapping entries; nulls and scalars inside a list are skipped."""
    return [item for item in as_list(value) if isinstance(item, dict)]


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _safe_float(value: Any, default: float = 0.0) -> float:
    number = _optional_float(value)
    return default if number is None else number


def _safe_int(value: Any, default: int = 0) -> int:
    number = _optional_float(value)
    return default if number is None else int(number)


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_category(value: Any) -> IngredientCategory:
    """
    Map a raw ingredient type onto IngredientCategory.

    Raises:
        ValueError: If the type is not one of the known categories
    """
    text = str(value or "").strip().lower()
    try:
        return IngredientCategory(text)
    except ValueError as exc:
        raise ValueError(f"Unknown ingredient type: {value!r}") from exc


def parse_pack(data: dict[str, Any]) -> PackOption:
    # Non-numeric sizes/prices become NaN so catalog normalization drops them.
    size = _optional_float(data.get("pack_size"))
    price = _optional_float(data.get("pack_price"))
    return PackOption(
        pack_size=math.nan if size is None else size,
        pack_price=math.nan if price is None else price,
        purchase_url=_optional_text(data.get("purchase_url")),
        tier=parse_pack_tier(data.get("tier")),
        retailer=_optional_text(data.get("retailer")),
        search_url=_optional_text(data.get("search_url")),
        search_query=_optional_text(data.get("search_query")),
    )


def select_packs(raw_packs: Any, pricing_tier: PricingTier) -> tuple[PackOption, ...]:
    """Active packs offered to the event's pricing tier."""
    active = [parse_pack(p) for p in as_records(raw_packs) if p.get("is_active")]
    return tuple(filter_for_pricing_tier(active, pricing_tier))


def flatten_rows(rows: list[dict[str, Any]], pricing_tier: PricingTier) -> list[UsageLine]:
    """
    Flatten event-recipe rows into usage lines.

    Each row has servings and recipes; each recipe has recipe_ingredients;
    each recipe ingredient has ml_per_serving and ingredients. Any of the
    nested relationships may be a single object, a list, or missing.
    """
    lines: list[UsageLine] = []
    for row in rows:
        servings = _safe_int(row.get("servings"))
        for recipe in as_records(row.get("recipes")):
            for recipe_ingredient in as_records(recipe.get("recipe_ingredients")):
                amount = recipe_ingredient.get("ml_per_serving")
                if amount is None:
                    amount = recipe_ingredient.get("amount_per_serving")
                for ingredient in as_records(recipe_ingredient.get("ingredients")):
                    lines.append(
                        UsageLine(
                            ingredient_id=str(ingredient.get("id", "")),
                            name=str(ingredient.get("name", "")),
                            category=parse_category(ingredient.get("type")),
                            amount_per_serving=_safe_float(amount),
                            servings=servings,
                            unit=_optional_text(ingredient.get("unit")),
                            pack_size=_optional_float(ingredient.get("bottle_size_ml")),
                            price=_optional_float(ingredient.get("price")),
                            pack_options=select_packs(
                                ingredient.get("ingredient_packs"), pricing_tier
                            ),
                            purchase_url=_optional_text(ingredient.get("purchase_url")),
                        )
                    )
    return lines


def count_drinks(rows: list[dict[str, Any]]) -> int:
    """Total servings across event-recipe rows; non-numeric servings count as zero."""
    return sum(_safe_int(row.get("servings")) for row in rows)


def _parse_date(value: Any) -> date | None:
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return date_parser.isoparse(str(value)).date()
    except (ValueError, TypeError):
        return None


def parse_event_header(data: dict[str, Any]) -> EventHeader:
    guest_count = _optional_float(data.get("guest_count"))
    return EventHeader(
        title=_optional_text(data.get("title")),
        event_date=_parse_date(data.get("event_date")),
        guest_count=int(guest_count) if guest_count is not None else None,
        pricing_tier=parse_pricing_tier(data.get("pricing_tier")),
    )


class EventRowsAdapter:
    """
    Adapter for JSON event documents.

    Accepted shapes:
    - {"event": {...}, "event_recipes": [...]}
    - a bare list of event-recipe rows

    metadata["pricing_tier"] overrides the tier stored with the event.
    """

    def source_id(self) -> str:
        return "event_rows"

    def can_parse(self, metadata: dict[str, Any]) -> bool:
        return metadata.get("source") == self.source_id() or metadata.get("format") == "event_json"

    def parse(self, raw_bytes: bytes, metadata: dict[str, Any]) -> list[UsageLine]:
        """
        Parse an event document into usage lines.

        Raises:
            ValueError: If the bytes are not a JSON event document
        """
        event, rows = self._load(raw_bytes)
        tier = self._pricing_tier(event, metadata)
        lines = flatten_rows(rows, tier)
        logger.debug("Flattened %d rows into %d usage lines (tier=%s)", len(rows), len(lines), tier.value)
        return lines

    def parse_header(self, raw_bytes: bytes, metadata: dict[str, Any]) -> EventHeader:
        event, rows = self._load(raw_bytes)
        return replace(
            parse_event_header(event),
            pricing_tier=self._pricing_tier(event, metadata),
            drinks_count=count_drinks(rows),
        )

    def _pricing_tier(self, event: dict[str, Any], metadata: dict[str, Any]) -> PricingTier:
        return parse_pricing_tier(metadata.get("pricing_tier") or event.get("pricing_tier"))

    def _load(self, raw_bytes: bytes) -> tuple[dict[str, Any], list[dict[str, Any]]]:
        try:
            text = raw_bytes.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ValueError(f"Failed to decode event document: {exc}")

        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Event document is not valid JSON: {exc}")

        if isinstance(payload, list):
            event: Any = {}
            rows: Any = payload
        elif isinstance(payload, dict):
            event = payload.get("event") or {}
            rows = payload.get("event_recipes") or []
        else:
            raise ValueError("Event document must be an object or a list of rows")

        if not isinstance(event, dict) or not isinstance(rows, list):
            raise ValueError("Event document has an unexpected shape")
        return event, [r for r in rows if isinstance(r, dict)]
