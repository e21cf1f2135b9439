"""Purchasing policy: buffer, rounding increments and planner search limits."""

from __future__ import annotations

from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any

import yaml

POLICY_FILE = "policy.yaml"


@dataclass(frozen=True)
class PlannerPolicy:
    """
    Tunable constants for buffering, rounding and pack planning.

    Defaults ship in barplan/templates/policy.yaml.
    """

    buffer_rate: float = 0.10
    default_bottle_size: float = 700
    preferred_pack_size: float = 700
    glassware_increment: int = 12
    glassware_minimum: int = 24
    garnish_gram_increment: int = 15
    piece_units: frozenset[str] = field(
        default_factory=lambda: frozenset({"pc", "pcs", "piece", "pieces"})
    )
    gram_units: frozenset[str] = field(
        default_factory=lambda: frozenset({"g", "gram", "grams"})
    )
    headroom_factor: int = 2
    max_search_amount: int = 200_000


def _load_yaml(path: Path | None) -> dict[str, Any]:
    if path:
        file_path = path / POLICY_FILE if path.is_dir() else path
        if not file_path.exists():
            return {}
        with file_path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}

    try:
        resource = resources.files("barplan.templates").joinpath(POLICY_FILE)
        with resource.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}
    except FileNotFoundError:
        return {}


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ValueError(f"Policy section '{key}' must be a mapping, got {type(value).__name__}")
    return value


def _units(value: Any, fallback: frozenset[str]) -> frozenset[str]:
    if value is None:
        return fallback
    if not isinstance(value, list):
        raise ValueError(f"Unit lists must be sequences, got {type(value).__name__}")
    return frozenset(str(u).strip().lower() for u in value)


def policy_from_dict(data: dict[str, Any], base: PlannerPolicy | None = None) -> PlannerPolicy:
    """
    Build a PlannerPolicy from a parsed YAML mapping.

    Keys that are absent keep the value from base (or the dataclass defaults).

    Raises:
        ValueError: If a section has the wrong shape or a numeric value is invalid
    """
    base = base or PlannerPolicy()
    glassware = _section(data, "glassware")
    garnish = _section(data, "garnish_grams")
    search = _section(data, "search")

    try:
        policy = PlannerPolicy(
            buffer_rate=float(data.get("buffer_rate", base.buffer_rate)),
            default_bottle_size=float(data.get("default_bottle_size", base.default_bottle_size)),
            preferred_pack_size=float(data.get("preferred_pack_size", base.preferred_pack_size)),
            glassware_increment=int(glassware.get("increment", base.glassware_increment)),
            glassware_minimum=int(glassware.get("minimum", base.glassware_minimum)),
            garnish_gram_increment=int(garnish.get("increment", base.garnish_gram_increment)),
            piece_units=_units(data.get("piece_units"), base.piece_units),
            gram_units=_units(data.get("gram_units"), base.gram_units),
            headroom_factor=int(search.get("headroom_factor", base.headroom_factor)),
            max_search_amount=int(search.get("max_amount", base.max_search_amount)),
        )
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid policy value: {exc}") from exc

    if policy.buffer_rate < 0:
        raise ValueError("buffer_rate must be non-negative")
    if policy.default_bottle_size <= 0:
        raise ValueError("default_bottle_size must be positive")
    if policy.headroom_factor < 0 or policy.max_search_amount <= 0:
        raise ValueError("search limits must be positive")
    return policy


def load_policy(path: str | Path | None = None) -> PlannerPolicy:
    """
    Load the purchasing policy.

    Args:
        path: Optional directory containing policy.yaml, or a YAML file path.
            When omitted, the packaged defaults are used.

    Returns:
        PlannerPolicy with file values layered over the packaged defaults
    """
    defaults = policy_from_dict(_load_yaml(None))
    if path is None:
        return defaults
    return policy_from_dict(_load_yaml(Path(path)), base=defaults)
