"""CLI helpers for barplan."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict, is_dataclass
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any

from barplan.adapters.event_rows import EventRowsAdapter
from barplan.core.models import PricingTier
from barplan.core.pipeline import PipelineResult, PipelineRunner
from barplan.core.policy import load_policy
from barplan.formatting.order_list import format_order_summary_html, format_order_summary_text

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="barplan")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    plan_cmd = subparsers.add_parser("plan", help="Compute ingredient totals as JSON")
    plan_cmd.add_argument("file")
    plan_cmd.add_argument("--out", required=True)
    _add_planning_args(plan_cmd)

    render_cmd = subparsers.add_parser("render", help="Render the order list for an event")
    render_cmd.add_argument("file")
    render_cmd.add_argument("--format", choices=["html", "text"], default="text")
    render_cmd.add_argument("--out")
    _add_planning_args(render_cmd)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    result = _run(args.file, args.tier, args.policy)

    if args.command == "plan":
        payload = {
            "event": dataclass_to_dict(result.header),
            "totals": [dataclass_to_dict(t) for t in result.totals],
        }
        _write_text(args.out, json.dumps(payload, ensure_ascii=False, indent=2) + "\n")
        logger.info("Wrote %d ingredient totals to %s", len(result.totals), args.out)
        return 0

    if args.command == "render":
        if args.format == "html":
            body = format_order_summary_html(result.header, result.totals)
        else:
            body = format_order_summary_text(result.header, result.totals)
        if args.out:
            _write_text(args.out, body + "\n")
        else:
            print(body)
        return 0

    return 1


def _add_planning_args(cmd: argparse.ArgumentParser) -> None:
    cmd.add_argument("--tier", choices=[t.value for t in PricingTier], default=None)
    cmd.add_argument("--policy", default=None, help="policy.yaml file or directory holding one")


def _run(file_path: str, tier: str | None, policy_path: str | None) -> PipelineResult:
    runner = PipelineRunner(adapters=[EventRowsAdapter()], policy=load_policy(policy_path))
    metadata: dict[str, Any] = {"source": "event_rows", "file_path": file_path}
    if tier:
        metadata["pricing_tier"] = tier
    return runner.run_pipeline(Path(file_path).read_bytes(), metadata)


def _write_text(path: str | Path, text: str) -> None:
    Path(path).write_text(text, encoding="utf-8")


def dataclass_to_dict(obj: Any) -> Any:
    if obj is None:
        return None
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if is_dataclass(obj) and not isinstance(obj, type):
        data = asdict(obj)
        return {key: dataclass_to_dict(value) for key, value in data.items()}
    if isinstance(obj, (list, tuple)):
        return [dataclass_to_dict(value) for value in obj]
    if isinstance(obj, dict):
        return {key: dataclass_to_dict(value) for key, value in obj.items()}
    return obj


if __name__ == "__main__":
    raise SystemExit(main())
