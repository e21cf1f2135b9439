"""Ensure event fixtures stay small and synthetic."""

import json
from pathlib import Path

MAX_BYTES = 20_000
FIXTURES = Path(__file__).resolve().parents[1] / "src" / "barplan" / "adapters"


def test_fixture_sizes() -> None:
    for path in FIXTURES.rglob("fixtures/*"):
        if path.is_file():
            assert path.stat().st_size <= MAX_BYTES, f"Fixture too large: {path}"


def test_fixtures_use_example_domains() -> None:
    for path in FIXTURES.rglob("fixtures/*.json"):
        text = path.read_text(encoding="utf-8")
        json.loads(text)
        for line in text.splitlines():
            if "http" in line:
                assert "example" in line, f"Real URL in fixture {path}: {line.strip()}"
