"""Protocol definitions for barplan adapters and stages."""

from typing import Any, Iterable, Protocol, runtime_checkable

from barplan.core.models import EventHeader, PackOption, PackPlan, UsageLine
from barplan.core.policy import PlannerPolicy


@runtime_checkable
class Adapter(Protocol):
    """
    Adapter protocol: converts already-fetched event data into UsageLine records.

    Each adapter is responsible for:
    - Identifying whether it can parse given data
    - Resolving one-or-many relationship shapes into a flat list
    - Emitting immutable UsageLine records
    """

    def source_id(self) -> str:
        """
        Return a unique identifier for this adapter's source.

        Examples: 'event_rows'
        """
        ...

    def can_parse(self, metadata: dict[str, Any]) -> bool:
        """
        Determine if this adapter can parse data with the given metadata.

        Args:
            metadata: Context about the raw data (e.g., {'source': 'event_rows'})

        Returns:
            True if this adapter recognizes the format, False otherwise.
        """
        ...

    def parse(self, raw_bytes: bytes, metadata: dict[str, Any]) -> list[UsageLine]:
        """
        Parse raw data and emit UsageLine records.

        Args:
            raw_bytes: Raw bytes from the source
            metadata: Context (e.g., pricing_tier, file path)

        Returns:
            List of flattened UsageLine records

        Raises:
            ValueError: If parsing fails
        """
        ...

    def parse_header(self, raw_bytes: bytes, metadata: dict[str, Any]) -> EventHeader:
        """Extract event details shown alongside the order list."""
        ...


@runtime_checkable
class PackPlanner(Protocol):
    """PackPlanner protocol: choose packs covering a required quantity."""

    policy: PlannerPolicy

    def plan(self, requested: float, options: Iterable[PackOption]) -> PackPlan | None:
        """
        Cover requested with packs from options.

        Args:
            requested: Already-rounded quantity in the ingredient's unit
            options: Pack catalog for the ingredient (unnormalized)

        Returns:
            PackPlan, or None when no plan applies and the single-size path should be used
        """
        ...
