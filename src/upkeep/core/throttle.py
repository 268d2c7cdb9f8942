"""Decide whether the package index needs refreshing."""

from dataclasses import dataclass
from datetime import datetime, timedelta
import logging

from upkeep.core.errors import NoSourcesConfigured

logger = logging.getLogger(__name__)


@dataclass
class RefreshState:
    """When the index was last refreshed and how often it should be."""

    last_refresh: datetime | None
    interval_days: int

    def __post_init__(self):
        if self.interval_days < 1:
            raise ValueError("interval_days must be positive")

    def mark_refreshed(self, when: datetime) -> None:
        """Record a successful refresh."""
        self.last_refresh = when


def elapsed_days(since: datetime, now: datetime) -> int:
    """Whole 24-hour periods between two local timestamps."""
    return (now - since) // timedelta(days=1)


def should_refresh(
    state: RefreshState,
    tolerant: bool,
    sources: list[str],
    now: datetime | None = None,
) -> bool:
    """Return True if the index is stale.

    In tolerant mode one day less than the interval is enough, so a
    scheduled run landing just before the boundary still refreshes.
    """
    if not sources:
        raise NoSourcesConfigured("No package sources configured")

    if state.last_refresh is None:
        return True

    now = now or datetime.now()
    elapsed = elapsed_days(state.last_refresh, now)
    threshold = state.interval_days - 1 if tolerant else state.interval_days
    stale = elapsed >= threshold
    logger.debug(
        "Index age %d day(s), threshold %d: %s",
        elapsed, threshold, "refresh" if stale else "fresh",
    )
    return stale
