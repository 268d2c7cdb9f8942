from datetime import datetime, timedelta

import pytest

from upkeep.core.errors import NoSourcesConfigured
from upkeep.core.throttle import RefreshState, elapsed_days, should_refresh

SOURCES = ["https://index.example/packages.yaml"]
NOW = datetime(2026, 3, 10, 7, 0)


def state(days_ago: int, interval: int = 2) -> RefreshState:
    return RefreshState(last_refresh=NOW - timedelta(days=days_ago), interval_days=interval)


def test_strict_mode_waits_for_full_interval() -> None:
    assert should_refresh(state(1), tolerant=False, sources=SOURCES, now=NOW) is False
    assert should_refresh(state(2), tolerant=False, sources=SOURCES, now=NOW) is True


def test_tolerant_mode_allows_one_day_early() -> None:
    assert should_refresh(state(1), tolerant=True, sources=SOURCES, now=NOW) is True
    assert should_refresh(state(2), tolerant=True, sources=SOURCES, now=NOW) is True
    assert should_refresh(state(0), tolerant=True, sources=SOURCES, now=NOW) is False


def test_no_snapshot_always_refreshes() -> None:
    never = RefreshState(last_refresh=None, interval_days=30)
    assert should_refresh(never, tolerant=False, sources=SOURCES, now=NOW) is True


def test_no_sources_is_an_error() -> None:
    with pytest.raises(NoSourcesConfigured):
        should_refresh(state(5), tolerant=False, sources=[], now=NOW)


def test_elapsed_counts_whole_24_hour_periods() -> None:
    assert elapsed_days(datetime(2026, 3, 9, 23, 59), datetime(2026, 3, 10, 0, 1)) == 0
    assert elapsed_days(datetime(2026, 3, 9, 7, 0), datetime(2026, 3, 10, 6, 59)) == 0
    assert elapsed_days(datetime(2026, 3, 9, 7, 0), datetime(2026, 3, 10, 7, 0)) == 1
    assert elapsed_days(datetime(2026, 3, 1, 12, 0), datetime(2026, 3, 10, 11, 0)) == 8


def test_interval_must_be_positive() -> None:
    with pytest.raises(ValueError):
        RefreshState(last_refresh=None, interval_days=0)


def test_mark_refreshed() -> None:
    s = state(10)
    s.mark_refreshed(NOW)
    assert should_refresh(s, tolerant=False, sources=SOURCES, now=NOW) is False
