import pytest

from upkeep.core.differ import compute_candidates
from upkeep.core.errors import UnsupportedFeature

from conftest import FakeSource, reg, vc


def test_only_strictly_newer_registry_packages() -> None:
    source = FakeSource(
        installed=[reg("a", "1.0"), reg("b", "2.0"), reg("c", "3.0"), reg("d", "1.0")],
        available=[reg("a", "1.1"), reg("b", "2.0"), reg("c", "2.9")],
    )

    candidates = compute_candidates(source, include_vc=False)

    assert [c.name for c in candidates] == ["a"]
    assert candidates[0].available == reg("a", "1.1")


def test_order_follows_installed_enumeration() -> None:
    source = FakeSource(
        installed=[reg("zeta", "1.0"), reg("alpha", "1.0"), reg("mid", "1.0")],
        available=[reg("alpha", "2.0"), reg("mid", "2.0"), reg("zeta", "2.0")],
    )

    assert [c.name for c in compute_candidates(source, False)] == ["zeta", "alpha", "mid"]


def test_vc_packages_always_included_when_requested() -> None:
    source = FakeSource(
        installed=[vc("b", "2.0")],
        available=[reg("b", "1.0")],
    )

    candidates = compute_candidates(source, include_vc=True)

    assert len(candidates) == 1
    assert candidates[0].available is None
    assert candidates[0].is_version_controlled


def test_vc_packages_skipped_when_not_requested() -> None:
    source = FakeSource(installed=[vc("b", "2.0")], available=[reg("b", "9.0")])
    assert compute_candidates(source, include_vc=False) == ()


def test_vc_requested_but_unsupported() -> None:
    source = FakeSource(installed=[vc("b", "2.0")], supports_vc=False)
    with pytest.raises(UnsupportedFeature):
        compute_candidates(source, include_vc=True)


def test_mixed_sources() -> None:
    source = FakeSource(
        installed=[reg("A", "1.0"), vc("B", "2.0")],
        available=[reg("A", "1.1")],
    )

    candidates = compute_candidates(source, include_vc=True)

    assert [c.describe() for c in candidates] == ["A (1.0) => (1.1)", "B (2.0) (vc)"]
