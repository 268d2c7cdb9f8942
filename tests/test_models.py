import pytest

from upkeep.models.candidate import UpgradeCandidate
from upkeep.models.package import PackageDescriptor, SourceKind, Version, compare_versions

from conftest import reg, vc


def test_version_parse_strips_prefix() -> None:
    assert Version.parse("v1.2.3").parts == (1, 2, 3)
    assert str(Version.parse("20240101.5")) == "20240101.5"


@pytest.mark.parametrize("text", ["", "1.x", "1..2", "-1.0", "1.0-beta", "1_0", "+1.2", "1.\u0663", " 1. 2"])
def test_version_parse_rejects_garbage(text) -> None:
    with pytest.raises(ValueError):
        Version.parse(text)


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("1.0", "1.1", 1),
        ("1.1", "1.0", -1),
        ("1.0", "1.0", 0),
        ("1.0", "1.0.0", 0),
        ("1.0", "1.0.1", 1),
        ("1.9", "1.10", 1),
        ("2", "1.99.99", -1),
    ],
)
def test_compare_versions(a, b, expected) -> None:
    assert compare_versions(Version.parse(a), Version.parse(b)) == expected


def test_equal_padded_versions_hash_alike() -> None:
    assert len({Version.parse("1.0"), Version.parse("1.0.0"), Version.parse("1")}) == 1


def test_descriptor_create() -> None:
    desc = PackageDescriptor.create("magit", "3.3.0", "vc")
    assert desc.kind is SourceKind.VERSION_CONTROLLED
    assert desc.is_version_controlled
    assert str(desc) == "magit@3.3.0"


def test_candidate_describe() -> None:
    assert UpgradeCandidate(reg("a", "1.0"), reg("a", "1.1")).describe() == "a (1.0) => (1.1)"
    assert UpgradeCandidate(vc("b", "2.0")).describe() == "b (2.0) (vc)"


def test_candidate_rejects_non_upgrade() -> None:
    with pytest.raises(ValueError):
        UpgradeCandidate(reg("a", "1.1"), reg("a", "1.1"))
    with pytest.raises(ValueError):
        UpgradeCandidate(reg("a", "1.1"), reg("a", "1.0"))
    with pytest.raises(ValueError):
        UpgradeCandidate(reg("a", "1.0"))


def test_vc_candidate_never_carries_available() -> None:
    with pytest.raises(ValueError):
        UpgradeCandidate(vc("b", "2.0"), reg("b", "3.0"))
