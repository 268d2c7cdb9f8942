"""Data models for upkeep."""

from upkeep.models.package import (
    InstalledPackage,
    PackageDescriptor,
    SourceKind,
    Version,
    compare_versions,
)
from upkeep.models.candidate import CandidateSet, UpgradeCandidate

__all__ = [
    "InstalledPackage",
    "PackageDescriptor",
    "SourceKind",
    "Version",
    "compare_versions",
    "CandidateSet",
    "UpgradeCandidate",
]
