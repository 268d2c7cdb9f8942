"""Upgrade candidate model."""

from dataclasses import dataclass

from upkeep.models.package import PackageDescriptor


@dataclass(frozen=True)
class UpgradeCandidate:
    """An installed package paired with the version that would replace it.

    Version-controlled packages carry no available descriptor: they are
    upgraded by pulling their checkout, not by version comparison.
    """

    installed: PackageDescriptor
    available: PackageDescriptor | None = None

    def __post_init__(self):
        if self.installed.is_version_controlled:
            if self.available is not None:
                raise ValueError(
                    f"{self.installed.name} is version-controlled and cannot have an available version"
                )
            return
        if self.available is None:
            raise ValueError(f"{self.installed.name} has no available version")
        if self.available.name != self.installed.name:
            raise ValueError(
                f"Name mismatch: {self.installed.name} vs {self.available.name}"
            )
        if not self.available.version > self.installed.version:
            raise ValueError(
                f"{self.available} is not newer than {self.installed}"
            )

    @property
    def name(self) -> str:
        return self.installed.name

    @property
    def is_version_controlled(self) -> bool:
        return self.installed.is_version_controlled

    def describe(self) -> str:
        """One-line summary: ``name (1.0) => (1.1)`` or ``name (2.0) (vc)``."""
        if self.available is None:
            return f"{self.name} ({self.installed.version}) (vc)"
        return f"{self.name} ({self.installed.version}) => ({self.available.version})"


# Discovery order from the installed-package registry; selection indices map onto it.
CandidateSet = tuple[UpgradeCandidate, ...]
