"""Package descriptor and version models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from functools import total_ordering


class SourceKind(str, Enum):
    """Where an installed package came from."""

    REGISTRY = "registry"
    VERSION_CONTROLLED = "vc"


@total_ordering
@dataclass(frozen=True)
class Version:
    """A dotted version made of non-negative integers.

    Missing trailing components compare as zero, so ``1.0`` equals
    ``1.0.0`` and is lower than ``1.0.1``.
    """

    parts: tuple[int, ...]

    def __post_init__(self):
        if not self.parts:
            raise ValueError("Version needs at least one component")
        if any(not isinstance(p, int) or p < 0 for p in self.parts):
            raise ValueError(f"Invalid version components: {self.parts!r}")

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse a version string such as ``1.2.3`` or ``v20240101.1``."""
        value = str(text).strip()
        if value.startswith(("v", "V")):
            value = value[1:]
        components = value.split(".")
        if not all(p.isascii() and p.isdigit() for p in components):
            raise ValueError(f"Invalid version: {text!r}")
        return cls(tuple(int(p) for p in components))

    def _key(self) -> tuple[int, ...]:
        parts = list(self.parts)
        while len(parts) > 1 and parts[-1] == 0:
            parts.pop()
        return tuple(parts)

    def __eq__(self, other):
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __lt__(self, other):
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        return ".".join(str(p) for p in self.parts)


def compare_versions(a: Version, b: Version) -> int:
    """Return 1 if ``b`` is a strict upgrade of ``a``, -1 if a downgrade, else 0."""
    if b > a:
        return 1
    if b < a:
        return -1
    return 0


@dataclass(frozen=True)
class PackageDescriptor:
    """Represents one version of a package, installed or available."""

    name: str
    version: Version
    kind: SourceKind = SourceKind.REGISTRY

    @classmethod
    def create(cls, name: str, version: str, kind: SourceKind | str = SourceKind.REGISTRY) -> "PackageDescriptor":
        """Build a descriptor from plain strings."""
        return cls(name=name, version=Version.parse(version), kind=SourceKind(kind))

    @property
    def is_version_controlled(self) -> bool:
        return self.kind is SourceKind.VERSION_CONTROLLED

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"


@dataclass
class InstalledPackage:
    """Represents a package recorded in the manifest."""

    name: str
    kind: SourceKind
    versions: list[str] = field(default_factory=list)
    installed_at: datetime = field(default_factory=datetime.now)
    selected: bool = False
    requires: list[str] = field(default_factory=list)
    checkout: str = ""  # Working tree for version-controlled packages

    @property
    def latest(self) -> PackageDescriptor | None:
        """Descriptor for the newest installed version."""
        if not self.versions:
            return None
        newest = max(self.versions, key=Version.parse)
        return PackageDescriptor(self.name, Version.parse(newest), self.kind)

    def has_version(self, version: Version) -> bool:
        return any(Version.parse(v) == version for v in self.versions)

    def to_dict(self) -> dict:
        """Convert to dictionary for YAML serialization."""
        return {
            "source": self.kind.value,
            "versions": self.versions,
            "installed_at": self.installed_at.isoformat(),
            "selected": self.selected,
            "requires": self.requires,
            "checkout": self.checkout,
        }

    @classmethod
    def from_dict(cls, name: str, data: dict) -> "InstalledPackage":
        """Create InstalledPackage from dictionary."""
        installed_at = data.get("installed_at")
        if isinstance(installed_at, str):
            installed_at = datetime.fromisoformat(installed_at)
        elif installed_at is None:
            installed_at = datetime.now()

        return cls(
            name=name,
            kind=SourceKind(data.get("source", SourceKind.REGISTRY.value)),
            versions=[str(v) for v in data.get("versions", [])],
            installed_at=installed_at,
            selected=data.get("selected", False),
            requires=data.get("requires", []),
            checkout=data.get("checkout", ""),
        )
