"""Manifest file management for tracking installed packages."""

from pathlib import Path
from datetime import datetime
import yaml

from upkeep.models.package import InstalledPackage, PackageDescriptor, SourceKind, Version


MANIFEST_VERSION = 1


class Manifest:
    """Manages the upkeep manifest file.

    Entries keep their insertion order, which is the discovery order used
    when computing upgrade candidates.
    """

    def __init__(self, path: Path):
        self.path = path
        self._packages: dict[str, InstalledPackage] = {}
        self._load()

    def _load(self) -> None:
        """Load manifest from file."""
        if not self.path.exists():
            self._packages = {}
            return

        with open(self.path) as f:
            data = yaml.safe_load(f) or {}

        packages_data = data.get("packages", {}) or {}
        self._packages = {
            name: InstalledPackage.from_dict(name, pkg_data)
            for name, pkg_data in packages_data.items()
        }

    def save(self) -> None:
        """Save manifest to file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "version": MANIFEST_VERSION,
            "packages": {
                name: pkg.to_dict() for name, pkg in self._packages.items()
            },
        }

        with open(self.path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def get(self, name: str) -> InstalledPackage | None:
        """Get a package by name."""
        return self._packages.get(name)

    def has(self, desc: PackageDescriptor) -> bool:
        """Check if this exact version is recorded."""
        package = self._packages.get(desc.name)
        return package is not None and package.has_version(desc.version)

    def add_version(
        self,
        desc: PackageDescriptor,
        requires: list[str] | None = None,
        selected: bool | None = None,
    ) -> InstalledPackage:
        """Record an installed version, creating the entry if needed."""
        package = self._packages.get(desc.name)
        if package is None:
            package = InstalledPackage(name=desc.name, kind=desc.kind)
            self._packages[desc.name] = package

        version = str(desc.version)
        if not package.has_version(desc.version):
            package.versions.append(version)
        package.installed_at = datetime.now()
        if requires is not None:
            package.requires = list(requires)
        if selected is not None:
            package.selected = selected
        self.save()
        return package

    def remove_version(self, desc: PackageDescriptor) -> bool:
        """Forget an installed version. Drops the entry when none remain."""
        package = self._packages.get(desc.name)
        if package is None or not package.has_version(desc.version):
            return False

        package.versions = [
            v for v in package.versions if Version.parse(v) != desc.version
        ]
        if not package.versions:
            del self._packages[desc.name]
        self.save()
        return True

    def list_packages(self) -> list[InstalledPackage]:
        """List all installed packages."""
        return list(self._packages.values())

    def dependents(self, name: str) -> list[str]:
        """Names of installed packages that require ``name``."""
        return [
            pkg.name for pkg in self._packages.values()
            if pkg.name != name and name in pkg.requires
        ]

    def checkout_for(self, name: str) -> Path | None:
        """Working tree of a version-controlled package."""
        package = self._packages.get(name)
        if package is None or package.kind is not SourceKind.VERSION_CONTROLLED:
            return None
        return Path(package.checkout) if package.checkout else None
