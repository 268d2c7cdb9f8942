"""Package sources: what is installed, what is available, and how to change it."""

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
import logging
import shutil
import subprocess

import yaml

from upkeep.core.config import UpkeepConfig
from upkeep.core.downloader import download_file, fetch_text, DownloadError
from upkeep.core.errors import IoFailure, PackageOperationError
from upkeep.core.extractor import extract_archive, remove_tree, ExtractionError
from upkeep.core.manifest import Manifest
from upkeep.models.package import PackageDescriptor, SourceKind, Version

logger = logging.getLogger(__name__)

INDEX_FILENAME = "index.yaml"


class PackageSource(ABC):
    """Provider of installed and available packages.

    Operations are blocking and must not be called concurrently for the
    same package.
    """

    @property
    @abstractmethod
    def sources(self) -> list[str]:
        """Configured index locations."""

    @abstractmethod
    def list_installed(self) -> list[PackageDescriptor]:
        """Installed packages, in registry order."""

    @abstractmethod
    def list_available(self) -> dict[str, PackageDescriptor]:
        """Latest available descriptor per package name from the index snapshot."""

    @abstractmethod
    def supports_version_control(self) -> bool:
        """Whether version-controlled packages can be upgraded."""

    @abstractmethod
    def refresh_index(self) -> None:
        """Fetch a fresh index snapshot. Raises IoFailure."""

    @abstractmethod
    def index_last_modified(self) -> datetime | None:
        """When the index snapshot was written, or None if there is none."""

    @abstractmethod
    def install(self, desc: PackageDescriptor, mark_selected: bool = False) -> None:
        """Install a specific version. Raises PackageOperationError."""

    @abstractmethod
    def is_installed(self, desc: PackageDescriptor) -> bool:
        """Check that this exact version is present."""

    @abstractmethod
    def delete(self, desc: PackageDescriptor, force: bool = False) -> None:
        """Remove a specific version. Raises PackageOperationError."""

    @abstractmethod
    def vc_upgrade(self, desc: PackageDescriptor) -> None:
        """Update a version-controlled package in place. Raises PackageOperationError."""


def parse_index(text: str, origin: str) -> dict[str, dict]:
    """Parse an index document into ``{name: entry}``.

    Accepts YAML or JSON of the form::

        packages:
          name: {version: "1.2", url: "https://...", requires: [other]}
    """
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise IoFailure(f"Malformed index from {origin}: {e}")

    packages = data.get("packages") if isinstance(data, dict) else None
    if not isinstance(packages, dict):
        raise IoFailure(f"Malformed index from {origin}: missing 'packages' mapping")

    entries = {}
    for name, entry in packages.items():
        if isinstance(entry, str):
            entry = {"version": entry}
        if not isinstance(entry, dict) or "version" not in entry:
            raise IoFailure(f"Malformed index from {origin}: bad entry for {name}")
        # Unquoted YAML numbers lose digits (1.10 loads as 1.1).
        if not isinstance(entry["version"], str):
            raise IoFailure(
                f"Malformed index from {origin}: version of {name} must be a quoted string"
            )
        try:
            Version.parse(entry["version"])
        except ValueError as e:
            raise IoFailure(f"Malformed index from {origin}: {e}")
        entries[str(name)] = {
            "version": entry["version"],
            "url": entry.get("url", ""),
            "requires": list(entry.get("requires", []) or []),
        }
    return entries


def merge_indexes(indexes: list[dict[str, dict]]) -> dict[str, dict]:
    """Merge several indexes; the highest version wins on a name clash."""
    merged: dict[str, dict] = {}
    for index in indexes:
        for name, entry in index.items():
            current = merged.get(name)
            if current is None or Version.parse(entry["version"]) > Version.parse(current["version"]):
                merged[name] = entry
    return merged


class ManifestSource(PackageSource):
    """Package source backed by a YAML manifest and cached remote indexes."""

    def __init__(self, config: UpkeepConfig, manifest: Manifest | None = None):
        self.config = config
        self.manifest = manifest or Manifest(config.manifest_path)
        self.index_path = config.cache_dir / INDEX_FILENAME
        self._vc_supported: bool | None = None

    @property
    def sources(self) -> list[str]:
        return list(self.config.sources)

    def list_installed(self) -> list[PackageDescriptor]:
        installed = []
        for package in self.manifest.list_packages():
            latest = package.latest
            if latest is not None:
                installed.append(latest)
        return installed

    def _load_index(self) -> dict[str, dict]:
        if not self.index_path.exists():
            return {}
        with open(self.index_path) as f:
            data = yaml.safe_load(f) or {}
        return data.get("packages", {}) or {}

    def list_available(self) -> dict[str, PackageDescriptor]:
        return {
            name: PackageDescriptor.create(name, entry["version"])
            for name, entry in self._load_index().items()
        }

    def supports_version_control(self) -> bool:
        if self._vc_supported is None:
            self._vc_supported = (
                self.config.version_control and shutil.which("git") is not None
            )
        return self._vc_supported

    def refresh_index(self) -> None:
        indexes = []
        for url in self.sources:
            logger.debug("Fetching index %s", url)
            try:
                text = fetch_text(url)
            except DownloadError as e:
                raise IoFailure(str(e))
            indexes.append(parse_index(text, url))

        merged = merge_indexes(indexes)
        self.index_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.index_path.with_suffix(".tmp")
        with open(tmp_path, "w") as f:
            yaml.dump({"packages": merged}, f, default_flow_style=False, sort_keys=False)
        tmp_path.replace(self.index_path)
        logger.info("Index refreshed: %d packages from %d sources", len(merged), len(indexes))

    def index_last_modified(self) -> datetime | None:
        if not self.index_path.exists():
            return None
        return datetime.fromtimestamp(self.index_path.stat().st_mtime)

    def package_dir(self, desc: PackageDescriptor) -> Path:
        return self.config.packages_dir / f"{desc.name}-{desc.version}"

    def install(self, desc: PackageDescriptor, mark_selected: bool = False) -> None:
        entry = self._load_index().get(desc.name)
        if entry is None or Version.parse(entry["version"]) != desc.version:
            raise PackageOperationError(f"{desc} is not in the package index")

        target = self.package_dir(desc)
        target.mkdir(parents=True, exist_ok=True)

        url = entry.get("url")
        if url:
            archive_path = None
            try:
                archive_path = download_file(url, self.config.cache_dir)
                extract_archive(archive_path, target)
            except (DownloadError, ExtractionError) as e:
                remove_tree(target)
                raise PackageOperationError(str(e))
            finally:
                if archive_path is not None:
                    archive_path.unlink(missing_ok=True)

        # Only an explicit user install marks a package as selected.
        self.manifest.add_version(
            desc,
            requires=entry.get("requires", []),
            selected=True if mark_selected else None,
        )
        logger.info("Installed %s", desc)

    def is_installed(self, desc: PackageDescriptor) -> bool:
        return self.manifest.has(desc) and self.package_dir(desc).is_dir()

    def delete(self, desc: PackageDescriptor, force: bool = False) -> None:
        if not self.manifest.has(desc):
            raise PackageOperationError(f"{desc} is not installed")

        if not force:
            dependents = self.manifest.dependents(desc.name)
            if dependents:
                raise PackageOperationError(
                    f"{desc.name} is required by {', '.join(dependents)}"
                )

        try:
            remove_tree(self.package_dir(desc))
        except OSError as e:
            raise PackageOperationError(f"Cannot remove {desc}: {e}")
        self.manifest.remove_version(desc)
        logger.info("Deleted %s", desc)

    def vc_upgrade(self, desc: PackageDescriptor) -> None:
        if desc.kind is not SourceKind.VERSION_CONTROLLED:
            raise PackageOperationError(f"{desc.name} is not version-controlled")

        checkout = self.manifest.checkout_for(desc.name)
        if checkout is None or not checkout.is_dir():
            raise PackageOperationError(f"No checkout recorded for {desc.name}")

        try:
            result = subprocess.run(
                ["git", "-C", str(checkout), "pull", "--ff-only"],
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise PackageOperationError(f"Cannot run git: {e}")

        if result.returncode != 0:
            raise PackageOperationError(
                f"git pull failed for {desc.name}: {result.stderr.strip()}"
            )
        logger.info("Pulled %s in %s", desc.name, checkout)
