from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from upkeep.core.config import UpkeepConfig, set_config
from upkeep.core.errors import IoFailure, PackageOperationError
from upkeep.core.source import PackageSource
from upkeep.models.package import PackageDescriptor, SourceKind


def reg(name: str, version: str) -> PackageDescriptor:
    return PackageDescriptor.create(name, version)


def vc(name: str, version: str) -> PackageDescriptor:
    return PackageDescriptor.create(name, version, SourceKind.VERSION_CONTROLLED)


class FakeSource(PackageSource):
    """In-memory package source that records every operation."""

    def __init__(
        self,
        installed: list[PackageDescriptor] | None = None,
        available: list[PackageDescriptor] | None = None,
        supports_vc: bool = True,
        sources: list[str] | None = None,
        last_modified: datetime | None = None,
    ):
        self.installed = list(installed or [])
        self.available = {d.name: d for d in available or []}
        self.supports_vc = supports_vc
        self._sources = ["https://index.example/packages.yaml"] if sources is None else sources
        self.last_modified = last_modified
        self.calls: list[tuple[str, str]] = []
        self.fail_install: set[str] = set()
        self.fail_delete: set[str] = set()
        self.fail_vc: set[str] = set()
        self.silent_install: set[str] = set()
        self.fail_refresh = False

    @property
    def sources(self) -> list[str]:
        return self._sources

    def list_installed(self):
        return list(self.installed)

    def list_available(self):
        return dict(self.available)

    def supports_version_control(self):
        return self.supports_vc

    def refresh_index(self):
        self.calls.append(("refresh", ""))
        if self.fail_refresh:
            raise IoFailure("connection refused")
        self.last_modified = datetime.now()

    def index_last_modified(self):
        return self.last_modified

    def install(self, desc, mark_selected=False):
        self.calls.append(("install", str(desc)))
        if desc.name in self.fail_install:
            raise PackageOperationError(f"cannot install {desc}")
        if desc.name not in self.silent_install:
            self.installed.append(desc)

    def is_installed(self, desc):
        return desc in self.installed

    def delete(self, desc, force=False):
        self.calls.append(("delete", str(desc)))
        if desc.name in self.fail_delete:
            raise PackageOperationError(f"cannot delete {desc}")
        self.installed.remove(desc)

    def vc_upgrade(self, desc):
        self.calls.append(("vc", str(desc)))
        if desc.name in self.fail_vc:
            raise PackageOperationError(f"cannot pull {desc.name}")


@pytest.fixture
def config(tmp_path: Path) -> UpkeepConfig:
    cfg = UpkeepConfig.for_base_dir(tmp_path / ".upkeep")
    cfg.sources = ["https://index.example/packages.yaml"]
    set_config(cfg)
    yield cfg
    set_config(None)
