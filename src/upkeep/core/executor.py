"""Upgrade a single candidate: install new, verify, delete old."""

import logging

from upkeep.core.errors import PackageOperationError, UpgradeFailure
from upkeep.core.source import PackageSource
from upkeep.models.candidate import UpgradeCandidate

logger = logging.getLogger(__name__)


class UpgradeExecutor:
    """Performs upgrades against a package source.

    The old version is only removed once the new one is confirmed present,
    so a failed upgrade never leaves the package missing.
    """

    def __init__(self, source: PackageSource):
        self.source = source

    def upgrade(self, candidate: UpgradeCandidate) -> None:
        """Upgrade one candidate. Raises UpgradeFailure."""
        if candidate.is_version_controlled:
            try:
                self.source.vc_upgrade(candidate.installed)
            except PackageOperationError as e:
                raise UpgradeFailure(candidate, "vc", str(e))
            return

        new, old = candidate.available, candidate.installed
        logger.debug("Upgrading %s: %s -> %s", candidate.name, old.version, new.version)

        try:
            self.source.install(new, mark_selected=False)
        except PackageOperationError as e:
            raise UpgradeFailure(candidate, "install", str(e))

        if not self.source.is_installed(new):
            raise UpgradeFailure(candidate, "verify", f"{new} missing after install")

        try:
            self.source.delete(old, force=True)
        except PackageOperationError as e:
            raise UpgradeFailure(candidate, "delete", str(e))

    def upgrade_all(
        self, candidates: list[UpgradeCandidate]
    ) -> tuple[list[UpgradeCandidate], list[UpgradeFailure]]:
        """Upgrade each candidate in turn, collecting failures.

        Returns ``(upgraded, failures)``. A delete-stage failure counts as a
        failure even though the new version is installed.
        """
        upgraded = []
        failures = []
        for candidate in candidates:
            try:
                self.upgrade(candidate)
            except UpgradeFailure as e:
                logger.warning("%s", e)
                failures.append(e)
            else:
                upgraded.append(candidate)
        return upgraded, failures
