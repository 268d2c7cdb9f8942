"""Compute which installed packages have upgrades."""

import logging

from upkeep.core.errors import UnsupportedFeature
from upkeep.core.source import PackageSource
from upkeep.models.candidate import CandidateSet, UpgradeCandidate

logger = logging.getLogger(__name__)


def compute_candidates(source: PackageSource, include_vc: bool) -> CandidateSet:
    """Pair installed packages with newer available versions.

    Version-controlled packages are always candidates when ``include_vc``
    is set, since their freshness cannot be judged from the index.
    Packages missing from the index are skipped. Order follows
    ``source.list_installed()``.
    """
    if include_vc and not source.supports_version_control():
        raise UnsupportedFeature("Version-controlled upgrades are not available")

    available = source.list_available()
    candidates = []

    for installed in source.list_installed():
        if installed.is_version_controlled:
            if include_vc:
                candidates.append(UpgradeCandidate(installed))
            continue

        latest = available.get(installed.name)
        if latest is None:
            logger.debug("%s is not in the index", installed.name)
            continue

        if latest.version > installed.version:
            candidates.append(UpgradeCandidate(installed, latest))

    return tuple(candidates)
