"""One refresh -> diff -> select -> upgrade run."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol
import logging
import threading

from upkeep.core.config import UpkeepConfig
from upkeep.core.differ import compute_candidates
from upkeep.core.errors import IoFailure, NoSourcesConfigured, UpgradeFailure
from upkeep.core.executor import UpgradeExecutor
from upkeep.core.session import SelectionSession, SessionStatus
from upkeep.core.source import PackageSource
from upkeep.core.throttle import RefreshState, should_refresh
from upkeep.models.candidate import UpgradeCandidate

logger = logging.getLogger(__name__)

UP_TO_DATE = "up-to-date"
UPGRADED = "upgraded"
CANCELLED = "cancelled"
FAILED = "failed"


class SelectionSurface(Protocol):
    """Interactive display that lets the operator choose candidates."""

    def confirm(self, candidate: UpgradeCandidate) -> bool:
        """Yes/no question for a lone candidate."""

    def drive(self, session: SelectionSession) -> None:
        """Feed operator commands to ``session`` until it is closed."""


@dataclass
class RunReport:
    """Outcome of one pipeline run."""

    status: str
    upgraded: list[str] = field(default_factory=list)
    failures: list[UpgradeFailure] = field(default_factory=list)
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status != FAILED and not self.failures


class UpgradePipeline:
    """Runs the upgrade cycle against a package source.

    Only one run is active at a time; a scheduled run waits for an
    interactive one to finish.
    """

    def __init__(
        self,
        source: PackageSource,
        config: UpkeepConfig,
        surface: SelectionSurface | None = None,
    ):
        self.source = source
        self.config = config
        self.surface = surface
        self.executor = UpgradeExecutor(source)
        self.refresh_state = RefreshState(
            last_refresh=source.index_last_modified(),
            interval_days=config.refresh_interval_days,
        )
        self._include_vc: bool | None = None
        self._lock = threading.Lock()

    @property
    def include_vc(self) -> bool:
        """Version-controlled packages are included when configured and supported."""
        if self._include_vc is None:
            self._include_vc = (
                self.config.version_control and self.source.supports_version_control()
            )
        return self._include_vc

    def refresh_if_stale(self, tolerant: bool = False, force: bool = False) -> bool:
        """Refresh the index when it is stale. Returns True if refreshed.

        Raises NoSourcesConfigured and IoFailure.
        """
        if force:
            if not self.source.sources:
                raise NoSourcesConfigured("No package sources configured")
        elif not should_refresh(self.refresh_state, tolerant, self.source.sources):
            return False

        self.source.refresh_index()
        self.refresh_state.mark_refreshed(self.source.index_last_modified() or datetime.now())
        return True

    def _choose(self, candidates: tuple[UpgradeCandidate, ...], interactive: bool) -> list[UpgradeCandidate] | None:
        if not interactive:
            return list(candidates)

        if self.surface is None:
            raise RuntimeError("Interactive run without a selection surface")

        if len(candidates) == 1:
            return list(candidates) if self.surface.confirm(candidates[0]) else None

        session = SelectionSession(candidates)
        self.surface.drive(session)
        if session.status is SessionStatus.CANCELLED:
            return None
        return [candidates[i] for i in session.take_selection()]

    def run(
        self,
        interactive: bool,
        refresh: bool = True,
        tolerant: bool = False,
        include_vc: bool | None = None,
    ) -> RunReport:
        """Run the full cycle once.

        Index refresh failures end the run with a ``failed`` report rather
        than raising. Failed candidates are not remembered, so they are
        retried by the next run.
        """
        with self._lock:
            if refresh:
                try:
                    self.refresh_if_stale(tolerant=tolerant)
                except IoFailure as e:
                    logger.error("Index refresh failed: %s", e)
                    return RunReport(status=FAILED, error=str(e))

            if include_vc is None:
                include_vc = self.include_vc
            candidates = compute_candidates(self.source, include_vc)
            if not candidates:
                return RunReport(status=UP_TO_DATE)

            chosen = self._choose(candidates, interactive)
            if chosen is None:
                return RunReport(status=CANCELLED)

            upgraded, failures = self.executor.upgrade_all(chosen)
            return RunReport(
                status=UPGRADED if upgraded or not failures else FAILED,
                upgraded=[c.name for c in upgraded],
                failures=failures,
            )

    def tick(self) -> RunReport:
        """Scheduled run: tolerant refresh, then upgrade per configuration."""
        report = self.run(interactive=not self.config.unattended, tolerant=True)
        logger.info("Scheduled run finished: %s", report.status)
        for failure in report.failures:
            logger.warning("%s", failure)
        return report
