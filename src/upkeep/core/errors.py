"""Error types for upkeep."""


class UpkeepError(Exception):
    """Base class for errors reported to the user."""

    pass


class ConfigError(UpkeepError):
    """Invalid settings in the configuration file."""

    pass


class UnsupportedFeature(UpkeepError):
    """Version-controlled upgrades were requested but are unavailable."""

    pass


class NoSourcesConfigured(UpkeepError):
    """No package index sources are configured."""

    pass


class InvalidTimeFormat(UpkeepError):
    """A schedule time string could not be parsed."""

    pass


class IoFailure(UpkeepError):
    """Index refresh or network failure."""

    pass


class PackageOperationError(UpkeepError):
    """An install, delete or pull operation failed."""

    pass


class UpgradeFailure(UpkeepError):
    """Upgrading a single candidate failed.

    ``stage`` is one of ``install``, ``verify``, ``delete`` or ``vc``. A
    failure in the ``delete`` stage means the new version is already in
    place and only the old one could not be removed.
    """

    def __init__(self, candidate, stage: str, reason: str):
        self.candidate = candidate
        self.stage = stage
        self.reason = reason
        super().__init__(f"{candidate.name}: {stage} failed: {reason}")

    @property
    def new_version_installed(self) -> bool:
        return self.stage == "delete"


class SessionError(UpkeepError):
    """Invalid use of a selection session."""

    pass


class SessionClosed(SessionError):
    """Operation attempted on a confirmed or cancelled session."""

    pass
