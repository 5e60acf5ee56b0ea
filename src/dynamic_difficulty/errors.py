"""Exception types raised while loading configuration and snapshots.

Evaluation itself never raises for data problems; see calculator.py.
"""


class DifficultyError(Exception):
    """Base class for dynamic difficulty errors."""


class ConfigurationError(DifficultyError):
    """A configuration file or record could not be read or validated."""


class UnknownModifierError(ConfigurationError):
    """A modifier type identifier has no registered configuration record."""

    def __init__(self, modifier_type: object) -> None:
        self.modifier_type = modifier_type
        super().__init__(f"Unknown modifier type: {modifier_type!r}")


class SnapshotError(DifficultyError):
    """A player snapshot file could not be read or validated."""
