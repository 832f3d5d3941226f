# src/localconfig/contracts/errors.py
"""Error taxonomy for configuration loading, reconciliation and persistence.

Fatal errors:
- ConfigLoadError: the settings file exists but cannot be safely loaded
- ConfigIOError: the settings file or its legacy file cannot be written
- ConfigModeError: reconciliation requested while environment mode is active

Control flow:
- ReviewRequiredError: new variables were added and must be reviewed
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from localconfig.contracts.results import ReconciliationResult


class LocalconfigError(Exception):
    """Base class for all localconfig failures."""


class ConfigLoadError(LocalconfigError):
    """Raised when an existing settings file cannot be parsed or read.

    The original exception is chained via __cause__ and kept on ``cause``
    so callers can show it next to the offending path.

    Attributes:
        path: Settings file that failed to load
        cause: Underlying parse, security or OS error
    """

    def __init__(self, path: Path, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Error reading {path}: {cause}")


class ConfigIOError(LocalconfigError):
    """Raised when the settings file or legacy file cannot be written.

    Attributes:
        path: File that could not be opened or written
        cause: Underlying OS error
    """

    def __init__(self, path: Path, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"{path}: {cause}")


class ConfigModeError(LocalconfigError):
    """Raised when update is called while environment mode is active.

    In environment mode the configuration is derived from the process
    environment and must never be persisted. Reaching this is a programming
    error in the caller.
    """


class ReviewRequiredError(LocalconfigError):
    """Raised after update added new variables without use_defaults.

    This is NOT a failure. Both files have already been written; the signal
    tells the caller to stop the surrounding setup flow until someone has
    looked at the new values.

    Attributes:
        result: The reconciliation result (new and old variable names)
        path: Settings file that now contains the new variables
    """

    def __init__(self, result: ReconciliationResult, path: Path) -> None:
        self.result = result
        self.path = path
        super().__init__(f"New variables added to {path}: {', '.join(result.new_vars)}")
