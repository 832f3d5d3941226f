# src/localconfig/core/answers.py
"""Installation answers for unattended setup.

An answers file uses the same restricted grammar as the settings file::

    db_host = 'db.internal'
    db_pass = 'hunter2'
    urlbase = 'https://bugs.example.com/'

The reconciler consults the answers only for variables that are missing from
the settings file. Extra names in the answers file are ignored.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from localconfig.contracts import ConfigLoadError
from localconfig.core.logging import get_logger
from localconfig.core.settings_parser import (
    SettingsIncludeError,
    SettingsParser,
    SettingsSecurityError,
    SettingsSyntaxError,
)

logger = get_logger(__name__)

EMPTY_ANSWERS: Mapping[str, Any] = {}


def load_answers(path: Path | None) -> Mapping[str, Any]:
    """Load an answers file.

    Args:
        path: Answers file, or None for no answers

    Returns:
        Mapping of variable name to answer

    Raises:
        ConfigLoadError: If the file is missing or cannot be parsed
    """
    if path is None:
        return EMPTY_ANSWERS

    try:
        answers = SettingsParser().parse_file(path)
    except (SettingsSyntaxError, SettingsSecurityError, SettingsIncludeError, OSError, UnicodeDecodeError) as e:
        raise ConfigLoadError(path, e) from e

    # Names only: answers often carry passwords
    logger.info("answers_loaded", path=str(path), names=sorted(answers))
    return answers
