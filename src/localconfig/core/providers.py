# src/localconfig/core/providers.py
"""Default providers: zero-argument host queries used as variable defaults.

Providers only read from the host (PATH lookups, group database) or consume
randomness. A provider that cannot find what it is looking for returns an
empty string instead of raising: the resulting variable is something the
administrator can correct by editing the settings file.
"""

from __future__ import annotations

import os
import secrets
import shutil
import string
import sys

from localconfig.core.canonical import canonical_json
from localconfig.core.logging import get_logger

logger = get_logger(__name__)

# 64 characters is roughly the equivalent of a 384-bit key.
SECRET_LENGTH = 64

# Length of secrets produced by the old, weak generator. Stored secrets of
# exactly this length are regenerated during reconciliation.
LEGACY_SECRET_LENGTH = 256

_PASSWORD_ALPHABET = string.ascii_letters + string.digits

ON_WINDOWS = sys.platform.startswith("win")


def bin_loc(name: str, path: str | None = None) -> str:
    """Locate an executable on the search path.

    Args:
        name: Executable name (e.g., "interdiff")
        path: Search path; defaults to the PATH environment variable

    Returns:
        Absolute path to the executable, or '' when it is not installed
    """
    location = shutil.which(name, path=path)
    if location is None:
        logger.warning("executable_not_found", executable=name)
        return ""
    return os.path.abspath(location)


def bin_dir(name: str, path: str | None = None) -> str:
    """Directory containing an executable, or '' when it is not installed."""
    location = bin_loc(name, path=path)
    if not location:
        return ""
    return os.path.dirname(location)


def sensible_group() -> str:
    """Name of the current process's effective group.

    Returns '' on Windows, or when the effective gid has no entry in the
    group database (common in containers running with arbitrary gids).
    """
    if ON_WINDOWS:
        return ""

    import grp

    gid = os.getegid()
    try:
        return grp.getgrgid(gid).gr_name
    except KeyError:
        logger.warning("group_not_found", gid=gid)
        return ""


def generate_random_password(length: int = SECRET_LENGTH) -> str:
    """Generate a cryptographically strong alphanumeric secret.

    Args:
        length: Number of characters

    Returns:
        Random string drawn from ASCII letters and digits
    """
    if length < 1:
        raise ValueError(f"length must be positive, got {length}")
    return "".join(secrets.choice(_PASSWORD_ALPHABET) for _ in range(length))


def default_setrlimit() -> str:
    """Resource limits applied to request processes, as canonical JSON."""
    return canonical_json({"RLIMIT_AS": 2_000_000_000})
