# src/localconfig/contracts/protocols.py
"""Protocols for the collaborators the reconciler depends on.

The reconciler never reaches for global state directly. Descriptions,
installation answers, user-facing output and the process cache are all
injected so tests and embedding applications can substitute their own.
"""

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

# Maps a variable name to a newline-terminated, human readable description.
DescriptionLookup = Callable[[str], str]

# Receives informational messages meant for the person running setup.
Notifier = Callable[[str], None]


@runtime_checkable
class AnswerSource(Protocol):
    """Key/value lookup of installation answers.

    Consulted only for variables found missing during reconciliation.
    A missing key is not an error.
    """

    def __contains__(self, name: object) -> bool: ...

    def __getitem__(self, name: str) -> Any: ...


@runtime_checkable
class CacheInvalidator(Protocol):
    """Anything that can drop a previously cached value by key."""

    def invalidate(self, key: str) -> None:
        """Forget the cached value for key (no-op when absent)."""
        ...
