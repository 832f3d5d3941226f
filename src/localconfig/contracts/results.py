"""Results produced by the reconciler."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class ReconciliationResult:
    """Outcome of one update run. Never persisted.

    Attributes:
        new_vars: Schema variables that were missing and got a value this run,
            in schema order
        old_vars: Stored variables with no schema entry, moved to the legacy
            file, sorted by name
        config_hash: Stable hash of the persisted configuration
    """

    new_vars: tuple[str, ...] = ()
    old_vars: tuple[str, ...] = ()
    config_hash: str = ""

    @property
    def has_changes(self) -> bool:
        """Whether the run added or moved any variable."""
        return bool(self.new_vars or self.old_vars)


@dataclass(frozen=True, slots=True)
class ReconciliationPlan:
    """Reconciled configuration computed without touching disk.

    Attributes:
        config: Every schema variable plus any orphaned ones, in load order
        new_vars: Variables that were filled from answers or defaults
        old_vars: Loaded variables that are not part of the schema
    """

    config: dict[str, Any] = field(default_factory=dict)
    new_vars: tuple[str, ...] = ()
    old_vars: tuple[str, ...] = ()
