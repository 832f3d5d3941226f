# src/localconfig/contracts/schema.py
"""Schema contracts for configuration variables.

A schema is an ordered collection of VariableDescriptor records. Each
descriptor names one variable, declares the shape of its value and says how
to compute a default when the variable is missing.

Defaults are a tagged variant:
- LiteralDefault: a fixed value (copied on every resolution)
- ProviderDefault: a zero-argument callable invoked on resolution

Example:
    VariableDescriptor("db_host", LiteralDefault("localhost"))
    VariableDescriptor("jwt_secret", ProviderDefault(lambda: generate_random_password(64)))
    VariableDescriptor("canonical_urlbase", lazy=True)
"""

from __future__ import annotations

import keyword
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from localconfig.contracts.enums import ValueShape

# Scalar types that may appear in a settings file, on their own or nested
# one level inside a sequence or mapping.
Scalar = str | int | float | bool | None

ConfigMap = dict[str, Any]


@dataclass(frozen=True, slots=True)
class LiteralDefault:
    """Default that is a fixed value."""

    value: Any = None


@dataclass(frozen=True, slots=True)
class ProviderDefault:
    """Default computed by calling a zero-argument function.

    Providers may query the host (search PATH, look up the effective group)
    or consume randomness. They must not write to disk.
    """

    provider: Callable[[], Any]
    description: str = ""


DefaultSpec = LiteralDefault | ProviderDefault


@dataclass(frozen=True, slots=True)
class VariableDescriptor:
    """One named configuration variable.

    Attributes:
        name: Unique, stable identifier (also the assignment name in the file)
        default: How to compute the value when the variable is missing
        shape: Declared value shape
        lazy: No default; the value must come from the environment or the
            answers source, otherwise it stays unset without error
    """

    name: str
    default: DefaultSpec = field(default_factory=LiteralDefault)
    shape: ValueShape = ValueShape.SCALAR
    lazy: bool = False

    def __post_init__(self) -> None:
        if not self.name.isidentifier() or keyword.iskeyword(self.name):
            raise ValueError(f"Variable name must be a valid identifier, got {self.name!r}")
        if self.lazy and not (isinstance(self.default, LiteralDefault) and self.default.value is None):
            raise ValueError(f"Lazy variable {self.name!r} cannot declare a default")


def shape_of(value: Any) -> ValueShape | None:
    """Infer the shape of a loaded value.

    Returns None for the unset marker (None), which is compatible with
    every declared shape.
    """
    if value is None:
        return None
    if isinstance(value, Mapping):
        return ValueShape.MAPPING
    if isinstance(value, Sequence) and not isinstance(value, str | bytes):
        return ValueShape.SEQUENCE
    return ValueShape.SCALAR
