# src/localconfig/core/resolver.py
"""Default resolution for variable descriptors."""

from __future__ import annotations

import copy
from typing import Any

from localconfig.contracts import LiteralDefault, ProviderDefault, VariableDescriptor
from localconfig.core.logging import get_logger

logger = get_logger(__name__)


class DefaultResolver:
    """Turns a descriptor's default spec into a concrete value.

    Literal defaults are deep-copied so a mutable default (the override
    mapping) is never shared between two configuration maps. Provider
    defaults are called with no arguments; providers report missing host
    resources by returning '' rather than raising.
    """

    def resolve(self, descriptor: VariableDescriptor) -> Any:
        """Produce a value for descriptor.

        Args:
            descriptor: Schema variable to resolve

        Returns:
            The default value (None for lazy variables)
        """
        default = descriptor.default
        if isinstance(default, ProviderDefault):
            value = default.provider()
            logger.debug("default_provided", variable=descriptor.name, provider=default.description)
            return value
        if isinstance(default, LiteralDefault):
            return copy.deepcopy(default.value)
        raise TypeError(f"Unknown default spec for {descriptor.name!r}: {type(default).__name__}")
