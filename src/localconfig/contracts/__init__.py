"""Shared contracts for cross-boundary data types.

This package is a LEAF MODULE with no outbound dependencies to core.
Runtime settings (LocalconfigSettings) are NOT re-exported here - import
them from localconfig.core.config.

Import patterns:
    from localconfig.contracts import VariableDescriptor, ReconciliationResult
    from localconfig.core.config import LocalconfigSettings
"""

from localconfig.contracts.enums import ConfigSource, ValueShape
from localconfig.contracts.errors import (
    ConfigIOError,
    ConfigLoadError,
    ConfigModeError,
    LocalconfigError,
    ReviewRequiredError,
)
from localconfig.contracts.protocols import (
    AnswerSource,
    CacheInvalidator,
    DescriptionLookup,
    Notifier,
)
from localconfig.contracts.results import ReconciliationPlan, ReconciliationResult
from localconfig.contracts.schema import (
    ConfigMap,
    DefaultSpec,
    LiteralDefault,
    ProviderDefault,
    Scalar,
    VariableDescriptor,
    shape_of,
)

__all__ = [
    # enums
    "ConfigSource",
    "ValueShape",
    # errors
    "ConfigIOError",
    "ConfigLoadError",
    "ConfigModeError",
    "LocalconfigError",
    "ReviewRequiredError",
    # protocols
    "AnswerSource",
    "CacheInvalidator",
    "DescriptionLookup",
    "Notifier",
    # results
    "ReconciliationPlan",
    "ReconciliationResult",
    # schema
    "ConfigMap",
    "DefaultSpec",
    "LiteralDefault",
    "ProviderDefault",
    "Scalar",
    "VariableDescriptor",
    "shape_of",
]
