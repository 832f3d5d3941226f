# src/localconfig/core/redaction.py
"""Masking of credential values for display and logs.

A variable is sensitive when its name contains one of SENSITIVE_PATTERNS
(``db_pass``, ``site_wide_secret``, ``db_mysql_ssl_client_key``). Masked
values keep their last four characters so an administrator can tell two
secrets apart without seeing either.
"""

from __future__ import annotations

from typing import Any

from localconfig.contracts import ConfigMap

# Name fragments that mark a variable as holding a credential
SENSITIVE_PATTERNS: tuple[str, ...] = ("secret", "pass", "password", "token", "key")


def is_secret_name(name: str) -> bool:
    """Whether a variable name indicates sensitive data."""
    lowered = name.lower()
    return any(pattern in lowered for pattern in SENSITIVE_PATTERNS)


def mask_value(value: Any) -> Any:
    """Mask a sensitive value, showing only the last 4 characters."""
    if not isinstance(value, str) or not value:
        return value
    if len(value) <= 4:
        return "****"
    return f"****{value[-4:]}"


def masked(config: ConfigMap) -> ConfigMap:
    """Copy of config with sensitive values masked."""
    return {name: mask_value(value) if is_secret_name(name) else value for name, value in config.items()}
