# src/localconfig/core/config.py
"""Runtime settings for localconfig itself.

Uses pydantic-settings: values come from the process environment through
field aliases and are validated by Pydantic. Settings are frozen (immutable)
after construction.

Sources, highest priority first:
1. Explicit overrides (CLI options, embedding application)
2. Process environment (LOCALCONFIG_PATH, LOCALCONFIG_ENV, ...)
3. Field defaults

``.env`` files are not read here; the CLI loads them into the process
environment before settings are built.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

# Deployment-time switch selecting environment-sourced configuration
ENV_MODE_SWITCH = "LOCALCONFIG_ENV"

# Location of the settings file when not given explicitly
PATH_ENV = "LOCALCONFIG_PATH"

# Answers file for unattended installs
ANSWERS_ENV = "LOCALCONFIG_ANSWERS"

DEFAULT_ENV_PREFIX = "LOCALCONFIG_"
DEFAULT_LOCALCONFIG_PATH = Path("localconfig")

# Values of the mode switch that mean "off". Anything else non-empty is "on".
_FALSE_VALUES = frozenset({"", "0", "false", "no", "off"})


def env_switch_enabled(value: str | None) -> bool:
    """Interpret a boolean-like environment value.

    Unset, empty, "0", "false", "no" and "off" (any case) are false.
    """
    if value is None:
        return False
    return value.strip().lower() not in _FALSE_VALUES


class LocalconfigSettings(BaseSettings):
    """Where the settings file lives and how configuration is sourced.

    Fields are populated by name in code and by their environment key
    otherwise: ``localconfig_path`` from LOCALCONFIG_PATH, ``env_mode`` from
    LOCALCONFIG_ENV, ``answers_path`` from LOCALCONFIG_ANSWERS. The remaining
    fields use the LOCALCONFIG_ prefix (LOCALCONFIG_USE_LOCK, ...).

    Example:
        settings = LocalconfigSettings(localconfig_path=Path("/srv/app/localconfig"))
        settings.old_path  # /srv/app/localconfig.old
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        env_prefix=DEFAULT_ENV_PREFIX,
        env_ignore_empty=True,
    )

    localconfig_path: Path = Field(
        default=DEFAULT_LOCALCONFIG_PATH,
        validation_alias=PATH_ENV,
        description="Settings file read and rewritten by update",
    )
    env_prefix: str = Field(
        default=DEFAULT_ENV_PREFIX,
        description="Prefix of per-variable environment keys in environment mode",
    )
    env_mode: bool = Field(
        default=False,
        validation_alias=ENV_MODE_SWITCH,
        description="Source configuration from the environment instead of the settings file",
    )
    answers_path: Path | None = Field(
        default=None,
        validation_alias=ANSWERS_ENV,
        description="Installation answers consulted for missing variables",
    )
    use_lock: bool = Field(
        default=True,
        description="Hold an advisory lock on <settings>.lock during update",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings)

    @field_validator("env_mode", mode="before")
    @classmethod
    def parse_env_switch(cls, v: Any) -> Any:
        """Any non-empty switch value other than 0/false/no/off enables the mode."""
        if isinstance(v, str):
            return env_switch_enabled(v)
        return v

    @field_validator("env_prefix")
    @classmethod
    def validate_env_prefix(cls, v: str) -> str:
        """Prefix must be non-empty and contain no '='."""
        if not v:
            raise ValueError("env_prefix must not be empty")
        if "=" in v:
            raise ValueError(f"env_prefix cannot contain '=': {v!r}")
        return v

    @property
    def old_path(self) -> Path:
        """Append-only legacy file receiving orphaned variables."""
        return self.localconfig_path.with_name(self.localconfig_path.name + ".old")


def _aliased_values(environ: Mapping[str, str]) -> dict[str, str]:
    """Field values found under their environment keys in environ."""
    values: dict[str, str] = {}
    for name, field in LocalconfigSettings.model_fields.items():
        key = field.validation_alias
        if isinstance(key, str) and environ.get(key):
            values[name] = environ[key]
    return values


def load_settings(environ: Mapping[str, str] | None = None, **overrides: Any) -> LocalconfigSettings:
    """Build settings from the environment plus explicit overrides.

    Overrides whose value is None are ignored, so CLI options that were not
    given fall back to the environment.

    Args:
        environ: Extra environment entries layered over the process
            environment (embedding applications, tests)
        **overrides: LocalconfigSettings fields

    Returns:
        Frozen, validated settings

    Raises:
        pydantic.ValidationError: If a value is invalid
    """
    values: dict[str, Any] = _aliased_values(environ) if environ is not None else {}
    values.update({k: v for k, v in overrides.items() if v is not None})
    return LocalconfigSettings(**values)
