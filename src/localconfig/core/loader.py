# src/localconfig/core/loader.py
"""Source loading: build a raw name -> value map from one of two sources.

Two interchangeable strategies:

- Environment strategy (load_from_env): every schema variable is read from
  ``<prefix><name>``; missing keys fall back to the variable's default. The
  ``param_override`` mapping is assembled from the override group only.
- File strategy (load_from_file): the settings file is parsed with the
  restricted settings grammar and its assignments are returned, limited to
  schema names unless deprecated (orphaned) names are requested.

read_localconfig() picks the strategy from the environment-mode switch.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from pathlib import Path

from localconfig.contracts import ConfigLoadError, ConfigMap, ConfigSource, shape_of
from localconfig.core.cache import LOCALCONFIG_CACHE_KEY, ProcessCache, process_cache
from localconfig.core.config import DEFAULT_ENV_PREFIX, LocalconfigSettings, load_settings
from localconfig.core.logging import get_logger
from localconfig.core.resolver import DefaultResolver
from localconfig.core.schema import DEFAULT_SCHEMA, PARAM_OVERRIDE_NAME, SchemaRegistry
from localconfig.core.settings_parser import (
    INCLUDE_STATEMENT,
    SettingsIncludeError,
    SettingsParser,
    SettingsSecurityError,
    SettingsSyntaxError,
)

logger = get_logger(__name__)

# User data starts with a letter or digit; anything else is bookkeeping.
_USER_SYMBOL = re.compile(r"^[A-Za-z0-9]")

# Names that can appear in a settings namespace but are never user data
RESERVED_SYMBOLS = frozenset({INCLUDE_STATEMENT})

_NAMESPACE_SEPARATOR = "::"


def is_user_symbol(name: str) -> bool:
    """Whether a name found in a settings file is a user variable."""
    return bool(_USER_SYMBOL.match(name)) and name not in RESERVED_SYMBOLS and _NAMESPACE_SEPARATOR not in name


def load_from_env(
    schema: SchemaRegistry = DEFAULT_SCHEMA,
    *,
    prefix: str = DEFAULT_ENV_PREFIX,
    environ: Mapping[str, str] | None = None,
    resolver: DefaultResolver | None = None,
) -> ConfigMap:
    """Build configuration from prefixed environment variables.

    Values present in the environment are taken verbatim (as text). Absent
    ones fall back to the schema default. Override-group entries are never
    defaulted: a missing ``<prefix><override>`` key maps to None (unset).
    Prefixed keys outside the override group do not reach the mapping.

    Args:
        schema: Variables to load
        prefix: Environment key prefix
        environ: Environment mapping (defaults to os.environ)
        resolver: Default resolver

    Returns:
        Configuration map covering every schema variable
    """
    env = os.environ if environ is None else environ
    resolver = resolver or DefaultResolver()

    config: ConfigMap = {}
    from_env: list[str] = []
    for var in schema:
        if var.name == PARAM_OVERRIDE_NAME:
            config[var.name] = {override: env.get(prefix + override) for override in schema.overrides}
            continue
        key = prefix + var.name
        if key in env:
            config[var.name] = env[key]
            from_env.append(var.name)
        else:
            config[var.name] = resolver.resolve(var)

    logger.debug("localconfig_loaded", source=ConfigSource.ENV, from_env=from_env)
    return config


def load_from_file(
    path: Path,
    schema: SchemaRegistry = DEFAULT_SCHEMA,
    *,
    include_deprecated: bool = False,
    parser: SettingsParser | None = None,
) -> ConfigMap:
    """Load the settings file.

    Args:
        path: Settings file
        schema: Variables the application knows about
        include_deprecated: Also return variables that are not in the schema
        parser: Settings parser (a fresh one by default)

    Returns:
        Loaded values; empty when the file does not exist

    Raises:
        ConfigLoadError: If the file cannot be read or parsed, or a schema
            variable is stored with the wrong shape
    """
    if not path.exists():
        logger.info("localconfig_missing", path=str(path))
        return {}

    parser = parser or SettingsParser()
    try:
        namespace = parser.parse_file(path)
    except (SettingsSyntaxError, SettingsSecurityError, SettingsIncludeError, OSError, UnicodeDecodeError) as e:
        raise ConfigLoadError(path, e) from e

    if include_deprecated:
        names = [name for name in namespace if is_user_symbol(name)]
    else:
        names = [name for name in schema.names() if name in namespace]

    config: ConfigMap = {}
    for name in names:
        value = namespace[name]
        var = schema.get(name)
        if var is not None:
            found = shape_of(value)
            if found is not None and found != var.shape:
                cause = ValueError(f"{name} must be a {var.shape.value}, found a {found.value}")
                raise ConfigLoadError(path, cause)
        config[name] = value

    logger.debug("localconfig_loaded", source=ConfigSource.FILE, path=str(path), count=len(config))
    return config


def read_localconfig(
    settings: LocalconfigSettings | None = None,
    schema: SchemaRegistry = DEFAULT_SCHEMA,
    *,
    include_deprecated: bool = False,
    environ: Mapping[str, str] | None = None,
) -> ConfigMap:
    """Read the current configuration from the active source.

    In environment mode the settings file is never touched and
    include_deprecated has no effect.

    Args:
        settings: Runtime settings (built from the environment by default)
        schema: Variables to load
        include_deprecated: Include stored variables missing from the schema
        environ: Environment mapping used in environment mode

    Raises:
        ConfigLoadError: If the settings file cannot be loaded
    """
    settings = settings or load_settings(environ)
    if settings.env_mode:
        return load_from_env(schema, prefix=settings.env_prefix, environ=environ)
    return load_from_file(settings.localconfig_path, schema, include_deprecated=include_deprecated)


def get_localconfig(
    settings: LocalconfigSettings | None = None,
    schema: SchemaRegistry = DEFAULT_SCHEMA,
    *,
    cache: ProcessCache = process_cache,
) -> ConfigMap:
    """Current configuration, memoized in the process cache.

    The cache entry is dropped by every successful update.
    """
    return cache.get_or_compute(LOCALCONFIG_CACHE_KEY, lambda: read_localconfig(settings, schema))
