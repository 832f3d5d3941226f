# src/localconfig/core/__init__.py
"""Core infrastructure: Schema, Loading, Reconciliation, Writing, Logging."""

from localconfig.core.answers import load_answers
from localconfig.core.cache import LOCALCONFIG_CACHE_KEY, ProcessCache, process_cache
from localconfig.core.canonical import CANONICAL_VERSION, canonical_json, stable_hash
from localconfig.core.config import (
    ENV_MODE_SWITCH,
    LocalconfigSettings,
    env_switch_enabled,
    load_settings,
)
from localconfig.core.loader import (
    get_localconfig,
    load_from_env,
    load_from_file,
    read_localconfig,
)
from localconfig.core.logging import configure_logging, get_logger
from localconfig.core.reconciler import Reconciler, review_message, update_localconfig
from localconfig.core.resolver import DefaultResolver
from localconfig.core.schema import (
    DEFAULT_SCHEMA,
    LOCALCONFIG_VARS,
    PARAM_OVERRIDE,
    SchemaRegistry,
)
from localconfig.core.settings_parser import SettingsParser
from localconfig.core.writer import format_value, render_localconfig, write_localconfig

__all__ = [
    # answers
    "load_answers",
    # cache
    "LOCALCONFIG_CACHE_KEY",
    "ProcessCache",
    "process_cache",
    # canonical
    "CANONICAL_VERSION",
    "canonical_json",
    "stable_hash",
    # config
    "ENV_MODE_SWITCH",
    "LocalconfigSettings",
    "env_switch_enabled",
    "load_settings",
    # loader
    "get_localconfig",
    "load_from_env",
    "load_from_file",
    "read_localconfig",
    # logging
    "configure_logging",
    "get_logger",
    # reconciler
    "Reconciler",
    "review_message",
    "update_localconfig",
    # resolver
    "DefaultResolver",
    # schema
    "DEFAULT_SCHEMA",
    "LOCALCONFIG_VARS",
    "PARAM_OVERRIDE",
    "SchemaRegistry",
    # parser
    "SettingsParser",
    # writer
    "format_value",
    "render_localconfig",
    "write_localconfig",
]
