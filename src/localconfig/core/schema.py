# src/localconfig/core/schema.py
"""Schema registry: the canonical, ordered set of configuration variables.

Order matters. It drives gap filling during reconciliation and the layout of
the settings file on disk. Appending a descriptor here is how a new variable
is introduced: the next update detects it as "new", fills it with its default
and asks the administrator to review it.

The override group is a fixed set of names packed as sub-keys of the single
mapping-shaped ``param_override`` variable. In environment mode each of them
is read from its own prefixed environment variable.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from functools import partial

from localconfig.contracts import (
    LiteralDefault,
    ProviderDefault,
    ValueShape,
    VariableDescriptor,
)
from localconfig.core.providers import (
    SECRET_LENGTH,
    bin_dir,
    bin_loc,
    default_setrlimit,
    generate_random_password,
    sensible_group,
)

PARAM_OVERRIDE_NAME = "param_override"

PARAM_OVERRIDE: tuple[str, ...] = (
    "use_mailer_queue",
    "mail_delivery_method",
    "shadowdb",
    "shadowdbhost",
    "shadowdbport",
    "shadowdbsock",
)


def _var(name: str, default: object = None) -> VariableDescriptor:
    return VariableDescriptor(name, LiteralDefault(default))


def _provided(name: str, provider: ProviderDefault) -> VariableDescriptor:
    return VariableDescriptor(name, provider)


LOCALCONFIG_VARS: tuple[VariableDescriptor, ...] = (
    _var("create_htaccess", 1),
    _provided("webservergroup", ProviderDefault(sensible_group, "effective group of this process")),
    _var("use_suexec", 0),
    _var("db_driver", "mysql"),
    _var("db_service", ""),
    _var("db_host", "localhost"),
    _var("db_name", "bugs"),
    _var("db_user", "bugs"),
    _var("db_pass", ""),
    _var("db_port", 0),
    _var("db_sock", ""),
    _var("db_check", 1),
    _var("db_mysql_ssl_ca_file", ""),
    _var("db_mysql_ssl_ca_path", ""),
    _var("db_mysql_ssl_client_cert", ""),
    _var("db_mysql_ssl_client_key", ""),
    _var("db_mysql_ssl_get_pubkey", 0),
    _var("index_html", 0),
    _provided("cvsbin", ProviderDefault(partial(bin_loc, "cvs"), "location of cvs")),
    _provided("interdiffbin", ProviderDefault(partial(bin_loc, "interdiff"), "location of interdiff")),
    _provided("diffpath", ProviderDefault(partial(bin_dir, "diff"), "directory containing diff")),
    _provided(
        "site_wide_secret",
        ProviderDefault(partial(generate_random_password, SECRET_LENGTH), "random secret"),
    ),
    _provided("jwt_secret", ProviderDefault(partial(generate_random_password, SECRET_LENGTH), "random secret")),
    VariableDescriptor(
        PARAM_OVERRIDE_NAME,
        LiteralDefault(dict.fromkeys(PARAM_OVERRIDE)),
        shape=ValueShape.MAPPING,
    ),
    _provided("setrlimit", ProviderDefault(default_setrlimit, "resource limits as JSON")),
    _var("size_limit", 750000),
    _var("memcached_servers", ""),
    _var("memcached_namespace", "bugzilla:"),
    _var("urlbase", ""),
    VariableDescriptor("canonical_urlbase", lazy=True),
    _var("logging_method", "syslog"),
    _var("nobody_user", "nobody@mozilla.org"),
    _var("attachment_base", ""),
    _var("ses_username", ""),
    _var("ses_password", ""),
    _var("inbound_proxies", ""),
    _var("shadowdb_user", ""),
    _var("shadowdb_pass", ""),
    _var("datadog_host", ""),
    _var("datadog_port", 8125),
)


class SchemaRegistry:
    """Ordered, read-only collection of variable descriptors.

    Args:
        variables: Descriptors in on-disk order
        overrides: Names packed under the ``param_override`` mapping

    Raises:
        ValueError: If names are duplicated, or an override group is given
            without a mapping-shaped ``param_override`` descriptor
    """

    def __init__(
        self,
        variables: Iterable[VariableDescriptor],
        overrides: Iterable[str] = (),
    ) -> None:
        self._variables = tuple(variables)
        self._overrides = tuple(overrides)
        self._by_name: dict[str, VariableDescriptor] = {}

        for var in self._variables:
            if var.name in self._by_name:
                raise ValueError(f"Duplicate variable name in schema: {var.name!r}")
            self._by_name[var.name] = var

        if self._overrides:
            group = self._by_name.get(PARAM_OVERRIDE_NAME)
            if group is None or group.shape != ValueShape.MAPPING:
                raise ValueError(f"Override group requires a mapping-shaped {PARAM_OVERRIDE_NAME!r} variable")
            if len(set(self._overrides)) != len(self._overrides):
                raise ValueError("Duplicate name in override group")

    @property
    def variables(self) -> tuple[VariableDescriptor, ...]:
        return self._variables

    @property
    def overrides(self) -> tuple[str, ...]:
        return self._overrides

    def names(self) -> tuple[str, ...]:
        """Variable names in schema order."""
        return tuple(var.name for var in self._variables)

    def get(self, name: str) -> VariableDescriptor | None:
        return self._by_name.get(name)

    def with_variables(self, *extra: VariableDescriptor) -> SchemaRegistry:
        """Return a new registry with extra descriptors appended."""
        return SchemaRegistry((*self._variables, *extra), self._overrides)

    def __iter__(self) -> Iterator[VariableDescriptor]:
        return iter(self._variables)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._variables)

    def __repr__(self) -> str:
        return f"SchemaRegistry({len(self._variables)} variables, overrides={list(self._overrides)})"


DEFAULT_SCHEMA = SchemaRegistry(LOCALCONFIG_VARS, PARAM_OVERRIDE)
