# src/localconfig/core/reconciler.py
"""Reconciliation of the stored settings file against the schema.

This is the orchestration core:

1. Load the settings file, including variables the schema no longer knows
2. Regenerate ``site_wide_secret`` when it was made by the old generator
3. Fill every missing schema variable from the answers, else its default
4. Classify stored variables missing from the schema as orphans
5. Persist the settings file and move orphans to ``<settings>.old``
6. Drop the cached configuration so readers see the new file

When a new version of the application adds a variable, the next update finds
it missing, writes its default and asks the administrator to review it before
setup continues (ReviewRequiredError), unless defaults were explicitly
accepted.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from localconfig.contracts import (
    AnswerSource,
    CacheInvalidator,
    ConfigIOError,
    ConfigModeError,
    DescriptionLookup,
    Notifier,
    ReconciliationPlan,
    ReconciliationResult,
    ReviewRequiredError,
)
from localconfig.core.answers import EMPTY_ANSWERS, load_answers
from localconfig.core.cache import LOCALCONFIG_CACHE_KEY, process_cache
from localconfig.core.canonical import stable_hash
from localconfig.core.config import ENV_MODE_SWITCH, LocalconfigSettings
from localconfig.core.fileops import settings_lock
from localconfig.core.loader import load_from_file
from localconfig.core.logging import get_logger
from localconfig.core.providers import LEGACY_SECRET_LENGTH
from localconfig.core.resolver import DefaultResolver
from localconfig.core.schema import DEFAULT_SCHEMA, SchemaRegistry
from localconfig.core.strings import describe_variable, format_message, wrap_hard
from localconfig.core.writer import write_localconfig

logger = get_logger(__name__)

SECRET_VARIABLE = "site_wide_secret"
DIFF_TOOL_VARIABLE = "interdiffbin"


def _is_legacy_secret(value: Any) -> bool:
    return isinstance(value, str) and len(value) == LEGACY_SECRET_LENGTH


class Reconciler:
    """Brings the settings file in line with the schema.

    Args:
        settings: Runtime settings (settings file location, mode switch)
        schema: Variables the application needs
        answers: Installation answers consulted for missing variables
            (defaults to the answers file named in settings, if any)
        describe: Description lookup for the comment above each variable
        cache: Cache whose ``localconfig`` entry is dropped after writing
        resolver: Default resolver
        notify: Receives messages for the person running setup

    Example:
        reconciler = Reconciler(LocalconfigSettings(localconfig_path=path))
        try:
            result = reconciler.update(output=True)
        except ReviewRequiredError as e:
            print(f"Review {e.path}: {e.result.new_vars}")
    """

    def __init__(
        self,
        settings: LocalconfigSettings,
        schema: SchemaRegistry = DEFAULT_SCHEMA,
        *,
        answers: AnswerSource | None = None,
        describe: DescriptionLookup = describe_variable,
        cache: CacheInvalidator = process_cache,
        resolver: DefaultResolver | None = None,
        notify: Notifier | None = None,
    ) -> None:
        self._settings = settings
        self._schema = schema
        self._answers = answers
        self._describe = describe
        self._cache = cache
        self._resolver = resolver or DefaultResolver()
        self._notify = notify

    @property
    def settings(self) -> LocalconfigSettings:
        return self._settings

    def _get_answers(self) -> AnswerSource:
        if self._answers is None:
            self._answers = load_answers(self._settings.answers_path) if self._settings.answers_path else EMPTY_ANSWERS
        return self._answers

    def _emit(self, message: str) -> None:
        if self._notify is not None:
            self._notify(message)

    def _check_mode(self) -> None:
        if self._settings.env_mode:
            raise ConfigModeError(
                format_message(
                    "error_localconfig_env_mode",
                    switch=ENV_MODE_SWITCH,
                    localconfig=self._settings.localconfig_path,
                )
            )

    def plan(self) -> ReconciliationPlan:
        """Compute the reconciled configuration without writing anything.

        Returns:
            Reconciled configuration plus new and orphaned variable names

        Raises:
            ConfigModeError: If environment mode is active
            ConfigLoadError: If the settings file cannot be loaded
        """
        self._check_mode()

        config = load_from_file(self._settings.localconfig_path, self._schema, include_deprecated=True)

        # Secrets from the old generator were 256 characters long.
        if _is_legacy_secret(config.get(SECRET_VARIABLE)):
            logger.warning("legacy_secret_regenerated", variable=SECRET_VARIABLE)
            config[SECRET_VARIABLE] = None

        answers = self._get_answers()
        new_vars: list[str] = []
        for var in self._schema:
            if config.get(var.name) is not None:
                continue
            if var.name in answers:
                config[var.name] = answers[var.name]
            else:
                config[var.name] = self._resolver.resolve(var)
            # Lazy variables without a value stay unset and are not "new"
            if var.lazy and config[var.name] is None:
                continue
            new_vars.append(var.name)

        old_vars = sorted(name for name in config if name not in self._schema)

        return ReconciliationPlan(config=config, new_vars=tuple(new_vars), old_vars=tuple(old_vars))

    def update(self, *, output: bool = False, use_defaults: bool = False) -> ReconciliationResult:
        """Reconcile and persist the settings file.

        Args:
            output: Show informational messages (missing diff tool, moved
                variables). Messages that halt setup are always shown.
            use_defaults: Accept defaults for new variables and continue
                instead of requesting a review

        Returns:
            Names of new and orphaned variables

        Raises:
            ConfigModeError: If environment mode is active
            ConfigLoadError: If the settings file cannot be loaded
            ConfigIOError: If the settings or legacy file cannot be written
            ReviewRequiredError: If new variables were added and use_defaults
                is False (both files are already written)
        """
        self._check_mode()
        path = self._settings.localconfig_path

        if self._settings.use_lock:
            try:
                with settings_lock(path):
                    plan, result = self._persist()
            except OSError as e:
                raise ConfigIOError(path, e) from e
        else:
            plan, result = self._persist()

        # Readers must see the file we just wrote
        self._cache.invalidate(LOCALCONFIG_CACHE_KEY)

        logger.info(
            "localconfig_reconciled",
            path=str(path),
            new_vars=list(result.new_vars),
            old_vars=list(result.old_vars),
            config_hash=result.config_hash,
        )

        if output and not plan.config.get(DIFF_TOOL_VARIABLE):
            self._emit(format_message("patchutils_missing", localconfig=path))

        if result.old_vars and output:
            self._emit(
                format_message(
                    "lc_old_vars",
                    localconfig=path,
                    old_file=self._settings.old_path,
                    vars=", ".join(result.old_vars),
                )
            )

        if result.new_vars:
            self._emit(_new_vars_message(path, result.new_vars))
            if not use_defaults:
                raise ReviewRequiredError(result, path)

        return result

    def _persist(self) -> tuple[ReconciliationPlan, ReconciliationResult]:
        plan = self.plan()
        # Hashed before any file is written
        config_hash = stable_hash({name: plan.config.get(name) for name in self._schema.names()})
        write_localconfig(
            self._settings.localconfig_path,
            plan.config,
            self._schema,
            orphans=plan.old_vars,
            describe=self._describe,
            old_path=self._settings.old_path,
        )
        return plan, ReconciliationResult(new_vars=plan.new_vars, old_vars=plan.old_vars, config_hash=config_hash)


def _new_vars_message(path: Path, new_vars: tuple[str, ...]) -> str:
    return format_message("lc_new_vars", localconfig=path, new_vars=wrap_hard(", ".join(new_vars)))


def review_message(error: ReviewRequiredError) -> str:
    """Message asking the administrator to review newly added variables."""
    return _new_vars_message(error.path, error.result.new_vars)


def update_localconfig(
    settings: LocalconfigSettings,
    *,
    output: bool = False,
    use_defaults: bool = False,
    answers: AnswerSource | None = None,
    schema: SchemaRegistry = DEFAULT_SCHEMA,
    notify: Notifier | None = None,
) -> ReconciliationResult:
    """Reconcile the settings file in one call. See Reconciler.update()."""
    reconciler = Reconciler(settings, schema, answers=answers, notify=notify)
    return reconciler.update(output=output, use_defaults=use_defaults)
