# tests/conftest.py
"""Shared test fixtures and helpers.

Fixtures:
- localconfig_path: settings file location inside tmp_path (not created)
- lc_settings: LocalconfigSettings pointing at localconfig_path
- small_schema: a compact, host-independent schema for reconciler tests
- cache: a fresh ProcessCache per test
- write_settings: write settings text to localconfig_path

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import logging
import os
from collections.abc import Callable, Iterator
from itertools import count
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

from localconfig.contracts import LiteralDefault, ProviderDefault, ValueShape, VariableDescriptor
from localconfig.core.cache import ProcessCache
from localconfig.core.config import LocalconfigSettings
from localconfig.core.schema import PARAM_OVERRIDE_NAME, SchemaRegistry

# =============================================================================
# Hypothesis profiles
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# Environment isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _clean_localconfig_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove LOCALCONFIG_* variables so the host environment cannot leak in."""
    for key in list(os.environ):
        if key.startswith("LOCALCONFIG_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Iterator[None]:
    """Undo configure_logging() calls so handlers never outlive a captured stream."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


# =============================================================================
# Settings fixtures
# =============================================================================


@pytest.fixture
def localconfig_path(tmp_path: Path) -> Path:
    return tmp_path / "localconfig"


@pytest.fixture
def lc_settings(localconfig_path: Path) -> LocalconfigSettings:
    return LocalconfigSettings(localconfig_path=localconfig_path)


@pytest.fixture
def write_settings(localconfig_path: Path) -> Callable[[str], Path]:
    def _write(text: str) -> Path:
        localconfig_path.write_text(text, encoding="utf-8")
        return localconfig_path

    return _write


@pytest.fixture
def cache() -> ProcessCache:
    return ProcessCache()


@pytest.fixture
def small_schema() -> SchemaRegistry:
    """Host-independent schema covering every descriptor kind.

    The token provider returns a new value on each call, so tests can tell
    whether a provider ran.
    """
    counter = count(1)

    return SchemaRegistry(
        (
            VariableDescriptor("db_host", LiteralDefault("localhost")),
            VariableDescriptor("db_port", LiteralDefault(0)),
            VariableDescriptor("token", ProviderDefault(lambda: f"token-{next(counter)}")),
            VariableDescriptor("interdiffbin", LiteralDefault("/usr/bin/interdiff")),
            VariableDescriptor("servers", LiteralDefault(["a", "b"]), shape=ValueShape.SEQUENCE),
            VariableDescriptor(
                PARAM_OVERRIDE_NAME,
                LiteralDefault({"shadowdb": None, "use_mailer_queue": None}),
                shape=ValueShape.MAPPING,
            ),
            VariableDescriptor("canonical_urlbase", lazy=True),
        ),
        overrides=("use_mailer_queue", "shadowdb"),
    )
