# tests/property/core/test_writer_properties.py
"""Property-based tests for settings file serialization.

These tests verify the invariants the reconciler relies on:
- Determinism: equal data renders to identical text regardless of how the
  mappings were built
- Round trip: rendered values load back unchanged through the restricted
  settings grammar
- Canonical hashing is insensitive to mapping insertion order
"""

from __future__ import annotations

import keyword
from typing import Any

from hypothesis import given
from hypothesis import strategies as st

from localconfig.contracts import VariableDescriptor
from localconfig.core.canonical import stable_hash
from localconfig.core.schema import SchemaRegistry
from localconfig.core.settings_parser import SettingsParser
from localconfig.core.writer import format_value, render_localconfig

# =============================================================================
# Strategies
# =============================================================================

scalars = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(min_value=-(10**12), max_value=10**12),
    st.floats(allow_nan=False, allow_infinity=False),
    st.text(max_size=40),
)

names = st.from_regex(r"[a-z][a-z0-9_]{0,15}", fullmatch=True).filter(lambda n: n != "include" and not keyword.iskeyword(n))

values = st.one_of(
    scalars,
    st.lists(scalars, max_size=6),
    st.dictionaries(st.text(max_size=12), scalars, max_size=6),
)

configs = st.dictionaries(names, values, min_size=1, max_size=8)


def _no_description(name: str) -> str:
    return ""


class TestRenderDeterminism:
    """Rendering depends only on content, never on construction order."""

    @given(config=configs)
    def test_mapping_insertion_order_does_not_matter(self, config: dict[str, Any]) -> None:
        schema = SchemaRegistry([VariableDescriptor(name) for name in config])
        reordered = {
            name: dict(reversed(list(value.items()))) if isinstance(value, dict) else value
            for name, value in reversed(list(config.items()))
        }

        assert render_localconfig(config, schema, _no_description) == render_localconfig(reordered, schema, _no_description)

    @given(config=configs)
    def test_hash_ignores_insertion_order(self, config: dict[str, Any]) -> None:
        reordered = dict(reversed(list(config.items())))

        assert stable_hash(config) == stable_hash(reordered)


class TestRoundTrip:
    """What the writer emits, the parser reads back."""

    @given(name=names, value=values)
    def test_value_round_trips(self, name: str, value: Any) -> None:
        parsed = SettingsParser().parse_text(f"{name} = {format_value(value)}\n")

        assert parsed == {name: value}

    @given(config=configs)
    def test_rendered_file_round_trips(self, config: dict[str, Any]) -> None:
        schema = SchemaRegistry([VariableDescriptor(name) for name in config])

        parsed = SettingsParser().parse_text(render_localconfig(config, schema, _no_description))

        assert parsed == config
