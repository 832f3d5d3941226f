# src/localconfig/core/writer.py
"""Serialization of reconciled configuration back to disk.

Output is deterministic: variables appear in schema order, mapping keys are
sorted, and every value is rendered in a single canonical literal form. Two
writes of equal data are byte-identical no matter how the data was built.

The rendered file is valid input for the settings grammar, so what is written
can always be loaded back.

Example output:
    # The DNS name or IP address of the host the database server runs on.
    db_host = 'localhost'

    param_override = {
        'mail_delivery_method': None,
        'shadowdb': None,
    }
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

from localconfig.contracts import ConfigIOError, ConfigMap, DescriptionLookup
from localconfig.core.fileops import append_text, file_size, restore_size, staged_write
from localconfig.core.logging import get_logger
from localconfig.core.schema import SchemaRegistry
from localconfig.core.strings import describe_variable

logger = get_logger(__name__)

_INDENT = "    "


def legacy_path_for(path: Path) -> Path:
    """Sibling file that receives orphaned variables: ``<path>.old``."""
    return path.with_name(path.name + ".old")


def _format_scalar(value: Any) -> str:
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"Cannot serialize non-finite float: {value}")
    if value is None or isinstance(value, bool | int | float | str):
        return repr(value)
    raise TypeError(f"Cannot serialize value of type {type(value).__name__}")


def format_value(value: Any) -> str:
    """Render a value as a canonical settings literal.

    Scalars use their literal form. Sequences and mappings are written one
    element per line; mapping keys are sorted.

    Raises:
        TypeError: If value (or an element) is not a supported scalar
        ValueError: If value (or an element) is a NaN or infinite float
    """
    if isinstance(value, Mapping):
        if not value:
            return "{}"
        lines = [f"{_INDENT}{key!r}: {_format_scalar(value[key])}," for key in sorted(value, key=str)]
        return "{\n" + "\n".join(lines) + "\n}"
    if isinstance(value, Sequence) and not isinstance(value, str | bytes):
        if not value:
            return "[]"
        lines = [f"{_INDENT}{_format_scalar(item)}," for item in value]
        return "[\n" + "\n".join(lines) + "\n]"
    return _format_scalar(value)


def format_assignment(name: str, value: Any) -> str:
    """Render ``name = <literal>`` terminated by a newline."""
    return f"{name} = {format_value(value)}\n"


def comment_block(description: str) -> str:
    """Turn a description into ``#`` comment lines (empty when no description)."""
    text = description.rstrip("\n")
    if not text:
        return ""
    return "".join(f"# {line}\n" if line else "#\n" for line in text.split("\n"))


def render_localconfig(
    config: ConfigMap,
    schema: SchemaRegistry,
    describe: DescriptionLookup = describe_variable,
) -> str:
    """Render the settings file: one commented assignment per schema variable.

    Variables absent from config are written as None (unset).
    """
    blocks = [comment_block(describe(var.name)) + format_assignment(var.name, config.get(var.name)) for var in schema]
    return "\n".join(blocks)


def render_orphans(config: ConfigMap, names: Iterable[str]) -> str:
    """Render orphaned variables as independent assignments, one block each."""
    return "".join(format_assignment(name, config[name]) + "\n" for name in names)


def append_orphans(path: Path, config: ConfigMap, names: Sequence[str]) -> None:
    """Append orphaned variables to the legacy file (never truncates).

    Raises:
        ConfigIOError: If the legacy file cannot be opened or written
    """
    if not names:
        return
    try:
        append_text(path, render_orphans(config, names))
    except OSError as e:
        raise ConfigIOError(path, e) from e
    logger.info("orphans_appended", path=str(path), names=list(names))


def write_localconfig(
    path: Path,
    config: ConfigMap,
    schema: SchemaRegistry,
    *,
    orphans: Sequence[str] = (),
    describe: DescriptionLookup = describe_variable,
    old_path: Path | None = None,
) -> str:
    """Persist the settings file and move orphans to the legacy file.

    All-or-nothing for both files: the new contents are staged in a temp
    file, orphans are appended to the legacy file, and only then does the
    temp file replace the settings file. If that replace fails, the legacy
    file is cut back to its previous size so the next run does not append
    the same orphans twice.

    Args:
        path: Settings file
        config: Reconciled configuration (may contain orphans)
        schema: Variables and their on-disk order
        orphans: Names in config to move to the legacy file
        describe: Description lookup for comment blocks
        old_path: Legacy file (defaults to ``<path>.old``)

    Returns:
        The text written to the settings file

    Raises:
        ConfigIOError: If either file cannot be written
    """
    text = render_localconfig(config, schema, describe)
    old_path = old_path or legacy_path_for(path)
    old_size: int | None = None
    appended = False

    try:
        old_size = file_size(old_path)
        with staged_write(path) as fh:
            fh.write(text)
            fh.flush()
            appended = bool(orphans)
            append_orphans(old_path, config, orphans)
    except ConfigIOError:
        if appended:
            _rollback_orphans(old_path, old_size)
        raise
    except OSError as e:
        if appended:
            _rollback_orphans(old_path, old_size)
        raise ConfigIOError(path, e) from e

    logger.info("localconfig_written", path=str(path), variables=len(schema))
    return text


def _rollback_orphans(old_path: Path, size: int | None) -> None:
    try:
        restore_size(old_path, size)
    except OSError as e:
        logger.warning("orphan_rollback_failed", path=str(old_path), error=str(e))
        return
    logger.info("orphans_rolled_back", path=str(old_path))
