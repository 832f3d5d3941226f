# src/localconfig/cli_formatters.py
"""CLI output formatting for configuration listings and reconciliation results.

Console output is human-readable; JSON output is a single canonical document
on stdout for scripts. Masking of sensitive values lives in
localconfig.core.redaction; callers mask before printing.
"""

from __future__ import annotations

import json

import typer

from localconfig.contracts import ConfigMap, ReconciliationResult
from localconfig.core.writer import format_value


def print_config(config: ConfigMap, *, as_json: bool = False) -> None:
    """Print a configuration map in schema/load order."""
    if as_json:
        typer.echo(json.dumps(config, indent=2, sort_keys=True))
        return
    for name, value in config.items():
        typer.echo(f"{name} = {format_value(value)}")


def print_result(result: ReconciliationResult, *, as_json: bool = False) -> None:
    """Print the outcome of an update or check."""
    if as_json:
        payload = {
            "new_vars": list(result.new_vars),
            "old_vars": list(result.old_vars),
            "config_hash": result.config_hash,
        }
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))
        return

    if not result.has_changes:
        typer.echo("✓ Configuration is up to date")
        return
    if result.new_vars:
        typer.echo(f"New variables: {', '.join(result.new_vars)}")
    if result.old_vars:
        typer.echo(f"Orphaned variables: {', '.join(result.old_vars)}")
