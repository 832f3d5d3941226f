# src/localconfig/cli.py
"""localconfig Command Line Interface.

Entry point for the localconfig CLI tool.

Exit codes:
    0  success
    1  fatal error (settings file unreadable or unwritable, wrong mode)
    2  usage error
    3  review required (new variables were added to the settings file),
       or drift detected by ``check``
"""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer
from pydantic import ValidationError

from localconfig import __version__
from localconfig.cli_formatters import print_config, print_result
from localconfig.contracts import (
    ConfigIOError,
    ConfigLoadError,
    ConfigModeError,
    ReconciliationResult,
    ReviewRequiredError,
)
from localconfig.core.config import LocalconfigSettings, load_settings
from localconfig.core.redaction import masked
from localconfig.core.strings import format_message

__all__ = [
    "app",
]

EXIT_FATAL = 1
EXIT_REVIEW_REQUIRED = 3

app = typer.Typer(
    name="localconfig",
    help="localconfig: reconcile local settings files against their schema.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"localconfig version {__version__}")
        raise typer.Exit()


def _load_dotenv(env_file: Path | None = None) -> bool:
    """Load environment variables from .env file.

    Args:
        env_file: Explicit path to .env file. If None, searches for .env
                 in current directory and parent directories.

    Returns:
        True if .env was found and loaded, False otherwise.

    Raises:
        typer.Exit: If explicit env_file path doesn't exist.
    """
    from dotenv import load_dotenv

    if env_file is not None:
        if not env_file.exists():
            typer.secho(
                f"Error: .env file not found: {env_file}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(1)
        return load_dotenv(env_file, override=False)

    return load_dotenv(override=False)  # Don't override existing env vars


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_dotenv: bool = typer.Option(
        False,
        "--no-dotenv",
        help="Skip loading .env file.",
    ),
    env_file: Path | None = typer.Option(
        None,
        "--env-file",
        help="Path to .env file (skips automatic search).",
        exists=False,  # We handle existence check ourselves for better error message
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """localconfig: reconcile local settings files against their schema."""
    from localconfig.core.logging import configure_logging

    log_level = "DEBUG" if verbose else "WARNING"
    configure_logging(json_output=json_logs, level=log_level)

    if not no_dotenv:
        _load_dotenv(env_file=env_file)
    elif env_file is not None:
        typer.secho(
            "Warning: --env-file ignored because --no-dotenv is set.",
            fg=typer.colors.YELLOW,
            err=True,
        )


def _format_error(
    title: str,
    message: str,
    hint: str | None = None,
    details: list[str] | None = None,
) -> None:
    """Display a formatted error with optional hint and details."""
    from rich.console import Console
    from rich.panel import Panel
    from rich.text import Text

    console = Console(stderr=True)

    content = Text()
    content.append(message, style="white")

    if details:
        content.append("\n\n")
        for detail in details:
            content.append(f"  • {detail}\n", style="dim")

    if hint:
        content.append("\n")
        content.append("Hint: ", style="yellow bold")
        content.append(hint, style="yellow")

    panel = Panel(
        content,
        title=f"[red bold]❌ {title}[/]",
        border_style="red",
        padding=(0, 1),
    )
    console.print(panel)


def _build_settings(localconfig: Path | None, answers: Path | None = None, use_lock: bool | None = None) -> LocalconfigSettings:
    try:
        return load_settings(localconfig_path=localconfig, answers_path=answers, use_lock=use_lock)
    except ValidationError as e:
        details = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            details.append(f"{loc}: {error['msg']}")
        _format_error(
            title="Invalid Settings",
            message="localconfig settings are invalid",
            details=details,
        )
        raise typer.Exit(EXIT_FATAL) from None


def _fail_on_load_error(e: ConfigLoadError) -> NoReturn:
    _format_error(
        title="Settings File Error",
        message=format_message("error_localconfig_read", localconfig=e.path, error=e.cause),
        hint="Only 'name = value' assignments and include('file') are allowed.",
    )
    raise typer.Exit(EXIT_FATAL) from None


_LOCALCONFIG_OPTION = typer.Option(
    None,
    "--localconfig",
    "-c",
    help="Path to the settings file (default: $LOCALCONFIG_PATH or ./localconfig).",
)


@app.command()
def update(
    localconfig: Path | None = _LOCALCONFIG_OPTION,
    answers: Path | None = typer.Option(
        None,
        "--answers",
        "-a",
        help="Answers file used for missing variables during unattended installs.",
    ),
    use_defaults: bool = typer.Option(
        False,
        "--use-defaults",
        "-y",
        help="Accept defaults for new variables instead of stopping for review.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only show messages that stop setup.",
    ),
    no_lock: bool = typer.Option(
        False,
        "--no-lock",
        help="Do not take the advisory lock on <settings>.lock.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Print the result as JSON.",
    ),
) -> None:
    """Add new variables to the settings file and move unknown ones aside."""
    from localconfig.core.reconciler import Reconciler

    settings = _build_settings(localconfig, answers, use_lock=False if no_lock else None)

    def notify(message: str) -> None:
        typer.echo(f"\n{message}", err=True)

    reconciler = Reconciler(settings, notify=notify)
    try:
        result = reconciler.update(output=not quiet, use_defaults=use_defaults)
    except ConfigModeError as e:
        _format_error(
            title="Environment Mode",
            message=str(e),
            hint="Unset the switch to manage the settings file.",
        )
        raise typer.Exit(EXIT_FATAL) from None
    except ConfigLoadError as e:
        _fail_on_load_error(e)
    except ConfigIOError as e:
        _format_error(
            title="Write Failed",
            message=format_message("error_localconfig_write", path=e.path, error=e.cause),
            hint="Check that the directory exists and is writable.",
        )
        raise typer.Exit(EXIT_FATAL) from None
    except ReviewRequiredError as e:
        if json_output:
            print_result(e.result, as_json=True)
        raise typer.Exit(EXIT_REVIEW_REQUIRED) from None

    print_result(result, as_json=json_output)


@app.command()
def check(
    localconfig: Path | None = _LOCALCONFIG_OPTION,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Print the result as JSON.",
    ),
) -> None:
    """Report new and orphaned variables without writing anything."""
    from localconfig.core.reconciler import Reconciler

    settings = _build_settings(localconfig)
    try:
        plan = Reconciler(settings).plan()
    except ConfigModeError as e:
        _format_error(title="Environment Mode", message=str(e))
        raise typer.Exit(EXIT_FATAL) from None
    except ConfigLoadError as e:
        _fail_on_load_error(e)

    result = ReconciliationResult(new_vars=plan.new_vars, old_vars=plan.old_vars)
    print_result(result, as_json=json_output)
    if result.has_changes:
        raise typer.Exit(EXIT_REVIEW_REQUIRED)


@app.command()
def show(
    localconfig: Path | None = _LOCALCONFIG_OPTION,
    include_deprecated: bool = typer.Option(
        False,
        "--include-deprecated",
        help="Also list stored variables the schema no longer knows.",
    ),
    reveal: bool = typer.Option(
        False,
        "--reveal-secrets",
        help="Print passwords and secrets instead of masking them.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Print the configuration as JSON.",
    ),
) -> None:
    """Print the current configuration from the active source."""
    from localconfig.core.loader import read_localconfig

    settings = _build_settings(localconfig)
    try:
        config = read_localconfig(settings, include_deprecated=include_deprecated)
    except ConfigLoadError as e:
        _fail_on_load_error(e)

    print_config(config if reveal else masked(config), as_json=json_output)


if __name__ == "__main__":
    app()
