"""Typer application factory and CLI entry point for skyfetch.

This module wires together the top-level Typer application and registers
the built-in commands (``search``, ``weather``, ``recent``, ``config``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
:class:`~skyfetch.exceptions.SkyfetchError` instances exit with their own
code; any other exception is written to a crash log under the data
directory.

See Also:
    :mod:`skyfetch.config`: Settings resolution.
    :mod:`skyfetch.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from skyfetch import __version__
from skyfetch.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="skyfetch",
    help="Search cities and show current weather from the command line.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

# ------------------------------------------------------------------ #
# Built-in commands
# ------------------------------------------------------------------ #

from skyfetch.commands.config import config_app  # noqa: E402
from skyfetch.commands.recent import recent_app  # noqa: E402
from skyfetch.commands.weather import search_command, weather_command  # noqa: E402

app.command("search")(search_command)
app.command("weather")(weather_command)
app.add_typer(recent_app, name="recent", help="Recently viewed cities.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"skyfetch {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output (cache hits, requests)."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Skip confirmations."
    ),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", help="Provider API key (overrides SKYFETCH_API_KEY)."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Provider base URL (overrides SKYFETCH_BASE_URL)."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~skyfetch.output.OutputManager` from
    CLI flags and stores the shared options in the Typer context so that
    sub-commands can read them via ``ctx.obj``.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
        force: Skip interactive confirmations.
        api_key: Provider API key override (highest precedence).
        base_url: Provider base URL override (highest precedence).
    """
    from skyfetch.config import load_settings
    from skyfetch.exceptions import ConfigError
    from skyfetch.output import OutputFormat, OutputManager, set_output

    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        try:
            fmt = OutputFormat(load_settings().output.format)
        except (ConfigError, ValueError):
            # An unreadable settings file must not block `config reset`.
            fmt = OutputFormat.AUTO

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["force"] = force
    ctx.obj["verbose"] = verbose
    ctx.obj["api_key"] = api_key
    ctx.obj["base_url"] = base_url


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path.

    Args:
        exc: The unhandled exception to log.

    Returns:
        Absolute path to the written crash log file.
    """
    from skyfetch.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``skyfetch`` console script.

    Unhandled :class:`~skyfetch.exceptions.SkyfetchError` instances
    cause a clean exit with the error's ``exit_code``. All other exceptions
    produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from skyfetch.exceptions import SkyfetchError
        from skyfetch.output import error

        if isinstance(exc, SkyfetchError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
