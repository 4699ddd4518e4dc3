"""Typer application and CLI entry point for specir.

The root app carries the global output flags; the sub-commands (``validate``,
``analyze``, ``types``, ``naming``, ``plan``) live in :mod:`specir.commands`
and are registered below.

:func:`main` is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the app.
:class:`~specir.exceptions.SpecirError` ends the process with the error's
exit code; anything else is written to a crash log under the data directory.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from specir import __version__
from specir.exit_codes import EXIT_GENERIC_FAILURE

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

app = typer.Typer(
    name="specir",
    help="Turn OpenAPI 3 documents into a code-generation IR.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"specir {__version__}")
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
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output and logging."
    ),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Write results to this file."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~specir.output.OutputManager` and configures
    logging (DEBUG with ``--verbose``, WARNING otherwise).
    """
    from specir.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(
        OutputManager(
            format=fmt,
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
            output_file=output_file,
        )
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=_LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


from specir.commands.analyze import analyze_command  # noqa: E402
from specir.commands.naming import naming_command  # noqa: E402
from specir.commands.plan import plan_command  # noqa: E402
from specir.commands.typemap import types_command  # noqa: E402
from specir.commands.validate import validate_command  # noqa: E402

app.command("validate")(validate_command)
app.command("analyze")(analyze_command)
app.command("types")(types_command)
app.command("naming")(naming_command)
app.command("plan")(plan_command)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback to ``<data_dir>/logs`` and return the path."""
    from specir.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        encoding="utf-8",
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``specir`` console script.

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
        from specir.exceptions import SpecirError
        from specir.output import error

        if isinstance(exc, SpecirError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
