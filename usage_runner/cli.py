"""
Command-line interface for usage-report.

``usage <command> [args...]`` runs the command, waits for it and prints its
CPU time, wall time, memory and block I/O figures.
"""

from __future__ import annotations

import logging
import os
import signal

import typer

from usage_common.errors import UsageError
from usage_common.logging import configure_logging
from usage_runner.engine.launcher import run_command
from usage_runner.models.config import LoggingConfig
from usage_runner.output_helpers import render_report

logger = logging.getLogger(__name__)

# Stage failures exit with -1, which the shell sees as 255.
EXIT_FAILURE = 255

app = typer.Typer(
    help="Run a command and report its wall time and resource usage.",
    add_completion=False,
)


@app.command(
    context_settings={
        "allow_extra_args": True,
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
    },
)
def usage(
    ctx: typer.Context,
    command: str = typer.Argument(
        ...,
        metavar="COMMAND",
        help="Program to run; looked up on PATH. Remaining arguments are passed to it.",
    ),
) -> None:
    """Run COMMAND [ARGS...] and print its resource usage once it exits."""
    settings = LoggingConfig.from_env()
    argv = [command, *ctx.args]
    try:
        configure_logging(
            level=settings.level,
            json=settings.json_logs,
            log_file=settings.log_file,
            force=True,
        )
        result = run_command(argv)
    except UsageError as exc:
        logger.debug("Stage failed: %s", exc.to_dict())
        typer.echo(f"{exc}: {exc.reason}", err=True)
        raise typer.Exit(EXIT_FAILURE) from exc
    except KeyboardInterrupt:
        die_by_signal(signal.SIGINT)

    logger.info("%s finished with status %s", argv[0], result.exit_status)
    typer.echo(render_report(result.report))


def die_by_signal(signum: int) -> None:
    """Terminate through the default disposition of ``signum``."""
    signal.signal(signum, signal.SIG_DFL)
    os.kill(os.getpid(), signum)
    # Reached only while the signal is blocked.
    raise typer.Exit(128 + signum)


def main() -> None:
    """Console script entrypoint (Typer app)."""
    app(prog_name="usage")


if __name__ == "__main__":  # pragma: no cover
    main()
