"""Command line interface.

``wfs-ft-validator URL [--count N] [--require TYPE ...] [--report PATH]``

Exit status: 0 when no errors were found, 2 when errors were found or the
run was aborted, 1 on usage errors.  Diagnostics go to the log stream on
stderr; the summary table goes to stdout.
"""

import logging
import sys
from pathlib import Path
from typing import Annotated

import httpx
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from wfs_ft_validator.core.config import ConfigValidationError, ValidatorConfig
from wfs_ft_validator.core.constants import EXIT_OK, EXIT_USAGE
from wfs_ft_validator.models.outcome import RunSummary
from wfs_ft_validator.models.report import RunReport
from wfs_ft_validator.orchestrators.validation_run import run_validation
from wfs_ft_validator.transport.httpx_transport import HttpxTransport

app = typer.Typer(
    add_completion=False,
    help="Validate the feature types of an OGC Web Feature Service.",
)

logger = logging.getLogger("wfs_ft_validator.cli")

_console = Console()

_STATUS_STYLES = {
    "ok": "green",
    "skipped": "yellow",
    "failed": "red",
    "fetch-failed": "red",
}


def configure_logging(level: str) -> None:
    """Route all log records through a rich handler on stderr."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, markup=False)],
        force=True,
    )
    # One line per request from httpx would duplicate our own logging.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _check_url(url: str) -> None:
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise typer.BadParameter(str(exc), param_hint="'URL'") from exc

    if parsed.scheme not in ("http", "https") or not parsed.host:
        msg = f"{url!r} is not an http(s) URL"
        raise typer.BadParameter(msg, param_hint="'URL'")


def _print_summary(summary: RunSummary) -> None:
    table = Table(title=f"WFS validation: {summary.endpoint}")
    table.add_column("Feature type", no_wrap=True)
    table.add_column("Status")
    table.add_column("Violations", justify="right")
    table.add_column("Hrefs", justify="right")
    table.add_column("Broken", justify="right")
    table.add_column("Errors", justify="right")

    for outcome in summary.outcomes:
        style = _STATUS_STYLES.get(outcome.status, "white")
        table.add_row(
            escape(outcome.type_name),
            f"[{style}]{outcome.status}[/{style}]",
            str(len(outcome.violations)),
            str(outcome.hrefs_checked),
            str(len(outcome.broken_links)),
            str(outcome.error_count),
        )

    _console.print(table)

    for error in summary.run_errors:
        _console.print(f"[yellow]{error['code']}[/yellow] {escape(str(error['message']))}")

    if summary.fatal_error is not None:
        _console.print(
            f"[red]Run aborted[/red] ({summary.fatal_error['code']}): "
            f"{escape(str(summary.fatal_error['message']))}"
        )

    if summary.succeeded:
        _console.print("[green]No errors found.[/green]")
    else:
        _console.print(f"[red]{summary.error_count} error(s) found.[/red]")


@app.command()
def validate(
    ctx: typer.Context,
    url: Annotated[str, typer.Argument(help="Base URL of the WFS under test.", show_default=False)],
    count: Annotated[
        int | None,
        typer.Option("--count", "-c", min=1, help="Number of features to test with each request."),
    ] = None,
    require: Annotated[
        list[str] | None,
        typer.Option(
            "--require",
            "-r",
            help="Feature type that must be advertised (repeatable).",
            show_default=False,
        ),
    ] = None,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", help="HTTP timeout in seconds for every request."),
    ] = None,
    report: Annotated[
        Path | None,
        typer.Option("--report", dir_okay=False, help="Write a JSON report to this file."),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)."),
    ] = None,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only log warnings and errors."),
    ] = False,
) -> None:
    """Validate every feature type of the WFS at URL."""
    _check_url(url)

    try:
        config = ValidatorConfig.from_env().with_overrides(
            feature_count=count,
            http_timeout_s=timeout,
            log_level=log_level.upper() if log_level else None,
        )
    except (ConfigValidationError, ValueError) as exc:
        raise typer.BadParameter(str(exc)) from exc

    configure_logging("WARNING" if quiet else config.log_level)

    with HttpxTransport(timeout_s=config.http_timeout_s, user_agent=config.user_agent) as transport:
        summary = run_validation(url, transport, config, required_types=require or ())

    _print_summary(summary)

    if report is not None:
        try:
            path = RunReport.from_summary(summary).write(report)
        except OSError as exc:
            logger.error("Cannot write report | path=%s | error=%s", report, exc)
        else:
            logger.info("Report written to %s", path)

    ctx.ensure_object(dict)["exit_code"] = summary.exit_code


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit status.

    Typer always leaves through ``SystemExit``: 0 after the command ran or
    after ``--help``, non-zero on usage errors (2) or an abort (1).  The
    run's own status travels in the context object instead, since a usage
    error and "errors found" would otherwise share status 2.
    """
    state: dict[str, int] = {}
    try:
        app(args=argv, prog_name="wfs-ft-validator", obj=state)
    except SystemExit as exc:
        if exc.code not in (None, 0):
            return EXIT_USAGE
    return state.get("exit_code", EXIT_OK)


def run() -> None:
    """Console script entry point."""
    sys.exit(main())
