from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.logging import RichHandler

from . import SpanMapError, __version__
from .errors import InputValidationError
from .excerpt import ExcerptMode
from .exit_codes import ExitCode
from .orchestration import DEFAULT_TIMEOUT_SECONDS, run_lookup
from .reporting import render_references_report
from .text import TextSpan

APP_NAME = "spanmap"
_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

app = typer.Typer(
    name=APP_NAME,
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def configure_logging(*, quiet: bool = False) -> None:
    """Initialise application-wide logging."""

    level = logging.WARNING if quiet else logging.INFO
    root = logging.getLogger()

    if getattr(configure_logging, "_configured", False):
        root.setLevel(level)
        for handler in root.handlers:
            handler.setLevel(level)
        configure_logging._level = level
        return

    handler = RichHandler(
        rich_tracebacks=True,
        show_path=False,
        markup=False,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))

    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    configure_logging._configured = True
    configure_logging._level = level


def _parse_span(value: str) -> TextSpan:
    """Parse a ``START:LENGTH`` argument into a span."""

    start_text, separator, length_text = (value or "").strip().partition(":")
    try:
        if not separator:
            raise ValueError(value)
        return TextSpan(start=int(start_text), length=int(length_text))
    except ValueError as exc:
        raise InputValidationError(
            message=f"Invalid span '{value}'.",
            remediation="Pass spans as START:LENGTH with non-negative integers, e.g. --span 120:5.",
        ) from exc


def _parse_excerpt_mode(value: str | None) -> ExcerptMode | None:
    """Resolve the --excerpt option into an excerpt mode."""

    if value is None:
        return None
    normalized = value.strip().lower().replace("_", "-")
    for mode in ExcerptMode:
        if mode.value == normalized:
            return mode
    choices = ", ".join(mode.value for mode in ExcerptMode)
    raise InputValidationError(
        message=f"Unknown excerpt mode '{value}'.",
        remediation=f"Choose one of: {choices}.",
    )


def _is_quiet_mode() -> bool:
    """Determine if the CLI is currently running in quiet mode."""

    return getattr(configure_logging, "_level", logging.INFO) == logging.WARNING


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    quiet: bool = typer.Option(
        False,
        "--quiet",
        help="Reduce log output to warnings and errors.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show the spanmap version and exit.",
    ),
) -> None:
    """Configure logging and handle global options."""

    configure_logging(quiet=quiet)

    if version:
        typer.echo(__version__)
        raise typer.Exit(code=int(ExitCode.SUCCESS))

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=int(ExitCode.SUCCESS))


@app.command("map")
def map_spans(
    span: list[str] = typer.Option(
        ...,
        "--span",
        "-s",
        help="Span of the document as START:LENGTH (pass multiple times).",
    ),
    document: Path | None = typer.Option(
        None,
        "--document",
        "-d",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Generated or plain document the spans refer to.",
    ),
    projection_map: Path | None = typer.Option(
        None,
        "--projection-map",
        "-p",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Projection map relating the generated document to its primary file.",
    ),
    primary: Path | None = typer.Option(
        None,
        "--primary",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Primary file whose sibling projection map names the generated document.",
    ),
    excerpt: str | None = typer.Option(
        None,
        "--excerpt",
        "-e",
        help="Also extract an excerpt per span: single-line or tooltip.",
    ),
    wide: bool = typer.Option(
        False,
        "--wide",
        help="Render the report with mapped and source span columns.",
    ),
    timeout: float = typer.Option(
        DEFAULT_TIMEOUT_SECONDS,
        "--timeout",
        min=0.1,
        help="Seconds allowed for the lookup before it is abandoned.",
        show_default=True,
    ),
) -> None:
    """Map generated-document spans back to their original files."""

    logger = logging.getLogger("spanmap.cli")
    quiet_mode = _is_quiet_mode()

    try:
        spans = [_parse_span(value) for value in span]
        excerpt_mode = _parse_excerpt_mode(excerpt)
    except InputValidationError as exc:
        logger.error(str(exc))
        if exc.remediation:
            logger.error("Remediation: %s", exc.remediation)
        raise typer.Exit(code=int(ExitCode.INVALID_INPUT)) from exc
    except SpanMapError as exc:  # pragma: no cover
        logger.error(str(exc))
        raise typer.Exit(code=int(ExitCode.UNEXPECTED_ERROR)) from exc

    outcome = run_lookup(
        spans,
        document_path=document,
        projection_map_path=projection_map,
        primary_path=primary,
        excerpt_mode=excerpt_mode,
        timeout_seconds=timeout,
        quiet=quiet_mode,
        wide=wide,
    )

    printed_message = False
    if outcome.message and not quiet_mode and outcome.report is not None:
        typer.echo(outcome.message)
        printed_message = True

    if outcome.report is not None:
        if printed_message:
            typer.echo("")
        typer.echo(render_references_report(outcome.report))

    raise typer.Exit(code=int(outcome.exit_code))


def entrypoint() -> None:
    """Execute the Typer application."""

    app()


__all__ = ["app", "entrypoint", "configure_logging", "ExitCode"]
