"""UXRay CLI entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from uxray import __version__


def _configure_logging(*, verbose: bool, quiet: bool) -> None:
    """Route library logging through a Rich handler on stderr."""
    from rich.console import Console
    from rich.logging import RichHandler

    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    root_logger = logging.getLogger("uxray")
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


def _resolve_format(report: str | None, out: Path | None) -> str | None:
    """Pick the export format: explicit/config value, else inferred from *out*."""
    if report is not None:
        return report
    if out is None:
        return None
    return "md" if out.suffix.lower() in (".md", ".markdown") else "json"


@click.command()
@click.version_option(version=__version__, prog_name="uxray")
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--report",
    type=click.Choice(["json", "md"]),
    default=None,
    help="Export the report in this format.",
)
@click.option(
    "--out",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Report output path (default: uxray-report.<format>).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: .uxray.yml in the current directory).",
)
@click.option(
    "--disable",
    "disabled",
    multiple=True,
    metavar="RULE",
    help="Disable a rule by name (repeatable).",
)
@click.option("--strict", is_flag=True, default=False, help="Exit 1 if violations found.")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Minimal output (errors only).")
def main(
    file: Path,
    *,
    report: str | None,
    out: Path | None,
    config_path: Path | None,
    disabled: tuple[str, ...],
    strict: bool,
    verbose: bool,
    quiet: bool,
) -> None:
    """Audit the JSX/TSX markup in FILE for accessibility issues.

    Exit codes: 0 = clean or violations without --strict,
    1 = violations with --strict or report export failure,
    2 = usage, input or configuration error.
    """
    from uxray.audit.engine import AuditError, audit_file
    from uxray.audit.report import ExportError, export_report, format_rich
    from uxray.config import ConfigError, build_registry, load_config

    _configure_logging(verbose=verbose, quiet=quiet)

    try:
        config = load_config(config_path)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    registry = build_registry(config, disabled=disabled)

    try:
        result = audit_file(file, registry=registry)
    except AuditError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    if not quiet:
        click.echo(format_rich(result, str(file), color=sys.stdout.isatty()), nl=False)

    out_path = out if out is not None else config.out
    fmt = _resolve_format(report or config.report, out_path)
    if fmt is not None:
        try:
            written = export_report(result, fmt, out_path)
        except ExportError as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(1)
        if not quiet:
            click.echo(f"\nReport exported to: {written}")

    if strict and result.violations:
        sys.exit(1)
