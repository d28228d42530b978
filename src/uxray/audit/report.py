"""Report formatters and export: JSON, Markdown, and a rich terminal summary."""

from __future__ import annotations

import json
import logging
from io import StringIO
from pathlib import Path
from typing import TYPE_CHECKING

from uxray.audit.rules import SEVERITY_ERROR, SEVERITY_INFO, SEVERITY_ORDER, SEVERITY_WARN

if TYPE_CHECKING:
    from uxray.audit.engine import AuditResult

logger = logging.getLogger(__name__)

REPORT_FORMATS: tuple[str, ...] = ("json", "md")

_SEVERITY_STYLES: dict[str, tuple[str, str]] = {
    SEVERITY_ERROR: ("✗", "red"),
    SEVERITY_WARN: ("⚠", "yellow"),
    SEVERITY_INFO: ("ℹ", "cyan"),
}


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ExportError(Exception):
    """Raised when a report cannot be written."""


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


def format_json(result: AuditResult) -> str:
    """Format an AuditResult as JSON.

    Top-level keys: ``totalChecks``, ``passedChecks``, ``violations``, ``score``.
    """
    return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)


def format_markdown(result: AuditResult) -> str:
    """Format an AuditResult as a Markdown document.

    Example output::

        # UXRay Audit Report

        **Score**: 82
        **Passed Checks**: 9 / 11
        **Violations**: 2

        ### 1. <img> tag is missing an alt attribute
        - **Type**: accessibility
        - **Severity**: error
        ...
    """
    entries = [
        f"### {i}. {v.message}\n- **Type**: {v.category}\n- **Severity**: {v.severity}\n"
        for i, v in enumerate(result.violations, start=1)
    ]
    body = "\n".join(entries) or "✅ No violations found!"

    # Two trailing spaces force Markdown line breaks inside the header block.
    return (
        "# UXRay Audit Report\n"
        "\n"
        f"**Score**: {result.score}  \n"
        f"**Passed Checks**: {result.passed_checks} / {result.total_checks}  \n"
        f"**Violations**: {len(result.violations)}\n"
        "\n"
        f"{body}\n"
    )


def format_rich(result: AuditResult, target: str = "", *, color: bool = False) -> str:
    """Render a terminal summary of *result* with Rich.

    Violations are listed most severe first.  Returns the rendered text so
    callers decide where it goes.  ANSI styling is only emitted when *color*
    is set.
    """
    from rich.console import Console
    from rich.markup import escape
    from rich.text import Text

    buf = StringIO()
    console = Console(
        file=buf, width=100, highlight=False, force_terminal=color, no_color=not color
    )

    title = "UXRay Audit Report"
    if target:
        title += f" for {target}"
    console.rule(f"[bold]{escape(title)}[/bold]", style="blue")

    score_style = "green" if result.score >= 90 else "yellow" if result.score >= 50 else "red"
    score_line = Text()
    score_line.append("  Score: ", style="bold")
    score_line.append(f"{result.score}", style=f"bold {score_style}")
    score_line.append(" / 100")
    console.print(score_line)
    console.print(f"  Passed Checks: {result.passed_checks} / {result.total_checks}")

    counts = result.summary
    console.print(
        f"  Violations: {len(result.violations)} "
        f"({counts[SEVERITY_ERROR]} errors, {counts[SEVERITY_WARN]} warnings, "
        f"{counts[SEVERITY_INFO]} info)"
    )
    console.print()

    if not result.violations:
        console.print("  [green]✓ No violations found[/green]")
        return buf.getvalue()

    # Most severe first; visitation order within a severity.
    ordered = sorted(result.violations, key=lambda v: -SEVERITY_ORDER.get(v.severity, 0))
    for v in ordered:
        marker, style = _SEVERITY_STYLES.get(v.severity, ("?", "white"))
        line = Text("  ")
        line.append(f"{marker} {v.severity:<5}", style=style)
        line.append(f" {v.name}", style="bold")
        if v.location:
            line.append(f" [{v.location}]", style="dim")
        console.print(line)
        console.print(f"      {v.message}", markup=False)

    return buf.getvalue()


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def default_report_path(fmt: str) -> Path:
    return Path(f"uxray-report.{fmt}")


def render(result: AuditResult, fmt: str) -> str:
    if fmt == "json":
        return format_json(result)
    if fmt == "md":
        return format_markdown(result)
    msg = f"Unknown report format '{fmt}', must be one of {list(REPORT_FORMATS)}"
    raise ValueError(msg)


def export_report(result: AuditResult, fmt: str, out_path: Path | None = None) -> Path:
    """Write *result* in *fmt* to *out_path* (default ``uxray-report.<fmt>``).

    The result is only read; a failed write leaves it usable.

    Raises
    ------
    ValueError
        For an unknown format.
    ExportError
        When the file cannot be written.
    """
    output = render(result, fmt)
    target = out_path if out_path is not None else default_report_path(fmt)
    try:
        target.write_text(output, encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot write report to {target}: {exc}"
        raise ExportError(msg) from exc
    logger.debug("Wrote %s report to %s", fmt, target)
    return target
