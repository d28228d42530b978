"""Tests for uxray.audit.report: JSON, Markdown and Rich output plus export."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from uxray.audit.engine import AuditResult, audit
from uxray.audit.report import (
    ExportError,
    default_report_path,
    export_report,
    format_json,
    format_markdown,
    format_rich,
    render,
)
from uxray.audit.rules import Violation
from uxray.markup.elements import Document

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture()
def clean_result() -> AuditResult:
    return audit(Document())


@pytest.fixture()
def dirty_result() -> AuditResult:
    return AuditResult(
        total_checks=11,
        passed_checks=9,
        violations=(
            Violation(
                "missing-alt",
                "accessibility",
                "error",
                "<img> tag is missing an alt attribute",
                location="5:5",
            ),
            Violation(
                "anchor-without-href",
                "structural-semantics",
                "warn",
                "<a> tag is missing an href attribute",
            ),
        ),
        score=82,
    )


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


class TestFormatJson:
    """JSON report structure."""

    def test_structure(self, dirty_result: AuditResult) -> None:
        data = json.loads(format_json(dirty_result))
        assert data["totalChecks"] == 11
        assert data["passedChecks"] == 9
        assert data["score"] == 82
        assert data["violations"][0] == {
            "name": "missing-alt",
            "category": "accessibility",
            "severity": "error",
            "message": "<img> tag is missing an alt attribute",
            "location": "5:5",
        }
        assert "location" not in data["violations"][1]

    def test_clean(self, clean_result: AuditResult) -> None:
        data = json.loads(format_json(clean_result))
        assert data == {"totalChecks": 11, "passedChecks": 11, "violations": [], "score": 100}


# ---------------------------------------------------------------------------
# Markdown
# ---------------------------------------------------------------------------


class TestFormatMarkdown:
    """Markdown report template."""

    def test_header(self, dirty_result: AuditResult) -> None:
        output = format_markdown(dirty_result)
        assert output.startswith("# UXRay Audit Report\n\n**Score**: 82  \n")
        assert "**Passed Checks**: 9 / 11  \n" in output
        assert "**Violations**: 2\n" in output

    def test_numbered_entries(self, dirty_result: AuditResult) -> None:
        output = format_markdown(dirty_result)
        assert (
            "### 1. <img> tag is missing an alt attribute\n"
            "- **Type**: accessibility\n"
            "- **Severity**: error\n"
        ) in output
        assert "### 2. <a> tag is missing an href attribute\n" in output
        assert "- **Type**: structural-semantics\n" in output

    def test_no_violations(self, clean_result: AuditResult) -> None:
        output = format_markdown(clean_result)
        assert "✅ No violations found!" in output
        assert "###" not in output


# ---------------------------------------------------------------------------
# Rich
# ---------------------------------------------------------------------------


class TestFormatRich:
    """Rich terminal summary."""

    def test_clean_summary(self, clean_result: AuditResult) -> None:
        output = format_rich(clean_result, "src/App.tsx")
        assert "UXRay Audit Report for src/App.tsx" in output
        assert "Score: 100 / 100" in output
        assert "Passed Checks: 11 / 11" in output
        assert "No violations found" in output

    def test_violation_lines(self, dirty_result: AuditResult) -> None:
        output = format_rich(dirty_result)
        assert "Violations: 2 (1 errors, 1 warnings, 0 info)" in output
        assert "missing-alt [5:5]" in output
        assert "<img> tag is missing an alt attribute" in output
        assert "anchor-without-href" in output

    def test_most_severe_listed_first(self) -> None:
        """Info, warn, error in visitation order -> error, warn, info on screen."""
        result = AuditResult(
            total_checks=11,
            passed_checks=8,
            violations=(
                Violation("heading-structure", "accessibility", "info", "h1 reminder"),
                Violation("anchor-without-href", "structural-semantics", "warn", "no href"),
                Violation("missing-alt", "accessibility", "error", "no alt"),
            ),
            score=73,
        )
        output = format_rich(result)
        assert output.index("missing-alt") < output.index("anchor-without-href")
        assert output.index("anchor-without-href") < output.index("heading-structure")
        # The result itself keeps visitation order.
        assert result.violations[0].name == "heading-structure"

    def test_no_ansi_without_color(self, dirty_result: AuditResult) -> None:
        assert "\x1b[" not in format_rich(dirty_result, "App.tsx")

    def test_markup_in_target_is_literal(self, clean_result: AuditResult) -> None:
        output = format_rich(clean_result, "[bold]x.tsx")
        assert "[bold]x.tsx" in output


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


class TestExport:
    """Writing reports to disk."""

    def test_default_paths(self) -> None:
        assert str(default_report_path("json")) == "uxray-report.json"
        assert str(default_report_path("md")) == "uxray-report.md"

    def test_export_to_default_path(
        self, clean_result: AuditResult, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        written = export_report(clean_result, "json")
        assert (tmp_path / "uxray-report.json").is_file()
        assert json.loads(written.read_text(encoding="utf-8"))["score"] == 100

    def test_export_to_explicit_path(self, dirty_result: AuditResult, tmp_path: Path) -> None:
        target = tmp_path / "a11y.md"
        written = export_report(dirty_result, "md", target)
        assert written == target
        assert target.read_text(encoding="utf-8") == format_markdown(dirty_result)

    def test_write_failure(self, dirty_result: AuditResult, tmp_path: Path) -> None:
        target = tmp_path / "missing-dir" / "report.json"
        with pytest.raises(ExportError, match="Cannot write report"):
            export_report(dirty_result, "json", target)
        # The result is still usable after a failed export.
        assert json.loads(format_json(dirty_result))["score"] == 82

    def test_unknown_format(self, clean_result: AuditResult) -> None:
        with pytest.raises(ValueError, match="Unknown report format 'html'"):
            render(clean_result, "html")
