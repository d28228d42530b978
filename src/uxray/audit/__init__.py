"""Audit domain: rules, catalog, engine, report export."""

from uxray.audit.catalog import RULES, default_registry
from uxray.audit.engine import (
    AuditError,
    AuditResult,
    ViolationAggregator,
    audit,
    audit_file,
    audit_source,
    compute_score,
    iter_elements,
)
from uxray.audit.report import (
    REPORT_FORMATS,
    ExportError,
    default_report_path,
    export_report,
    format_json,
    format_markdown,
    format_rich,
)
from uxray.audit.rules import (
    Finding,
    Rule,
    RuleContext,
    RuleRegistry,
    Violation,
    run_rules,
)

__all__ = [
    "REPORT_FORMATS",
    "RULES",
    "AuditError",
    "AuditResult",
    "ExportError",
    "Finding",
    "Rule",
    "RuleContext",
    "RuleRegistry",
    "Violation",
    "ViolationAggregator",
    "audit",
    "audit_file",
    "audit_source",
    "compute_score",
    "default_registry",
    "default_report_path",
    "export_report",
    "format_json",
    "format_markdown",
    "format_rich",
    "iter_elements",
    "run_rules",
]
