"""Audit engine: walk the element tree, run the registry, aggregate and score."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from uxray.audit.catalog import default_registry
from uxray.audit.rules import (
    SEVERITY_ERROR,
    SEVERITY_INFO,
    SEVERITY_WARN,
    RuleContext,
    RuleRegistry,
    Violation,
    run_rules,
)
from uxray.markup.elements import ElementNode, Expression
from uxray.markup.parser import MarkupParseError, parse_file, parse_source

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from pathlib import Path

    from uxray.markup.elements import Document, Fragment, Node

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class AuditError(Exception):
    """Raised when the input cannot be read or parsed."""


# ---------------------------------------------------------------------------
# Tree walker
# ---------------------------------------------------------------------------


def iter_elements(root: Document | Fragment | Node) -> Iterator[ElementNode]:
    """Yield every element below *root* in pre-order (document order).

    An element comes before elements nested in its attribute values, then
    those in its spread attributes, then its children.  Nothing is skipped
    or deduplicated.
    """
    stack: list[Node]
    if isinstance(root, ElementNode):
        stack = [root]
    else:
        stack = list(reversed(getattr(root, "children", ())))
    while stack:
        node = stack.pop()
        if isinstance(node, ElementNode):
            yield node
            pending: list[Node] = []
            for attr in node.attributes:
                if isinstance(attr.value, Expression):
                    pending.extend(attr.value.children)
            for spread in node.spreads:
                pending.extend(spread.children)
            pending.extend(node.children)
            stack.extend(reversed(pending))
        else:
            stack.extend(reversed(getattr(node, "children", ())))


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


class ViolationAggregator:
    """Collects violations for a single run, preserving visitation order."""

    __slots__ = ("_violations",)

    def __init__(self) -> None:
        self._violations: list[Violation] = []

    def __len__(self) -> int:
        return len(self._violations)

    def add(self, violation: Violation) -> None:
        self._violations.append(violation)

    def extend(self, violations: Iterable[Violation]) -> None:
        self._violations.extend(violations)

    @property
    def violations(self) -> tuple[Violation, ...]:
        return tuple(self._violations)

    def count_by_severity(self) -> dict[str, int]:
        return _count(v.severity for v in self._violations)

    def count_by_category(self) -> dict[str, int]:
        return _count(v.category for v in self._violations)

    def count_by_rule(self) -> dict[str, int]:
        return _count(v.name for v in self._violations)


def _count(keys: Iterable[str]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for key in keys:
        counts[key] = counts.get(key, 0) + 1
    return counts


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


def compute_score(total_checks: int, violation_count: int) -> int:
    """Return the 0-100 score for a run.

    ``total_checks`` is the number of registered rules, not the number of
    elements, so a large file with many findings bottoms out at 0.  Halves
    round up.  With no rules registered there is nothing to fail: 100.
    """
    if total_checks <= 0:
        return 100
    passed = total_checks - violation_count
    return max(0, math.floor(passed / total_checks * 100 + 0.5))


@dataclass(frozen=True)
class AuditResult:
    """Outcome of one audit run.

    ``passed_checks`` is ``total_checks - len(violations)`` and may be
    negative; only the score is clamped.
    """

    total_checks: int
    passed_checks: int
    violations: tuple[Violation, ...]
    score: int

    @property
    def errors(self) -> tuple[Violation, ...]:
        return tuple(v for v in self.violations if v.severity == SEVERITY_ERROR)

    @property
    def warnings(self) -> tuple[Violation, ...]:
        return tuple(v for v in self.violations if v.severity == SEVERITY_WARN)

    @property
    def infos(self) -> tuple[Violation, ...]:
        return tuple(v for v in self.violations if v.severity == SEVERITY_INFO)

    @property
    def summary(self) -> dict[str, int]:
        return {
            SEVERITY_ERROR: len(self.errors),
            SEVERITY_WARN: len(self.warnings),
            SEVERITY_INFO: len(self.infos),
        }

    def to_dict(self) -> dict[str, object]:
        return {
            "totalChecks": self.total_checks,
            "passedChecks": self.passed_checks,
            "violations": [v.to_dict() for v in self.violations],
            "score": self.score,
        }


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def audit(
    document: Document | Fragment | Node,
    source: str = "",
    *,
    registry: RuleRegistry | None = None,
) -> AuditResult:
    """Run every registered rule against every element of *document*.

    Single pass, top to bottom.  Exceptions raised by rules are not caught.
    """
    if registry is None:
        registry = default_registry()

    aggregator = ViolationAggregator()
    visited = 0
    for element in iter_elements(document):
        visited += 1
        aggregator.extend(run_rules(registry, RuleContext(element=element, source=source)))

    total_checks = len(registry)
    violation_count = len(aggregator)
    logger.debug(
        "Audited %d element(s) with %d rule(s): %d violation(s)",
        visited,
        total_checks,
        violation_count,
    )
    return AuditResult(
        total_checks=total_checks,
        passed_checks=total_checks - violation_count,
        violations=aggregator.violations,
        score=compute_score(total_checks, violation_count),
    )


def audit_source(source: str, *, registry: RuleRegistry | None = None) -> AuditResult:
    """Parse *source* and audit it.

    Raises
    ------
    AuditError
        When the source does not parse.
    """
    try:
        document = parse_source(source)
    except MarkupParseError as exc:
        raise AuditError(str(exc)) from exc
    return audit(document, source, registry=registry)


def audit_file(path: Path, *, registry: RuleRegistry | None = None) -> AuditResult:
    """Read, parse and audit one component file.

    Raises
    ------
    AuditError
        When the file cannot be read or does not parse.
    """
    try:
        document, source = parse_file(path)
    except MarkupParseError as exc:
        raise AuditError(str(exc)) from exc
    logger.debug("Auditing %s", path)
    return audit(document, source, registry=registry)
