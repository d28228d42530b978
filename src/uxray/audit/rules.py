"""Rule model: severities, categories, rule context, violations and the registry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from uxray.markup.elements import ElementNode

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SEVERITY_INFO = "info"
SEVERITY_WARN = "warn"
SEVERITY_ERROR = "error"

VALID_SEVERITIES: frozenset[str] = frozenset({SEVERITY_INFO, SEVERITY_WARN, SEVERITY_ERROR})
# Ordinal for display and sorting only; never folded into the score.
SEVERITY_ORDER: dict[str, int] = {SEVERITY_INFO: 0, SEVERITY_WARN: 1, SEVERITY_ERROR: 2}

CATEGORY_ACCESSIBILITY = "accessibility"
CATEGORY_FORM_SEMANTICS = "form-semantics"
CATEGORY_STRUCTURAL_SEMANTICS = "structural-semantics"

VALID_CATEGORIES: frozenset[str] = frozenset(
    {CATEGORY_ACCESSIBILITY, CATEGORY_FORM_SEMANTICS, CATEGORY_STRUCTURAL_SEMANTICS}
)

# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RuleContext:
    """What a rule sees for one element: the element and the raw source text."""

    element: ElementNode
    source: str = ""


@dataclass(frozen=True)
class Finding:
    """Detector output.  ``severity=None`` means the rule's own severity."""

    message: str
    severity: str | None = None


@dataclass(frozen=True)
class Violation:
    """A single finding emitted by one rule against one element."""

    name: str
    category: str
    severity: str  # "info" | "warn" | "error"
    message: str
    location: str = ""  # "line:column", empty when unknown

    def to_dict(self) -> dict[str, str]:
        data = {
            "name": self.name,
            "category": self.category,
            "severity": self.severity,
            "message": self.message,
        }
        if self.location:
            data["location"] = self.location
        return data


@dataclass(frozen=True)
class Rule:
    """A named, typed, severity-tagged check.

    ``detect`` is a pure function of the :class:`RuleContext`.  It returns
    at most one :class:`Finding`; :meth:`check` turns that into a
    :class:`Violation` carrying the rule's identity.
    """

    name: str
    description: str
    category: str
    severity: str
    detect: Callable[[RuleContext], Finding | None]

    def __post_init__(self) -> None:
        if not self.name:
            msg = "Rule name must not be empty"
            raise ValueError(msg)
        if self.severity not in VALID_SEVERITIES:
            msg = (
                f"Rule '{self.name}': invalid severity '{self.severity}', "
                f"must be one of {sorted(VALID_SEVERITIES)}"
            )
            raise ValueError(msg)
        if self.category not in VALID_CATEGORIES:
            msg = (
                f"Rule '{self.name}': invalid category '{self.category}', "
                f"must be one of {sorted(VALID_CATEGORIES)}"
            )
            raise ValueError(msg)

    def check(self, ctx: RuleContext) -> Violation | None:
        finding = self.detect(ctx)
        if finding is None:
            return None
        return Violation(
            name=self.name,
            category=self.category,
            severity=finding.severity or self.severity,
            message=finding.message,
            location=ctx.element.location,
        )


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class RuleRegistry:
    """Ordered, immutable collection of rules.

    The order fixes iteration and therefore violation order for a single
    element; its length is the ``totalChecks`` of every audit run.  A
    registry holds no per-run state and may be shared between runs.
    """

    __slots__ = ("_rules",)

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        rules_tuple = tuple(rules)
        seen: set[str] = set()
        for rule in rules_tuple:
            if rule.name in seen:
                msg = f"Duplicate rule name '{rule.name}'"
                raise ValueError(msg)
            seen.add(rule.name)
        self._rules = rules_tuple

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __contains__(self, name: object) -> bool:
        return any(rule.name == name for rule in self._rules)

    def __repr__(self) -> str:
        return f"RuleRegistry({list(self.names)!r})"

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(rule.name for rule in self._rules)

    def get(self, name: str) -> Rule:
        for rule in self._rules:
            if rule.name == name:
                return rule
        raise KeyError(name)

    def without(self, *names: str) -> RuleRegistry:
        """Return a new registry with *names* removed, order preserved.

        Raises ``KeyError`` for a name that is not registered.
        """
        for name in names:
            if name not in self:
                raise KeyError(name)
        return RuleRegistry(rule for rule in self._rules if rule.name not in names)

    def only(self, *names: str) -> RuleRegistry:
        """Return a new registry restricted to *names*, in registry order."""
        for name in names:
            if name not in self:
                raise KeyError(name)
        return RuleRegistry(rule for rule in self._rules if rule.name in names)


def run_rules(registry: Iterable[Rule], ctx: RuleContext) -> list[Violation]:
    """Run every rule once against *ctx* and return the violations, in rule order.

    Exceptions raised by a rule propagate: a rule failing on a well-formed
    tree is a defect in that rule.
    """
    results: list[Violation] = []
    for rule in registry:
        violation = rule.check(ctx)
        if violation is not None:
            results.append(violation)
    return results
