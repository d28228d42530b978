"""Built-in rule catalog: accessibility and semantic checks for JSX markup.

Every detector looks at one element, short-circuits to ``None`` for tags it
does not handle, and reports at most one finding.  Where a rule has several
conditions, the first one that matches wins.
"""

from __future__ import annotations

import re

from uxray.audit.rules import (
    CATEGORY_ACCESSIBILITY,
    CATEGORY_FORM_SEMANTICS,
    CATEGORY_STRUCTURAL_SEMANTICS,
    SEVERITY_ERROR,
    SEVERITY_INFO,
    SEVERITY_WARN,
    Finding,
    Rule,
    RuleContext,
    RuleRegistry,
)

# ---------------------------------------------------------------------------
# Tag sets
# ---------------------------------------------------------------------------

FORM_FIELD_TAGS: frozenset[str] = frozenset({"input", "select", "textarea"})
LANDMARK_TAGS: frozenset[str] = frozenset(
    {"nav", "main", "aside", "header", "footer", "section", "article"}
)
SECTIONING_TAGS: frozenset[str] = frozenset({"section", "article"})
INTERACTIVE_TAGS: frozenset[str] = frozenset(
    {"button", "a", "input", "select", "textarea", "div", "span"}
)
HEADING_TAGS: tuple[str, ...] = ("h1", "h2", "h3", "h4", "h5", "h6")

_HEADING_RE = re.compile(r"^h[1-6]$")

# Attribute groups
_CLICK_HANDLERS = ("onClick", "onKeyDown", "onKeyUp")
_KEYBOARD_HANDLERS = ("onKeyDown", "onKeyUp", "onKeyPress")
_TOGGLE_HANDLERS = ("onClick", "onToggle")
_ARIA_NAMING = ("aria-label", "aria-labelledby")


# ---------------------------------------------------------------------------
# Detectors
# ---------------------------------------------------------------------------


def _detect_missing_label(ctx: RuleContext) -> Finding | None:
    el = ctx.element
    if el.tag not in FORM_FIELD_TAGS or el.has_attribute("id"):
        return None
    # Capitalised for the message only; the element itself is left alone.
    display = el.tag[:1].upper() + el.tag[1:]
    return Finding(
        f"{display} element may be missing an associated <label> (no id or label found)"
    )


def _detect_missing_alt(ctx: RuleContext) -> Finding | None:
    el = ctx.element
    if el.tag != "img" or el.has_attribute("alt"):
        return None
    return Finding("<img> tag is missing an alt attribute")


def _detect_button_label(ctx: RuleContext) -> Finding | None:
    el = ctx.element
    if el.tag != "button":
        return None
    if el.text or el.has_attribute("aria-label"):
        return None
    return Finding("<button> has no text content or aria-label")


def _detect_anchor_without_href(ctx: RuleContext) -> Finding | None:
    el = ctx.element
    if el.tag != "a" or el.has_attribute("href"):
        return None
    return Finding("<a> tag is missing an href attribute")


def _detect_iframe_without_title(ctx: RuleContext) -> Finding | None:
    el = ctx.element
    if el.tag != "iframe" or el.has_attribute("title"):
        return None
    return Finding("iframe element is missing a title")


def _detect_heading_structure(ctx: RuleContext) -> Finding | None:
    el = ctx.element
    if not _HEADING_RE.match(el.tag):
        return None
    # Only the current element is known here, so heading order across the
    # document is not checked; h1 gets a reminder.
    if el.tag == "h1":
        return Finding(
            "Ensure this h1 is the main heading and there is only one h1 per page",
            SEVERITY_INFO,
        )
    return None


def _detect_landmark_elements(ctx: RuleContext) -> Finding | None:
    el = ctx.element
    if el.tag not in LANDMARK_TAGS:
        return None
    if el.tag not in SECTIONING_TAGS or el.has_attribute("role"):
        return None
    if el.has_child_tag(*HEADING_TAGS):
        return None
    return Finding(f"{el.tag} element should have a heading or aria-label for accessibility")


def _detect_form_validation(ctx: RuleContext) -> Finding | None:
    el = ctx.element
    if el.tag not in FORM_FIELD_TAGS:
        return None

    is_required = el.has_attribute("required", "aria-required")

    if el.tag == "input":
        input_type = el.literal("type")
        if input_type == "email" and not is_required:
            return Finding(
                "Email input should have required attribute for better validation",
                SEVERITY_WARN,
            )
        if input_type == "password" and not el.has_attribute("aria-describedby"):
            return Finding(
                "Password input should have aria-describedby for password requirements",
                SEVERITY_INFO,
            )

    if is_required and not el.has_attribute(*_ARIA_NAMING):
        return Finding(
            "Required form field should have aria-label or aria-labelledby",
            SEVERITY_WARN,
        )
    return None


def _detect_aria_validation(ctx: RuleContext) -> Finding | None:
    el = ctx.element
    # Any plain identifier, components included; member and namespaced tags are skipped.
    if "." in el.tag or ":" in el.tag:
        return None
    aria = el.aria_attributes

    for attr in aria:
        value = attr.literal
        if attr.name == "aria-label" and value is not None and not value.strip():
            return Finding("aria-label should not be empty", SEVERITY_ERROR)

        if attr.name == "aria-hidden" and value == "true":
            if any(other.name != "aria-hidden" for other in aria):
                return Finding(
                    'aria-hidden="true" should not be used with other ARIA attributes',
                    SEVERITY_WARN,
                )

        if attr.name in ("aria-labelledby", "aria-describedby") and value is not None:
            if not value.strip():
                return Finding(
                    f"{attr.name} should reference a valid element ID", SEVERITY_ERROR
                )

    if el.tag == "button":
        if el.has_attribute(*_TOGGLE_HANDLERS) and not el.has_attribute("aria-expanded"):
            return Finding(
                "Button with toggle behavior should have aria-expanded attribute",
                SEVERITY_WARN,
            )
    return None


def _detect_table_accessibility(ctx: RuleContext) -> Finding | None:
    el = ctx.element
    if el.tag != "table":
        return None

    has_caption = el.has_child_tag("caption")
    has_label = el.has_attribute(*_ARIA_NAMING)
    has_summary = el.has_attribute("summary")
    if not has_caption and not has_label and not has_summary:
        return Finding("Table should have a caption, aria-label, or summary for accessibility")

    if not el.has_child_tag("thead"):
        return Finding("Table should have proper header structure (thead) for accessibility")
    return None


def _detect_keyboard_accessibility(ctx: RuleContext) -> Finding | None:
    el = ctx.element
    if el.tag not in INTERACTIVE_TAGS:
        return None

    has_click_handler = el.has_attribute(*_CLICK_HANDLERS)
    has_role = el.has_attribute("role")
    if not has_click_handler and not has_role:
        return None

    if el.tag in ("div", "span"):
        if has_click_handler and not el.has_attribute("tabIndex") and not has_role:
            return Finding(
                "Interactive div/span should have tabIndex or role for keyboard accessibility",
                SEVERITY_ERROR,
            )

    if has_click_handler and not el.has_attribute(*_KEYBOARD_HANDLERS):
        return Finding(
            "Interactive element should support keyboard events (Enter/Space)",
            SEVERITY_WARN,
        )

    if not el.has_attribute("aria-label", "aria-labelledby", "role"):
        return Finding(
            "Interactive element should have proper ARIA attributes for screen readers",
            SEVERITY_WARN,
        )
    return None


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

MISSING_LABEL = Rule(
    name="missing-label",
    description="Detect input elements without labels or identifiers",
    category=CATEGORY_FORM_SEMANTICS,
    severity=SEVERITY_WARN,
    detect=_detect_missing_label,
)

MISSING_ALT = Rule(
    name="missing-alt",
    description="Detect <img> tags missing alt attribute",
    category=CATEGORY_ACCESSIBILITY,
    severity=SEVERITY_ERROR,
    detect=_detect_missing_alt,
)

BUTTON_LABEL = Rule(
    name="button-label",
    description="Detect <button> elements with no accessible label",
    category=CATEGORY_ACCESSIBILITY,
    severity=SEVERITY_ERROR,
    detect=_detect_button_label,
)

ANCHOR_WITHOUT_HREF = Rule(
    name="anchor-without-href",
    description="Detect <a> tags without href attribute",
    category=CATEGORY_STRUCTURAL_SEMANTICS,
    severity=SEVERITY_WARN,
    detect=_detect_anchor_without_href,
)

IFRAME_WITHOUT_TITLE = Rule(
    name="iframe-without-title",
    description="Detect iframe elements without a title",
    category=CATEGORY_ACCESSIBILITY,
    severity=SEVERITY_WARN,
    detect=_detect_iframe_without_title,
)

HEADING_STRUCTURE = Rule(
    name="heading-structure",
    description="Detect improper heading hierarchy and missing heading levels",
    category=CATEGORY_ACCESSIBILITY,
    severity=SEVERITY_INFO,
    detect=_detect_heading_structure,
)

LANDMARK_ELEMENTS = Rule(
    name="landmark-elements",
    description="Detect missing or improper landmark elements for page structure",
    category=CATEGORY_ACCESSIBILITY,
    severity=SEVERITY_WARN,
    detect=_detect_landmark_elements,
)

FORM_VALIDATION = Rule(
    name="form-validation",
    description="Detect form elements missing proper validation attributes",
    category=CATEGORY_FORM_SEMANTICS,
    severity=SEVERITY_WARN,
    detect=_detect_form_validation,
)

ARIA_VALIDATION = Rule(
    name="aria-validation",
    description="Validate proper ARIA attribute usage and relationships",
    category=CATEGORY_ACCESSIBILITY,
    severity=SEVERITY_ERROR,
    detect=_detect_aria_validation,
)

TABLE_ACCESSIBILITY = Rule(
    name="table-accessibility",
    description="Detect tables missing proper accessibility features",
    category=CATEGORY_ACCESSIBILITY,
    severity=SEVERITY_WARN,
    detect=_detect_table_accessibility,
)

KEYBOARD_ACCESSIBILITY = Rule(
    name="keyboard-accessibility",
    description="Detect interactive elements missing keyboard accessibility",
    category=CATEGORY_ACCESSIBILITY,
    severity=SEVERITY_ERROR,
    detect=_detect_keyboard_accessibility,
)

RULES: tuple[Rule, ...] = (
    MISSING_LABEL,
    MISSING_ALT,
    BUTTON_LABEL,
    ANCHOR_WITHOUT_HREF,
    IFRAME_WITHOUT_TITLE,
    HEADING_STRUCTURE,
    LANDMARK_ELEMENTS,
    FORM_VALIDATION,
    ARIA_VALIDATION,
    TABLE_ACCESSIBILITY,
    KEYBOARD_ACCESSIBILITY,
)


def default_registry() -> RuleRegistry:
    """Return a registry holding the built-in rules in catalog order."""
    return RuleRegistry(RULES)
