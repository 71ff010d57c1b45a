"""Built-in lint rules for UI component declarations."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from uilint.kernel.domain.structure import (
    ComponentKind,
    ComponentNode,
    ElementNode,
    ExpressionRef,
    RawHTMLInjection,
    TemplateExpression,
    TextLiteral,
    URLReference,
)
from uilint.kernel.linting.models import Match, NodeKind, Severity
from uilint.kernel.linting.rules import Attribute, NodeView, Rule, rule

# Attributes that make the browser navigate to, load or submit to a URL
_NAVIGATION_ATTRIBUTES = frozenset({
    "href",
    "src",
    "action",
    "formaction",
    "xlinkhref",
    "xlink:href",
    "to",
})

# Tags that only group their children and carry no semantics of their own
_GENERIC_WRAPPER_TAGS = frozenset({"div", "span"})

_TEXT_SLOT = "\x00"


# ---------------------------------------------------------------------------
# Component rules
# ---------------------------------------------------------------------------


@rule(
    "prefer-function-component",
    title="Class component could be a function component",
    severity=Severity.WARNING,
    applies_to={NodeKind.COMPONENT},
)
def prefer_function_component(view: NodeView, options: Mapping[str, Any]) -> Match | None:
    component = view.node
    assert isinstance(component, ComponentNode)
    if component.kind is not ComponentKind.CLASS or component.uses_lifecycle_methods:
        return None
    fix = f"Rewrite '{component.name}' as a function taking props"
    if component.uses_this_binding:
        fix += " and replace this.props / this.state with props and hooks"
    return Match(
        message=f"Class component '{component.name}' uses no lifecycle methods",
        suggested_fix=fix,
    )


@rule(
    "pascal-case-component-name",
    title="Component name is not PascalCase",
    severity=Severity.WARNING,
    applies_to={NodeKind.COMPONENT},
)
def pascal_case_component_name(view: NodeView, options: Mapping[str, Any]) -> Match | None:
    component = view.node
    assert isinstance(component, ComponentNode)
    name = component.name
    if name[0].isupper():
        return None
    return Match(
        message=f"Component name '{name}' does not start with an uppercase letter",
        suggested_fix=f"Rename to '{name[0].upper()}{name[1:]}'",
    )


# ---------------------------------------------------------------------------
# List rules
# ---------------------------------------------------------------------------


def _index_names_in_scope(view: NodeView) -> set[str]:
    """Names that resolve to an iteration index at this node.

    A name is resolved by the nearest production that binds it, so an
    inner item named like an outer index shadows that index.
    """
    bound: set[str] = set()
    index_names: set[str] = set()
    for binding in view.iterations_in_scope():
        if binding.index_name and binding.index_name not in bound:
            index_names.add(binding.index_name)
        bound.add(binding.item_name)
        if binding.index_name:
            bound.add(binding.index_name)
    return index_names


@rule(
    "no-index-as-key",
    title="List key derived from the item index",
    severity=Severity.WARNING,
    applies_to={NodeKind.ELEMENT},
    suggestion="Use a stable identifier of the item (e.g. item.id) as the key",
)
def no_index_as_key(view: NodeView, options: Mapping[str, Any]) -> Match | None:
    element = view.node
    assert isinstance(element, ElementNode)
    if not isinstance(element.key, TemplateExpression):
        return None
    index_names = _index_names_in_scope(view)
    referenced = element.key.identifiers
    if not referenced or not referenced <= index_names:
        return None
    return Match(message=f"Key '{element.key.expression}' is the position of the item in the list")


@rule(
    "missing-list-key",
    title="List item without a key",
    severity=Severity.WARNING,
    applies_to={NodeKind.ELEMENT},
)
def missing_list_key(view: NodeView, options: Mapping[str, Any]) -> Match | None:
    element = view.node
    assert isinstance(element, ElementNode)
    production = view.list_production
    if production is None or element.key is not None:
        return None
    item = production.iteration.item_name if production.iteration else "item"
    return Match(
        message=f"<{element.tag}> is rendered once per item of '{production.expression}' "
        "but has no key",
        suggested_fix=f"Add key={{{item}.id}} (a stable identifier of the item)",
    )


# ---------------------------------------------------------------------------
# Security rules
# ---------------------------------------------------------------------------


@rule(
    "unsanitized-raw-html",
    title="Raw HTML injected without sanitization",
    severity=Severity.ERROR,
    applies_to={NodeKind.ATTRIBUTE},
    suggestion="Sanitize the markup (e.g. DOMPurify.sanitize) before injecting it",
)
def unsanitized_raw_html(view: NodeView, options: Mapping[str, Any]) -> Match | None:
    attribute = view.node
    assert isinstance(attribute, Attribute)
    value = attribute.value
    if not isinstance(value, RawHTMLInjection) or value.sanitized:
        return None
    source = f" from '{value.expression}'" if value.expression else ""
    return Match(message=f"'{attribute.name}' injects unsanitized HTML{source}")


@rule(
    "unvalidated-url-reference",
    title="URL used for navigation without protocol validation",
    severity=Severity.ERROR,
    applies_to={NodeKind.ATTRIBUTE},
    suggestion="Allow only http:, https: or mailto: URLs before rendering them",
)
def unvalidated_url_reference(view: NodeView, options: Mapping[str, Any]) -> Match | None:
    attribute = view.node
    assert isinstance(attribute, Attribute)
    value = attribute.value
    if not isinstance(value, URLReference) or value.validated:
        return None
    if attribute.name.lower() not in _NAVIGATION_ATTRIBUTES:
        return None
    return Match(
        message=f"'{attribute.name}' uses URL '{value.value}' without validating its protocol"
    )


# ---------------------------------------------------------------------------
# Markup rules
# ---------------------------------------------------------------------------


@rule(
    "redundant-wrapper-element",
    title="Wrapper element could be a fragment",
    severity=Severity.INFO,
    applies_to={NodeKind.ELEMENT},
    suggestion="Replace the wrapper with a fragment (<>...</>)",
)
def redundant_wrapper_element(view: NodeView, options: Mapping[str, Any]) -> Match | None:
    element = view.node
    assert isinstance(element, ElementNode)
    if view.is_root or element.is_fragment_wrapper:
        return None
    if element.tag not in _GENERIC_WRAPPER_TAGS or element.attributes or element.key is not None:
        return None
    if len(element.children) != 1 or not isinstance(element.children[0], ElementNode):
        return None
    return Match(message=f"<{element.tag}> only wraps <{element.children[0].tag}>")


def _shape(node: ElementNode | TextLiteral | ExpressionRef, texts: list[str]) -> tuple:
    """Structural signature of a subtree with text literals masked out.

    Text values are appended to ``texts`` in document order.
    """
    if isinstance(node, TextLiteral):
        texts.append(node.value)
        return (_TEXT_SLOT,)
    if isinstance(node, ExpressionRef):
        return ("expr", node.expression, node.iteration, tuple(_shape(c, texts) for c in node.body))
    return (
        node.tag,
        node.is_fragment_wrapper,
        tuple(sorted(node.attributes.items(), key=lambda item: item[0])),
        tuple(_shape(c, texts) for c in node.children),
    )


def _literal_signature(node: Any) -> tuple[tuple, tuple[str, ...]] | None:
    if not isinstance(node, ElementNode):
        return None
    texts: list[str] = []
    shape = _shape(node, texts)
    return shape, tuple(texts)


def _varying_slot(texts: list[tuple[str, ...]]) -> int | None:
    """Index of the only text slot whose value differs across ``texts``."""
    varying = [i for i in range(len(texts[0])) if len({t[i] for t in texts}) > 1]
    return varying[0] if len(varying) == 1 else None


def _check_sibling_options(options: Mapping[str, Any]) -> None:
    if options["threshold"] < 2:
        raise ValueError(f"option 'threshold' must be at least 2, got {options['threshold']}")


@rule(
    "duplicate-literal-siblings",
    title="Repeated markup that differs only in one text literal",
    severity=Severity.INFO,
    applies_to={NodeKind.ELEMENT},
    option_check=_check_sibling_options,
    threshold=3,
)
def duplicate_literal_siblings(view: NodeView, options: Mapping[str, Any]) -> Match | None:
    """Report the first element of a run of near-identical siblings."""
    threshold = options["threshold"]
    current = _literal_signature(view.node)
    if current is None or not current[1]:
        return None

    previous = _literal_signature(view.previous_sibling)
    if previous is not None and previous[0] == current[0]:
        return None

    run: list[tuple[str, ...]] = []
    for sibling in view.siblings[view.index :]:
        signature = _literal_signature(sibling)
        if signature is None or signature[0] != current[0]:
            break
        run.append(signature[1])

    slot = _varying_slot(run) if len(run) >= threshold else None
    if slot is None:
        return None
    element = view.node
    assert isinstance(element, ElementNode)
    values = ", ".join(repr(texts[slot]) for texts in run)
    return Match(
        message=f"{len(run)} sibling <{element.tag}> elements differ only in text: {values}",
        suggested_fix="Render them from an array with .map() and a stable key",
    )


BUILTIN_RULES: tuple[Rule, ...] = (
    prefer_function_component,
    pascal_case_component_name,
    no_index_as_key,
    missing_list_key,
    unsanitized_raw_html,
    unvalidated_url_reference,
    redundant_wrapper_element,
    duplicate_literal_siblings,
)
