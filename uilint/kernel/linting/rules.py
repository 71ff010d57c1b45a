"""Rule value type, node views and the rule decorator."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from uilint.kernel.domain.structure import (
    AttributeValue,
    ComponentNode,
    ElementNode,
    ExpressionRef,
    IterationBinding,
    TreeNode,
)
from uilint.kernel.exceptions import ConfigError, RuleInternalError
from uilint.kernel.linting.models import (
    INTERNAL_RULE_ERROR,
    Finding,
    Location,
    Match,
    NodeKind,
    Severity,
)
from uilint.kernel.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Attribute:
    """One ``name=value`` pair of an element, visited as its own node."""

    name: str
    value: AttributeValue


@dataclass(frozen=True, slots=True)
class NodeView:
    """Read-only window on a node and its surroundings during a walk.

    ``siblings`` are the nodes sharing the same parent container, with
    the viewed node at ``index``.
    """

    node: TreeNode | Attribute
    kind: NodeKind
    node_id: str
    location: Location
    component: ComponentNode
    parent: NodeView | None = None
    siblings: tuple[Any, ...] = ()
    index: int = 0

    @property
    def is_root(self) -> bool:
        """True for the component and for top-level elements of its body."""
        return self.parent is None or self.parent.kind is NodeKind.COMPONENT

    @property
    def depth(self) -> int:
        return sum(1 for _ in self.ancestors())

    def ancestors(self) -> Iterator[NodeView]:
        """Yield enclosing views, nearest first."""
        view = self.parent
        while view is not None:
            yield view
            view = view.parent

    @property
    def previous_sibling(self) -> Any | None:
        return self.siblings[self.index - 1] if self.index > 0 else None

    @property
    def list_production(self) -> ExpressionRef | None:
        """The list production this node is a per-item template of, if any."""
        if self.parent is None:
            return None
        node = self.parent.node
        if isinstance(node, ExpressionRef) and node.is_list_production:
            return node
        return None

    def iterations_in_scope(self) -> list[IterationBinding]:
        """Iteration bindings of every enclosing list production, nearest first."""
        return [
            view.node.iteration
            for view in self.ancestors()
            if isinstance(view.node, ExpressionRef) and view.node.iteration is not None
        ]

    @property
    def element(self) -> ElementNode | None:
        """The element owning this node (itself for elements)."""
        if isinstance(self.node, ElementNode):
            return self.node
        if self.kind is NodeKind.ATTRIBUTE and self.parent is not None:
            owner = self.parent.node
            return owner if isinstance(owner, ElementNode) else None
        return None


Predicate = Callable[[NodeView, Mapping[str, Any]], Match | None]

# Validates a complete option mapping; raises ValueError when a value is out of range
OptionCheck = Callable[[Mapping[str, Any]], None]


def _freeze(options: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(options))


def _type_mismatch(default: Any, value: Any) -> bool:
    expected = type(default)
    if isinstance(value, bool) and expected is not bool:
        return True
    if expected is float and isinstance(value, int):
        return False
    return not isinstance(value, expected)


@dataclass(frozen=True, slots=True)
class Rule:
    """A stateless check over one kind of node.

    ``options`` holds the rule's tunables with their current values; a
    rule only accepts overrides for option names it declares, of the
    same type as the declared default, and passing ``option_check``.
    """

    id: str
    title: str
    severity: Severity
    applies_to: frozenset[NodeKind]
    predicate: Predicate
    suggestion: str | None = None
    options: Mapping[str, Any] = field(default_factory=dict)
    option_check: OptionCheck | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ConfigError("rule id cannot be empty")
        if self.id == INTERNAL_RULE_ERROR:
            raise ConfigError("rule id is reserved", rule_id=self.id)
        if not self.applies_to:
            raise ConfigError("rule must apply to at least one node kind", rule_id=self.id)
        object.__setattr__(self, "severity", Severity.parse(self.severity))
        object.__setattr__(self, "applies_to", frozenset(NodeKind(k) for k in self.applies_to))
        object.__setattr__(self, "options", _freeze(self.options))

    def applies(self, kind: NodeKind) -> bool:
        return kind in self.applies_to

    def with_severity(self, severity: Severity) -> Rule:
        return replace(self, severity=severity)

    def with_options(self, overrides: Mapping[str, Any]) -> Rule:
        """Return a copy with some option values replaced.

        Raises
        ------
        ConfigError
            If an override names an option the rule does not declare, has
            a different type than the declared default, or is rejected by
            the rule's ``option_check``
        """
        unknown = set(overrides) - set(self.options)
        if unknown:
            known = ", ".join(sorted(self.options)) or "none"
            raise ConfigError(
                f"unknown option(s) {', '.join(sorted(unknown))} (known: {known})",
                rule_id=self.id,
            )
        for name, value in sorted(overrides.items()):
            default = self.options[name]
            if _type_mismatch(default, value):
                raise ConfigError(
                    f"option '{name}' must be {type(default).__name__}, got {value!r}",
                    rule_id=self.id,
                )

        merged = {**self.options, **overrides}
        if self.option_check is not None:
            try:
                self.option_check(merged)
            except ValueError as e:
                raise ConfigError(str(e), rule_id=self.id) from e
        return replace(self, options=merged)

    def check(self, view: NodeView) -> Finding | None:
        """Run the predicate on one node and build at most one finding.

        A failing predicate never propagates: it is reported as an
        ``internal-rule-error`` finding on the same node.
        """
        try:
            match = self.predicate(view, self.options)
            if match is not None and not isinstance(match, Match):
                raise TypeError(f"predicate returned {type(match).__name__}, expected Match")
        except Exception as exc:
            error = RuleInternalError(self.id, view.node_id, exc)
            logger.warning("{error}", error=error)
            return Finding(
                rule_id=INTERNAL_RULE_ERROR,
                node_id=view.node_id,
                severity=Severity.ERROR,
                message=str(error),
                location=view.location,
                source_rule=self.id,
            )

        if match is None:
            return None
        return Finding(
            rule_id=self.id,
            node_id=view.node_id,
            severity=self.severity,
            message=match.message,
            location=view.location,
            suggested_fix=match.suggested_fix or self.suggestion,
        )


def rule(
    rule_id: str,
    *,
    title: str,
    severity: Severity,
    applies_to: set[NodeKind] | frozenset[NodeKind],
    suggestion: str | None = None,
    option_check: OptionCheck | None = None,
    **options: Any,
) -> Callable[[Predicate], Rule]:
    """Turn a predicate function into a :class:`Rule`.

    Keyword arguments beyond the named ones declare the rule's options
    and their defaults.

    Examples
    --------
    Example usage::

        @rule("no-empty-title", title="Title is empty", severity=Severity.INFO,
              applies_to={NodeKind.ELEMENT})
        def no_empty_title(view, options):
            ...
    """

    def decorator(predicate: Predicate) -> Rule:
        return Rule(
            id=rule_id,
            title=title,
            severity=severity,
            applies_to=frozenset(applies_to),
            predicate=predicate,
            suggestion=suggestion,
            options=options,
            option_check=option_check,
        )

    return decorator
