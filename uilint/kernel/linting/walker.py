"""Single-pass pre-order walker that runs the active rules over a tree."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from uilint.kernel.domain.structure import (
    ComponentNode,
    ElementNode,
    ExpressionRef,
    SourceLocation,
    TextLiteral,
)
from uilint.kernel.linting.models import Finding, Location, NodeKind
from uilint.kernel.linting.registry import RuleRegistry
from uilint.kernel.linting.rules import Attribute, NodeView, Rule
from uilint.kernel.logging import get_logger

logger = get_logger(__name__)


class _Walk:
    """State of one traversal: the rules by node kind and collected findings."""

    __slots__ = ("_component", "_findings", "_order", "_rules_by_kind")

    def __init__(self, component: ComponentNode, rules: Sequence[Rule]) -> None:
        self._component = component
        self._rules_by_kind = {kind: [r for r in rules if r.applies(kind)] for kind in NodeKind}
        self._findings: list[Finding] = []
        self._order = 0

    def run(self) -> list[Finding]:
        component = self._component
        view = self._visit(
            component,
            NodeKind.COMPONENT,
            component.id,
            component.name,
            component.location,
            parent=None,
            siblings=(component,),
            index=0,
        )
        self._visit_elements(component.body, view)
        return self._findings

    def _visit(
        self,
        node: Any,
        kind: NodeKind,
        node_id: str,
        path: str,
        position: SourceLocation | None,
        *,
        parent: NodeView | None,
        siblings: tuple[Any, ...],
        index: int,
    ) -> NodeView:
        location = Location(
            path=path,
            order=self._order,
            line=position.line if position else None,
            column=position.column if position else None,
        )
        self._order += 1
        view = NodeView(
            node=node,
            kind=kind,
            node_id=node_id,
            location=location,
            component=self._component,
            parent=parent,
            siblings=siblings,
            index=index,
        )
        for rule in self._rules_by_kind[kind]:
            if (finding := rule.check(view)) is not None:
                self._findings.append(finding)
        return view

    def _visit_elements(self, elements: tuple[ElementNode, ...], parent: NodeView) -> None:
        for index, element in enumerate(elements):
            self._visit_child(element, parent, elements, index)

    def _visit_child(
        self,
        node: ElementNode | TextLiteral | ExpressionRef,
        parent: NodeView,
        siblings: tuple[Any, ...],
        index: int,
    ) -> None:
        if isinstance(node, ElementNode):
            path = f"{parent.location.path}/{node.tag or '<>'}[{index}]"
            view = self._visit(
                node,
                NodeKind.ELEMENT,
                node.id or path,
                path,
                node.location,
                parent=parent,
                siblings=siblings,
                index=index,
            )
            attributes = tuple(Attribute(name, value) for name, value in node.attributes.items())
            for attr_index, attribute in enumerate(attributes):
                attr_path = f"{path}@{attribute.name}"
                self._visit(
                    attribute,
                    NodeKind.ATTRIBUTE,
                    f"{view.node_id}@{attribute.name}",
                    attr_path,
                    node.location,
                    parent=view,
                    siblings=attributes,
                    index=attr_index,
                )
            for child_index, child in enumerate(node.children):
                self._visit_child(child, view, node.children, child_index)

        elif isinstance(node, TextLiteral):
            path = f"{parent.location.path}/#text[{index}]"
            self._visit(
                node,
                NodeKind.TEXT,
                f"{parent.node_id}/#text[{index}]",
                path,
                node.location,
                parent=parent,
                siblings=siblings,
                index=index,
            )

        else:
            path = f"{parent.location.path}/{{}}[{index}]"
            view = self._visit(
                node,
                NodeKind.EXPRESSION,
                f"{parent.node_id}/{{}}[{index}]",
                path,
                node.location,
                parent=parent,
                siblings=siblings,
                index=index,
            )
            self._visit_elements(node.body, view)


def walk(tree: ComponentNode, rules: RuleRegistry | Sequence[Rule]) -> list[Finding]:
    """Run every applicable rule once at every node of ``tree``.

    The traversal is a single pre-order pass: the component, then each
    element followed by its attributes (in declaration order) and its
    children. Rules run in registry order at each node.

    Parameters
    ----------
    tree : ComponentNode
        Read-only structural model to inspect
    rules : RuleRegistry | Sequence[Rule]
        Active rules

    Returns
    -------
    list[Finding]
        Findings in collection order (not yet deduplicated or sorted)
    """
    active = tuple(rules)
    findings = _Walk(tree, active).run()
    logger.debug(
        "Walked component {name}: {count} finding(s) from {rules} rule(s)",
        name=tree.name,
        count=len(findings),
        rules=len(active),
    )
    return findings
