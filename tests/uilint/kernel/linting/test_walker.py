"""Tests for uilint.kernel.linting.walker and the Rule contract."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from uilint.kernel.domain.structure import (
    ComponentNode,
    ElementNode,
    ExpressionRef,
    IterationBinding,
    RawHTMLInjection,
    SourceLocation,
    StringLiteral,
    TextLiteral,
)
from uilint.kernel.exceptions import ConfigError
from uilint.kernel.linting.component_rules import unsanitized_raw_html
from uilint.kernel.linting.models import INTERNAL_RULE_ERROR, Match, NodeKind, Severity
from uilint.kernel.linting.registry import resolve
from uilint.kernel.linting.rules import NodeView, Rule
from uilint.kernel.linting.walker import walk

ALL_KINDS = frozenset(NodeKind)


def _recorder(seen: list[NodeView], kinds: frozenset[NodeKind] = ALL_KINDS) -> Rule:
    """A rule that records every view it is given and never matches."""

    def predicate(view: NodeView, options: Mapping[str, Any]) -> Match | None:
        seen.append(view)
        return None

    return Rule(id="recorder", title="records", severity=Severity.INFO, applies_to=kinds, predicate=predicate)


def _failing(rule_id: str = "boom") -> Rule:
    def predicate(view: NodeView, options: Mapping[str, Any]) -> Match | None:
        raise RuntimeError("inspection failed")

    return Rule(
        id=rule_id,
        title="always fails",
        severity=Severity.INFO,
        applies_to=frozenset({NodeKind.ELEMENT}),
        predicate=predicate,
    )


def _tree() -> ComponentNode:
    return ComponentNode(
        name="List",
        body=(
            ElementNode(
                tag="ul",
                attributes={"className": StringLiteral("menu"), "id": StringLiteral("nav")},
                children=(
                    TextLiteral("Items"),
                    ExpressionRef(
                        expression="items.map((item, i) => ...)",
                        iteration=IterationBinding("items", "item", "i"),
                        body=(ElementNode(tag="li", children=(TextLiteral("x"),)),),
                    ),
                ),
                location=SourceLocation(line=3, column=5),
            ),
            ElementNode(tag="footer", id="page-footer"),
        ),
    )


class TestTraversal:
    def test_preorder(self) -> None:
        seen: list[NodeView] = []
        walk(_tree(), [_recorder(seen)])
        assert [v.location.path for v in seen] == [
            "List",
            "List/ul[0]",
            "List/ul[0]@className",
            "List/ul[0]@id",
            "List/ul[0]/#text[0]",
            "List/ul[0]/{}[1]",
            "List/ul[0]/{}[1]/li[0]",
            "List/ul[0]/{}[1]/li[0]/#text[0]",
            "List/footer[1]",
        ]

    def test_every_node_once(self) -> None:
        seen: list[NodeView] = []
        walk(_tree(), [_recorder(seen)])
        orders = [v.location.order for v in seen]
        assert orders == list(range(len(seen)))
        assert len({v.node_id for v in seen}) == len(seen)

    def test_kinds(self) -> None:
        seen: list[NodeView] = []
        walk(_tree(), [_recorder(seen)])
        assert [v.kind for v in seen] == [
            NodeKind.COMPONENT,
            NodeKind.ELEMENT,
            NodeKind.ATTRIBUTE,
            NodeKind.ATTRIBUTE,
            NodeKind.TEXT,
            NodeKind.EXPRESSION,
            NodeKind.ELEMENT,
            NodeKind.TEXT,
            NodeKind.ELEMENT,
        ]

    def test_applies_to_filters_nodes(self) -> None:
        seen: list[NodeView] = []
        walk(_tree(), [_recorder(seen, frozenset({NodeKind.ELEMENT}))])
        assert [v.node_id for v in seen] == ["List/ul[0]", "List/ul[0]/{}[1]/li[0]", "page-footer"]

    def test_explicit_ids_and_locations(self) -> None:
        seen: list[NodeView] = []
        walk(_tree(), [_recorder(seen)])
        by_path = {v.location.path: v for v in seen}
        assert by_path["List/footer[1]"].node_id == "page-footer"
        assert by_path["List/ul[0]"].location.line == 3
        assert by_path["List/ul[0]@id"].location.column == 5

    def test_context_accessors(self) -> None:
        seen: list[NodeView] = []
        walk(_tree(), [_recorder(seen)])
        by_path = {v.location.path: v for v in seen}
        item = by_path["List/ul[0]/{}[1]/li[0]"]
        assert item.list_production is not None
        assert [b.index_name for b in item.iterations_in_scope()] == ["i"]
        assert item.depth == 3
        assert not item.is_root
        assert by_path["List/ul[0]"].is_root
        assert by_path["List/footer[1]"].previous_sibling is by_path["List/ul[0]"].node
        assert by_path["List/ul[0]@id"].element is by_path["List/ul[0]"].node
        assert item.component.name == "List"

    def test_empty_body(self) -> None:
        seen: list[NodeView] = []
        assert walk(ComponentNode(name="Empty"), [_recorder(seen)]) == []
        assert [v.kind for v in seen] == [NodeKind.COMPONENT]


class TestRuleIsolation:
    def test_predicate_failure_becomes_finding(self) -> None:
        findings = walk(_tree(), [_failing()])
        assert len(findings) == 3
        assert {f.rule_id for f in findings} == {INTERNAL_RULE_ERROR}
        assert all(f.severity is Severity.ERROR for f in findings)
        assert all(f.source_rule == "boom" for f in findings)
        assert "inspection failed" in findings[0].message

    def test_failure_does_not_suppress_other_rules(self) -> None:
        tree = ComponentNode(
            name="Bio",
            body=(ElementNode(tag="div", attributes={"dangerouslySetInnerHTML": RawHTMLInjection(False)}),),
        )
        findings = walk(tree, [_failing(), unsanitized_raw_html])
        assert {f.rule_id for f in findings} == {INTERNAL_RULE_ERROR, "unsanitized-raw-html"}

    def test_wrong_return_type_is_internal_error(self) -> None:
        bad = Rule(
            id="bad-return",
            title="returns a string",
            severity=Severity.INFO,
            applies_to=frozenset({NodeKind.COMPONENT}),
            predicate=lambda view, options: "oops",  # type: ignore[arg-type,return-value]
        )
        findings = walk(ComponentNode(name="X"), [bad])
        assert findings[0].rule_id == INTERNAL_RULE_ERROR
        assert findings[0].source_rule == "bad-return"

    def test_default_suggestion_used(self) -> None:
        tree = ComponentNode(
            name="Bio",
            body=(ElementNode(tag="div", attributes={"dangerouslySetInnerHTML": RawHTMLInjection(False)}),),
        )
        findings = walk(tree, [unsanitized_raw_html])
        assert findings[0].suggested_fix == unsanitized_raw_html.suggestion


class TestRuleContract:
    def test_reserved_id(self) -> None:
        with pytest.raises(ConfigError, match="reserved"):
            Rule(
                id=INTERNAL_RULE_ERROR,
                title="x",
                severity=Severity.INFO,
                applies_to=frozenset({NodeKind.ELEMENT}),
                predicate=lambda view, options: None,
            )

    def test_empty_applies_to(self) -> None:
        with pytest.raises(ConfigError):
            Rule(
                id="x",
                title="x",
                severity=Severity.INFO,
                applies_to=frozenset(),
                predicate=lambda view, options: None,
            )

    def test_severity_label_accepted(self) -> None:
        r = Rule(
            id="x",
            title="x",
            severity="error",  # type: ignore[arg-type]
            applies_to=frozenset({NodeKind.ELEMENT}),
            predicate=lambda view, options: None,
        )
        assert r.severity is Severity.ERROR

    def test_walk_accepts_registry(self) -> None:
        tree = ComponentNode(name="lower")
        findings = walk(tree, resolve())
        assert [f.rule_id for f in findings] == ["pascal-case-component-name"]
