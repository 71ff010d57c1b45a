"""Tests for uilint.kernel.domain.structure."""

from __future__ import annotations

import pytest

from uilint.kernel.domain.structure import (
    ComponentKind,
    ComponentNode,
    ElementNode,
    ExpressionRef,
    IterationBinding,
    StringLiteral,
    TemplateExpression,
    TextLiteral,
)
from uilint.kernel.exceptions import ParseError


class TestComponentNode:
    def test_defaults(self) -> None:
        component = ComponentNode(name="Button")
        assert component.kind is ComponentKind.FUNCTION
        assert component.body == ()
        assert component.props == ()
        assert component.id == "Button"

    def test_kind_from_string(self) -> None:
        component = ComponentNode(name="Button", kind="class")  # type: ignore[arg-type]
        assert component.kind is ComponentKind.CLASS

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ParseError, match="component name cannot be empty"):
            ComponentNode(name="")

    def test_blank_name_rejected(self) -> None:
        with pytest.raises(ParseError):
            ComponentNode(name="   ")

    def test_frozen(self) -> None:
        component = ComponentNode(name="Button")
        with pytest.raises(AttributeError):
            component.name = "Other"  # type: ignore[misc]

    def test_body_list_becomes_tuple(self) -> None:
        component = ComponentNode(name="Button", body=[ElementNode(tag="div")])  # type: ignore[arg-type]
        assert isinstance(component.body, tuple)


class TestElementNode:
    def test_attributes_read_only(self) -> None:
        element = ElementNode(tag="a", attributes={"title": StringLiteral("x")})
        with pytest.raises(TypeError):
            element.attributes["title"] = StringLiteral("y")  # type: ignore[index]

    def test_attributes_copied(self) -> None:
        source = {"title": StringLiteral("x")}
        element = ElementNode(tag="a", attributes=source)
        source["href"] = StringLiteral("y")
        assert "href" not in element.attributes

    def test_empty_tag_rejected(self) -> None:
        with pytest.raises(ParseError):
            ElementNode(tag="")

    def test_fragment_may_have_empty_tag(self) -> None:
        assert ElementNode(tag="", is_fragment_wrapper=True).is_fragment_wrapper

    def test_element_children(self) -> None:
        child = ElementNode(tag="span")
        element = ElementNode(tag="div", children=(TextLiteral("a"), child, ExpressionRef("x")))
        assert element.element_children == (child,)


    def test_key_attribute_becomes_element_key(self) -> None:
        element = ElementNode(
            tag="li",
            attributes={"key": TemplateExpression("i"), "className": StringLiteral("row")},
        )
        assert element.key == TemplateExpression("i")
        assert set(element.attributes) == {"className"}

    def test_key_given_twice_rejected(self) -> None:
        with pytest.raises(ParseError, match="key is given both"):
            ElementNode(
                tag="li",
                attributes={"key": TemplateExpression("i")},
                key=TemplateExpression("item.id"),
            )

    @pytest.mark.parametrize("element_id", ["nav/main", "link@href"])
    def test_id_with_separator_rejected(self, element_id: str) -> None:
        with pytest.raises(ParseError, match="cannot contain"):
            ElementNode(tag="div", id=element_id)


class TestNodeIds:
    def test_distinct_ids_accepted(self) -> None:
        component = ComponentNode(
            name="Page",
            body=(
                ElementNode(tag="div", id="a"),
                ElementNode(tag="div", id="b"),
                ElementNode(tag="div"),
            ),
        )
        assert [e.id for e in component.body] == ["a", "b", ""]

    def test_duplicate_sibling_ids_rejected(self) -> None:
        with pytest.raises(ParseError, match="duplicate node id 'x'"):
            ComponentNode(
                name="Page",
                body=(ElementNode(tag="div", id="x"), ElementNode(tag="div", id="x")),
            )

    def test_duplicate_nested_id_rejected(self) -> None:
        production = ExpressionRef(
            expression="items.map(item => ...)",
            iteration=IterationBinding("items", "item"),
            body=(ElementNode(tag="li", id="row"),),
        )
        body = (ElementNode(tag="ul", id="row", children=(production,)),)
        with pytest.raises(ParseError, match="duplicate node id"):
            ComponentNode(name="Page", body=body)

    def test_element_id_equal_to_component_id_rejected(self) -> None:
        with pytest.raises(ParseError, match="duplicate node id"):
            ComponentNode(name="Page", body=(ElementNode(tag="main", id="Page"),))


class TestExpressionRef:
    def test_list_production(self) -> None:
        expr = ExpressionRef(
            "items.map(item => ...)", iteration=IterationBinding("items", "item")
        )
        assert expr.is_list_production
        assert not ExpressionRef("label").is_list_production


class TestTemplateExpression:
    @pytest.mark.parametrize(
        ("expression", "expected"),
        [
            ("index", {"index"}),
            ("item.id", {"item"}),
            ("String(i)", {"i"}),
            ("i.toString()", {"i"}),
            ("`${index}`", {"index"}),
            ("`item-${item.id}`", {"item"}),
            ("'row-' + i", {"i"}),
            ("42", set()),
        ],
    )
    def test_identifiers(self, expression: str, expected: set[str]) -> None:
        assert TemplateExpression(expression).identifiers == expected
