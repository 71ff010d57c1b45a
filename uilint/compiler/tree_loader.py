"""Structural document loader.

Builds the immutable structural model from YAML or JSON documents that
describe component declarations. A document is either a single component
mapping or a mapping with a ``components`` list::

    components:
      - name: NavBar
        kind: function
        body:
          - tag: ul
            children:
              - tag: li
                children: ["Home"]
              - tag: li
                attributes:
                  dangerouslySetInnerHTML: {type: raw_html, sanitized: false}
              - expression: links.map((link, i) => ...)
                each: {collection: links, item: link, index: i}
                body:
                  - tag: a
                    key: {type: expression, expression: i}
                    attributes:
                      href: {type: url, value: "{link.url}", validated: false}

Attribute values given as bare strings are string literals; children
given as bare strings are text literals.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from uilint.kernel.domain.structure import (
    AttributeValue,
    ComponentKind,
    ComponentNode,
    ElementNode,
    ExpressionRef,
    FunctionRef,
    IterationBinding,
    PropDecl,
    RawHTMLInjection,
    SourceLocation,
    StringLiteral,
    TemplateExpression,
    TextLiteral,
    URLReference,
)
from uilint.kernel.exceptions import ParseError
from uilint.kernel.logging import get_logger

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Document schema
# ---------------------------------------------------------------------------


class _Schema(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class StringValueSchema(_Schema):
    type: Literal["string"]
    value: str


class ExpressionValueSchema(_Schema):
    type: Literal["expression"]
    expression: str


class FunctionValueSchema(_Schema):
    type: Literal["function"]
    name: str


class RawHTMLValueSchema(_Schema):
    type: Literal["raw_html"]
    sanitized: bool = False
    expression: str = ""


class URLValueSchema(_Schema):
    type: Literal["url"]
    value: str
    validated: bool = False


AttributeValueSchema = (
    str
    | Annotated[
        StringValueSchema
        | ExpressionValueSchema
        | FunctionValueSchema
        | RawHTMLValueSchema
        | URLValueSchema,
        Field(discriminator="type"),
    ]
)


class _Positioned(_Schema):
    line: int | None = Field(default=None, ge=1)
    column: int | None = Field(default=None, ge=1)

    def source_location(self) -> SourceLocation | None:
        if self.line is None:
            return None
        return SourceLocation(line=self.line, column=self.column or 1)


class IterationSchema(_Schema):
    collection: str | None = None
    item: str = "item"
    index: str | None = None


class ExpressionSchema(_Positioned):
    expression: str = Field(min_length=1)
    each: IterationSchema | None = None
    body: list[ElementSchema] = Field(default_factory=list)


class ElementSchema(_Positioned):
    tag: str = ""
    id: str = ""
    fragment: bool = False
    key: AttributeValueSchema | None = None
    attributes: dict[str, AttributeValueSchema] = Field(default_factory=dict)
    children: list[str | ElementSchema | ExpressionSchema] = Field(default_factory=list)


class PropSchema(_Schema):
    name: str = Field(min_length=1)
    required: bool = False
    default: str | None = None


class ComponentSchema(_Positioned):
    name: str = Field(min_length=1)
    id: str = ""
    kind: ComponentKind = ComponentKind.FUNCTION
    props: list[str | PropSchema] = Field(default_factory=list)
    uses_lifecycle_methods: bool = False
    uses_this_binding: bool = False
    body: list[ElementSchema] = Field(default_factory=list)


class DocumentSchema(_Schema):
    components: list[ComponentSchema] = Field(default_factory=list)


ExpressionSchema.model_rebuild()
ElementSchema.model_rebuild()
ComponentSchema.model_rebuild()
DocumentSchema.model_rebuild()


# ---------------------------------------------------------------------------
# Schema -> structural model
# ---------------------------------------------------------------------------


def _attribute_value(value: Any) -> AttributeValue:
    if isinstance(value, str):
        return StringLiteral(value)
    if isinstance(value, StringValueSchema):
        return StringLiteral(value.value)
    if isinstance(value, ExpressionValueSchema):
        return TemplateExpression(value.expression)
    if isinstance(value, FunctionValueSchema):
        return FunctionRef(value.name)
    if isinstance(value, RawHTMLValueSchema):
        return RawHTMLInjection(sanitized=value.sanitized, expression=value.expression)
    return URLReference(value=value.value, validated=value.validated)


def _child(child: str | ElementSchema | ExpressionSchema) -> ElementNode | TextLiteral | ExpressionRef:
    if isinstance(child, str):
        return TextLiteral(child)
    if isinstance(child, ElementSchema):
        return _element(child)
    iteration = None
    if child.each is not None:
        iteration = IterationBinding(
            collection=child.each.collection or child.expression,
            item_name=child.each.item,
            index_name=child.each.index,
        )
    return ExpressionRef(
        expression=child.expression,
        iteration=iteration,
        body=tuple(_element(e) for e in child.body),
        location=child.source_location(),
    )


def _element(schema: ElementSchema) -> ElementNode:
    return ElementNode(
        tag=schema.tag,
        attributes={name: _attribute_value(v) for name, v in schema.attributes.items()},
        children=tuple(_child(c) for c in schema.children),
        is_fragment_wrapper=schema.fragment,
        key=_attribute_value(schema.key) if schema.key is not None else None,
        id=schema.id,
        location=schema.source_location(),
    )


def _component(schema: ComponentSchema) -> ComponentNode:
    return ComponentNode(
        name=schema.name,
        kind=schema.kind,
        props=tuple(
            PropDecl(name=p) if isinstance(p, str) else PropDecl(p.name, p.required, p.default)
            for p in schema.props
        ),
        body=tuple(_element(e) for e in schema.body),
        uses_lifecycle_methods=schema.uses_lifecycle_methods,
        uses_this_binding=schema.uses_this_binding,
        id=schema.id,
        location=schema.source_location(),
    )


def _describe(error: PydanticValidationError) -> str:
    parts = []
    for detail in error.errors()[:5]:
        where = ".".join(str(p) for p in detail["loc"]) or "<document>"
        parts.append(f"{where}: {detail['msg']}")
    if error.error_count() > 5:
        parts.append(f"... and {error.error_count() - 5} more")
    return "; ".join(parts)


def build_components(data: Any, source: str = "<document>") -> list[ComponentNode]:
    """Validate a parsed document and build its component trees.

    Raises
    ------
    ParseError
        If the document does not match the schema or a tree is malformed
    """
    if isinstance(data, dict) and "components" not in data and "name" in data:
        data = {"components": [data]}
    if not isinstance(data, dict):
        raise ParseError(source, f"expected a mapping, got {type(data).__name__}")

    try:
        document = DocumentSchema.model_validate(data)
    except PydanticValidationError as e:
        raise ParseError(source, _describe(e)) from e

    try:
        components = [_component(c) for c in document.components]
    except ParseError as e:
        raise ParseError(source, e.reason) from e

    logger.debug("Loaded {count} component(s) from {source}", count=len(components), source=source)
    return components


def load_components(text: str, source: str = "<string>") -> list[ComponentNode]:
    """Parse a YAML (or JSON) structural document."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ParseError(source, f"invalid YAML: {e}") from e
    if data is None:
        return []
    return build_components(data, source)


def load_file(path: str | Path) -> list[ComponentNode]:
    """Read and parse a structural document file.

    Raises
    ------
    ParseError
        If the file cannot be read or parsed
    """
    path = Path(path)
    logger.info("Loading components from {path}", path=path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ParseError(str(path), f"cannot read file: {e}") from e
    return load_components(text, str(path))
