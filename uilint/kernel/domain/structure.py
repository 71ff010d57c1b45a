"""Structural model of a UI component declaration.

The model is produced by an external parser (see
``uilint.compiler.tree_loader``) and treated as read-only input for a
lint run. Every class here is a frozen dataclass; sequences are tuples
and attribute mappings are read-only proxies.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType

from uilint.kernel.exceptions import ParseError

_IDENTIFIER_RE = re.compile(r"(?<![\w$.])(?:[A-Za-z_][\w$]*|\$[\w$]+)")
_QUOTED_RE = re.compile(r"'[^']*'|\"[^\"]*\"")
_TEMPLATE_LITERAL_RE = re.compile(r"`([^`]*)`")
_TEMPLATE_SLOT_RE = re.compile(r"\$\{([^}]*)\}")

# Generated node ids use these as separators
_RESERVED_ID_CHARS = frozenset("/@")

# Identifiers that only coerce a value and never change what it refers to
_COERCION_CALLS = frozenset({"String", "Number", "toString", "parseInt", "parseFloat"})


class ComponentKind(StrEnum):
    """How a component is declared."""

    FUNCTION = "function"
    CLASS = "class"


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Position of a node in its original source text (1-based)."""

    line: int
    column: int = 1

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


# ---------------------------------------------------------------------------
# Attribute values
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class StringLiteral:
    """A plain string attribute value: ``className="btn"``."""

    value: str


@dataclass(frozen=True, slots=True)
class TemplateExpression:
    """An embedded expression attribute value: ``key={item.id}``."""

    expression: str

    @property
    def identifiers(self) -> frozenset[str]:
        """Free identifiers referenced by the expression.

        Member accesses (``item.id`` -> ``id``) and coercion helpers such
        as ``String(...)`` are not free references and are left out.
        """
        code = _TEMPLATE_LITERAL_RE.sub(
            lambda m: " ".join(_TEMPLATE_SLOT_RE.findall(m.group(1))), self.expression
        )
        code = _QUOTED_RE.sub(" ", code)
        return frozenset(_IDENTIFIER_RE.findall(code)) - _COERCION_CALLS


@dataclass(frozen=True, slots=True)
class FunctionRef:
    """A reference to a handler function: ``onClick={handleClick}``."""

    name: str


@dataclass(frozen=True, slots=True)
class RawHTMLInjection:
    """Raw HTML injected into the element (``dangerouslySetInnerHTML``)."""

    sanitized: bool
    expression: str = ""


@dataclass(frozen=True, slots=True)
class URLReference:
    """A URL-valued attribute and whether its protocol was validated."""

    value: str
    validated: bool


AttributeValue = StringLiteral | TemplateExpression | FunctionRef | RawHTMLInjection | URLReference


# ---------------------------------------------------------------------------
# Tree nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TextLiteral:
    """Literal text between tags."""

    value: str
    location: SourceLocation | None = None


@dataclass(frozen=True, slots=True)
class IterationBinding:
    """Names bound by a list production such as ``items.map((item, i) => ...)``."""

    collection: str
    item_name: str
    index_name: str | None = None


@dataclass(frozen=True, slots=True)
class ExpressionRef:
    """An embedded expression child.

    When ``iteration`` is set the expression is a list production and
    ``body`` holds the element template rendered once per item.
    """

    expression: str
    iteration: IterationBinding | None = None
    body: tuple[ElementNode, ...] = ()
    location: SourceLocation | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "body", tuple(self.body))

    @property
    def is_list_production(self) -> bool:
        return self.iteration is not None


@dataclass(frozen=True, slots=True)
class ElementNode:
    """A markup element with its attributes and children."""

    tag: str
    attributes: Mapping[str, AttributeValue] = field(default_factory=dict)
    children: tuple[ElementNode | TextLiteral | ExpressionRef, ...] = ()
    is_fragment_wrapper: bool = False
    key: AttributeValue | None = None
    id: str = ""
    location: SourceLocation | None = None

    def __post_init__(self) -> None:
        if not self.tag and not self.is_fragment_wrapper:
            raise ParseError(self.id or "<element>", "element tag cannot be empty")
        if _RESERVED_ID_CHARS.intersection(self.id):
            raise ParseError(self.id, "element id cannot contain '/' or '@'")
        attributes = dict(self.attributes)
        if "key" in attributes:
            # key={...} written as an attribute is the element key
            if self.key is not None:
                raise ParseError(self.id or self.tag, "key is given both as attribute and as key")
            object.__setattr__(self, "key", attributes.pop("key"))
        object.__setattr__(self, "attributes", MappingProxyType(attributes))
        object.__setattr__(self, "children", tuple(self.children))

    @property
    def element_children(self) -> tuple[ElementNode, ...]:
        return tuple(child for child in self.children if isinstance(child, ElementNode))


@dataclass(frozen=True, slots=True)
class PropDecl:
    """A declared component prop."""

    name: str
    required: bool = False
    default: str | None = None


@dataclass(frozen=True, slots=True)
class ComponentNode:
    """Root of the structural model: one component declaration.

    For a class component ``body`` is the output of its ``render``
    method.
    """

    name: str
    kind: ComponentKind = ComponentKind.FUNCTION
    props: tuple[PropDecl, ...] = ()
    body: tuple[ElementNode, ...] = ()
    uses_lifecycle_methods: bool = False
    uses_this_binding: bool = False
    id: str = ""
    location: SourceLocation | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ParseError(self.id or "<component>", "component name cannot be empty")
        object.__setattr__(self, "kind", ComponentKind(self.kind))
        object.__setattr__(self, "props", tuple(self.props))
        object.__setattr__(self, "body", tuple(self.body))
        if not self.id:
            object.__setattr__(self, "id", self.name)
        _check_unique_ids(self)


TreeNode = ComponentNode | ElementNode | TextLiteral | ExpressionRef


def _iter_elements(elements: tuple[ElementNode, ...]) -> Iterator[ElementNode]:
    for element in elements:
        yield element
        for child in element.children:
            if isinstance(child, ElementNode):
                yield from _iter_elements((child,))
            elif isinstance(child, ExpressionRef):
                yield from _iter_elements(child.body)


def _check_unique_ids(component: ComponentNode) -> None:
    """Explicit node ids must be unique within one component tree."""
    seen = {component.id}
    for element in _iter_elements(component.body):
        if not element.id:
            continue
        if element.id in seen:
            raise ParseError(component.id, f"duplicate node id '{element.id}'")
        seen.add(element.id)
