"""Structural model consumed by the lint engine."""

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
    TreeNode,
    URLReference,
)

__all__ = [
    "AttributeValue",
    "ComponentKind",
    "ComponentNode",
    "ElementNode",
    "ExpressionRef",
    "FunctionRef",
    "IterationBinding",
    "PropDecl",
    "RawHTMLInjection",
    "SourceLocation",
    "StringLiteral",
    "TemplateExpression",
    "TextLiteral",
    "TreeNode",
    "URLReference",
]
