"""Deterministic boundary symbol names derived from native symbols."""

from __future__ import annotations

import re

from . import constants
from .declarations import ClassDecl, DeclarationBase, MethodDecl

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_]")

# C# reserved keywords; a native parameter spelled like one needs an @ prefix
CSHARP_KEYWORDS: frozenset[str] = frozenset(
    {
        "abstract", "as", "base", "bool", "break", "byte", "case", "catch",
        "char", "checked", "class", "const", "continue", "decimal", "default",
        "delegate", "do", "double", "else", "enum", "event", "explicit",
        "extern", "false", "finally", "fixed", "float", "for", "foreach",
        "goto", "if", "implicit", "in", "int", "interface", "internal", "is",
        "lock", "long", "namespace", "new", "null", "object", "operator",
        "out", "override", "params", "private", "protected", "public",
        "readonly", "ref", "return", "sbyte", "sealed", "short", "sizeof",
        "stackalloc", "static", "string", "struct", "switch", "this", "throw",
        "true", "try", "typeof", "uint", "ulong", "unchecked", "unsafe",
        "ushort", "using", "virtual", "void", "volatile", "while",
    }
)


def sanitize(symbol: str) -> str:
    """``Urho3D::Shape::Area`` → ``Urho3D__Shape__Area``."""
    return _UNSAFE_CHARS.sub("_", symbol)


def c_function_name(decl: DeclarationBase) -> str:
    return sanitize(decl.qualified_symbol)


def getter_name(decl: DeclarationBase) -> str:
    return f"{constants.GETTER_PREFIX}{c_function_name(decl)}"


def setter_name(decl: DeclarationBase) -> str:
    return f"{constants.SETTER_PREFIX}{c_function_name(decl)}"


def destructor_name(cls: ClassDecl) -> str:
    return f"{c_function_name(cls)}{constants.DESTRUCTOR_SUFFIX}"


def add_ref_name(ref_counted_base: str) -> str:
    return f"{sanitize(ref_counted_base)}{constants.ADD_REF_SUFFIX}"


def release_ref_name(ref_counted_base: str) -> str:
    return f"{sanitize(ref_counted_base)}{constants.RELEASE_REF_SUFFIX}"


def delegate_name(method: MethodDecl) -> str:
    return f"{method.name}{constants.DELEGATE_SUFFIX}"


def callback_setter_name(method: MethodDecl, class_name: str) -> str:
    return constants.CALLBACK_SETTER_TEMPLATE.format(
        class_name=class_name, name=method.name
    )


def parameter_name(name: str, index: int) -> str:
    """Managed-safe parameter identifier; unnamed parameters get ``argN``."""
    if not name:
        return f"arg{index}"
    if name in CSHARP_KEYWORDS:
        return f"@{name}"
    if name == constants.INSTANCE_PARAM:
        return f"{name}_"
    return name
