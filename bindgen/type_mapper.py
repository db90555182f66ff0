"""Type Marshal Policy — native type descriptor → P/Invoke representation."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Mapping

from . import constants
from .type_spelling import TypeDescriptor

logger = logging.getLogger(__name__)


class UnmappedTypeError(ValueError):
    """Raised when a type has no boundary representation."""


class TypeMapper(ABC):
    """Pure mapping from a type descriptor to its boundary representation."""

    @abstractmethod
    def to_param(self, type_: TypeDescriptor) -> str:
        """Representation of *type_* used as a boundary parameter."""
        ...

    @abstractmethod
    def to_return(self, type_: TypeDescriptor, is_virtual_context: bool) -> str:
        """Representation of *type_* returned across the boundary.

        ``is_virtual_context`` is True for method results (which a managed
        override may produce) and False for field getters, which return a
        reference to native storage.
        """
        ...


PRIMITIVE_TYPES: dict[str, str] = {
    "void": "void",
    "bool": "bool",
    "char": "sbyte",
    "signed char": "sbyte",
    "unsigned char": "byte",
    "short": "short",
    "unsigned short": "ushort",
    "int": "int",
    "signed": "int",
    "unsigned": "uint",
    "unsigned int": "uint",
    "long": "int",
    "unsigned long": "uint",
    "long long": "long",
    "unsigned long long": "ulong",
    "float": "float",
    "double": "double",
    "size_t": "UIntPtr",
    "int8_t": "sbyte",
    "uint8_t": "byte",
    "int16_t": "short",
    "uint16_t": "ushort",
    "int32_t": "int",
    "uint32_t": "uint",
    "int64_t": "long",
    "uint64_t": "ulong",
    "Urho3D::StringHash": "uint",
}

STRING_TYPES: frozenset[str] = frozenset(
    {"String", "Urho3D::String", "std::string", "eastl::string"}
)


class PInvokeTypeMapper(TypeMapper):
    """Default policy for C# P/Invoke declarations.

    Primitives map by table, string classes and ``char*`` map to ``string``,
    every other pointer, reference or class value crosses as an ``IntPtr``
    handle.  *overrides* (native name → representation) take precedence for
    non-pointer types.  With *strict*, unknown class types passed by value are
    rejected instead of being treated as handles.
    """

    def __init__(self, overrides: Mapping[str, str] | None = None, strict: bool = False):
        self._overrides = dict(overrides or {})
        self._strict = strict

    def _is_string(self, type_: TypeDescriptor) -> bool:
        if type_.name == "char" and type_.pointer_depth == 1:
            return True
        return type_.name in STRING_TYPES and type_.pointer_depth == 0

    def _check(self, type_: TypeDescriptor) -> None:
        if not type_.name:
            raise UnmappedTypeError("Type descriptor has no name")
        if type_.name == "void" and type_.pointer_depth == 0 and type_.is_indirect:
            raise UnmappedTypeError(f"Cannot map '{type_}'")
        if (
            self._strict
            and not type_.is_indirect
            and type_.name not in PRIMITIVE_TYPES
            and type_.name not in STRING_TYPES
            and type_.name not in self._overrides
        ):
            raise UnmappedTypeError(f"No mapping for value type '{type_}'")

    def to_param(self, type_: TypeDescriptor) -> str:
        self._check(type_)
        if type_.is_void:
            raise UnmappedTypeError("'void' is not a valid parameter type")
        if self._is_string(type_):
            return constants.STRING_REPRESENTATION
        if type_.pointer_depth == 0 and type_.name in self._overrides:
            return self._overrides[type_.name]
        if type_.pointer_depth == 0 and type_.name in PRIMITIVE_TYPES:
            primitive = PRIMITIVE_TYPES[type_.name]
            if type_.is_reference and not type_.is_const:
                return f"ref {primitive}"
            return primitive
        return constants.HANDLE_TYPE

    def to_return(self, type_: TypeDescriptor, is_virtual_context: bool) -> str:
        self._check(type_)
        if self._is_string(type_):
            return constants.STRING_REPRESENTATION
        if type_.pointer_depth == 0 and type_.name in self._overrides:
            return self._overrides[type_.name]
        if type_.pointer_depth == 0 and type_.name in PRIMITIVE_TYPES:
            return PRIMITIVE_TYPES[type_.name]
        return constants.HANDLE_TYPE
