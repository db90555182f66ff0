"""Declaration Tree — the resolved native API model consumed by the generator."""

from __future__ import annotations

import logging
import weakref
from enum import Enum
from functools import cached_property
from pathlib import Path
from typing import Annotated, Any, Iterator, Literal, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Discriminator,
    PrivateAttr,
    Tag,
    model_validator,
)

from .type_spelling import VOID, TypeDescriptor, parse_type_spelling

logger = logging.getLogger(__name__)


class DeclKind(str, Enum):
    CLASS = "class"
    FIELD = "field"
    CONSTRUCTOR = "constructor"
    METHOD = "method"
    # Pass-through kinds
    NAMESPACE = "namespace"
    OPAQUE = "opaque"


class UnresolvedBaseError(ValueError):
    """Raised when a class names a base that is not part of the tree."""


def _coerce_type(value: Any) -> Any:
    if isinstance(value, str):
        return parse_type_spelling(value)
    return value


TypeRef = Annotated[TypeDescriptor, BeforeValidator(_coerce_type)]


class Parameter(BaseModel):
    name: str = ""
    type: TypeRef


class DeclarationBase(BaseModel):
    name: str
    symbol_name: str = ""

    _parent: Any = PrivateAttr(default=None)

    @property
    def decl_kind(self) -> DeclKind:
        return DeclKind(self.kind)

    @property
    def parent(self) -> DeclarationBase | None:
        """Enclosing container, or None for top-level nodes. Non-owning."""
        return self._parent() if self._parent is not None else None

    @property
    def qualified_symbol(self) -> str:
        """Globally unique native symbol, derived from the parent chain if absent."""
        if self.symbol_name:
            return self.symbol_name
        parent = self.parent
        if parent is None:
            return self.name
        return f"{parent.qualified_symbol}::{self.name}"


class FieldDecl(DeclarationBase):
    kind: Literal["field"] = "field"
    type: TypeRef
    is_static: bool = False
    default_value: str | None = None


class ConstructorDecl(DeclarationBase):
    kind: Literal["constructor"] = "constructor"
    parameters: list[Parameter] = []


class MethodDecl(DeclarationBase):
    kind: Literal["method"] = "method"
    parameters: list[Parameter] = []
    return_type: TypeRef = VOID
    is_virtual: bool = False


class ClassDecl(DeclarationBase):
    kind: Literal["class"] = "class"
    bases: list[str] = []
    is_ref_counted: bool = False
    children: list[Declaration] = []


class NamespaceDecl(DeclarationBase):
    kind: Literal["namespace"] = "namespace"
    children: list[Declaration] = []


class OpaqueDecl(DeclarationBase):
    """Any declaration kind the generator does not bind (enum, typedef, ...)."""

    model_config = ConfigDict(extra="allow")

    kind: str = DeclKind.OPAQUE.value
    name: str = ""

    @property
    def decl_kind(self) -> DeclKind:
        return DeclKind.OPAQUE


_TAGGED_KINDS: frozenset[str] = frozenset(
    kind.value for kind in DeclKind if kind != DeclKind.OPAQUE
)


def _declaration_tag(value: Any) -> str:
    kind = value.get("kind", "") if isinstance(value, dict) else getattr(value, "kind", "")
    if isinstance(kind, DeclKind):
        kind = kind.value
    return kind if kind in _TAGGED_KINDS else DeclKind.OPAQUE.value


Declaration = Annotated[
    Union[
        Annotated[ClassDecl, Tag("class")],
        Annotated[FieldDecl, Tag("field")],
        Annotated[ConstructorDecl, Tag("constructor")],
        Annotated[MethodDecl, Tag("method")],
        Annotated[NamespaceDecl, Tag("namespace")],
        Annotated[OpaqueDecl, Tag("opaque")],
    ],
    Discriminator(_declaration_tag),
]

ClassDecl.model_rebuild()
NamespaceDecl.model_rebuild()


def children_of(decl: DeclarationBase) -> list[DeclarationBase]:
    if isinstance(decl, (ClassDecl, NamespaceDecl)):
        return decl.children
    return []


def iter_declarations(declarations: list[DeclarationBase]) -> Iterator[DeclarationBase]:
    """Yield every declaration depth-first, in document order."""
    for decl in declarations:
        yield decl
        yield from iter_declarations(children_of(decl))


def _link(declarations: list[DeclarationBase], parent: DeclarationBase | None):
    for decl in declarations:
        decl._parent = weakref.ref(parent) if parent is not None else None
        _link(children_of(decl), decl)


class DeclarationTree(BaseModel):
    """Ordered forest of declarations, linked on construction.

    Base symbols are checked by :meth:`resolve_bases`, which ``load_tree``
    calls once the document has validated.
    """

    declarations: list[Declaration] = []

    @model_validator(mode="after")
    def _link_parents(self) -> DeclarationTree:
        _link(self.declarations, None)
        return self

    def resolve_bases(self) -> DeclarationTree:
        """Raise UnresolvedBaseError if any class names a base outside the tree."""
        for cls in self.classes.values():
            missing = [base for base in cls.bases if base not in self.classes]
            if missing:
                raise UnresolvedBaseError(
                    f"Unresolved base class {', '.join(missing)} "
                    f"of '{cls.qualified_symbol}'"
                )
        return self

    @cached_property
    def classes(self) -> dict[str, ClassDecl]:
        """Qualified symbol → class declaration."""
        return {
            decl.qualified_symbol: decl
            for decl in iter_declarations(self.declarations)
            if isinstance(decl, ClassDecl)
        }

    def walk(self) -> Iterator[DeclarationBase]:
        return iter_declarations(self.declarations)

    # ── hierarchy queries ────────────────────────────────────────

    def bases_of(self, cls: ClassDecl) -> list[ClassDecl]:
        try:
            return [self.classes[symbol] for symbol in cls.bases]
        except KeyError as e:
            raise UnresolvedBaseError(
                f"Unresolved base class {e.args[0]} of '{cls.qualified_symbol}'"
            ) from e

    def is_subclass_of(self, cls: ClassDecl, symbol: str) -> bool:
        """True if *cls* is *symbol* or derives from it through any base."""
        if cls.qualified_symbol == symbol:
            return True
        return any(self.is_subclass_of(base, symbol) for base in self.bases_of(cls))

    def hierarchy_root(self, cls: ClassDecl) -> ClassDecl:
        """Topmost class along the primary (first) base chain."""
        bases = self.bases_of(cls)
        if not bases:
            return cls
        return self.hierarchy_root(bases[0])


def load_tree(text: str | bytes) -> DeclarationTree:
    """Validate a JSON document into a linked, base-resolved DeclarationTree."""
    tree = DeclarationTree.model_validate_json(text).resolve_bases()
    logger.info(
        "Loaded declaration tree: %d top-level declarations, %d classes",
        len(tree.declarations),
        len(tree.classes),
    )
    return tree


def load_tree_file(path: str | Path) -> DeclarationTree:
    logger.info("Reading declarations from %s", path)
    return load_tree(Path(path).read_text(encoding="utf-8"))
