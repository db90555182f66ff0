"""Traversal Driver — walks the declaration tree and notifies a visitor."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable

from .declarations import (
    ClassDecl,
    ConstructorDecl,
    DeclarationBase,
    DeclarationTree,
    DeclKind,
    FieldDecl,
    MethodDecl,
    NamespaceDecl,
)

logger = logging.getLogger(__name__)


class DeclarationVisitor(ABC):
    """Receives enter/exit for classes and a single visit for each member."""

    @abstractmethod
    def enter_class(self, decl: ClassDecl) -> None: ...

    @abstractmethod
    def exit_class(self, decl: ClassDecl) -> None: ...

    @abstractmethod
    def visit_field(self, decl: FieldDecl) -> None: ...

    @abstractmethod
    def visit_constructor(self, decl: ConstructorDecl) -> None: ...

    @abstractmethod
    def visit_method(self, decl: MethodDecl) -> None: ...

    def pass_through(self, decl: DeclarationBase) -> None:
        """Called for declarations no handler binds. No-op by default."""


class TraversalDriver:
    """Document-order walk with a dispatch table keyed by declaration kind.

    Kinds without a handler are passed through: the visitor's
    ``pass_through`` hook fires and traversal continues.
    """

    def __init__(self, visitor: DeclarationVisitor):
        self._visitor = visitor
        self._DISPATCH: dict[DeclKind, Callable] = {
            DeclKind.CLASS: self._visit_class,
            DeclKind.NAMESPACE: self._visit_namespace,
            DeclKind.FIELD: visitor.visit_field,
            DeclKind.CONSTRUCTOR: visitor.visit_constructor,
            DeclKind.METHOD: visitor.visit_method,
        }

    @property
    def handled_kinds(self) -> frozenset[DeclKind]:
        return frozenset(self._DISPATCH)

    def walk(self, declarations: list[DeclarationBase]) -> None:
        for decl in declarations:
            self._visit(decl)

    def _visit(self, decl: DeclarationBase) -> None:
        handler = self._DISPATCH.get(decl.decl_kind)
        if handler is None:
            logger.debug(
                "Passing through unsupported declaration '%s' (%s)",
                decl.name,
                getattr(decl, "kind", decl.decl_kind.value),
            )
            self._visitor.pass_through(decl)
            return
        handler(decl)

    def _visit_class(self, decl: ClassDecl) -> None:
        self._visitor.enter_class(decl)
        try:
            self.walk(decl.children)
        finally:
            self._visitor.exit_class(decl)

    def _visit_namespace(self, decl: NamespaceDecl) -> None:
        self.walk(decl.children)


def walk(tree: DeclarationTree, visitor: DeclarationVisitor) -> None:
    """Drive *visitor* over every declaration of *tree* in document order."""
    TraversalDriver(visitor).walk(tree.declarations)
