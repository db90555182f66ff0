"""P/Invoke generation pass — wires the driver, emitters and output sink."""

from __future__ import annotations

import logging
from contextlib import ExitStack

from .declarations import (
    ClassDecl,
    ConstructorDecl,
    DeclarationBase,
    DeclarationTree,
    FieldDecl,
    MethodDecl,
)
from .driver import DeclarationVisitor, walk
from .emitters import ClassEmitter, MemberEmitter
from .gen_types import GenerationResult, GenerationStats, GeneratorConfig
from .printer import CodePrinter
from .type_mapper import PInvokeTypeMapper, TypeMapper

logger = logging.getLogger(__name__)


class _GenerationPass(DeclarationVisitor):
    """State for one pass over one tree. Discarded when the pass completes."""

    def __init__(
        self,
        tree: DeclarationTree,
        type_mapper: TypeMapper,
        config: GeneratorConfig,
    ):
        self.printer = CodePrinter()
        self.stats = GenerationStats()
        self._config = config
        self._classes = ClassEmitter(self.printer, tree, config, self.stats)
        self._members = MemberEmitter(self.printer, type_mapper, config, self.stats)
        self._scopes: list[ExitStack] = []

    def start(self) -> ExitStack:
        """Write the file preamble; the returned stack closes the namespace."""
        for using in self._config.usings:
            self.printer.line(f"using {using};")
        self.printer.line()
        self.printer.line(f"namespace {self._config.namespace}")
        stack = ExitStack()
        stack.enter_context(self.printer.block())
        self.printer.line()
        return stack

    # ── visitor ──────────────────────────────────────────────────

    def enter_class(self, decl: ClassDecl) -> None:
        stack = ExitStack()
        stack.enter_context(self._classes.scope(decl))
        self._scopes.append(stack)

    def exit_class(self, decl: ClassDecl) -> None:
        self._scopes.pop().close()

    def _owning_class(self, decl: DeclarationBase) -> ClassDecl | None:
        parent = decl.parent
        if isinstance(parent, ClassDecl):
            return parent
        logger.debug("Skipping %s '%s' outside a class", decl.kind, decl.qualified_symbol)
        self.stats.skipped_orphan_members += 1
        return None

    def visit_field(self, decl: FieldDecl) -> None:
        if self._owning_class(decl) is not None:
            self._members.emit_field(decl)

    def visit_constructor(self, decl: ConstructorDecl) -> None:
        if self._owning_class(decl) is not None:
            self._members.emit_constructor(decl)

    def visit_method(self, decl: MethodDecl) -> None:
        cls = self._owning_class(decl)
        if cls is not None:
            self._members.emit_method(decl, cls)

    def pass_through(self, decl: DeclarationBase) -> None:
        self.stats.passed_through += 1


class PInvokeGenerator:
    """Generates the C# P/Invoke binding file for a declaration tree.

    The generator itself is stateless between passes: every call to
    :meth:`generate` builds a fresh printer and fresh emitters, so emitting
    the same tree twice yields byte-identical text.
    """

    def __init__(
        self,
        type_mapper: TypeMapper | None = None,
        config: GeneratorConfig | None = None,
    ):
        self._type_mapper = type_mapper or PInvokeTypeMapper()
        self._config = config or GeneratorConfig()

    @property
    def config(self) -> GeneratorConfig:
        return self._config

    def generate(self, tree: DeclarationTree) -> GenerationResult:
        logger.info(
            "Generating P/Invoke bindings (namespace=%s, library=%s)",
            self._config.namespace,
            self._config.library,
        )
        gen = _GenerationPass(tree, self._type_mapper, self._config)
        with gen.start():
            walk(tree, gen)
        text = gen.printer.get()
        gen.stats.output_lines = text.count("\n")
        logger.info(
            "Generated %d classes, %d methods (%d virtual), %d lines",
            gen.stats.classes,
            gen.stats.methods,
            gen.stats.virtual_methods,
            gen.stats.output_lines,
        )
        return GenerationResult(text=text, stats=gen.stats)

    def visit(self, tree: DeclarationTree) -> str:
        """Emitted text for *tree*."""
        return self.generate(tree).text
