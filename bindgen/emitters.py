"""Class and member emitters — P/Invoke boundary code for each declaration."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from . import constants, naming
from .declarations import (
    ClassDecl,
    ConstructorDecl,
    DeclarationTree,
    FieldDecl,
    MethodDecl,
    Parameter,
)
from .gen_types import GenerationStats, GeneratorConfig
from .printer import CodePrinter
from .type_mapper import TypeMapper

logger = logging.getLogger(__name__)


# ── template variables ───────────────────────────────────────────


@dataclass(frozen=True)
class ClassVars:
    name: str
    base: str
    destructor: str
    is_root: bool
    is_ref_counted: bool

    @property
    def has_bases(self) -> bool:
        return bool(self.base)

    @property
    def new_modifier(self) -> str:
        return "new " if self.has_bases else ""


@dataclass(frozen=True)
class FieldVars:
    getter: str
    setter: str
    cs_return: str
    cs_param: str


@dataclass(frozen=True)
class FunctionVars:
    c_function_name: str
    cs_param_list: str
    cs_return: str
    class_name: str
    name: str

    @property
    def has_params(self) -> bool:
        return bool(self.cs_param_list)

    @property
    def instance_params(self) -> str:
        head = f"{constants.HANDLE_TYPE} {constants.INSTANCE_PARAM}"
        return f"{head}, {self.cs_param_list}" if self.has_params else head


def _parameter_list(parameters: list[Parameter], type_mapper: TypeMapper) -> str:
    return ", ".join(
        f"{type_mapper.to_param(param.type)} {naming.parameter_name(param.name, i)}"
        for i, param in enumerate(parameters)
    )


# ── class emitter ────────────────────────────────────────────────


class ClassEmitter:
    """Emits a class scope: identity cache, lifetime members, destructor import."""

    def __init__(
        self,
        printer: CodePrinter,
        tree: DeclarationTree,
        config: GeneratorConfig,
        stats: GenerationStats,
    ):
        self._printer = printer
        self._tree = tree
        self._config = config
        self._stats = stats

    def is_ref_counted(self, cls: ClassDecl) -> bool:
        return cls.is_ref_counted or self._tree.is_subclass_of(
            cls, self._config.ref_counted_base
        )

    def _vars(self, cls: ClassDecl) -> ClassVars:
        bases = self._tree.bases_of(cls)
        if len(bases) > 1:
            logger.warning(
                "Class '%s' has %d bases; only '%s' is bound as the managed base",
                cls.qualified_symbol,
                len(bases),
                bases[0].name,
            )
        return ClassVars(
            name=cls.name,
            base=bases[0].name if bases else "",
            destructor=naming.destructor_name(cls),
            is_root=not bases,
            is_ref_counted=self.is_ref_counted(cls),
        )

    @contextmanager
    def scope(self, cls: ClassDecl) -> Iterator[ClassVars]:
        """Emit the class header and lifetime members; close the class on exit."""
        v = self._vars(cls)
        self._stats.classes += 1
        self._stats.hierarchy_roots += int(v.is_root)
        self._stats.ref_counted_classes += int(v.is_ref_counted)
        logger.debug(
            "Entering class %s (root=%s, ref_counted=%s)",
            cls.qualified_symbol,
            v.is_root,
            v.is_ref_counted,
        )

        bases = f"{v.base}, " if v.has_bases else ""
        self._printer.line(f"public partial class {v.name} : {bases}IDisposable")
        with self._printer.block():
            self._emit_cache(v)
            if v.is_root:
                self._emit_root_storage()
                self._emit_root_constructor(v)
            else:
                self._emit_proxy_constructor(v)
            self._emit_dispose(v)
            self._emit_finalizer(v)
            self._emit_destructor_import(v)
            yield v
        self._printer.line()

    def _emit_cache(self, v: ClassVars) -> None:
        dictionary = f"ConcurrentDictionary<{constants.HANDLE_TYPE}, {v.name}>"
        self._printer.line(
            f"internal static {v.new_modifier}{dictionary} "
            f"{constants.CACHE_FIELD} = new {dictionary}();"
        )
        self._printer.line()

    def _emit_root_storage(self) -> None:
        self._printer.line(f"internal {constants.HANDLE_TYPE} {constants.HANDLE_FIELD};")
        self._printer.line(f"protected volatile int {constants.DISPOSED_FIELD};")
        self._printer.line()

    def _emit_root_constructor(self, v: ClassVars) -> None:
        p = self._printer
        param = constants.INSTANCE_PARAM
        p.line(f"internal {v.name}({constants.HANDLE_TYPE} {param})")
        with p.block():
            # Null while a subclass constructor is still creating the native object
            p.line(f"if ({param} != {constants.NULL_HANDLE})")
            with p.block():
                p.line(f"{constants.HANDLE_FIELD} = {param};")
                if v.is_ref_counted:
                    p.line(f"{naming.add_ref_name(self._config.ref_counted_base)}({param});")
        p.line()

    def _emit_proxy_constructor(self, v: ClassVars) -> None:
        param = constants.INSTANCE_PARAM
        self._printer.line(
            f"internal {v.name}({constants.HANDLE_TYPE} {param}) : base({param}) {{ }}"
        )
        self._printer.line()

    def _emit_dispose(self, v: ClassVars) -> None:
        p = self._printer
        handle = constants.HANDLE_FIELD
        modifier = " new" if v.has_bases else ""
        p.line(f"public{modifier} void Dispose()")
        with p.block():
            p.line(f"if (Interlocked.Increment(ref {constants.DISPOSED_FIELD}) == 1)")
            with p.block():
                p.line("var self = this;")
                p.line(f"{constants.CACHE_FIELD}.TryRemove({handle}, out self);")
                if v.is_ref_counted:
                    p.line(f"{naming.release_ref_name(self._config.ref_counted_base)}({handle});")
                else:
                    p.line(f"{v.destructor}({handle});")
                p.line(f"{handle} = {constants.NULL_HANDLE};")
        p.line()

    def _emit_finalizer(self, v: ClassVars) -> None:
        self._printer.line(f"~{v.name}()")
        with self._printer.block():
            self._printer.line("Dispose();")
        self._printer.line()

    def _emit_destructor_import(self, v: ClassVars) -> None:
        # Emitted even when the native class declares no destructor
        self._printer.line(self._config.dll_import)
        self._printer.line(
            f"internal static extern void {v.destructor}"
            f"({constants.HANDLE_TYPE} {constants.INSTANCE_PARAM});"
        )
        self._printer.line()


# ── member emitters ──────────────────────────────────────────────


class MemberEmitter:
    """Emits boundary imports for fields, constructors and methods."""

    def __init__(
        self,
        printer: CodePrinter,
        type_mapper: TypeMapper,
        config: GeneratorConfig,
        stats: GenerationStats,
    ):
        self._printer = printer
        self._type_mapper = type_mapper
        self._config = config
        self._stats = stats

    def _import(self, signature: str, cs_return: str = "") -> None:
        self._printer.line(self._config.dll_import)
        if cs_return == constants.STRING_REPRESENTATION:
            self._printer.line(constants.UTF8_RETURN_ATTRIBUTE)
        self._printer.line(f"internal static extern {signature};")
        self._printer.line()

    def emit_field(self, decl: FieldDecl) -> None:
        if decl.is_static:
            # TODO: bind static fields once the native glue exports class-level accessors
            logger.debug("Skipping static field %s", decl.qualified_symbol)
            self._stats.skipped_static_fields += 1
            return

        v = FieldVars(
            getter=naming.getter_name(decl),
            setter=naming.setter_name(decl),
            cs_return=self._type_mapper.to_return(decl.type, False),
            cs_param=self._type_mapper.to_param(decl.type),
        )
        owner = f"{constants.HANDLE_TYPE} {constants.FIELD_OWNER_PARAM}"
        # LPUTF8Str copies the native string into managed memory
        self._import(f"{v.cs_return} {v.getter}({owner})", v.cs_return)
        self._import(
            f"void {v.setter}({owner}, {v.cs_param} {constants.SETTER_VALUE_PARAM})"
        )
        self._stats.fields += 1

    def emit_constructor(self, decl: ConstructorDecl) -> None:
        params = _parameter_list(decl.parameters, self._type_mapper)
        self._import(
            f"{constants.HANDLE_TYPE} {naming.c_function_name(decl)}({params})"
        )
        self._stats.constructors += 1

    def emit_method(self, decl: MethodDecl, cls: ClassDecl) -> None:
        v = FunctionVars(
            c_function_name=naming.c_function_name(decl),
            cs_param_list=_parameter_list(decl.parameters, self._type_mapper),
            cs_return=self._type_mapper.to_return(decl.return_type, True),
            class_name=cls.name,
            name=decl.name,
        )
        self._import(
            f"{v.cs_return} {v.c_function_name}({v.instance_params})", v.cs_return
        )
        self._stats.methods += 1
        if decl.is_virtual:
            self._emit_virtual_registration(decl, v)

    def _emit_virtual_registration(self, decl: MethodDecl, v: FunctionVars) -> None:
        """Callback delegate plus the import that installs it on the native side."""
        p = self._printer
        delegate = naming.delegate_name(decl)
        p.line(self._config.function_pointer_attribute)
        if v.cs_return == constants.STRING_REPRESENTATION:
            p.line(constants.UTF8_RETURN_ATTRIBUTE)
        p.line(f"internal delegate {v.cs_return} {delegate}({v.instance_params});")
        p.line()
        setter = naming.callback_setter_name(decl, v.class_name)
        self._import(
            f"void {setter}({constants.HANDLE_TYPE} {constants.INSTANCE_PARAM}, "
            f"{delegate} {constants.CALLBACK_PARAM})"
        )
        self._stats.virtual_methods += 1
