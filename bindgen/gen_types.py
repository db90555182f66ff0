"""Generation pipeline data types (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass, field

from . import constants


@dataclass(frozen=True)
class GeneratorConfig:
    """Groups generator configuration."""

    namespace: str = constants.DEFAULT_NAMESPACE
    library: str = constants.DEFAULT_LIBRARY
    calling_convention: str = constants.DEFAULT_CALLING_CONVENTION
    ref_counted_base: str = constants.REF_COUNTED_BASE
    output_name: str = constants.DEFAULT_OUTPUT_NAME
    usings: tuple[str, ...] = constants.REQUIRED_USINGS

    @property
    def dll_import(self) -> str:
        return (
            f'[DllImport("{self.library}", '
            f"CallingConvention = CallingConvention.{self.calling_convention})]"
        )

    @property
    def function_pointer_attribute(self) -> str:
        return f"[UnmanagedFunctionPointer(CallingConvention.{self.calling_convention})]"


@dataclass
class GenerationStats:
    """Counts of what a generation pass emitted and skipped."""

    classes: int = 0
    hierarchy_roots: int = 0
    ref_counted_classes: int = 0
    fields: int = 0
    constructors: int = 0
    methods: int = 0
    virtual_methods: int = 0
    skipped_static_fields: int = 0
    skipped_orphan_members: int = 0
    passed_through: int = 0
    output_lines: int = 0

    def report(self) -> str:
        lines = [
            "═══ Generation Statistics ═══",
            f"  {'Declaration':<24} {'Emitted':>8}",
            f"  {'─' * 24} {'─' * 8}",
        ]
        rows = [
            ("Classes", self.classes),
            ("  hierarchy roots", self.hierarchy_roots),
            ("  reference counted", self.ref_counted_classes),
            ("Field accessor pairs", self.fields),
            ("Constructors", self.constructors),
            ("Methods", self.methods),
            ("  virtual", self.virtual_methods),
        ]
        for name, count in rows:
            lines.append(f"  {name:<24} {count:>8}")
        lines.append(f"  {'─' * 24} {'─' * 8}")
        lines.append(
            f"  Skipped: {self.skipped_static_fields} static fields,"
            f" {self.skipped_orphan_members} members outside a class,"
            f" {self.passed_through} unsupported declarations"
        )
        lines.append(f"  Output: {self.output_lines} lines")
        return "\n".join(lines)


@dataclass(frozen=True)
class GenerationResult:
    text: str
    stats: GenerationStats = field(default_factory=GenerationStats)
