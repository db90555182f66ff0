"""Composable API functions for the binding generator.

Each function corresponds to a CLI workflow (--stdout, --stats, --kinds)
but is callable programmatically without argparse.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .declarations import DeclarationTree, load_tree, load_tree_file
from .decl_stats import count_kinds
from .gen_types import GenerationResult, GeneratorConfig
from .generator import PInvokeGenerator
from .output import write_output
from .type_mapper import TypeMapper

logger = logging.getLogger(__name__)


def load_declarations(source: str | bytes | Path) -> DeclarationTree:
    """Load a declaration tree from JSON text or from a ``Path`` to a JSON file."""
    if isinstance(source, Path):
        return load_tree_file(source)
    return load_tree(source)


def generate_source(
    tree: DeclarationTree,
    config: GeneratorConfig | None = None,
    type_mapper: TypeMapper | None = None,
) -> str:
    """Generate the binding source text for *tree* without touching disk.

    Args:
        tree: A linked, resolved declaration tree.
        config: Generator configuration; defaults apply when omitted.
        type_mapper: Type marshal policy; ``PInvokeTypeMapper`` when omitted.

    Returns:
        The complete generated C# source.
    """
    return PInvokeGenerator(type_mapper, config).visit(tree)


def generate_bindings(
    tree: DeclarationTree,
    output_dir: str | Path,
    config: GeneratorConfig | None = None,
    type_mapper: TypeMapper | None = None,
) -> GenerationResult:
    """Generate bindings for *tree* and write them into *output_dir*.

    Args:
        tree: A linked, resolved declaration tree.
        output_dir: Existing directory receiving ``config.output_name``.
        config: Generator configuration.
        type_mapper: Type marshal policy.

    Returns:
        The generation result (text and statistics).

    Raises:
        OutputWriteError: If the output file cannot be written.
    """
    generator = PInvokeGenerator(type_mapper, config)
    result = generator.generate(tree)
    write_output(result.text, Path(output_dir) / generator.config.output_name)
    return result


def declaration_stats(tree: DeclarationTree) -> dict[str, int]:
    """Return declaration-kind frequency counts for *tree*."""
    return count_kinds(tree)
