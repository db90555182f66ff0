"""Type descriptors and the tree-sitter layer that parses C++ type spellings."""

from __future__ import annotations

import functools
import logging
from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict

from . import constants

logger = logging.getLogger(__name__)

_ALIAS_NAME = "__bindgen_alias"


class TypeSpellingError(ValueError):
    """Raised when a type spelling cannot be parsed into a descriptor."""


class TypeDescriptor(BaseModel):
    """Structured native type: base name plus qualifiers and indirection."""

    model_config = ConfigDict(frozen=True)

    name: str
    is_const: bool = False
    pointer_depth: int = 0
    is_reference: bool = False
    is_rvalue_reference: bool = False

    @property
    def spelling(self) -> str:
        text = f"const {self.name}" if self.is_const else self.name
        text += "*" * self.pointer_depth
        if self.is_rvalue_reference:
            text += "&&"
        elif self.is_reference:
            text += "&"
        return text

    @property
    def is_void(self) -> bool:
        return self.name == "void" and self.pointer_depth == 0

    @property
    def is_indirect(self) -> bool:
        return self.pointer_depth > 0 or self.is_reference or self.is_rvalue_reference

    def __str__(self) -> str:
        return self.spelling


VOID = TypeDescriptor(name="void")


class ParserFactory(ABC):
    """Abstract factory for obtaining a language parser."""

    @abstractmethod
    def get_parser(self, language: str): ...


class TreeSitterParserFactory(ParserFactory):
    """Concrete factory that delegates to tree-sitter-language-pack."""

    def get_parser(self, language: str):
        import tree_sitter_language_pack as tslp

        return tslp.get_parser(language)


def _find_first(node, node_type: str):
    if node.type == node_type:
        return node
    return next(
        (
            found
            for child in node.children
            if (found := _find_first(child, node_type)) is not None
        ),
        None,
    )


class TypeSpellingParser:
    """Parses a spelling such as ``const Urho3D::String&`` into a TypeDescriptor.

    The spelling is wrapped in an alias declaration so the grammar sees it in
    a pure type context (``using X = <spelling>;``), then the resulting
    ``type_descriptor`` node is read back.
    """

    def __init__(self, parser_factory: ParserFactory | None = None):
        self._factory = parser_factory or TreeSitterParserFactory()

    def parse(self, spelling: str) -> TypeDescriptor:
        text = " ".join(spelling.split())
        if not text:
            raise TypeSpellingError("Empty type spelling")

        source = f"using {_ALIAS_NAME} = {text};".encode("utf-8")
        parser = self._factory.get_parser(constants.TYPE_SPELLING_LANGUAGE)
        tree = parser.parse(source)
        root = tree.root_node
        if root.has_error:
            raise TypeSpellingError(f"Cannot parse type spelling '{spelling}'")

        descriptor = _find_first(root, "type_descriptor")
        if descriptor is None:
            raise TypeSpellingError(f"No type found in spelling '{spelling}'")
        type_node = descriptor.child_by_field_name("type")
        if type_node is None:
            raise TypeSpellingError(f"No base type in spelling '{spelling}'")

        def _text(node) -> str:
            return source[node.start_byte : node.end_byte].decode("utf-8")

        is_const = any(
            child.type == "type_qualifier" and _text(child) == "const"
            for child in descriptor.children
        )
        declarator = descriptor.child_by_field_name("declarator")
        indirection = _text(declarator) if declarator is not None else ""

        result = TypeDescriptor(
            name=" ".join(_text(type_node).split()),
            is_const=is_const,
            pointer_depth=indirection.count("*"),
            is_reference="&" in indirection and "&&" not in indirection,
            is_rvalue_reference="&&" in indirection,
        )
        logger.debug("Parsed type spelling '%s' -> %s", spelling, result)
        return result


@functools.lru_cache(maxsize=None)
def _default_parser() -> TypeSpellingParser:
    return TypeSpellingParser(TreeSitterParserFactory())


@functools.lru_cache(maxsize=1024)
def parse_type_spelling(spelling: str) -> TypeDescriptor:
    """Parse *spelling* with the default tree-sitter backed parser."""
    return _default_parser().parse(spelling)
