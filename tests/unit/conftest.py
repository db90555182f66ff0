"""Shared builders for the binding generator test suite."""

from __future__ import annotations

from bindgen.declarations import (
    ClassDecl,
    ConstructorDecl,
    DeclarationTree,
    FieldDecl,
    MethodDecl,
    Parameter,
)
from bindgen.gen_types import GeneratorConfig
from bindgen.generator import PInvokeGenerator
from bindgen.type_spelling import TypeDescriptor

DLL_IMPORT = '[DllImport("Urho3DCSharp", CallingConvention = CallingConvention.Cdecl)]'


def t(name: str, **kwargs) -> TypeDescriptor:
    """Build a TypeDescriptor without going through the spelling parser."""
    return TypeDescriptor(name=name, **kwargs)


def shape_class(**overrides) -> ClassDecl:
    """``Shape``: no base, reference counted, a string field and a virtual Area()."""
    fields = dict(
        name="Shape",
        symbol_name="Urho3D::Shape",
        is_ref_counted=True,
        children=[
            FieldDecl(name="Name", symbol_name="Urho3D::Shape::Name", type=t("Urho3D::String")),
            MethodDecl(
                name="Area",
                symbol_name="Urho3D::Shape::Area",
                return_type=t("float"),
                is_virtual=True,
            ),
        ],
    )
    fields.update(overrides)
    return ClassDecl(**fields)


def shape_tree() -> DeclarationTree:
    return DeclarationTree(declarations=[shape_class()])


def base_derived_tree(ref_counted: bool = False) -> DeclarationTree:
    base = ClassDecl(
        name="Base",
        symbol_name="Urho3D::Base",
        is_ref_counted=ref_counted,
        children=[
            ConstructorDecl(name="Base", symbol_name="Urho3D::Base::Base"),
            MethodDecl(name="Update", symbol_name="Urho3D::Base::Update", is_virtual=True),
        ],
    )
    derived = ClassDecl(
        name="Derived",
        symbol_name="Urho3D::Derived",
        bases=["Urho3D::Base"],
        children=[
            ConstructorDecl(
                name="Derived",
                symbol_name="Urho3D::Derived::Derived",
                parameters=[Parameter(name="size", type=t("int"))],
            ),
            MethodDecl(name="Size", symbol_name="Urho3D::Derived::Size", return_type=t("int")),
        ],
    )
    return DeclarationTree(declarations=[base, derived])


def generate(tree: DeclarationTree, **config) -> str:
    return PInvokeGenerator(config=GeneratorConfig(**config)).visit(tree)


def class_section(text: str, class_name: str) -> str:
    """Slice of *text* from the class header up to the next class header."""
    header = f"public partial class {class_name} :"
    start = text.index(header)
    end = text.find("public partial class ", start + len(header))
    return text[start:] if end == -1 else text[start:end]
