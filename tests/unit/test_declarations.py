"""Tests for the declaration tree model, loading and hierarchy queries."""

from __future__ import annotations

import json

import pytest

from bindgen.declarations import (
    ClassDecl,
    DeclarationTree,
    DeclKind,
    FieldDecl,
    MethodDecl,
    NamespaceDecl,
    OpaqueDecl,
    UnresolvedBaseError,
    load_tree,
    load_tree_file,
)
from bindgen.type_spelling import VOID

TREE_JSON = {
    "declarations": [
        {
            "kind": "namespace",
            "name": "Urho3D",
            "children": [
                {"kind": "class", "name": "RefCounted", "symbol_name": "Urho3D::RefCounted"},
                {
                    "kind": "class",
                    "name": "Object",
                    "symbol_name": "Urho3D::Object",
                    "bases": ["Urho3D::RefCounted"],
                    "children": [
                        {
                            "kind": "method",
                            "name": "GetTypeName",
                            "symbol_name": "Urho3D::Object::GetTypeName",
                            "return_type": {"name": "Urho3D::String", "is_const": True, "is_reference": True},
                            "is_virtual": True,
                        },
                        {"kind": "field", "name": "flags_", "type": {"name": "unsigned"}},
                    ],
                },
                {"kind": "enum", "name": "BlendMode", "values": ["BLEND_REPLACE", "BLEND_ADD"]},
            ],
        }
    ]
}


def _load() -> DeclarationTree:
    return load_tree(json.dumps(TREE_JSON))


class TestLoading:
    def test_kinds_are_discriminated(self):
        ns = _load().declarations[0]
        assert isinstance(ns, NamespaceDecl)
        assert isinstance(ns.children[1], ClassDecl)
        assert isinstance(ns.children[1].children[0], MethodDecl)
        assert isinstance(ns.children[1].children[1], FieldDecl)

    def test_unknown_kind_loads_as_opaque(self):
        enum = _load().declarations[0].children[2]
        assert isinstance(enum, OpaqueDecl)
        assert enum.kind == "enum"
        assert enum.decl_kind == DeclKind.OPAQUE

    def test_structured_type_descriptor(self):
        method = _load().classes["Urho3D::Object"].children[0]
        assert method.return_type.name == "Urho3D::String"
        assert method.return_type.is_const
        assert method.return_type.is_reference
        assert method.is_virtual

    def test_method_defaults(self):
        method = MethodDecl(name="Update")
        assert method.return_type == VOID
        assert method.parameters == []
        assert not method.is_virtual

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "decls.json"
        path.write_text(json.dumps(TREE_JSON), encoding="utf-8")
        tree = load_tree_file(path)
        assert set(tree.classes) == {"Urho3D::RefCounted", "Urho3D::Object"}

    def test_malformed_document_raises(self):
        with pytest.raises(ValueError):
            load_tree('{"declarations": [{"kind": "field", "name": "x"}]}')


class TestLinking:
    def test_parent_back_references(self):
        tree = _load()
        ns = tree.declarations[0]
        obj = tree.classes["Urho3D::Object"]
        assert ns.parent is None
        assert obj.parent is ns
        assert obj.children[0].parent is obj

    def test_parent_is_not_serialized(self):
        dumped = _load().model_dump()
        assert "parent" not in dumped["declarations"][0]["children"][1]
        assert "_parent" not in dumped["declarations"][0]["children"][1]

    def test_qualified_symbol_derived_from_parents(self):
        tree = _load()
        field = tree.classes["Urho3D::Object"].children[1]
        assert field.symbol_name == ""
        assert field.qualified_symbol == "Urho3D::Object::flags_"

    def test_explicit_symbol_wins(self):
        method = _load().classes["Urho3D::Object"].children[0]
        assert method.qualified_symbol == "Urho3D::Object::GetTypeName"

    def test_walk_is_document_order(self):
        names = [decl.name for decl in _load().walk()]
        assert names == ["Urho3D", "RefCounted", "Object", "GetTypeName", "flags_", "BlendMode"]


class TestHierarchyQueries:
    def test_unresolved_base_rejected(self):
        doc = {"declarations": [{"kind": "class", "name": "Node", "bases": ["Urho3D::Missing"]}]}
        with pytest.raises(UnresolvedBaseError, match="Unresolved base class Urho3D::Missing of 'Node'"):
            load_tree(json.dumps(doc))

    def test_constructed_tree_reports_unresolved_base(self):
        tree = DeclarationTree(declarations=[ClassDecl(name="Node", bases=["Urho3D::Missing"])])
        with pytest.raises(UnresolvedBaseError):
            tree.resolve_bases()
        with pytest.raises(UnresolvedBaseError, match="Urho3D::Missing"):
            tree.bases_of(tree.classes["Node"])

    def test_resolved_tree_returns_itself(self):
        tree = DeclarationTree(declarations=[ClassDecl(name="A"), ClassDecl(name="B", bases=["A"])])
        assert tree.resolve_bases() is tree

    def test_is_subclass_of(self):
        tree = _load()
        obj = tree.classes["Urho3D::Object"]
        assert tree.is_subclass_of(obj, "Urho3D::RefCounted")
        assert tree.is_subclass_of(obj, "Urho3D::Object")
        assert not tree.is_subclass_of(tree.classes["Urho3D::RefCounted"], "Urho3D::Object")

    def test_hierarchy_root(self):
        tree = DeclarationTree(
            declarations=[
                ClassDecl(name="A"),
                ClassDecl(name="B", bases=["A"]),
                ClassDecl(name="C", bases=["B"]),
            ]
        )
        assert tree.hierarchy_root(tree.classes["C"]).name == "A"
        assert tree.hierarchy_root(tree.classes["A"]).name == "A"

    def test_bases_of_preserves_order(self):
        tree = DeclarationTree(
            declarations=[
                ClassDecl(name="A"),
                ClassDecl(name="B"),
                ClassDecl(name="C", bases=["B", "A"]),
            ]
        )
        assert [b.name for b in tree.bases_of(tree.classes["C"])] == ["B", "A"]
