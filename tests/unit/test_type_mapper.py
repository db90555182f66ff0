"""Tests for the default P/Invoke type marshal policy."""

from __future__ import annotations

import pytest

from bindgen.type_mapper import PInvokeTypeMapper, UnmappedTypeError
from tests.unit.conftest import t


@pytest.fixture
def mapper() -> PInvokeTypeMapper:
    return PInvokeTypeMapper()


class TestParameters:
    def test_primitives(self, mapper):
        assert mapper.to_param(t("int")) == "int"
        assert mapper.to_param(t("unsigned")) == "uint"
        assert mapper.to_param(t("float")) == "float"
        assert mapper.to_param(t("bool")) == "bool"

    def test_const_reference_primitive_by_value(self, mapper):
        assert mapper.to_param(t("float", is_const=True, is_reference=True)) == "float"

    def test_mutable_reference_primitive_by_ref(self, mapper):
        assert mapper.to_param(t("int", is_reference=True)) == "ref int"

    def test_strings(self, mapper):
        assert mapper.to_param(t("Urho3D::String", is_const=True, is_reference=True)) == "string"
        assert mapper.to_param(t("char", is_const=True, pointer_depth=1)) == "string"

    def test_class_pointers_and_values_are_handles(self, mapper):
        assert mapper.to_param(t("Urho3D::Node", pointer_depth=1)) == "IntPtr"
        assert mapper.to_param(t("Urho3D::Node", is_reference=True)) == "IntPtr"
        assert mapper.to_param(t("Urho3D::Node")) == "IntPtr"
        assert mapper.to_param(t("int", pointer_depth=1)) == "IntPtr"

    def test_void_parameter_rejected(self, mapper):
        with pytest.raises(UnmappedTypeError):
            mapper.to_param(t("void"))

    def test_void_pointer_is_handle(self, mapper):
        assert mapper.to_param(t("void", pointer_depth=1)) == "IntPtr"


class TestReturns:
    def test_void(self, mapper):
        assert mapper.to_return(t("void"), True) == "void"

    def test_primitive_reference_returned_by_value(self, mapper):
        assert mapper.to_return(t("int", is_const=True, is_reference=True), False) == "int"

    def test_string_in_both_contexts(self, mapper):
        assert mapper.to_return(t("Urho3D::String"), True) == "string"
        assert mapper.to_return(t("Urho3D::String", is_const=True, is_reference=True), False) == "string"

    def test_class_return_is_handle(self, mapper):
        assert mapper.to_return(t("Urho3D::Node", pointer_depth=1), True) == "IntPtr"


class TestOverridesAndStrictness:
    def test_override_applies_to_values_and_references(self):
        mapper = PInvokeTypeMapper(overrides={"Urho3D::Vector3": "Vector3"})
        assert mapper.to_param(t("Urho3D::Vector3", is_const=True, is_reference=True)) == "Vector3"
        assert mapper.to_return(t("Urho3D::Vector3"), True) == "Vector3"
        assert mapper.to_param(t("Urho3D::Vector3", pointer_depth=1)) == "IntPtr"

    def test_strict_rejects_unknown_value_types(self):
        mapper = PInvokeTypeMapper(strict=True)
        with pytest.raises(UnmappedTypeError, match="Urho3D::Node"):
            mapper.to_param(t("Urho3D::Node"))
        assert mapper.to_param(t("Urho3D::Node", pointer_depth=1)) == "IntPtr"

    def test_nameless_type_rejected(self, mapper):
        with pytest.raises(UnmappedTypeError):
            mapper.to_return(t(""), False)

    def test_void_reference_rejected(self, mapper):
        with pytest.raises(UnmappedTypeError):
            mapper.to_return(t("void", is_reference=True), False)
