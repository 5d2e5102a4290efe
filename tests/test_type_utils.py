"""
Tests for autoshot.type_utils

Test Coverage:
- parse_type_string(): generics, variance, nullability, star projections
- type_to_source() / collect_type_imports()
- name_ref() / resolve_name_refs() / clashing_names()
- is_implicit_import(), escape_identifier(), base_file_name()
"""
import pytest

from autoshot.api_parser import parse_type
from autoshot.type_utils import (base_file_name, clashing_names, collect_type_imports, escape_identifier,
                                 escape_package, is_implicit_import, name_ref, parse_type_string,
                                 resolve_name_refs, type_to_source)


class TestParseTypeString:
    """Compact type notation parsing."""

    def test_parse_type_string_when_plain_name_then_no_arguments(self):
        assert parse_type_string("kotlin.String") == ("kotlin.String", [], False)

    def test_parse_type_string_when_nested_generics_then_tree(self):
        # Act
        parsed = parse_type_string("kotlin.collections.Map<kotlin.String, out com.example.Item?>?")

        # Assert
        assert parsed == (
            "kotlin.collections.Map",
            [("", ("kotlin.String", [], False)), ("out", ("com.example.Item", [], True))],
            True,
        )

    def test_parse_type_string_when_star_projection_then_star(self):
        assert parse_type_string("kotlin.reflect.KClass<*>") == ("kotlin.reflect.KClass", ["*"], False)

    def test_parse_type_string_when_package_starts_with_in_then_not_variance(self):
        name, args, _ = parse_type_string("kotlin.Array<inline.Foo>")
        assert args == [("", ("inline.Foo", [], False))]

    @pytest.mark.parametrize("text", ["kotlin.collections.List<", "Foo Bar", "<kotlin.String>", "Map<A B>"])
    def test_parse_type_string_when_malformed_then_raises(self, text):
        with pytest.raises(ValueError):
            parse_type_string(text)


class TestTypeRendering:
    """Rendering and import collection for resolved types."""

    def test_type_to_source_when_generic_nullable_then_simple_names(self):
        type_ref = parse_type("kotlin.collections.List<out com.example.Item>?")
        assert type_to_source(type_ref) == "List<out Item>?"

    def test_type_to_source_when_star_argument_then_star(self):
        assert type_to_source(parse_type("kotlin.reflect.KClass<*>")) == "KClass<*>"

    def test_collect_type_imports_when_generic_then_includes_arguments(self):
        imports = collect_type_imports(parse_type("kotlin.collections.Map<kotlin.String, com.example.Item>"))
        assert imports == {"kotlin.collections.Map", "kotlin.String", "com.example.Item"}

    def test_type_to_source_when_reference_given_then_used_for_every_name(self):
        type_ref = parse_type("kotlin.collections.List<com.example.Item>")
        assert type_to_source(type_ref, reference=lambda name: name) == "kotlin.collections.List<com.example.Item>"


class TestNameRefs:
    """Deferred spelling of type names."""

    def test_resolve_name_refs_when_not_qualified_then_simple_name(self):
        text = f"@{name_ref('androidx.compose.runtime.Composable')}"
        assert resolve_name_refs(text) == "@Composable"

    def test_resolve_name_refs_when_qualified_then_full_name(self):
        # Arrange
        text = f"@{name_ref('com.example.ui.Preview')} x: {name_ref('com.example.Item')}"

        # Act
        rendered = resolve_name_refs(text, {"com.example.ui.Preview"})

        # Assert
        assert rendered == "@com.example.ui.Preview x: Item"

    def test_clashing_names_when_simple_names_collide_then_all_colliding_returned(self):
        # Act
        clashes = clashing_names({
            "androidx.compose.ui.tooling.preview.Preview",
            "com.example.ui.Preview",
            "androidx.compose.runtime.Composable",
        })

        # Assert
        assert clashes == {"androidx.compose.ui.tooling.preview.Preview", "com.example.ui.Preview"}

    def test_clashing_names_when_all_distinct_then_empty(self):
        assert clashing_names({"com.a.First", "com.z.Last"}) == set()


class TestNames:
    """Name helpers."""

    @pytest.mark.parametrize("name, expected", [
        ("kotlin.String", True),
        ("kotlin.collections.List", True),
        ("java.lang.Integer", True),
        ("kotlinx.coroutines.flow.Flow", False),
        ("kotlin.reflect.KClass", False),
        ("com.example.Item", False),
    ])
    def test_is_implicit_import(self, name, expected):
        assert is_implicit_import(name) is expected

    @pytest.mark.parametrize("name, expected", [
        ("Greeting", "Greeting"),
        ("in", "`in`"),
        ("my preview", "`my preview`"),
        ("`already`", "`already`"),
    ])
    def test_escape_identifier(self, name, expected):
        assert escape_identifier(name) == expected

    def test_escape_package_when_keyword_segment_then_escaped(self):
        assert escape_package("com.example.fun") == "com.example.`fun`"

    @pytest.mark.parametrize("file_name, expected", [
        ("Sample.kt", "Sample"),
        ("Legacy.java", "Legacy"),
        ("src\\main\\Sample.kt", "Sample"),
        ("NoExtension", "NoExtension"),
    ])
    def test_base_file_name(self, file_name, expected):
        assert base_file_name(file_name) == expected
