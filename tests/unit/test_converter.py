"""
Unit tests for the dialect converter.
"""

import copy

from schemasmith.schema.converter import convert_fragment, from_draft07, from_openapi3_0, to_draft2020_12
from schemasmith.schema.document import Dialect, Document


class TestFromDraft07:
    """Test draft-07 → 2020-12 conversion."""

    def test_boolean_schemas(self):
        """Test that boolean schemas pass through."""
        assert from_draft07(True) is True
        assert from_draft07(False) is False

    def test_strips_schema_at_every_level(self):
        """Test that $schema is dropped at the root and in subschemas."""
        schema = {
            "$schema": "http://json-schema.org/draft-07/schema#",
            "type": "object",
            "properties": {"a": {"$schema": "http://json-schema.org/draft-07/schema#", "type": "string"}},
            "allOf": [{"$schema": "http://json-schema.org/draft-07/schema#", "type": "number"}],
        }

        assert from_draft07(schema) == {
            "type": "object",
            "properties": {"a": {"type": "string"}},
            "allOf": [{"type": "number"}],
        }

    def test_renames_definitions(self):
        """Test that definitions become $defs and their values are converted."""
        schema = {
            "definitions": {
                "Foo": {"type": "object", "properties": {"x": {"$schema": "x", "type": "string"}}},
                "Bar": True,
            }
        }

        assert from_draft07(schema) == {
            "$defs": {
                "Foo": {"type": "object", "properties": {"x": {"type": "string"}}},
                "Bar": True,
            }
        }

    def test_non_object_definitions_are_dropped(self):
        """Test that malformed definitions do not create $defs."""
        assert from_draft07({"definitions": 123}) == {}
        assert from_draft07({"definitions": None}) == {}
        assert from_draft07({"definitions": ["x"]}) == {}

    def test_rewrites_refs(self):
        """Test that local definition refs are re-pointed."""
        schema = {"$ref": "#/definitions/Foo", "definitions": {"Foo": {"type": "string"}}}

        assert from_draft07(schema) == {"$ref": "#/$defs/Foo", "$defs": {"Foo": {"type": "string"}}}

    def test_non_string_refs_are_kept(self):
        """Test that malformed refs pass through."""
        assert from_draft07({"$ref": 123}) == {"$ref": 123}
        assert from_draft07({"$ref": None}) == {"$ref": None}

    def test_tuple_with_additional_items(self):
        """Test that items[] becomes prefixItems and additionalItems becomes items."""
        schema = {
            "type": "array",
            "items": [{"type": "number"}, {"type": "string"}],
            "additionalItems": {"type": "boolean"},
        }

        assert from_draft07(schema) == {
            "type": "array",
            "prefixItems": [{"type": "number"}, {"type": "string"}],
            "items": {"type": "boolean"},
        }

    def test_tuple_without_additional_items(self):
        """Test that an open tuple only gets prefixItems."""
        schema = {"type": "array", "items": [{"type": "number"}, {"type": "string"}]}

        assert from_draft07(schema) == {
            "type": "array",
            "prefixItems": [{"type": "number"}, {"type": "string"}],
        }

    def test_list_drops_additional_items(self):
        """Test that additionalItems next to a single items schema is dropped."""
        schema = {"type": "array", "items": {"type": "number"}, "additionalItems": False}

        assert from_draft07(schema) == {"type": "array", "items": {"type": "number"}}

    def test_additional_items_without_items(self):
        """Test that additionalItems without items is dropped."""
        assert from_draft07({"type": "array", "additionalItems": {"type": "number"}}) == {"type": "array"}

    def test_recurses_into_schema_locations(self):
        """Test recursion into properties, additionalProperties and anyOf."""
        schema = {
            "type": "object",
            "properties": {"a": {"definitions": {"X": {"type": "string", "$schema": "x"}}}},
            "additionalProperties": {
                "items": [{"$ref": "#/definitions/T"}],
                "additionalItems": {"$ref": "#/definitions/U"},
            },
            "anyOf": [{"definitions": {"Y": {"type": "number"}}}],
        }

        assert from_draft07(schema) == {
            "type": "object",
            "properties": {"a": {"$defs": {"X": {"type": "string"}}}},
            "additionalProperties": {
                "prefixItems": [{"$ref": "#/$defs/T"}],
                "items": {"$ref": "#/$defs/U"},
            },
            "anyOf": [{"$defs": {"Y": {"type": "number"}}}],
        }

    def test_unknown_keywords_are_not_walked(self):
        """Test that the contents of unknown keywords are left unchanged."""
        custom = {
            "$schema": "should-stay",
            "definitions": {"Foo": {"type": "string"}},
            "items": [{"type": "number"}],
            "additionalItems": False,
            "$ref": "#/definitions/Foo",
        }

        assert from_draft07({"custom": custom}) == {"custom": custom}

    def test_existing_defs_are_converted(self):
        """Test that $defs already present are kept and converted."""
        schema = {"$defs": {"A": {"$schema": "x", "type": "string"}, "B": {"items": [{"type": "number"}]}}}

        assert from_draft07(schema) == {
            "$defs": {"A": {"type": "string"}, "B": {"prefixItems": [{"type": "number"}]}}
        }

    def test_unrelated_keywords_are_preserved(self):
        """Test that annotations and unknown keys survive."""
        schema = {"title": "Example", "default": 123, "examples": [1, 2, 3], "nullable": True}

        assert from_draft07(schema) == schema

    def test_input_is_not_mutated(self):
        """Test purity of the conversion."""
        schema = {"items": [{"$ref": "#/definitions/A"}], "definitions": {"A": {"type": "string"}}}
        before = copy.deepcopy(schema)

        from_draft07(schema)
        assert schema == before

    def test_idempotent(self):
        """Test that converting an already converted schema changes nothing."""
        schema = {
            "type": "array",
            "items": [{"$ref": "#/definitions/A"}],
            "additionalItems": False,
            "definitions": {"A": {"type": "string"}},
        }
        once = from_draft07(schema)

        assert from_draft07(once) == once


class TestFromOpenApi30:
    """Test OpenAPI 3.0 → 2020-12 conversion."""

    def test_boolean_schemas(self):
        """Test that boolean schemas pass through."""
        assert from_openapi3_0(True) is True
        assert from_openapi3_0(False) is False

    def test_nullable_false_is_removed(self):
        """Test that nullable: false is dropped."""
        assert from_openapi3_0({"type": "string", "nullable": False}) == {"type": "string"}
        assert from_openapi3_0({"type": "string", "nullable": False, "description": "a"}) == {
            "type": "string",
            "description": "a",
        }

    def test_nullable_widens_type(self):
        """Test that a string type becomes [type, null]."""
        assert from_openapi3_0({"type": "string", "nullable": True}) == {"type": ["string", "null"]}
        assert from_openapi3_0({"type": "string", "nullable": True, "description": "a"}) == {
            "type": ["string", "null"],
            "description": "a",
        }

    def test_nullable_widens_type_list(self):
        """Test that null is appended to type lists once."""
        assert from_openapi3_0({"type": ["string"], "nullable": True}) == {"type": ["string", "null"]}
        assert from_openapi3_0({"type": ["string", "null"], "nullable": True}) == {"type": ["string", "null"]}

    def test_nullable_widens_enum(self):
        """Test that null is appended to enums once."""
        assert from_openapi3_0({"enum": ["a", "b"], "nullable": True}) == {"enum": ["a", "b", None]}
        assert from_openapi3_0({"enum": ["a", None], "nullable": True}) == {"enum": ["a", None]}

    def test_nullable_wraps_in_any_of(self):
        """Test that an untyped nullable schema is wrapped."""
        assert from_openapi3_0({"minimum": 1, "nullable": True}) == {
            "anyOf": [{"minimum": 1}, {"type": "null"}]
        }

    def test_nullable_ref(self):
        """Test that a nullable $ref is wrapped."""
        assert from_openapi3_0({"$ref": "#/components/schemas/A", "nullable": True}) == {
            "anyOf": [{"$ref": "#/components/schemas/A"}, {"type": "null"}]
        }

    def test_nested_nullable(self):
        """Test that properties and items are walked."""
        schema = {
            "type": "object",
            "properties": {"a": {"type": "number", "nullable": True}},
            "items": {"type": "string", "nullable": True},
        }

        assert from_openapi3_0(schema) == {
            "type": "object",
            "properties": {"a": {"type": ["number", "null"]}},
            "items": {"type": ["string", "null"]},
        }

    def test_nullable_inside_all_of(self):
        """Test that schema arrays are walked."""
        schema = {"allOf": [{"type": "string", "nullable": True}, {"enum": ["x"], "nullable": True}]}

        assert from_openapi3_0(schema) == {
            "allOf": [{"type": ["string", "null"]}, {"enum": ["x", None]}]
        }

    def test_property_named_like_a_keyword(self):
        """Test that property names are not mistaken for keywords."""
        schema = {
            "type": "object",
            "properties": {"nullable": {"type": "boolean"}, "exclusiveMinimum": True},
        }

        assert from_openapi3_0(schema) == schema

    def test_exclusive_bounds(self):
        """Test the boolean exclusive bound forms."""
        assert from_openapi3_0({"minimum": 5, "exclusiveMinimum": True}) == {"exclusiveMinimum": 5}
        assert from_openapi3_0({"maximum": 5, "exclusiveMaximum": True}) == {"exclusiveMaximum": 5}
        assert from_openapi3_0({"minimum": 5, "exclusiveMinimum": False}) == {"minimum": 5}
        assert from_openapi3_0({"maximum": 5, "exclusiveMaximum": False}) == {"maximum": 5}

    def test_exclusive_flag_without_bound(self):
        """Test that a dangling exclusive flag is dropped."""
        assert from_openapi3_0({"exclusiveMinimum": True}) == {}
        assert from_openapi3_0({"exclusiveMaximum": True}) == {}

    def test_numeric_exclusive_bounds_are_kept(self):
        """Test that 2020-12 style bounds are untouched."""
        assert from_openapi3_0({"exclusiveMinimum": 2, "minimum": 1}) == {"exclusiveMinimum": 2, "minimum": 1}
        assert from_openapi3_0({"exclusiveMaximum": 9, "maximum": 10}) == {"exclusiveMaximum": 9, "maximum": 10}

    def test_nested_exclusive_bounds(self):
        """Test that bounds in properties are converted."""
        schema = {
            "type": "object",
            "properties": {
                "a": {"minimum": 1, "exclusiveMinimum": True},
                "b": {"maximum": 10, "exclusiveMaximum": False},
            },
        }

        assert from_openapi3_0(schema) == {
            "type": "object",
            "properties": {"a": {"exclusiveMinimum": 1}, "b": {"maximum": 10}},
        }

    def test_nullable_and_exclusive_together(self):
        """Test both conversions on one schema."""
        schema = {"type": "number", "nullable": True, "minimum": 1, "exclusiveMinimum": True}

        assert from_openapi3_0(schema) == {"type": ["number", "null"], "exclusiveMinimum": 1}

    def test_vendor_extensions_are_untouched(self):
        """Test that x-* values are not converted."""
        schema = {"type": "string", "x-meta": {"nullable": True, "type": "string"}}

        assert from_openapi3_0(schema) == schema

    def test_input_is_not_mutated(self):
        """Test purity of the conversion."""
        schema = {"properties": {"a": {"type": "string", "nullable": True}}}
        before = copy.deepcopy(schema)

        from_openapi3_0(schema)
        assert schema == before

    def test_idempotent(self):
        """Test that converting an already converted schema changes nothing."""
        schema = {
            "type": "object",
            "properties": {
                "a": {"type": "string", "nullable": True},
                "b": {"minimum": 0, "exclusiveMinimum": True, "nullable": True},
            },
        }
        once = from_openapi3_0(schema)

        assert from_openapi3_0(once) == once


class TestToDraft202012:
    """Test whole-document conversion."""

    def test_draft07_document(self):
        """Test that definitions and refs move to $defs."""
        document = Document.from_json(
            {
                "$schema": "http://json-schema.org/draft-07/schema#",
                "$ref": "#/definitions/A",
                "definitions": {"A": {"type": "array", "items": [{"type": "string"}], "additionalItems": False}},
            },
            Dialect.DRAFT_07,
        )

        converted = to_draft2020_12(document)

        assert converted.dialect == Dialect.DRAFT_2020_12
        assert converted.schema == {"$ref": "#/$defs/A"}
        assert converted.definitions == {"A": {"type": "array", "prefixItems": [{"type": "string"}], "items": False}}

    def test_openapi3_0_document(self):
        """Test that component refs are re-pointed and nullable is converted."""
        document = Document.from_json(
            {
                "type": "object",
                "properties": {"a": {"$ref": "#/components/schemas/A", "nullable": True}},
                "components": {"schemas": {"A": {"type": "string", "nullable": True}}},
            },
            Dialect.OPENAPI_3_0,
        )

        converted = to_draft2020_12(document)

        assert converted.schema == {
            "type": "object",
            "properties": {"a": {"anyOf": [{"$ref": "#/$defs/A"}, {"type": "null"}]}},
        }
        assert converted.definitions == {"A": {"type": ["string", "null"]}}

    def test_openapi3_1_document(self):
        """Test that 3.1 only needs its refs re-pointed."""
        document = Document(
            Dialect.OPENAPI_3_1,
            {"$ref": "#/components/schemas/A"},
            {"A": {"type": ["string", "null"]}},
        )

        converted = to_draft2020_12(document)

        assert converted.schema == {"$ref": "#/$defs/A"}
        assert converted.definitions == {"A": {"type": ["string", "null"]}}

    def test_draft2020_12_is_copied(self):
        """Test that a 2020-12 document is returned as an equal copy."""
        document = Document(Dialect.DRAFT_2020_12, {"type": "string"}, {"A": {"type": "number"}})

        converted = to_draft2020_12(document)

        assert converted == document
        assert converted.definitions is not document.definitions

    def test_convert_fragment(self):
        """Test single-value conversion by dialect name."""
        assert convert_fragment({"type": "string", "nullable": True}, "openapi-3.0") == {"type": ["string", "null"]}
        assert convert_fragment({"$ref": "#/definitions/A"}, "draft-07") == {"$ref": "#/$defs/A"}
        assert convert_fragment({"type": "string"}, "draft-2020-12") == {"type": "string"}
