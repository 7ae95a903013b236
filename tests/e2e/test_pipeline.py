"""
End-to-end test: compile, convert, rewrite and validate.

These tests run whole pipelines the way a caller would: an AST compiled to
every dialect, legacy schema files converted and narrowed for OpenAI, and
JSON instances validated against each stage.
"""

import json
from pathlib import Path

import pytest

from schemasmith import (
    make_json_schema_draft07,
    make_json_schema_draft2020_12,
    make_json_schema_openapi3_1,
    openai,
    to_draft2020_12,
)
from schemasmith.schema import RecordingTracer, checks
from schemasmith.schema.document import Dialect, Document
from schemasmith.schema.types import Element, Primitive, PropertySignature, Struct, Suspend, Tuple
from schemasmith.validation import check_schema, validate

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures" / "schemas"


def build_person():
    address = Struct([
        PropertySignature("street", Primitive("string"), is_optional=True),
        PropertySignature("city", Primitive("string")),
    ]).annotate(identifier="Address")

    holder = {}
    person = Struct([
        PropertySignature("name", Primitive("string").check(checks.is_min_length(1))),
        PropertySignature("age", Primitive("number").check(checks.is_int32()), is_optional=True),
        PropertySignature("address", address, is_optional=True),
        PropertySignature("location", Tuple([Element(Primitive("number")), Element(Primitive("number"))]), is_optional=True),
        PropertySignature("friends", Tuple(rest=[Suspend(thunk=lambda: holder["person"])]), is_optional=True),
    ]).annotate(identifier="Person", description="A person")
    holder["person"] = person
    return person


def load_fixture(name):
    with open(FIXTURES_DIR / name) as f:
        return json.load(f)


@pytest.mark.e2e
class TestCompilePipeline:
    """Test AST → JSON Schema → OpenAI subset."""

    @pytest.fixture(scope="class")
    def person(self):
        return build_person()

    def test_every_target_passes_its_meta_schema(self, person):
        """Test that each compiled dialect is a valid schema."""
        for make in (make_json_schema_draft07, make_json_schema_draft2020_12, make_json_schema_openapi3_1):
            document = make(person)
            assert set(document.definitions) == {"Person", "Address"}
            check_schema(document)

    def test_compiled_document_validates_instances(self, person):
        """Test the compiled schema against conforming and non-conforming data."""
        document = make_json_schema_draft2020_12(person)

        assert validate('{"name": "Ann", "friends": [{"name": "Bob", "address": {"city": "Oslo"}}]}', document).is_valid
        assert validate('{"name": "Ann", "location": [1, 2]}', document).is_valid
        assert not validate('{"name": ""}', document).is_valid
        assert not validate('{"name": "Ann", "age": 1.5}', document).is_valid
        assert not validate('{"name": "Ann", "location": [1, 2, 3]}', document).is_valid
        assert not validate('{"name": "Ann", "nickname": "A"}', document).is_valid

    def test_draft07_converts_to_draft2020_12(self, person):
        """Test that converting the draft-07 output gives the 2020-12 output."""
        converted = to_draft2020_12(make_json_schema_draft07(person))
        direct = make_json_schema_draft2020_12(person)

        assert converted.to_json() == direct.to_json()

    def test_openai_rewrite(self, person):
        """Test that the rewritten document is valid and strict."""
        tracer = RecordingTracer()
        rewritten = openai(make_json_schema_draft2020_12(person), tracer)

        check_schema(rewritten)
        assert rewritten.schema["required"] == ["name", "age", "address", "location", "friends"]
        assert rewritten.schema["properties"]["age"] == {"type": ["integer", "null"]}
        assert rewritten.schema["properties"]["address"] == {"anyOf": [{"$ref": "#/$defs/Address"}, {"type": "null"}]}
        assert rewritten.definitions["Address"]["required"] == ["street", "city"]

        names = {change.name for change in tracer.changes}
        assert "replace-top-level-ref-with-definition" in names
        assert "merge-allOf-fragments" in names
        assert "add-required-property" in names

        instance = {
            "name": "Ann",
            "age": None,
            "address": {"street": None, "city": "Oslo"},
            "location": None,
            "friends": [{"name": "Bob", "age": 40, "address": None, "location": [0, 1], "friends": None}],
        }
        assert validate(json.dumps(instance), rewritten).is_valid
        assert not validate('{"name": "Ann"}', rewritten).is_valid


@pytest.mark.e2e
class TestLegacyPipeline:
    """Test legacy schema file → draft 2020-12 → OpenAI subset."""

    def test_openapi3_0_order(self):
        """Test converting and rewriting an OpenAPI 3.0 component."""
        document = to_draft2020_12(Document.from_json(load_fixture("legacy_order.openapi.json"), Dialect.OPENAPI_3_0))
        check_schema(document)

        order = {"id": 1, "status": "open", "customer": {"name": "Ann"}, "lines": [{"sku": "a-1", "quantity": 100}]}
        assert validate(json.dumps(order), document).is_valid
        assert not validate(json.dumps({**order, "id": 0}), document).is_valid

        rewritten = openai(document)
        check_schema(rewritten)
        assert rewritten.definitions["Line"]["properties"]["quantity"] == {"type": ["integer", "null"]}
        assert "x-internal" not in rewritten.schema["properties"]["note"]

        strict_order = {
            "id": 1,
            "status": None,
            "customer": {"name": "Ann", "email": None},
            "lines": [{"sku": "a-1", "quantity": None}],
            "note": None,
        }
        assert validate(json.dumps(strict_order), rewritten).is_valid

    def test_draft07_point(self):
        """Test converting a draft-07 tuple schema and rewriting it."""
        document = to_draft2020_12(Document.from_json(load_fixture("legacy_point.draft07.json"), Dialect.DRAFT_07))
        check_schema(document)

        assert validate('{"point": [1, 2], "tags": ["a"]}', document).is_valid
        assert not validate('{"point": [1, 2, 3]}', document).is_valid

        rewritten = openai(document)
        check_schema(rewritten)
        assert rewritten.definitions["Point"] == {
            "type": "array",
            "prefixItems": [{"type": "number"}, {"type": "number"}],
            "items": False,
        }
        assert validate('{"point": [1, 2], "tags": null}', rewritten).is_valid
