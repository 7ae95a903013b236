#!/usr/bin/env python3
"""
Demo: Person record compiled to every dialect.

This demonstrates compiling one schema AST with:
- Required and optional properties
- Constraint checks: minLength, maxLength, isInt32
- A named nested struct (Address) shared by two properties
- A recursive "friends" list through Suspend
- OpenAI rewriting of the draft 2020-12 output
"""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from schemasmith import make_json_schema_draft07, make_json_schema_draft2020_12, make_json_schema_openapi3_1
from schemasmith.schema import RecordingTracer, checks, openai
from schemasmith.schema.types import (
    Element,
    Primitive,
    PropertySignature,
    Struct,
    Suspend,
    Tuple,
)
from schemasmith.validation import check_schema, validate


def build_person():
    address = Struct([
        PropertySignature("street", Primitive("string"), is_optional=True),
        PropertySignature("city", Primitive("string")),
        PropertySignature(
            "zipcode",
            Primitive("string").check(checks.is_min_length(5), checks.is_max_length(10)),
            is_optional=True,
        ),
    ]).annotate(identifier="Address", description="A postal address")

    person = None

    def get_person():
        return person

    person = Struct([
        PropertySignature(
            "name",
            Primitive("string").check(checks.is_min_length(2), checks.is_max_length(50)),
        ),
        PropertySignature("age", Primitive("number").check(checks.is_int32())),
        PropertySignature("home", address),
        PropertySignature("work", address, is_optional=True),
        PropertySignature("hobbies", Tuple(rest=[Primitive("string")]), is_optional=True),
        PropertySignature(
            "friends",
            Tuple(rest=[Suspend(thunk=get_person)]),
            is_optional=True,
        ),
        PropertySignature("location", Tuple([Element(Primitive("number")), Element(Primitive("number"))]), is_optional=True),
    ]).annotate(identifier="Person", title="Person")

    return person


def main():
    print("=" * 60)
    print("SchemaSmith Demo: Person Record")
    print("=" * 60)

    person = build_person()

    for make in (make_json_schema_draft07, make_json_schema_draft2020_12, make_json_schema_openapi3_1):
        document = make(person)
        print("\n" + "=" * 60)
        print(f"{document.dialect.value}")
        print("=" * 60)
        print(json.dumps(document.to_json(), indent=2))
        check_schema(document)
        print("✓ Meta-schema check passed")

    document = make_json_schema_draft2020_12(person)
    tracer = RecordingTracer()
    rewritten = openai(document, tracer)

    print("\n" + "=" * 60)
    print("OpenAI structured-output subset")
    print("=" * 60)
    print(json.dumps(rewritten.to_json(include_uri=False), indent=2))

    print(f"\n{len(tracer.changes)} change(s):")
    for change in tracer.changes:
        print(f"  - {'/'.join(str(p) for p in change.path)}: {change.summary}")

    sample = {
        "name": "Alice",
        "age": 28,
        "home": {"city": "NYC"},
        "friends": [{"name": "Bob", "age": 35, "home": {"city": "SF"}}],
    }
    result = validate(json.dumps(sample), document)
    print(f"\nSample valid against draft 2020-12: {'✓' if result.is_valid else '✗'} {result.is_valid}")

    print("\n" + "=" * 60)
    print("Demo Complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
