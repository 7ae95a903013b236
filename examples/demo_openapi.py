#!/usr/bin/env python3
"""
Demo: Legacy OpenAPI 3.0 component to OpenAI structured outputs.

This demonstrates the converter and rewriter on an existing schema:
- nullable: true on a typed property, an enum and a $ref
- Boolean exclusiveMinimum (OpenAPI 3.0 form)
- oneOf and allOf, which OpenAI does not accept as-is
- x-* vendor extensions, which are left untouched
"""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from schemasmith.schema import Dialect, Document, RecordingTracer, openai, to_draft2020_12
from schemasmith.validation import check_schema


def main():
    print("=" * 60)
    print("SchemaSmith Demo: OpenAPI 3.0 → OpenAI")
    print("=" * 60)

    component = {
        "type": "object",
        "properties": {
            "id": {"type": "integer", "minimum": 0, "exclusiveMinimum": True},
            "status": {"type": "string", "enum": ["open", "closed"], "nullable": True},
            "owner": {"$ref": "#/components/schemas/User"},
            "payload": {
                "oneOf": [
                    {"type": "string"},
                    {"type": "number", "x-precision": {"nullable": True}},
                ]
            },
        },
        "required": ["id"],
        "components": {
            "schemas": {
                "User": {
                    "allOf": [
                        {"type": "object", "description": "A user"},
                        {"properties": {"name": {"type": "string", "nullable": True}}},
                    ]
                }
            }
        },
    }

    document = to_draft2020_12(Document.from_json(component, Dialect.OPENAPI_3_0))

    print("\nConverted to draft 2020-12:")
    print(json.dumps(document.to_json(), indent=2))
    check_schema(document)
    print("✓ Meta-schema check passed")

    tracer = RecordingTracer()
    rewritten = openai(document, tracer)

    print("\nRewritten for OpenAI:")
    print(json.dumps(rewritten.to_json(include_uri=False), indent=2))

    print(f"\n{len(tracer.changes)} change(s):")
    for change in tracer.changes:
        print(f"  - [{change.name}] {'/'.join(str(p) for p in change.path)}: {change.summary}")

    print("\n" + "=" * 60)
    print("Demo Complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
