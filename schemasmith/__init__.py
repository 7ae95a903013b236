"""
SchemaSmith: JSON Schema generation, dialect conversion and OpenAI rewriting

SchemaSmith compiles an annotated schema AST into JSON Schema documents,
normalizes legacy draft-07 and OpenAPI 3.0 schemas to draft 2020-12, and
narrows documents to the strict subset accepted by OpenAI structured outputs.

Key Features:
    - draft-07, draft 2020-12 and OpenAPI 3.1 output from one AST
    - Named definitions with $ref, recursion through Suspend nodes
    - Deterministic handling of identifiers shared by different schemas
    - Constraint checks mapped to JSON Schema keywords
    - Lossless draft-07 / OpenAPI 3.0 → draft 2020-12 conversion
    - OpenAI rewriting with a traceable list of changes

Quick Start:
    ```python
    from schemasmith import make_json_schema_draft2020_12, openai
    from schemasmith.schema.types import Primitive, PropertySignature, Struct

    person = Struct([
        PropertySignature("name", Primitive("string")),
        PropertySignature("age", Primitive("number"), is_optional=True),
    ]).annotate(identifier="Person")

    document = make_json_schema_draft2020_12(person)
    print(document.to_json())
    print(openai(document).schema)
    ```

Architecture:
    1. Compiler: AST → JSON Schema fragment + definitions
    2. Converter: draft-07 / OpenAPI 3.0 → canonical draft 2020-12
    3. Rewriter: draft 2020-12 → OpenAI structured-output subset
    4. Validator: meta-schema checks and instance validation (jsonschema)
"""

__version__ = "0.1.0"

from schemasmith.api import (  # noqa: F401
    from_draft07,
    from_openapi3_0,
    make_json_schema_draft07,
    make_json_schema_draft2020_12,
    make_json_schema_openapi3_1,
    openai,
    to_draft2020_12,
)
from schemasmith.schema.document import Dialect, Document  # noqa: F401

__all__ = [
    "make_json_schema_draft07",
    "make_json_schema_draft2020_12",
    "make_json_schema_openapi3_1",
    "from_draft07",
    "from_openapi3_0",
    "to_draft2020_12",
    "openai",
    "Dialect",
    "Document",
]
