"""
Validation layer module.

This module checks produced documents against their dialect's meta-schema and
validates JSON instances against them, reporting every error found.

Components:
    - validator: Meta-schema checks and instance validation using jsonschema
    - error_formatter: Convert validation errors to human-readable messages

Validation Flow:
    1. Serialize the Document to a standalone schema (definitions embedded)
    2. Pick the jsonschema validator class from `$schema` (draft 2020-12 default)
    3. Collect all errors (not just the first one)
    4. Format errors with context (path, expected keyword value, actual value)

Example:
    ```python
    from schemasmith.validation import validate

    schema = {"type": "object", "properties": {"age": {"type": "integer"}}}
    result = validate('{"age": "not a number"}', schema)
    if not result.is_valid:
        for error in result.errors:
            print(f"  - {error.path}: {error.message}")
    ```
"""

from schemasmith.validation.validator import (
    SchemaCheckError,
    ValidationError,
    ValidationResult,
    check_schema,
    format_validation_errors,
    quick_validate,
    to_standalone_schema,
    validate,
    validate_instance,
)
from schemasmith.validation.error_formatter import (
    format_error_with_context,
    suggest_compilation_fix,
    suggest_fix,
)

__all__ = [
    "SchemaCheckError",
    "ValidationError",
    "ValidationResult",
    "check_schema",
    "format_validation_errors",
    "quick_validate",
    "to_standalone_schema",
    "validate",
    "validate_instance",
    "format_error_with_context",
    "suggest_compilation_fix",
    "suggest_fix",
]
