"""
JSON Schema checks and instance validation, delegated to jsonschema.

Two questions come up once a document has been produced:
    1. Is the document itself a valid schema for its dialect? (check_schema)
    2. Does a given JSON value conform to it? (validate)

Both are answered by the jsonschema library; the validator class is picked
from the document's `$schema` and defaults to draft 2020-12.

Usage:
    ```python
    from schemasmith.validation import check_schema, validate

    schema = {"type": "object", "properties": {"age": {"type": "integer"}}}
    check_schema(schema)  # raises SchemaCheckError if the schema is malformed

    result = validate('{"age": "old"}', schema)
    if not result.is_valid:
        for error in result.errors:
            print(f"Error at {error.path}: {error.message}")
    ```
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from jsonschema import Draft7Validator, Draft202012Validator
from jsonschema.validators import validator_for

from schemasmith.schema.converter import to_draft2020_12
from schemasmith.schema.document import Dialect, Document, get_meta_schema_uri

logger = logging.getLogger(__name__)

VALIDATORS = {
    get_meta_schema_uri(Dialect.DRAFT_07): Draft7Validator,
    get_meta_schema_uri(Dialect.DRAFT_2020_12): Draft202012Validator,
}


class SchemaCheckError(ValueError):
    """
    Raised when a document is not a valid schema for its dialect.

    Attributes:
        messages: One jsonschema message per meta-schema violation
    """

    def __init__(self, messages: List[str]):
        self.messages = list(messages)
        summary = "; ".join(self.messages[:3])
        if len(self.messages) > 3:
            summary += f" (and {len(self.messages) - 3} more)"
        super().__init__(f"Invalid schema: {summary}")


@dataclass
class ValidationError:
    """
    Represents a single validation error.

    Attributes:
        path: JSON path to the error location (e.g., ".user.address.zipcode")
        message: Human-readable error message
        schema_path: Path in schema that failed
        validator: Keyword that failed (e.g., "type", "minimum")
        expected: Value of the failing keyword
        actual: What was found
    """
    path: str
    message: str
    schema_path: str
    validator: str
    expected: Any
    actual: Any


@dataclass
class ValidationResult:
    """
    Result of validating JSON against a schema.

    Attributes:
        is_valid: Whether the instance is valid
        errors: List of validation errors (empty if valid)
        raw_output: Original JSON text
        parsed_output: Parsed JSON (None if parsing or validation failed)
    """
    is_valid: bool
    errors: List[ValidationError] = field(default_factory=list)
    raw_output: str = ""
    parsed_output: Optional[Any] = None


def to_standalone_schema(schema: Union[Document, Dict[str, Any], bool]) -> Union[Dict[str, Any], bool]:
    """
    Turn a Document into a single schema value jsonschema can resolve on its own.

    OpenAPI 3.0 documents are converted to draft 2020-12 first, since
    `nullable` and boolean exclusive bounds mean nothing to a JSON Schema
    validator. Plain dicts and booleans are returned unchanged.
    """
    if not isinstance(schema, Document):
        return schema
    if schema.dialect == Dialect.OPENAPI_3_0:
        schema = to_draft2020_12(schema)
    return schema.to_json()


def _validator_class(schema: Union[Dict[str, Any], bool]) -> Any:
    # meta-schema ids are compared without the empty fragment
    if isinstance(schema, dict) and isinstance(schema.get("$schema"), str):
        cls = VALIDATORS.get(schema["$schema"].rstrip("#"))
        if cls is not None:
            return cls
    return validator_for(schema, default=Draft202012Validator)


def check_schema(schema: Union[Document, Dict[str, Any], bool]) -> None:
    """
    Check a schema against its dialect's meta-schema.

    Args:
        schema: Document or standalone schema

    Raises:
        SchemaCheckError: With every violation found, not just the first

    Example:
        ```python
        check_schema({"type": "object", "minProperties": -1})
        # SchemaCheckError: Invalid schema: -1 is less than the minimum of 0
        ```
    """
    standalone = to_standalone_schema(schema)
    cls = _validator_class(standalone)
    meta_validator = cls(cls.META_SCHEMA)
    messages = [error.message for error in meta_validator.iter_errors(standalone)]
    if messages:
        logger.debug(f"Schema failed {cls.__name__} meta-schema check with {len(messages)} error(s)")
        raise SchemaCheckError(messages)


def validate(output: str, schema: Union[Document, Dict[str, Any], bool]) -> ValidationResult:
    """
    Validate JSON text against a schema.

    Args:
        output: JSON string to validate
        schema: Document or standalone schema

    Returns:
        ValidationResult: Validation result with every error found

    Example:
        ```python
        schema = {
            "type": "object",
            "properties": {"name": {"type": "string"}},
            "required": ["name"]
        }

        result = validate('{"name": "Alice"}', schema)
        assert result.is_valid

        result = validate('{"age": 25}', schema)
        assert not result.is_valid
        print(result.errors[0].message)  # "'name' is a required property"
        ```
    """
    try:
        parsed = json.loads(output)
    except json.JSONDecodeError as e:
        return ValidationResult(
            is_valid=False,
            errors=[
                ValidationError(
                    path="",
                    message=f"Invalid JSON: {e.msg}",
                    schema_path="",
                    validator="json",
                    expected="valid JSON",
                    actual=f"parse error at position {e.pos}"
                )
            ],
            raw_output=output,
            parsed_output=None
        )

    return validate_instance(parsed, schema, raw_output=output)


def validate_instance(instance: Any, schema: Union[Document, Dict[str, Any], bool], raw_output: str = "") -> ValidationResult:
    """
    Validate an already parsed JSON value against a schema.

    Args:
        instance: JSON value
        schema: Document or standalone schema
        raw_output: Source text, kept on the result

    Returns:
        ValidationResult: Validation result with every error found
    """
    standalone = to_standalone_schema(schema)
    validator = _validator_class(standalone)(standalone)

    errors = [_convert_jsonschema_error(error, instance) for error in validator.iter_errors(instance)]
    is_valid = len(errors) == 0

    return ValidationResult(
        is_valid=is_valid,
        errors=errors,
        raw_output=raw_output,
        parsed_output=instance if is_valid else None
    )


def _convert_jsonschema_error(error: Any, data: Any) -> ValidationError:
    """
    Convert a jsonschema ValidationError to our ValidationError.

    Args:
        error: jsonschema ValidationError
        data: The data being validated

    Returns:
        ValidationError: Our error representation
    """
    path = "." + ".".join(str(p) for p in error.path) if error.path else "root"

    actual = data
    for key in error.path:
        if isinstance(actual, dict):
            actual = actual.get(key, "MISSING")
        elif isinstance(actual, list):
            try:
                actual = actual[int(key)]
            except (IndexError, ValueError):
                actual = "INVALID_INDEX"
        else:
            actual = "UNKNOWN"

    schema_path = "." + ".".join(str(p) for p in error.schema_path) if error.schema_path else "root"

    expected = error.schema.get(error.validator, "see schema") if isinstance(error.schema, dict) else error.schema

    return ValidationError(
        path=path,
        message=error.message,
        schema_path=schema_path,
        validator=str(error.validator),
        expected=expected,
        actual=actual
    )


def format_validation_errors(errors: List[ValidationError]) -> str:
    """
    Format validation errors as a human-readable string.

    Example:
        ```python
        result = validate(output, schema)
        if not result.is_valid:
            print(format_validation_errors(result.errors))
            # Validation failed with 1 error(s):
            #
            #   1. At .age: 'old' is not of type 'integer'
            #      Expected: integer
            #      Got: old
        ```
    """
    if not errors:
        return "No validation errors"

    lines = [f"Validation failed with {len(errors)} error(s):"]

    for i, error in enumerate(errors, 1):
        lines.append(f"\n  {i}. At {error.path}: {error.message}")
        lines.append(f"     Expected: {error.expected}")
        lines.append(f"     Got: {error.actual}")

    return "\n".join(lines)


def quick_validate(output: str, schema: Union[Document, Dict[str, Any], bool]) -> bool:
    """Validate and return only whether the output conforms."""
    return validate(output, schema).is_valid
