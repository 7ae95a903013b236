"""
Error formatter - convert validation and compilation errors to user-friendly messages.
"""

from schemasmith.schema.errors import CompilationError, MissingIdentifierError, UnsupportedNodeError
from schemasmith.validation.validator import ValidationError


def format_error_with_context(error: ValidationError) -> str:
    """
    Format a validation error on several lines.

    Args:
        error: Validation error

    Returns:
        str: Location, problem, expected and actual value
    """
    lines = [
        f"Validation error at {error.path}",
        f"   Problem: {error.message}",
        f"   Expected: {error.expected}",
        f"   Got: {error.actual}",
    ]

    if error.validator:
        lines.append(f"   Keyword: {error.validator}")

    return "\n".join(lines)


def suggest_fix(error: ValidationError) -> str:
    """
    Suggest how to fix a validation error.

    Args:
        error: Validation error

    Returns:
        str: Suggested fix
    """
    if error.validator == "required":
        return f"Add the missing property to the object at {error.path}"

    elif error.validator == "type":
        return f"Change {error.path} to type {error.expected}"

    elif error.validator in ["minimum", "maximum", "exclusiveMinimum", "exclusiveMaximum"]:
        return f"Ensure {error.path} is within the allowed range"

    elif error.validator in ["minLength", "maxLength", "minItems", "maxItems"]:
        return f"Adjust the length of {error.path}"

    elif error.validator == "additionalProperties":
        return f"Remove the properties the schema does not declare at {error.path}"

    elif error.validator in ["enum", "const"]:
        return f"Use one of the allowed values at {error.path}: {error.expected}"

    elif error.validator == "json":
        return "Fix the JSON syntax before validating"

    else:
        return "Check the schema requirements"


def suggest_compilation_fix(error: CompilationError) -> str:
    """
    Suggest how to make a node compile.

    Args:
        error: Error raised by the compiler

    Returns:
        str: Suggested fix
    """
    if isinstance(error, MissingIdentifierError):
        return "Annotate the recursive schema with an identifier"

    if isinstance(error, UnsupportedNodeError):
        return "Attach a JSON Schema override or pass an on_missing_annotation fallback"

    return "Restructure the schema so it has a JSON Schema representation"
