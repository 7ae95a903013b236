"""
Constraint kinds and their JSON Schema keywords.

A node's checks are an ordered list of Filter and FilterGroup values. This
module provides constructors for the known constraint kinds and the table
that turns each kind into the keywords appended to the compiled fragment.

Usage:
    ```python
    from schemasmith.schema import checks
    from schemasmith.schema.types import Primitive

    name = Primitive("string").check(checks.is_min_length(1), checks.is_max_length(64))
    age = Primitive("number").check(checks.is_int32())
    ```

Kind table:
    - isMinLength / isMaxLength / isLength: minLength, minItems or
      minProperties (and max variants) depending on the compiled type
    - isPattern, isStartsWith, isEndsWith, isIncludes, isTrimmed,
      isUppercased, isLowercased, isCapitalized, isUncapitalized, isULID: pattern
    - isUUID: format
    - isBase64 / isBase64Url: contentEncoding (2020-12 and OpenAPI 3.1 only)
    - isInt: type integer
    - isFinite: no keyword
    - isMultipleOf: multipleOf
    - isGreaterThan(OrEqualTo) / isLessThan(OrEqualTo) / isBetween: bounds
    - isUnique: uniqueItems
    - isMinProperties / isMaxProperties: minProperties / maxProperties
    - groups isInt32 / isUint32: isInt plus isBetween
"""

import logging
import re
from typing import Any, Callable, Dict, List, Optional, Sequence

from schemasmith.schema.annotations import get_json_schema_annotations
from schemasmith.schema.document import Dialect
from schemasmith.schema.regex_compiler import escape_regex
from schemasmith.schema.types import Check, Filter, FilterGroup

logger = logging.getLogger(__name__)

TRIMMED_PATTERN = r"^\S[\s\S]*\S$|^\S$|^$"
UPPERCASED_PATTERN = r"^[^a-z]*$"
LOWERCASED_PATTERN = r"^[^A-Z]*$"
CAPITALIZED_PATTERN = r"^[^a-z]?[\s\S]*$"
UNCAPITALIZED_PATTERN = r"^[^A-Z]?[\s\S]*$"
ULID_PATTERN = r"^[0-7][0-9A-HJKMNP-TV-Z]{25}$"

INT32_MIN = -2147483648
INT32_MAX = 2147483647
UINT32_MAX = 4294967295

ConstraintBuilder = Callable[[Dict[str, Any], Dialect, Optional[str]], Optional[Dict[str, Any]]]


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------


def _filter(kind: str, params: Dict[str, Any], annotations: Dict[str, Any], required: Optional[bool] = None) -> Filter:
    return Filter(kind=kind, params=params, annotations=dict(annotations), required=required)


def is_min_length(min_length: int, **annotations: Any) -> Filter:
    """Length (string, array or object size) of at least `min_length`."""
    return _filter("isMinLength", {"minLength": min_length}, annotations)


def is_max_length(max_length: int, **annotations: Any) -> Filter:
    """Length of at most `max_length`."""
    return _filter("isMaxLength", {"maxLength": max_length}, annotations)


def is_length(length: int, **annotations: Any) -> Filter:
    """Length of exactly `length`."""
    return _filter("isLength", {"length": length}, annotations)


def is_pattern(regex: Any, **annotations: Any) -> Filter:
    """
    Match a regular expression.

    Args:
        regex: Pattern string or compiled re.Pattern
    """
    if isinstance(regex, re.Pattern):
        regex = regex.pattern
    return _filter("isPattern", {"regex": regex}, annotations)


def is_starts_with(prefix: str, **annotations: Any) -> Filter:
    return _filter("isStartsWith", {"startsWith": prefix}, annotations)


def is_ends_with(suffix: str, **annotations: Any) -> Filter:
    return _filter("isEndsWith", {"endsWith": suffix}, annotations)


def is_includes(text: str, **annotations: Any) -> Filter:
    return _filter("isIncludes", {"includes": text}, annotations)


def is_trimmed(**annotations: Any) -> Filter:
    return _filter("isTrimmed", {}, annotations)


def is_uppercased(**annotations: Any) -> Filter:
    return _filter("isUppercased", {}, annotations)


def is_lowercased(**annotations: Any) -> Filter:
    return _filter("isLowercased", {}, annotations)


def is_capitalized(**annotations: Any) -> Filter:
    return _filter("isCapitalized", {}, annotations)


def is_uncapitalized(**annotations: Any) -> Filter:
    return _filter("isUncapitalized", {}, annotations)


def is_uuid(version: Optional[int] = None, **annotations: Any) -> Filter:
    return _filter("isUUID", {"version": version}, annotations)


def is_ulid(**annotations: Any) -> Filter:
    return _filter("isULID", {}, annotations)


def is_base64(**annotations: Any) -> Filter:
    return _filter("isBase64", {}, annotations)


def is_base64_url(**annotations: Any) -> Filter:
    return _filter("isBase64Url", {}, annotations)


def is_int(**annotations: Any) -> Filter:
    return _filter("isInt", {}, annotations)


def is_finite(**annotations: Any) -> Filter:
    return _filter("isFinite", {}, annotations)


def is_multiple_of(divisor: float, **annotations: Any) -> Filter:
    return _filter("isMultipleOf", {"divisor": divisor}, annotations)


def is_greater_than(exclusive_minimum: float, **annotations: Any) -> Filter:
    return _filter("isGreaterThan", {"exclusiveMinimum": exclusive_minimum}, annotations)


def is_greater_than_or_equal_to(minimum: float, **annotations: Any) -> Filter:
    return _filter("isGreaterThanOrEqualTo", {"minimum": minimum}, annotations)


def is_less_than(exclusive_maximum: float, **annotations: Any) -> Filter:
    return _filter("isLessThan", {"exclusiveMaximum": exclusive_maximum}, annotations)


def is_less_than_or_equal_to(maximum: float, **annotations: Any) -> Filter:
    return _filter("isLessThanOrEqualTo", {"maximum": maximum}, annotations)


def is_between(minimum: float, maximum: float, **annotations: Any) -> Filter:
    return _filter("isBetween", {"minimum": minimum, "maximum": maximum}, annotations)


def is_unique(**annotations: Any) -> Filter:
    return _filter("isUnique", {}, annotations)


def is_min_properties(min_properties: int, **annotations: Any) -> Filter:
    return _filter("isMinProperties", {"minProperties": min_properties}, annotations)


def is_max_properties(max_properties: int, **annotations: Any) -> Filter:
    return _filter("isMaxProperties", {"maxProperties": max_properties}, annotations)


def is_int32(**annotations: Any) -> FilterGroup:
    """32-bit signed integer: isInt and isBetween(-2^31, 2^31 - 1)."""
    return FilterGroup(checks=[is_int(), is_between(INT32_MIN, INT32_MAX)], annotations=dict(annotations))


def is_uint32(**annotations: Any) -> FilterGroup:
    """32-bit unsigned integer: isInt and isBetween(0, 2^32 - 1)."""
    return FilterGroup(checks=[is_int(), is_between(0, UINT32_MAX)], annotations=dict(annotations))


def required(check: Check, value: bool = True) -> Check:
    """Return a copy of `check` that also sets the optionality of its node."""
    if isinstance(check, FilterGroup):
        return FilterGroup(checks=list(check.checks), annotations=dict(check.annotations), required=value)
    return Filter(kind=check.kind, params=dict(check.params), annotations=dict(check.annotations), required=value)


# ---------------------------------------------------------------------------
# Kind table
# ---------------------------------------------------------------------------


def _length_keyword(json_type: Optional[str], bound: str) -> str:
    if json_type == "array":
        return f"{bound}Items"
    if json_type == "object":
        return f"{bound}Properties"
    return f"{bound}Length"


def _content_encoding(encoding: str) -> ConstraintBuilder:
    def build(params: Dict[str, Any], target: Dialect, json_type: Optional[str]) -> Optional[Dict[str, Any]]:
        if target in (Dialect.DRAFT_2020_12, Dialect.OPENAPI_3_1):
            return {"contentEncoding": encoding}
        return None

    return build


def _pattern(pattern: str) -> ConstraintBuilder:
    return lambda params, target, json_type: {"pattern": pattern}


CONSTRAINTS: Dict[str, ConstraintBuilder] = {
    "isMinLength": lambda p, t, j: {_length_keyword(j, "min"): p["minLength"]},
    "isMaxLength": lambda p, t, j: {_length_keyword(j, "max"): p["maxLength"]},
    "isLength": lambda p, t, j: {_length_keyword(j, "min"): p["length"], _length_keyword(j, "max"): p["length"]},
    "isPattern": lambda p, t, j: {"pattern": p["regex"]},
    "isStartsWith": lambda p, t, j: {"pattern": "^" + escape_regex(p["startsWith"])},
    "isEndsWith": lambda p, t, j: {"pattern": escape_regex(p["endsWith"]) + "$"},
    "isIncludes": lambda p, t, j: {"pattern": escape_regex(p["includes"])},
    "isTrimmed": _pattern(TRIMMED_PATTERN),
    "isUppercased": _pattern(UPPERCASED_PATTERN),
    "isLowercased": _pattern(LOWERCASED_PATTERN),
    "isCapitalized": _pattern(CAPITALIZED_PATTERN),
    "isUncapitalized": _pattern(UNCAPITALIZED_PATTERN),
    "isULID": _pattern(ULID_PATTERN),
    "isUUID": lambda p, t, j: {"format": "uuid"},
    "isBase64": _content_encoding("base64"),
    "isBase64Url": _content_encoding("base64url"),
    "isInt": lambda p, t, j: {"type": "integer"},
    "isFinite": lambda p, t, j: None,
    "isMultipleOf": lambda p, t, j: {"multipleOf": p["divisor"]},
    "isGreaterThan": lambda p, t, j: {"exclusiveMinimum": p["exclusiveMinimum"]},
    "isGreaterThanOrEqualTo": lambda p, t, j: {"minimum": p["minimum"]},
    "isLessThan": lambda p, t, j: {"exclusiveMaximum": p["exclusiveMaximum"]},
    "isLessThanOrEqualTo": lambda p, t, j: {"maximum": p["maximum"]},
    "isBetween": lambda p, t, j: {"minimum": p["minimum"], "maximum": p["maximum"]},
    "isUnique": lambda p, t, j: {"uniqueItems": True},
    "isMinProperties": lambda p, t, j: {"minProperties": p["minProperties"]},
    "isMaxProperties": lambda p, t, j: {"maxProperties": p["maxProperties"]},
}


def get_check_fragment(check: Check, target: Dialect, json_type: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    Turn one check into the fragment appended to the compiled node.

    Args:
        check: Filter or FilterGroup
        target: Dialect being generated
        json_type: `type` keyword of the compiled node, used to pick between
            string, array and object length keywords

    Returns:
        Optional[Dict]: Check annotations merged with the constraint
            keywords, or None if the check contributes nothing

    Example:
        ```python
        get_check_fragment(is_min_length(2, description="short"), Dialect.DRAFT_07, "array")
        # {"description": "short", "minItems": 2}
        ```
    """
    annotations = get_json_schema_annotations(check.annotations) or {}

    if isinstance(check, FilterGroup):
        fragments = get_check_fragments(check.checks, target, json_type)
        if fragments:
            return {**annotations, "allOf": fragments}
        return annotations or None

    builder = CONSTRAINTS.get(check.kind)
    if builder is None:
        logger.debug(f"No JSON Schema keyword for check kind {check.kind!r}")
        constraint = None
    else:
        constraint = builder(check.params, target, json_type)

    if not constraint and not annotations:
        return None
    return {**annotations, **(constraint or {})}


def get_check_fragments(checks: Sequence[Check], target: Dialect, json_type: Optional[str] = None) -> Optional[List[Dict[str, Any]]]:
    """
    Turn a check chain into the list of fragments to append as allOf.

    Returns:
        Optional[List[Dict]]: Fragments in chain order, or None if empty
    """
    fragments = []
    for check in checks:
        fragment = get_check_fragment(check, target, json_type)
        if fragment is not None:
            fragments.append(fragment)
    return fragments or None
