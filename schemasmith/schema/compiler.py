"""
AST compiler - turn schema AST nodes into JSON Schema fragments.

This module walks an annotated AST (see types.py) and produces the JSON Schema
fragment for each node, registering named nodes as definitions and emitting
`$ref`s to them. Cyclic ASTs (through Suspend nodes) terminate because a
definition is reserved before its body is compiled.

Usage:
    ```python
    from schemasmith.schema.compiler import CompileOptions, make_document
    from schemasmith.schema.types import Primitive, PropertySignature, Struct

    person = Struct([PropertySignature("name", Primitive("string"))]).annotate(identifier="Person")
    document = make_document(person, CompileOptions(target="draft-2020-12"))

    document.schema       # {"$ref": "#/$defs/Person"}
    document.definitions  # {"Person": {"type": "object", ...}}
    ```

Compilation order for every node:
    1. Identifier / cycle resolution (definitions + $ref)
    2. Override hook
    3. Encoding (compile the encoded node instead)
    4. Base compilation by node kind
    5. Check chain, appended as allOf (a check `type` replaces the declared type)
    6. title / description / default / examples

Definitions:
    A node whose identifier is already registered with a different fragment
    is registered again under the first free key among "<id>-1", "<id>-2", ...
    (reusing an equal suffixed entry when there is one), so no two different
    fragments ever share a definition name.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Union
from typing import Tuple as TypingTuple

from schemasmith.schema.annotations import get_identifier, get_json_schema_annotations
from schemasmith.schema.checks import get_check_fragments
from schemasmith.schema.document import Dialect, Document, Fragment, get_pointer
from schemasmith.schema.errors import (
    CompilationError,
    MissingIdentifierError,
    UnsupportedNodeError,
    UnsupportedShapeError,
)
from schemasmith.schema.regex_compiler import NUMBER_KEY_PATTERN, get_template_literal_pattern
from schemasmith.schema.types import (
    PRIMITIVE_KINDS,
    Declaration,
    Enum,
    Literal,
    Never,
    OverrideContext,
    Primitive,
    SchemaNode,
    Struct,
    Suspend,
    TemplateLiteral,
    Tuple,
    Undefined,
    Unknown,
)
from schemasmith.schema.types import Union as UnionNode
from schemasmith.utils.json_utils import PathSegment, escape_json_pointer, json_equal

logger = logging.getLogger(__name__)

REFERENCE_STRATEGIES = ("keep", "skip")
COMPILE_TARGETS = (Dialect.DRAFT_07, Dialect.DRAFT_2020_12, Dialect.OPENAPI_3_1)


@dataclass
class CompileOptions:
    """
    Settings for one compilation run.

    Attributes:
        target: Dialect to generate (draft-07, draft-2020-12 or openapi-3.1)
        definitions: Definitions registry, filled in place during the run
        reference_strategy: "keep" emits $refs for identified nodes, "skip"
            inlines them (Suspend nodes still produce $refs)
        additional_properties: Default `additionalProperties` for structs
        on_missing_annotation: Fallback for Declaration / Undefined nodes;
            returning None means "no fallback"
    """

    target: Dialect = Dialect.DRAFT_2020_12
    definitions: Dict[str, Fragment] = field(default_factory=dict)
    reference_strategy: str = "keep"
    additional_properties: Fragment = False
    on_missing_annotation: Optional[Callable[[SchemaNode], Optional[Fragment]]] = None

    def __post_init__(self) -> None:
        self.target = Dialect(self.target)
        if self.target not in COMPILE_TARGETS:
            raise ValueError(f"Cannot compile to {self.target.value}, use draft-07, draft-2020-12 or openapi-3.1")
        if self.reference_strategy not in REFERENCE_STRATEGIES:
            raise ValueError(f"Unknown reference strategy: {self.reference_strategy}")


def make_document(node: SchemaNode, options: Optional[CompileOptions] = None) -> Document:
    """
    Compile a root node into a Document.

    Args:
        node: Root AST node
        options: Compilation settings (default: draft 2020-12, keep refs)

    Returns:
        Document: Root fragment plus every definition it references

    Raises:
        CompilationError: If any node cannot be represented
    """
    options = options or CompileOptions()
    schema = compile_node(node, (), options)
    logger.debug(f"Compiled document with {len(options.definitions)} definition(s) for {options.target.value}")
    return Document(dialect=options.target, schema=schema, definitions=options.definitions)


def compile_node(node: SchemaNode, path: Sequence[PathSegment] = (), options: Optional[CompileOptions] = None) -> Fragment:
    """
    Compile a single node, registering any definitions in `options.definitions`.

    Args:
        node: AST node
        path: Location of the node, used in error messages
        options: Compilation settings

    Returns:
        Fragment: JSON Schema for the node
    """
    options = options or CompileOptions()
    return _go(node, list(path), options, False, False)


# ---------------------------------------------------------------------------
# Fragment helpers
# ---------------------------------------------------------------------------


def _ref(target: Dialect, identifier: str) -> Dict[str, Any]:
    return {"$ref": get_pointer(target) + escape_json_pointer(identifier)}


def _as_object(fragment: Fragment) -> Dict[str, Any]:
    if isinstance(fragment, bool):
        return {} if fragment else {"not": {}}
    return fragment


def _append_all_of(out: Fragment, fragments: Optional[List[Dict[str, Any]]]) -> Fragment:
    if not fragments:
        return out
    out = _as_object(out)
    if "$ref" in out:
        out = {"allOf": [out]}
    if isinstance(out.get("allOf"), list):
        return {**out, "allOf": [*out["allOf"], *fragments]}
    return {**out, "allOf": list(fragments)}


def _split_type(fragment: Dict[str, Any]) -> TypingTuple[Optional[Any], Dict[str, Any]]:
    """Pull `type` out of a check fragment, including the members of a group."""
    rest = dict(fragment)
    json_type = rest.pop("type", None)
    if isinstance(rest.get("allOf"), list):
        members = []
        for member in rest["allOf"]:
            member_type, member = _split_type(member)
            if member_type is not None:
                json_type = member_type
            if member:
                members.append(member)
        if members:
            rest["allOf"] = members
        else:
            del rest["allOf"]
    return json_type, rest


def _switch_type(out: Dict[str, Any], fragments: List[Dict[str, Any]]) -> TypingTuple[Dict[str, Any], List[Dict[str, Any]]]:
    # checks such as isInt replace the declared type instead of intersecting it
    kept = []
    for fragment in fragments:
        json_type, rest = _split_type(fragment)
        if json_type is not None:
            out = {**out, "type": json_type}
        if rest:
            kept.append(rest)
    return out, kept


def _overwrite_annotations(out: Fragment, annotations: Dict[str, Any]) -> Fragment:
    extracted = get_json_schema_annotations(annotations)
    if not extracted:
        return out
    out = _as_object(out)
    if "$ref" in out:
        out = {"allOf": [out]}
    return {**out, **extracted}


def _merge_key_annotations(out: Fragment, annotations: Dict[str, Any]) -> Fragment:
    extracted = get_json_schema_annotations(annotations)
    if not extracted:
        return out
    return _append_all_of(out, [extracted])


def _get_encoded(node: SchemaNode) -> SchemaNode:
    while node.encoding is not None:
        node = node.encoding
    return node


def _is_optional(node: SchemaNode, declared: bool) -> bool:
    if declared:
        return True

    if node.checks:
        flag = node.checks[-1].required
    elif node.override is not None:
        flag = node.override.required
    else:
        flag = None
    if flag is not None:
        return not flag

    encoded = _get_encoded(node)
    if isinstance(encoded, Undefined):
        return True
    return isinstance(encoded, UnionNode) and any(isinstance(m, Undefined) for m in encoded.members)


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


def _go(node: SchemaNode, path: List[PathSegment], options: CompileOptions, ignore_identifier: bool, ignore_override: bool) -> Fragment:
    # 1. identifiers
    if not ignore_identifier and (options.reference_strategy != "skip" or isinstance(node, Suspend)):
        identifier = get_identifier(node)
        if identifier is not None:
            return _resolve_reference(node, identifier, path, options, ignore_override)

    # 2. override
    if not ignore_override and node.override is not None:
        try:
            default = _go(node, path, options, ignore_identifier, True)
        except CompilationError as e:
            logger.debug(f"Default fragment unavailable for override: {e}")
            default = {}
        type_parameters = []
        if isinstance(node, Declaration):
            type_parameters = [_go(tp, path, options, False, False) for tp in node.type_parameters]
        context = OverrideContext(
            target=options.target,
            json_schema=default,
            make=lambda other: _go(other, path, options, False, False),
            type_parameters=type_parameters,
        )
        return _overwrite_annotations(node.override.override(context), node.annotations)

    # 3. encoding
    if node.encoding is not None:
        return _go(node.encoding, path, options, ignore_identifier, ignore_override)

    # 4. base
    out = _base(node, path, options)

    # 5. checks
    if node.checks:
        json_type = out.get("type") if isinstance(out, dict) else None
        fragments = get_check_fragments(node.checks, options.target, json_type)
        if fragments and json_type is not None:
            out, fragments = _switch_type(out, fragments)
        out = _append_all_of(out, fragments)

    # 6. annotations
    return _overwrite_annotations(out, node.annotations)


def _resolve_reference(node: SchemaNode, identifier: str, path: List[PathSegment], options: CompileOptions, ignore_override: bool) -> Fragment:
    definitions = options.definitions

    if identifier not in definitions:
        # reserve the name first so cycles back to it terminate
        definitions[identifier] = _ref(options.target, identifier)
        try:
            definitions[identifier] = _go(node, path, options, True, ignore_override)
        except CompilationError:
            del definitions[identifier]
            raise
        logger.debug(f"Registered definition {identifier!r}")
        return _ref(options.target, identifier)

    if isinstance(node, Suspend):
        return _ref(options.target, identifier)

    generated = _go(node, path, options, True, ignore_override)
    if json_equal(definitions[identifier], generated):
        return _ref(options.target, identifier)

    key = _register_variant(identifier, generated, definitions)
    return _ref(options.target, key)


def _register_variant(identifier: str, generated: Fragment, definitions: Dict[str, Fragment]) -> str:
    n = 1
    while True:
        key = f"{identifier}-{n}"
        if key not in definitions:
            definitions[key] = generated
            logger.info(f"Identifier {identifier!r} is shared by different schemas, registered {key!r}")
            return key
        if json_equal(definitions[key], generated):
            return key
        n += 1


def _base(node: SchemaNode, path: List[PathSegment], options: CompileOptions) -> Fragment:
    if isinstance(node, Primitive):
        if node.kind not in PRIMITIVE_KINDS:
            raise UnsupportedNodeError(f"Unsupported primitive {node.kind!r}", path)
        return {"type": node.kind}

    if isinstance(node, Literal):
        return _compile_literal(node, path)

    if isinstance(node, Enum):
        members = [Literal(value) for _, value in node.enums]
        return _go(UnionNode(members, "anyOf"), path, options, False, False)

    if isinstance(node, TemplateLiteral):
        try:
            pattern = get_template_literal_pattern(node)
        except ValueError as e:
            raise UnsupportedShapeError(str(e), path) from e
        return {"type": "string", "pattern": pattern}

    if isinstance(node, Tuple):
        return _compile_tuple(node, path, options)

    if isinstance(node, Struct):
        return _compile_struct(node, path, options)

    if isinstance(node, UnionNode):
        members = [_go(m, path, options, False, False) for m in node.members if not isinstance(m, Undefined)]
        if not members:
            return {"not": {}}
        if len(members) == 1:
            return members[0]
        return {"oneOf" if node.mode == "oneOf" else "anyOf": members}

    if isinstance(node, Suspend):
        if get_identifier(node) is None:
            raise MissingIdentifierError("Suspend schema without identifier detected", path)
        return _go(node.resolve(), path, options, True, False)

    if isinstance(node, Unknown):
        return {}

    if isinstance(node, Never):
        return {"not": {}}

    if options.on_missing_annotation is not None:
        fallback = options.on_missing_annotation(node)
        if fallback is not None:
            return fallback

    if isinstance(node, Declaration):
        raise UnsupportedNodeError(f"Unsupported schema Declaration({node.name})", path)
    raise UnsupportedNodeError(f"Unsupported schema {node.tag}", path)


def _compile_literal(node: Literal, path: List[PathSegment]) -> Dict[str, Any]:
    value = node.value
    if isinstance(value, bool):
        return {"type": "boolean", "enum": [value]}
    if isinstance(value, str):
        return {"type": "string", "enum": [value]}
    if isinstance(value, (int, float)):
        return {"type": "number", "enum": [value]}
    raise UnsupportedNodeError(f"Unsupported literal {value!r}", path)


def _compile_tuple(node: Tuple, path: List[PathSegment], options: CompileOptions) -> Dict[str, Any]:
    if len(node.rest) > 1:
        raise UnsupportedShapeError("Generating a JSON Schema for post-rest elements is not supported", path)

    out: Dict[str, Any] = {"type": "array"}

    items = [
        _merge_key_annotations(_go(e.node, [*path, i], options, False, False), e.annotations)
        for i, e in enumerate(node.elements)
    ]

    for i, element in enumerate(node.elements):
        if _is_optional(element.node, element.is_optional):
            out["minItems"] = i
            break

    if node.rest:
        rest: Fragment = _go(node.rest[0], [*path, len(node.elements)], options, False, False)
    else:
        rest = False

    if not items:
        out["items"] = rest
    elif options.target == Dialect.DRAFT_07:
        out["items"] = items
        out["additionalItems"] = rest
    else:
        out["prefixItems"] = items
        out["items"] = rest

    return out


def _compile_struct(node: Struct, path: List[PathSegment], options: CompileOptions) -> Dict[str, Any]:
    if not node.property_signatures and not node.index_signatures:
        return {"anyOf": [{"type": "object"}, {"type": "array"}]}

    properties: Dict[str, Fragment] = {}
    required: List[str] = []
    for ps in node.property_signatures:
        if not isinstance(ps.name, str):
            raise UnsupportedShapeError(f"Unsupported property signature name {ps.name!r}", [*path, ps.name])
        compiled = _go(ps.node, [*path, ps.name], options, False, False)
        properties[ps.name] = _merge_key_annotations(compiled, ps.annotations)
        if not _is_optional(ps.node, ps.is_optional):
            required.append(ps.name)

    out: Dict[str, Any] = {
        "type": "object",
        "properties": properties,
        "required": required,
        "additionalProperties": options.additional_properties,
    }

    pattern_properties: Dict[str, Fragment] = {}
    for index_signature in node.index_signatures:
        value = _go(index_signature.node, path, options, False, False)
        pattern = _get_index_signature_pattern(index_signature.parameter, path, options)
        if pattern is not None:
            pattern_properties[pattern] = value
        else:
            out["additionalProperties"] = value

    if pattern_properties:
        out["patternProperties"] = pattern_properties
        del out["additionalProperties"]

    return out


def _find_pattern(fragment: Fragment) -> Optional[str]:
    if not isinstance(fragment, dict):
        return None
    if isinstance(fragment.get("pattern"), str):
        return fragment["pattern"]
    for member in fragment.get("allOf", None) or []:
        if isinstance(member, dict) and isinstance(member.get("pattern"), str):
            return member["pattern"]
    return None


def _get_index_signature_pattern(parameter: SchemaNode, path: List[PathSegment], options: CompileOptions) -> Optional[str]:
    encoded = _get_encoded(parameter)

    if isinstance(encoded, Primitive) and encoded.kind == "string":
        return _find_pattern(_go(parameter, path, options, True, False))

    if isinstance(encoded, Primitive) and encoded.kind in ("number", "integer"):
        return NUMBER_KEY_PATTERN

    if isinstance(encoded, TemplateLiteral):
        try:
            return get_template_literal_pattern(encoded)
        except ValueError as e:
            raise UnsupportedShapeError(str(e), path) from e

    raise UnsupportedShapeError(f"Unsupported index signature parameter {encoded.tag}", path)
