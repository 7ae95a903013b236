"""
Schema AST node definitions.

This module defines the annotated type tree that the compiler turns into JSON
Schema. Nodes are plain dataclasses compared by identity: two structurally
identical nodes are still two nodes, which is what lets the compiler tell
"the same named node seen twice" from "two nodes sharing a name".

Type Hierarchy:
    SchemaNode (abstract)
    ├── Primitive: string, number, integer, boolean, null
    ├── Literal: a single string/number/boolean value
    ├── Enum: ordered (name, value) pairs
    ├── TemplateLiteral: string built from literal and typed parts
    ├── Tuple: positional elements plus an optional rest segment
    ├── Struct: property signatures plus index signatures
    ├── Union: members joined as anyOf or oneOf
    ├── Suspend: lazy reference to another node (recursion)
    ├── Declaration: opaque type with no JSON Schema shape
    ├── Undefined: absence of a value (only meaningful inside unions)
    ├── Unknown: any value
    └── Never: no value

Every node can carry:
    - annotations: identifier, title, description, default, examples, ...
    - checks: ordered Filter / FilterGroup constraint chain
    - encoding: alternate node compiled in place of this one
    - override: JsonSchemaOverride hook replacing the compiled fragment

Example:
    ```python
    from schemasmith.schema.types import Primitive, PropertySignature, Struct

    person = Struct([
        PropertySignature("name", Primitive("string")),
        PropertySignature("nickname", Primitive("string"), is_optional=True),
    ]).annotate(identifier="Person")
    ```
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Tuple as TupleType, Union as UnionType

from schemasmith.schema.document import Dialect, Fragment

PRIMITIVE_KINDS = ("string", "number", "integer", "boolean", "null")


@dataclass
class Filter:
    """
    A single constraint in a node's check chain.

    Attributes:
        kind: Constraint kind tag (e.g. "isMinLength", "isBetween")
        params: Kind-specific parameters (e.g. {"minLength": 3})
        annotations: Annotations attached to the constraint itself
        required: Overrides the optionality of the checked node when set
    """

    kind: str
    params: Dict[str, Any] = field(default_factory=dict)
    annotations: Dict[str, Any] = field(default_factory=dict)
    required: Optional[bool] = None


@dataclass
class FilterGroup:
    """
    A named group of constraints, e.g. isInt32 = isInt & isBetween.

    Attributes:
        checks: Constituent constraints, in order
        annotations: Annotations attached to the group
        required: Overrides the optionality of the checked node when set
    """

    checks: List["Check"] = field(default_factory=list)
    annotations: Dict[str, Any] = field(default_factory=dict)
    required: Optional[bool] = None


Check = UnionType[Filter, FilterGroup]


@dataclass
class OverrideContext:
    """
    What an override hook gets to work with.

    Attributes:
        target: Dialect being generated
        json_schema: Fragment the compiler would have produced without the hook
        make: Compiles another node in the same run (shares definitions)
        type_parameters: Compiled type parameters of a Declaration
    """

    target: Dialect
    json_schema: Fragment
    make: Callable[["SchemaNode"], Fragment]
    type_parameters: List[Fragment] = field(default_factory=list)


class JsonSchemaOverride(ABC):
    """
    Capability interface for nodes whose JSON Schema must be hand written.

    Attributes:
        required: When set, overrides the optionality of the node as a
            property or tuple element
    """

    required: Optional[bool] = None

    @abstractmethod
    def override(self, context: OverrideContext) -> Fragment:
        """
        Produce the final fragment for the node.

        Args:
            context: Target dialect, default fragment and compile callback

        Returns:
            Fragment: JSON Schema to use for the node
        """
        pass


@dataclass
class Override(JsonSchemaOverride):
    """JsonSchemaOverride backed by a plain function."""

    fn: Callable[[OverrideContext], Fragment]
    required: Optional[bool] = None

    def override(self, context: OverrideContext) -> Fragment:
        return self.fn(context)


@dataclass(eq=False)
class SchemaNode(ABC):
    """
    Abstract base class for all AST nodes.

    The shared fields are keyword-only so that subclasses keep their own
    positional fields: Primitive("string"), Literal("a"), ...
    """

    annotations: Dict[str, Any] = field(default_factory=dict, kw_only=True)
    checks: List[Check] = field(default_factory=list, kw_only=True)
    encoding: Optional["SchemaNode"] = field(default=None, kw_only=True)
    override: Optional[JsonSchemaOverride] = field(default=None, kw_only=True)

    @property
    def tag(self) -> str:
        """Node kind name used in error messages."""
        return type(self).__name__

    def annotate(self, **annotations: Any) -> "SchemaNode":
        """Return a copy with the given annotations added."""
        return replace(self, annotations={**self.annotations, **annotations})

    def check(self, *checks: Check) -> "SchemaNode":
        """Return a copy with the given constraints appended to the chain."""
        return replace(self, checks=[*self.checks, *checks])

    def with_encoding(self, encoded: "SchemaNode") -> "SchemaNode":
        """Return a copy that compiles as `encoded`."""
        return replace(self, encoding=encoded)

    def with_override(self, override: UnionType[JsonSchemaOverride, Callable[[OverrideContext], Fragment]]) -> "SchemaNode":
        """Return a copy whose fragment is produced by `override`."""
        if not isinstance(override, JsonSchemaOverride):
            override = Override(override)
        return replace(self, override=override)


@dataclass(eq=False)
class Primitive(SchemaNode):
    """
    A JSON primitive type.

    Example JSON Schema:
        {"type": "string"}
    """

    kind: str = "string"


@dataclass(eq=False)
class Literal(SchemaNode):
    """
    Exactly one string, number or boolean value.

    Example JSON Schema:
        {"type": "string", "enum": ["a"]}
    """

    value: Any = None


@dataclass(eq=False)
class Enum(SchemaNode):
    """
    Ordered (name, value) members; compiled as a union of literals.

    Attributes:
        enums: Member names and values, in declaration order
    """

    enums: List[TupleType[str, Any]] = field(default_factory=list)


@dataclass(eq=False)
class TemplateLiteral(SchemaNode):
    """
    A string made of literal text and typed holes, e.g. `id-${number}`.

    Attributes:
        parts: Literal strings or nodes (Primitive string/number/integer,
            Literal, TemplateLiteral, or a Union of those)
    """

    parts: List[UnionType[str, SchemaNode]] = field(default_factory=list)


@dataclass(eq=False)
class Element:
    """
    A positional tuple element.

    Attributes:
        node: Element type
        is_optional: Whether the element may be omitted
        annotations: Annotations attached to the position, not the type
    """

    node: SchemaNode
    is_optional: bool = False
    annotations: Dict[str, Any] = field(default_factory=dict)


@dataclass(eq=False)
class Tuple(SchemaNode):
    """
    Positional elements followed by at most one rest segment.

    Attributes:
        elements: Positional elements
        rest: Rest segment first, then any post-rest elements (unsupported)
    """

    elements: List[Element] = field(default_factory=list)
    rest: List[SchemaNode] = field(default_factory=list)


@dataclass(eq=False)
class PropertySignature:
    """
    A named property of a Struct.

    Attributes:
        name: Property key (must be a string to compile)
        node: Property type
        is_optional: Whether the key may be absent
        annotations: Annotations attached to the key, not the type
    """

    name: Any
    node: SchemaNode
    is_optional: bool = False
    annotations: Dict[str, Any] = field(default_factory=dict)


@dataclass(eq=False)
class IndexSignature:
    """
    Typed keys beyond the declared properties, e.g. Record<string, number>.

    Attributes:
        parameter: Key type (string, number or template literal)
        node: Value type
    """

    parameter: SchemaNode
    node: SchemaNode


@dataclass(eq=False)
class Struct(SchemaNode):
    """
    A JSON object with named properties and index signatures.

    Example JSON Schema:
        {
            "type": "object",
            "properties": {"name": {"type": "string"}},
            "required": ["name"],
            "additionalProperties": false
        }
    """

    property_signatures: List[PropertySignature] = field(default_factory=list)
    index_signatures: List[IndexSignature] = field(default_factory=list)


@dataclass(eq=False)
class Union(SchemaNode):
    """
    Members joined as anyOf or oneOf.

    Attributes:
        members: Alternatives; Undefined members are dropped on compile
        mode: "anyOf" or "oneOf"
    """

    members: List[SchemaNode] = field(default_factory=list)
    mode: str = "anyOf"


@dataclass(eq=False)
class Suspend(SchemaNode):
    """
    Lazy reference to another node, used to express recursion.

    The thunk is evaluated at most once. A Suspend only compiles when it, or
    the node its thunk returns, carries an identifier.
    """

    thunk: Callable[[], SchemaNode] = None
    _resolved: Optional[SchemaNode] = field(default=None, init=False, repr=False)

    def resolve(self) -> SchemaNode:
        """Force the thunk (memoized)."""
        if self._resolved is None:
            self._resolved = self.thunk()
        return self._resolved


@dataclass(eq=False)
class Declaration(SchemaNode):
    """
    An opaque type (class instance, symbol, bigint, ...).

    Only compiles through an override or the on_missing_annotation hook.
    """

    name: str = "Declaration"
    type_parameters: List[SchemaNode] = field(default_factory=list)


@dataclass(eq=False)
class Undefined(SchemaNode):
    """Absence of a value. Makes a property optional when found in a union."""


@dataclass(eq=False)
class Unknown(SchemaNode):
    """Any JSON value."""


@dataclass(eq=False)
class Never(SchemaNode):
    """No value at all."""
