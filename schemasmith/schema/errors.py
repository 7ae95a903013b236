"""
Compilation errors.

Every error raised while compiling an AST node is a CompilationError (a
ValueError subclass) carrying the structural path from the document root.

Error Hierarchy:
    CompilationError
    ├── UnsupportedNodeError: node kind with no JSON Schema representation
    ├── UnsupportedShapeError: representable kind, unrepresentable shape
    └── MissingIdentifierError: Suspend node without a resolvable identifier
"""

from typing import List, Sequence

from schemasmith.utils.json_utils import PathSegment, format_path


class CompilationError(ValueError):
    """
    Base class for compiler failures.

    Attributes:
        reason: Message without the location suffix
        path: Property names and indices from the root to the failing node
    """

    def __init__(self, reason: str, path: Sequence[PathSegment] = ()):
        self.reason = reason
        self.path: List[PathSegment] = list(path)
        super().__init__(f"{reason} at {format_path(self.path)}")


class UnsupportedNodeError(CompilationError):
    """Raised for Declaration/Undefined nodes and literals with no JSON form."""


class UnsupportedShapeError(CompilationError):
    """Raised for post-rest tuple elements, non-string keys and bad index signatures."""


class MissingIdentifierError(CompilationError):
    """Raised when a Suspend node has no identifier anywhere in its thunk chain."""
