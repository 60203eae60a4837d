"""Exceptions raised while generating an OpenAPI document.

Only failures that leave no sensible document to write are raised.
Recoverable problems (unresolved references, empty declarations, unknown
directives) are logged and replaced with a best-effort schema instead.
"""


class TypedocOpenApiError(Exception):
    """Base class for every error this package raises."""


class InputError(TypedocOpenApiError):
    """An input artifact could not be read or does not look like a TypeDoc dump."""


class SchemaCompileError(TypedocOpenApiError):
    """The type tree contains something the compiler has no policy for."""


class UnrecognizedIntrinsicError(SchemaCompileError):
    """An intrinsic type name outside string/number/boolean/any/void/undefined/null."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unrecognized intrinsic type {name!r}")
