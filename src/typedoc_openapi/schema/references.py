"""Memoized compilation of named declarations into ``components.schemas``."""

from __future__ import annotations

import hashlib
import json
import re
from typing import TYPE_CHECKING

import structlog

from typedoc_openapi.schema.generics import Binding, GenericEnvironment
from typedoc_openapi.schema.models import UNRESOLVED, Schema
from typedoc_openapi.typedoc.loader import DeclarationTable
from typedoc_openapi.typedoc.models import (
    CLASS,
    INTERFACE,
    TYPE_ALIAS,
    ArrayType,
    IntersectionType,
    IntrinsicType,
    LiteralType,
    Reflection,
    ReferenceType,
    ReflectionType,
    SomeType,
    TupleType,
    UnionType,
)

if TYPE_CHECKING:
    from typedoc_openapi.schema.compiler import SchemaCompiler

logger = structlog.get_logger(__name__)

# Component names are limited to this alphabet by OpenAPI.
_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9.\-_]")


def _mentions(descriptor: SomeType, name: str) -> bool:
    """Whether ``name`` is referenced anywhere inside ``descriptor``."""
    match descriptor:
        case ReferenceType():
            return descriptor.name == name or any(_mentions(arg, name) for arg in descriptor.type_arguments)
        case ArrayType(element_type=element):
            return _mentions(element, name)
        case UnionType(types=types) | IntersectionType(types=types):
            return any(_mentions(member, name) for member in types)
        case TupleType(elements=elements):
            return any(_mentions(element, name) for element in elements)
        case _:
            return False


class ReferenceRegistry:
    """Composite key -> compiled schema, handing out ``$ref`` pointers.

    A key is reserved with an empty placeholder before its declaration body
    is compiled, so self- and mutually-referential declarations resolve to a
    pointer instead of recursing forever. A generic declaration that
    instantiates itself with a nested argument (``Tree<Tree<T>>`` inside
    ``Tree<T>``) points back at its outermost instantiation.
    """

    def __init__(self, declarations: DeclarationTable, compiler: SchemaCompiler):
        self._declarations = declarations
        self._compiler = compiler
        self._schemas: dict[str, Schema] = {}
        self._compiling: dict[str, str] = {}  # declaration name -> outermost key

    def resolve(self, reference: ReferenceType, env: GenericEnvironment) -> Schema:
        """Return a pointer for ``reference``, compiling its declaration on first use."""
        key = self.composite_key(reference, env)
        if key in self._schemas:
            return Schema.pointer(key)

        declaration = self._declaration_for(reference)
        if declaration is None:
            logger.error("reference.unresolved", name=reference.name)
            return UNRESOLVED
        if declaration.kind_string not in (INTERFACE, CLASS, TYPE_ALIAS):
            logger.error("reference.unsupported_kind", name=reference.name, kind=declaration.kind_string)
            return UNRESOLVED

        outer_key = self._compiling.get(declaration.name)
        if outer_key is not None and self._grows(declaration.name, key, outer_key, reference):
            logger.warning("generic.recursive_instantiation", key=key, outer=outer_key)
            return Schema.pointer(outer_key)

        self._schemas[key] = Schema()
        if outer_key is None:
            self._compiling[declaration.name] = key
        try:
            schema = self._compile_declaration(declaration, reference, env)
        finally:
            if outer_key is None:
                del self._compiling[declaration.name]

        self._schemas[key] = schema
        return Schema.pointer(key)

    def composite_key(self, reference: ReferenceType, env: GenericEnvironment) -> str:
        """``Name`` or ``Name_Arg1_Arg2`` for generic instantiations."""
        if not reference.type_arguments:
            return reference.name
        names = [self._argument_name(argument, env) for argument in reference.type_arguments]
        return "_".join([reference.name, *names])

    def schemas(self) -> dict[str, Schema]:
        return dict(self._schemas)

    def get(self, key: str) -> Schema | None:
        return self._schemas.get(key)

    def __contains__(self, key: str) -> bool:
        return key in self._schemas

    def _declaration_for(self, reference: ReferenceType) -> Reflection | None:
        declaration = self._declarations.get(reference.name)
        if declaration is None:
            declaration = self._declarations.target(reference)
        return declaration

    def _grows(self, name: str, key: str, outer_key: str, reference: ReferenceType) -> bool:
        """Whether instantiating ``name`` again would nest its key deeper than the outer one."""
        if any(_mentions(argument, name) for argument in reference.type_arguments):
            return True
        return key.split("_").count(name) > outer_key.split("_").count(name)

    def _compile_declaration(
        self,
        declaration: Reflection,
        reference: ReferenceType,
        env: GenericEnvironment,
    ) -> Schema:
        scope = GenericEnvironment(self._bind_parameters(declaration, reference.type_arguments, env))
        if declaration.kind_string != TYPE_ALIAS:
            return self._compiler.compile_object(declaration, scope)
        if declaration.type is None:
            logger.warning("alias.missing_type", name=declaration.name)
            return Schema(type="object")
        return self._compiler.compile(declaration.type, scope)

    def _bind_parameters(
        self,
        declaration: Reflection,
        arguments: list[SomeType],
        env: GenericEnvironment,
    ) -> dict[str, Binding]:
        """Bind each formal parameter to its argument (or default), compiled in the caller's scope."""
        bindings = {}
        for index, parameter in enumerate(declaration.type_parameters):
            argument = arguments[index] if index < len(arguments) else parameter.default
            if argument is None:
                logger.warning("generic.missing_argument", declaration=declaration.name, parameter=parameter.name)
                bindings[parameter.name] = Binding(Schema(type="object"), "object")
                continue
            bindings[parameter.name] = Binding(
                self._compiler.compile(argument, env),
                self._argument_name(argument, env),
            )
        return bindings

    def _argument_name(self, argument: SomeType, env: GenericEnvironment) -> str:
        match argument:
            case ReferenceType():
                if self._compiler.is_type_parameter(argument, env):
                    binding = env.lookup(argument.name)
                    if binding is not None:
                        return binding.key_name
                return self.composite_key(argument, env)
            case IntrinsicType(name=name):
                return name
            case LiteralType(value=value):
                text = value if isinstance(value, str) else json.dumps(value)
                return _UNSAFE_KEY_CHARS.sub("_", text)
            case ArrayType(element_type=element):
                return f"{self._argument_name(element, env)}Array"
            case UnionType(types=types):
                return "Or".join(self._argument_name(member, env) for member in types)
            case IntersectionType(types=types):
                return "And".join(self._argument_name(member, env) for member in types)
            case TupleType(elements=elements):
                return "Tuple" + "".join(self._argument_name(element, env) for element in elements)
            case ReflectionType():
                # inline shapes have no name; key on their content
                content = argument.model_dump_json(exclude_none=True) + repr(env)
                digest = hashlib.sha1(content.encode("utf-8")).hexdigest()
                return f"Object{digest[:8]}"
            case _:
                return argument.type
