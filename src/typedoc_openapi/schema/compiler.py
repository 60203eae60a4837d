"""Translate TypeDoc type nodes into OpenAPI schemas.

``SchemaCompiler.compile`` dispatches on the kind of type node. Named
references go through, in order: shims, generic parameter substitution,
enumerations, and finally the reference registry, which compiles the
declaration once and hands out ``$ref`` pointers to it.
"""

from typing import Any

import structlog
import yaml

from typedoc_openapi.errors import UnrecognizedIntrinsicError
from typedoc_openapi.schema.generics import EMPTY_ENVIRONMENT, GenericEnvironment
from typedoc_openapi.schema.models import Schema
from typedoc_openapi.schema.references import ReferenceRegistry
from typedoc_openapi.schema.shims import ShimRegistry, date_time_shim, opaque_object_shim
from typedoc_openapi.typedoc.loader import DeclarationTable
from typedoc_openapi.typedoc.models import (
    ENUMERATION,
    TYPE_PARAMETER,
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

logger = structlog.get_logger(__name__)

OK_CONTENT_RESULT = "OkNegotiatedContentResult"
ACTION_RESULT_MARKER = "IHttpActionResult"


def _literal_type(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if value is None:
        return "null"
    return "string"


def _one_or_union(schemas: list[Schema]) -> Schema:
    if len(schemas) == 1:
        return schemas[0]
    return Schema(one_of=schemas)


class SchemaCompiler:
    """Recursive, cycle-safe translator from type nodes to schemas.

    Owns the shim and reference registries for one generation run.
    """

    def __init__(self, declarations: DeclarationTable):
        self.declarations = declarations
        self.shims = ShimRegistry()
        self.references = ReferenceRegistry(declarations, self)
        self._register_default_shims()

    def _register_default_shims(self) -> None:
        self.shims.register("Moment", date_time_shim)
        self.shims.register("Date", date_time_shim)
        self.shims.register("unknown", opaque_object_shim)
        self.shims.register("Promise", self._unwrap_promise)
        self.shims.register(OK_CONTENT_RESULT, self._unwrap_first_argument)

    def compile(self, descriptor: SomeType, env: GenericEnvironment = EMPTY_ENVIRONMENT) -> Schema:
        match descriptor:
            case LiteralType(value=value):
                return Schema(type=_literal_type(value), enum=[value])
            case ReferenceType():
                return self._compile_reference(descriptor, env)
            case IntrinsicType():
                return self._compile_intrinsic(descriptor, env)
            case ArrayType(element_type=element):
                return Schema(type="array", items=self.compile(element, env))
            case ReflectionType(declaration=declaration):
                return self._compile_inline(declaration, env)
            case IntersectionType(types=types):
                return Schema(all_of=[self.compile(member, env) for member in types])
            case UnionType(types=types):
                # Literal-only unions stay a oneOf of single-value enums.
                return Schema(one_of=[self.compile(member, env) for member in types])
            case TupleType(elements=elements):
                return Schema(type="array", items=Schema(one_of=[self.compile(element, env) for element in elements]))
            case _:
                logger.error("descriptor.unhandled_kind", kind=getattr(descriptor, "type", None))
                return Schema(type="object")

    def compile_object(self, declaration: Reflection, env: GenericEnvironment = EMPTY_ENVIRONMENT) -> Schema:
        """Object schema from an interface, class or inline type literal.

        Property schemas get the property's documentation as ``title``
        unless they are ``$ref`` pointers, which cannot carry siblings.
        """
        schema = Schema(type="object", description=declaration.documentation)

        signature = declaration.index_signature
        if signature is not None and signature.type is not None:
            schema.additional_properties = self.compile(signature.type, env)

        properties = declaration.properties
        if not properties:
            if schema.additional_properties is None:
                logger.warning("object.empty", name=declaration.name)
            return schema

        schema.properties = {}
        schema.required = []
        for prop in properties:
            if prop.type is None:
                continue
            compiled = self.compile(prop.type, env)
            if not compiled.is_reference:
                documentation = prop.documentation
                update: dict[str, Any] = {"title": documentation}
                if documentation and not compiled.description:
                    update["description"] = documentation
                compiled = compiled.model_copy(update=update)
            schema.properties[prop.name] = compiled
            if not prop.flags.is_optional:
                schema.required.append(prop.name)
        return schema

    def is_type_parameter(self, reference: ReferenceType, env: GenericEnvironment) -> bool:
        """Whether ``reference`` names a generic parameter rather than a declaration."""
        target = self.declarations.target(reference)
        if target is not None:
            return target.kind_string == TYPE_PARAMETER
        return reference.name in env and reference.name not in self.declarations

    # -- per-kind helpers -----------------------------------------------------

    def _compile_reference(self, reference: ReferenceType, env: GenericEnvironment) -> Schema:
        shim = self.shims.get(reference.name)
        if shim is not None:
            return shim(reference, env)

        if self.is_type_parameter(reference, env):
            binding = env.lookup(reference.name)
            if binding is None:
                logger.warning("generic.unbound_parameter", name=reference.name)
                return Schema(type="object")
            return binding.schema

        target = self.declarations.target(reference)
        if target is not None and target.kind_string == ENUMERATION:
            return self._compile_enumeration(target)

        return self.references.resolve(reference, env)

    def _compile_intrinsic(self, intrinsic: IntrinsicType, env: GenericEnvironment) -> Schema:
        name = intrinsic.name
        match name:
            case "string" | "boolean" | "number":
                return Schema(type=name)
            case "any":
                return Schema(type="object")
            case "undefined" | "void" | "null":
                return Schema(type="null")

        # e.g. ``unknown`` is an intrinsic in TypeDoc but has a shim
        shim = self.shims.get(name)
        if shim is not None:
            return shim(ReferenceType(name=name), env)
        raise UnrecognizedIntrinsicError(name)

    def _compile_inline(self, declaration: Reflection, env: GenericEnvironment) -> Schema:
        if declaration.children:
            return self.compile_object(declaration, env)

        signature = declaration.index_signature
        if signature is not None and signature.type is not None:
            return Schema(type="object", additional_properties=self.compile(signature.type, env))

        logger.error("reflection.empty", name=declaration.name)
        return Schema(type="object")

    def _compile_enumeration(self, enumeration: Reflection) -> Schema:
        values = [self._enumeration_value(member) for member in enumeration.children]
        return Schema(type=_literal_type(values[0]) if values else "string", enum=values)

    def _enumeration_value(self, member: Reflection) -> Any:
        if isinstance(member.type, LiteralType):
            return member.type.value
        # TypeDoc < 0.22 only records the initializer source text
        if member.default_value is not None:
            return yaml.safe_load(member.default_value)
        return member.name

    # -- wrapper shims --------------------------------------------------------

    def _unwrap_first_argument(self, reference: ReferenceType, env: GenericEnvironment) -> Schema:
        """Unwrap a single-argument wrapper such as ``OkNegotiatedContentResult<T>``."""
        if not reference.type_arguments:
            logger.warning("wrapper.missing_argument", name=reference.name)
            return Schema(type="object")
        return self.compile(reference.type_arguments[0], env)

    def _unwrap_promise(self, reference: ReferenceType, env: GenericEnvironment) -> Schema:
        """Find the payload type of a controller's ``Promise<...>`` return.

        Responses are often unions of a payload-bearing ok result and
        several status-code results. Ok-content results win; otherwise
        anything implementing the action-result marker is dropped.
        """
        if not reference.type_arguments:
            return Schema(type="null")

        argument = reference.type_arguments[0]
        if not isinstance(argument, UnionType):
            return self.compile(argument, env)

        ok_results = [
            self._unwrap_first_argument(member, env)
            for member in argument.types
            if isinstance(member, ReferenceType) and member.name == OK_CONTENT_RESULT
        ]
        if ok_results:
            return _one_or_union(ok_results)

        payloads = [self.compile(member, env) for member in argument.types if not self._is_action_result(member)]
        if payloads:
            return _one_or_union(payloads)

        logger.warning("promise.no_payload_branch", members=[member.type for member in argument.types])
        return self.compile(argument, env)

    def _is_action_result(self, member: SomeType) -> bool:
        if not isinstance(member, ReferenceType):
            return False
        declaration = self.declarations.get(member.name) or self.declarations.target(member)
        if declaration is None:
            return False
        return any(
            isinstance(implemented, ReferenceType) and implemented.name == ACTION_RESULT_MARKER
            for implemented in declaration.implemented_types
        )
