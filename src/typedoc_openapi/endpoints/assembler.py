"""Collect endpoints from ``@controller`` classes and their HTTP-verb methods."""

import structlog

from typedoc_openapi.endpoints.base import Endpoint, Param, Tag
from typedoc_openapi.endpoints.paths import strip_quotes
from typedoc_openapi.schema.compiler import SchemaCompiler
from typedoc_openapi.typedoc.loader import find_in_tree
from typedoc_openapi.typedoc.models import CLASS, METHOD, Reflection

logger = structlog.get_logger(__name__)

HTTP_METHODS = {
    "httpGet": "get",
    "httpPost": "post",
    "httpPut": "put",
    "httpDelete": "delete",
    "httpPatch": "patch",
    "httpHead": "head",
    "httpOptions": "options",
}


def _is_controller(item: Reflection) -> bool:
    return item.kind_string == CLASS and item.decorator("controller") is not None


def _is_endpoint(item: Reflection) -> bool:
    return (
        item.kind_string == METHOD
        and item.is_public
        and any(dec.name in HTTP_METHODS for dec in item.decorators)
    )


def _argument(item: Reflection, decorator_name: str, argument_name: str) -> str | None:
    decorator = item.decorator(decorator_name)
    if decorator is None or argument_name not in decorator.arguments:
        return None
    return strip_quotes(str(decorator.arguments[argument_name]))


class EndpointAssembler:
    """Walks controllers and builds one Endpoint per verb decorator."""

    def __init__(self, compiler: SchemaCompiler):
        self.compiler = compiler
        self.tags: list[Tag] = []

    def assemble(self, declarations: list[Reflection]) -> list[Endpoint]:
        self.tags = []
        endpoints: list[Endpoint] = []
        for controller in find_in_tree(declarations, _is_controller):
            prefix = _argument(controller, "controller", "path")
            if prefix is None:
                logger.warning("controller.missing_path", name=controller.name)
                continue
            self.tags.append(Tag(name=controller.name, description=controller.documentation))
            for method in controller.children:
                if _is_endpoint(method):
                    endpoints.extend(self._assemble_method(controller.name, prefix, method))
        return endpoints

    def _assemble_method(self, controller: str, prefix: str, method: Reflection) -> list[Endpoint]:
        if not method.signatures:
            logger.warning("endpoint.missing_signature", controller=controller, method=method.name)
            return []
        signature = method.signatures[0]

        path_parameters: list[Param] = []
        query_parameters: list[Param] = []
        body = None
        body_description = ""
        for parameter in signature.parameters:
            if parameter.type is None:
                continue
            if parameter.decorator("requestParam") is not None:
                path_parameters.append(Param(
                    name=_argument(parameter, "requestParam", "paramName") or parameter.name,
                    location="path",
                    required=True,
                    style="simple",
                    param_schema=self.compiler.compile(parameter.type),
                    description=parameter.documentation,
                ))
            elif parameter.decorator("queryParam") is not None:
                query_parameters.append(Param(
                    name=_argument(parameter, "queryParam", "queryParamName") or parameter.name,
                    location="query",
                    required=False,
                    style="form",
                    param_schema=self.compiler.compile(parameter.type),
                    description=parameter.documentation,
                ))
            elif parameter.decorator("requestBody") is not None:
                body = self.compiler.compile(parameter.type)
                body_description = parameter.documentation

        response = self.compiler.compile(signature.type) if signature.type is not None else None
        comment = signature.comment

        endpoints = []
        for decorator in method.decorators:
            verb = HTTP_METHODS.get(decorator.name)
            if verb is None or "path" not in decorator.arguments:
                continue
            endpoints.append(Endpoint(
                controller=controller,
                method=verb,
                prefix=prefix,
                suffix=strip_quotes(str(decorator.arguments["path"])),
                path_parameters=path_parameters,
                query_parameters=query_parameters,
                body=body,
                body_description=body_description,
                response=response,
                response_description=comment.returns.strip() if comment else "",
                summary=(comment.short_text if comment and comment.short_text else signature.name),
                description=signature.documentation,
                deprecated=signature.has_comment_tag("deprecated") or method.has_comment_tag("deprecated"),
            ))
        return endpoints
