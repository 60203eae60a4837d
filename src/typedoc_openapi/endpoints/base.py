"""Endpoint records produced from decorated controller methods.

Each record renders itself as an OpenAPI operation; the document composer
only decides where in the ``paths`` map it goes.
"""

from typing import Any

from pydantic import BaseModel

from typedoc_openapi.endpoints.paths import join_route
from typedoc_openapi.schema.models import Schema

JSON_CONTENT = "application/json"


class Param(BaseModel):
    """A path or query parameter."""

    name: str
    location: str  # path / query
    required: bool
    style: str  # simple / form
    param_schema: Schema
    description: str = ""

    def to_openapi(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "in": self.location,
            "description": self.description,
            "required": self.required,
            "schema": self.param_schema.to_openapi(),
            "style": self.style,
        }


class Tag(BaseModel):
    """One controller, listed in the document's ``tags``."""

    name: str
    description: str = ""


class Endpoint(BaseModel):
    """One HTTP verb on one route of a controller method."""

    controller: str
    method: str  # get / post / put / delete / patch / head / options
    prefix: str
    suffix: str
    path_parameters: list[Param] = []
    query_parameters: list[Param] = []
    body: Schema | None = None
    body_description: str = ""
    response: Schema | None = None
    response_description: str = ""
    summary: str = ""
    description: str = ""
    deprecated: bool = False

    @property
    def path(self) -> str:
        return join_route(self.prefix, self.suffix)

    @property
    def parameters(self) -> list[Param]:
        return [*self.path_parameters, *self.query_parameters]

    def operation(self) -> dict[str, Any]:
        """The OpenAPI operation object for this verb."""
        operation: dict[str, Any] = {
            "tags": [self.controller],
            "summary": self.summary,
            "description": self.description,
        }
        if self.body is not None:
            operation["requestBody"] = {
                "description": self.body_description,
                "content": {JSON_CONTENT: {"schema": self.body.to_openapi()}},
                "required": True,
            }
        operation["deprecated"] = self.deprecated
        operation["responses"] = {
            "200": {
                "description": self.response_description,
                "content": {JSON_CONTENT: {"schema": self.response.to_openapi() if self.response else {}}},
            }
        }
        return operation
