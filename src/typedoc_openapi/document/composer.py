"""Fold endpoints, compiled schemas and description metadata into one document."""

from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field

from typedoc_openapi.document.description import ApiDescription
from typedoc_openapi.endpoints.base import Endpoint, Tag
from typedoc_openapi.schema.models import Schema

logger = structlog.get_logger(__name__)

DEFAULT_OPENAPI_VERSION = "3.0.3"


class Contact(BaseModel):
    name: str | None = None
    url: str | None = None
    email: str | None = None


class License(BaseModel):
    name: str
    url: str | None = None


class Info(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    version: str = "1"
    description: str = ""
    contact: Contact | None = None
    license: License | None = None
    terms_of_service: str | None = Field(default=None, alias="termsOfService")


class DocumentComposer:
    """Builds the OpenAPI document for one project."""

    def __init__(self, project_name: str, openapi_version: str = DEFAULT_OPENAPI_VERSION):
        self.project_name = project_name
        self.openapi_version = openapi_version

    def compose(
        self,
        endpoints: list[Endpoint],
        schemas: dict[str, Schema],
        tags: list[Tag],
        description: ApiDescription | None = None,
    ) -> dict[str, Any]:
        description = description or ApiDescription()

        document: dict[str, Any] = {
            "openapi": self.openapi_version,
            "info": self.build_info(description).model_dump(by_alias=True, exclude_none=True),
            "paths": self.build_paths(endpoints),
            "components": {
                "schemas": {name: schema.to_openapi() for name, schema in schemas.items()},
            },
            "tags": [tag.model_dump() for tag in tags],
        }

        if description.security_schemes:
            document["components"]["securitySchemes"] = {
                name: scheme.model_dump(by_alias=True, exclude_none=True)
                for name, scheme in description.security_schemes.items()
            }
        if description.security:
            document["security"] = [{name: scopes} for name, scopes in description.security.items()]

        return document

    def build_info(self, description: ApiDescription) -> Info:
        info = Info(
            title=description.title or f"OpenAPI schema for {self.project_name}",
            version=description.version or "1",
            description=description.description,
            terms_of_service=description.terms_of_service,
        )
        if description.name or description.url or description.email:
            info.contact = Contact(name=description.name, url=description.url, email=description.email)
        if description.license_name:
            info.license = License(name=description.license_name, url=description.license_url)
        elif description.license_url:
            logger.warning("description.license_without_name", url=description.license_url)
        return info

    def build_paths(self, endpoints: list[Endpoint]) -> dict[str, dict[str, Any]]:
        """Path -> path item; the first endpoint on a path supplies the shared parameters."""
        paths: dict[str, dict[str, Any]] = {}
        for endpoint in endpoints:
            path = endpoint.path
            if path not in paths:
                paths[path] = {"parameters": [param.to_openapi() for param in endpoint.parameters]}
            path_item = paths[path]
            if endpoint.method in path_item:
                logger.warning("path.duplicate_operation", path=path, method=endpoint.method)
                continue
            path_item[endpoint.method] = endpoint.operation()
        return paths
