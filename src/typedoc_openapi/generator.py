"""One generation run: project dump in, OpenAPI document out."""

import json
from pathlib import Path
from typing import Any

import structlog
import yaml

from typedoc_openapi.document.composer import DEFAULT_OPENAPI_VERSION, DocumentComposer
from typedoc_openapi.document.description import ApiDescription
from typedoc_openapi.endpoints.assembler import EndpointAssembler
from typedoc_openapi.schema.compiler import SchemaCompiler
from typedoc_openapi.schema.shims import Shim
from typedoc_openapi.typedoc.loader import DeclarationTable, load_project
from typedoc_openapi.typedoc.models import Reflection

logger = structlog.get_logger(__name__)


class OpenApiGenerator:
    """Owns every registry for one project, so independent runs never share state."""

    def __init__(self, project: Reflection, openapi_version: str = DEFAULT_OPENAPI_VERSION):
        self.project = project
        self.declarations = DeclarationTable(project)
        self.compiler = SchemaCompiler(self.declarations)
        self.assembler = EndpointAssembler(self.compiler)
        self.composer = DocumentComposer(project.name, openapi_version)

        for name in self.declarations.names():
            if name in self.compiler.shims:
                logger.warning("declaration.shadowed_by_shim", name=name)

    @classmethod
    def from_file(cls, file_path: Path, openapi_version: str = DEFAULT_OPENAPI_VERSION) -> "OpenApiGenerator":
        return cls(load_project(file_path), openapi_version=openapi_version)

    def add_shim(self, name: str, shim: Shim) -> None:
        self.compiler.shims.register(name, shim)

    def generate(self, description: ApiDescription | None = None) -> dict[str, Any]:
        endpoints = self.assembler.assemble(self.project.children)
        return self.composer.compose(
            endpoints,
            self.compiler.references.schemas(),
            self.assembler.tags,
            description,
        )


def dump_document(document: dict[str, Any], fmt: str = "json", indent: int = 2) -> str:
    """Serialize a generated document as JSON or YAML."""
    if fmt == "yaml":
        return yaml.safe_dump(document, sort_keys=False, allow_unicode=True, indent=indent)
    return json.dumps(document, indent=indent, ensure_ascii=False) + "\n"
