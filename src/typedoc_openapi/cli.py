"""CLI entry point for typedoc-openapi."""

from pathlib import Path

import click

from typedoc_openapi.config import get_settings
from typedoc_openapi.document.description import load_description
from typedoc_openapi.errors import TypedocOpenApiError
from typedoc_openapi.generator import OpenApiGenerator, dump_document
from typedoc_openapi.log import configure_logging_once


@click.group()
@click.option("--log-level", default=None, help="Diagnostic log level (default from TYPEDOC_OPENAPI_LOG_LEVEL).")
def main(log_level: str | None):
    """typedoc-openapi: generate OpenAPI documents from TypeDoc project dumps."""
    configure_logging_once(log_level or get_settings().log_level)


@main.command()
@click.argument("project_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output file for the OpenAPI document.")
@click.option("-d", "--description", "description_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Description file with @directives and prose.")
@click.option("--format", "fmt", default=None, type=click.Choice(["json", "yaml"]), help="Output format.")
@click.option("--openapi-version", default=None, help="Value of the document's 'openapi' field.")
def generate(project_path: Path, output: Path, description_path: Path | None, fmt: str | None, openapi_version: str | None):
    """Generate an OpenAPI document from a TypeDoc JSON dump."""
    settings = get_settings()
    fmt = fmt or settings.output_format

    click.echo(f"Reading {project_path}...")
    try:
        generator = OpenApiGenerator.from_file(project_path, openapi_version=openapi_version or settings.openapi_version)
        description = load_description(description_path) if description_path else None
        document = generator.generate(description)
        text = dump_document(document, fmt=fmt, indent=settings.indent)
    except TypedocOpenApiError as e:
        raise click.ClickException(str(e)) from e

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(
        f"Wrote {len(document['paths'])} paths and "
        f"{len(document['components']['schemas'])} schemas to {output}"
    )


@main.command()
@click.argument("project_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def schemas(project_path: Path):
    """List the component schemas a project compiles to."""
    try:
        generator = OpenApiGenerator.from_file(project_path)
        document = generator.generate()
    except TypedocOpenApiError as e:
        raise click.ClickException(str(e)) from e

    for name in document["components"]["schemas"]:
        click.echo(name)
