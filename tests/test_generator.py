"""End-to-end generation over the getting-started sample project."""

import json

import pytest
import yaml
from structlog.testing import capture_logs

from typedoc_openapi.document.description import parse_description
from typedoc_openapi.generator import OpenApiGenerator, dump_document
from typedoc_openapi.schema.models import Schema

from typedoc_builders import interface, intrinsic, project, prop


@pytest.fixture
def document(getting_started_path):
    return OpenApiGenerator.from_file(getting_started_path).generate()


class TestGettingStarted:
    def test_components(self, document):
        assert list(document["components"]["schemas"]) == ["IBodyData", "IReturnData"]

    def test_paths(self, document):
        assert list(document["paths"]) == ["/api/post", "/api/items/{id}"]
        assert set(document["paths"]["/api/post"]) == {"parameters", "post"}
        assert set(document["paths"]["/api/items/{id}"]) == {"parameters", "get", "head", "delete"}

    def test_info_defaults(self, document):
        assert document["info"]["title"] == "OpenAPI schema for getting_started"
        assert document["info"]["version"] == "1"

    def test_tags(self, document):
        assert [tag["name"] for tag in document["tags"]] == ["ApiController"]

    def test_body_schema(self, document):
        body = document["components"]["schemas"]["IBodyData"]
        assert body["type"] == "object"
        assert "{TST1}" in body["description"]
        assert body["required"] == ["stringType", "numberType", "enumeratedLiterals", "inferredType", "indexedType"]

        properties = body["properties"]
        assert properties["stringType"]["type"] == "string"
        assert "{TST2}" in properties["stringType"]["title"]
        assert properties["numberType"]["type"] == "number"
        assert "{TST3}" in properties["numberType"]["title"]
        assert properties["boolType"]["type"] == "boolean"
        assert "{TST4}" in properties["boolType"]["title"]

    def test_literal_union(self, document):
        literals = document["components"]["schemas"]["IBodyData"]["properties"]["enumeratedLiterals"]
        assert "{TST5}" in literals["title"]
        assert literals["oneOf"] == [
            {"type": "string", "enum": ["one"]},
            {"type": "string", "enum": ["two"]},
            {"type": "string", "enum": ["three"]},
        ]

    def test_enumeration_is_inlined(self, document):
        enumeration = document["components"]["schemas"]["IBodyData"]["properties"]["enumeration"]
        assert enumeration["type"] == "number"
        assert enumeration["enum"] == [1, 2, 3, 4]
        assert "Level" not in document["components"]["schemas"]

    def test_inline_type(self, document):
        inferred = document["components"]["schemas"]["IBodyData"]["properties"]["inferredType"]
        assert inferred["type"] == "object"
        assert "{TST6}" in inferred["title"]
        assert inferred["required"] == ["subProperty1", "subProperty2"]
        sub_property = inferred["properties"]["subProperty2"]
        assert sub_property["enum"] == ["string literal"]
        assert "{TST7}" in sub_property["title"]

    def test_index_signature(self, document):
        indexed = document["components"]["schemas"]["IBodyData"]["properties"]["indexedType"]
        assert indexed["additionalProperties"] == {"type": "number"}
        assert "{TST8}" in indexed["title"]

    def test_union_of_inline_types(self, document):
        union = document["components"]["schemas"]["IBodyData"]["properties"]["unionType"]
        assert "{TST9}" in union["title"]
        assert union["oneOf"][0] == {"type": "string"}
        assert list(union["oneOf"][1]["properties"]) == ["typeOne"]
        assert list(union["oneOf"][2]["properties"]) == ["typeTwo"]

    def test_response_schema(self, document):
        response = document["components"]["schemas"]["IReturnData"]
        assert "{TST10}" in response["description"]
        timestamp = response["properties"]["timestamp"]
        assert timestamp["type"] == "string"
        assert timestamp["format"] == "date-time"
        assert "{TST11}" in timestamp["title"]
        assert "{TST12}" in response["properties"]["uuid"]["title"]

    def test_post_operation(self, document):
        post = document["paths"]["/api/post"]["post"]
        assert "{TST14}" in post["summary"]
        assert "{TST15}" in post["description"]
        assert "{TST16}" in post["requestBody"]["description"]
        assert post["requestBody"]["content"]["application/json"]["schema"] == {"$ref": "#/components/schemas/IBodyData"}
        response = post["responses"]["200"]
        assert "{TST17}" in response["description"]
        assert response["content"]["application/json"]["schema"] == {"$ref": "#/components/schemas/IReturnData"}

    def test_item_operations(self, document):
        item = document["paths"]["/api/items/{id}"]
        assert [param["name"] for param in item["parameters"]] == ["id", "verbose"]
        assert item["get"]["summary"] == "Fetch one item."
        assert item["get"]["responses"]["200"]["description"] == "The item."
        assert item["head"]["responses"] == item["get"]["responses"]
        assert item["delete"]["deprecated"] is True
        assert item["delete"]["responses"]["200"]["content"]["application/json"]["schema"] == {"type": "null"}

    def test_json_serializable(self, document):
        assert json.loads(dump_document(document)) == document


class TestGenerator:
    def test_runs_are_deterministic(self, getting_started_path):
        first = dump_document(OpenApiGenerator.from_file(getting_started_path).generate())
        second = dump_document(OpenApiGenerator.from_file(getting_started_path).generate())
        assert first == second

    def test_yaml_output(self, getting_started_path):
        document = OpenApiGenerator.from_file(getting_started_path).generate()
        text = dump_document(document, fmt="yaml")
        assert text.startswith("openapi: 3.0.3")
        assert yaml.safe_load(text) == document

    def test_description_is_applied(self, getting_started_path):
        description = parse_description("@title: Sample API\nThe sample.\nSecond line.")
        document = OpenApiGenerator.from_file(getting_started_path).generate(description)
        assert document["info"]["title"] == "Sample API"
        assert document["info"]["description"] == "The sample.\nSecond line."

    def test_openapi_version(self, getting_started_path):
        document = OpenApiGenerator.from_file(getting_started_path, openapi_version="3.1.0").generate()
        assert document["openapi"] == "3.1.0"

    def test_declaration_shadowed_by_shim_is_logged(self):
        with capture_logs() as logs:
            OpenApiGenerator(project(interface("Moment", prop("x", intrinsic("number")))))
        assert any(log["event"] == "declaration.shadowed_by_shim" and log["name"] == "Moment" for log in logs)

    def test_add_shim(self):
        generator = OpenApiGenerator(project())
        generator.add_shim("Decimal", lambda reference, env: Schema(type="string", format="decimal"))
        assert "Decimal" in generator.compiler.shims

    def test_empty_project(self):
        document = OpenApiGenerator(project(name="empty")).generate()
        assert document["paths"] == {}
        assert document["components"] == {"schemas": {}}
        assert document["tags"] == []
