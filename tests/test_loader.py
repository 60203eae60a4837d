import pytest
from structlog.testing import capture_logs

from typedoc_openapi.errors import InputError
from typedoc_openapi.typedoc.loader import DeclarationTable, find_in_tree, load_project, parse_project

from typedoc_builders import interface, project, prop, intrinsic


class TestLoadProject:
    def test_load_getting_started(self, getting_started_path):
        root = load_project(getting_started_path)
        assert root.name == "getting_started"
        assert root.children[0].kind_string == "Module"

    def test_load_yaml(self, tmp_path):
        f = tmp_path / "project.yaml"
        f.write_text("name: demo\nchildren:\n  - name: IUser\n    kindString: Interface\n")
        root = load_project(f)
        assert root.children[0].name == "IUser"

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputError):
            load_project(tmp_path / "missing.json")

    def test_not_a_project(self):
        with pytest.raises(InputError):
            parse_project('{"openapi": "3.0.0"}')

    def test_invalid_text(self):
        with pytest.raises(InputError):
            parse_project("{not: [valid")


class TestDeclarationTable:
    def test_registers_interfaces_aliases_and_classes(self, getting_started_path):
        table = DeclarationTable(load_project(getting_started_path))
        assert set(table.names()) == {"ApiController", "IBodyData", "IReturnData", "NotFoundResult", "BadRequestResult"}
        assert "Level" not in table

    def test_id_index_covers_nested_reflections(self, getting_started_path):
        table = DeclarationTable(load_project(getting_started_path))
        assert table.by_id(60).name == "Level"
        assert table.by_id(17).name == "body"
        assert table.by_id(None) is None
        assert table.by_id(9999) is None

    def test_duplicate_name_warns_and_later_wins(self):
        with capture_logs() as logs:
            table = DeclarationTable(project(
                interface("IUser", prop("a", intrinsic("string"))),
                interface("IUser", prop("b", intrinsic("string"))),
            ))
        assert table.get("IUser").properties[0].name == "b"
        assert any(log["event"] == "declaration.duplicate" for log in logs)


class TestFindInTree:
    def test_finds_nested_matches(self, getting_started_path):
        root = load_project(getting_started_path)
        properties = find_in_tree(root.children, lambda item: item.kind_string == "Property")
        names = [p.name for p in properties]
        assert "stringType" in names
        assert "timestamp" in names
