"""Reading TypeDoc project dumps and indexing their declarations."""

import json
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from typedoc_openapi.errors import InputError
from typedoc_openapi.typedoc.models import CLASS, INTERFACE, TYPE_ALIAS, Reflection, ReferenceType

logger = structlog.get_logger(__name__)

REGISTERED_KINDS = (INTERFACE, TYPE_ALIAS, CLASS)


def load_project(file_path: Path) -> Reflection:
    """Load a TypeDoc JSON (or YAML) project dump."""
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise InputError(f"Cannot read {file_path}: {e}") from e
    return parse_project(text, source=str(file_path))


def parse_project(text: str, source: str = "<string>") -> Reflection:
    """Parse the text of a project dump into its root reflection."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise InputError(f"{source} is neither JSON nor YAML: {e}") from e

    if not isinstance(data, dict) or "children" not in data:
        raise InputError(f"{source} does not look like a TypeDoc project dump")

    try:
        return Reflection.model_validate(data)
    except ValidationError as e:
        raise InputError(f"{source} is not a valid TypeDoc project dump: {e}") from e


def find_in_tree(
    nodes: Iterable[Reflection],
    matcher: Callable[[Reflection], bool],
) -> list[Reflection]:
    """Depth-first search of ``children``, keeping every node ``matcher`` accepts."""
    matches = []
    for node in nodes:
        if matcher(node):
            matches.append(node)
        if node.children:
            matches.extend(find_in_tree(node.children, matcher))
    return matches


def _walk(node: Reflection) -> Iterator[Reflection]:
    yield node
    for group in (node.children, node.signatures, node.parameters, node.type_parameters):
        for child in group:
            yield from _walk(child)
    if node.index_signature is not None:
        yield from _walk(node.index_signature)


class DeclarationTable:
    """Name index of interfaces, type aliases and classes, plus an id index of every reflection.

    Populated once from the project tree and read-only afterwards.
    """

    def __init__(self, project: Reflection):
        self._by_name: dict[str, Reflection] = {}
        self._by_id: dict[int, Reflection] = {}

        for node in _walk(project):
            if node.id is not None:
                self._by_id[node.id] = node

        for declaration in find_in_tree(project.children, lambda item: item.kind_string in REGISTERED_KINDS):
            if declaration.name in self._by_name:
                logger.warning("declaration.duplicate", name=declaration.name)
            self._by_name[declaration.name] = declaration

    def get(self, name: str) -> Reflection | None:
        return self._by_name.get(name)

    def by_id(self, reflection_id: int | None) -> Reflection | None:
        if reflection_id is None:
            return None
        return self._by_id.get(reflection_id)

    def target(self, reference: ReferenceType) -> Reflection | None:
        """The reflection a reference links to, if TypeDoc recorded the link."""
        return self.by_id(reference.id)

    def names(self) -> list[str]:
        return list(self._by_name)

    def __contains__(self, name: str) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._by_name)
