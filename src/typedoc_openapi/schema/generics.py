"""Generic parameter bindings for one reference resolution."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import NamedTuple

from typedoc_openapi.schema.models import Schema


class Binding(NamedTuple):
    """A type argument compiled in the caller's scope.

    ``key_name`` is the argument's own name, used when the parameter shows
    up as a type argument of a nested generic reference.
    """

    schema: Schema
    key_name: str


class GenericEnvironment:
    """Immutable mapping of type parameter names to their bound arguments.

    ``extend`` returns a new environment; the receiver is never modified, so
    bindings made for one instantiation cannot leak into another.
    """

    __slots__ = ("_bindings",)

    def __init__(self, bindings: Mapping[str, Binding] | None = None):
        self._bindings = MappingProxyType(dict(bindings or {}))

    def extend(self, bindings: Mapping[str, Binding]) -> GenericEnvironment:
        if not bindings:
            return self
        return GenericEnvironment({**self._bindings, **bindings})

    def lookup(self, name: str) -> Binding | None:
        return self._bindings.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

    def __repr__(self) -> str:
        bound = ", ".join(f"{name}={binding.key_name}" for name, binding in self._bindings.items())
        return f"GenericEnvironment({bound})"


EMPTY_ENVIRONMENT = GenericEnvironment()
