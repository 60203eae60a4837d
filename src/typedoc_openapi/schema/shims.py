"""Named overrides that replace default translation for specific types."""

from collections.abc import Callable

import structlog

from typedoc_openapi.schema.generics import GenericEnvironment
from typedoc_openapi.schema.models import Schema
from typedoc_openapi.typedoc.models import ReferenceType

logger = structlog.get_logger(__name__)

Shim = Callable[[ReferenceType, GenericEnvironment], Schema]


def date_time_shim(reference: ReferenceType, env: GenericEnvironment) -> Schema:
    """Moment/Date values travel as ISO-8601 strings."""
    return Schema(type="string", format="date-time")


def opaque_object_shim(reference: ReferenceType, env: GenericEnvironment) -> Schema:
    return Schema(type="object")


class ShimRegistry:
    """Type name -> shim. Shims win over every other resolution strategy."""

    def __init__(self):
        self._shims: dict[str, Shim] = {}

    def register(self, name: str, shim: Shim) -> None:
        if name in self._shims:
            logger.warning("shim.overwritten", name=name)
        self._shims[name] = shim

    def get(self, name: str) -> Shim | None:
        return self._shims.get(name)

    def names(self) -> list[str]:
        return list(self._shims)

    def __contains__(self, name: str) -> bool:
        return name in self._shims
