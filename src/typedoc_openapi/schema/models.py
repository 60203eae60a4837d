"""Compiled OpenAPI schema nodes.

One model covers every schema shape the compiler produces: primitives,
arrays, objects, allOf/oneOf combinations and ``$ref`` pointers into
``components.schemas``. Unset fields are dropped on export.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

REF_PREFIX = "#/components/schemas/"


class Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ref: str | None = Field(default=None, alias="$ref")
    type: str | None = None
    format: str | None = None
    title: str | None = None
    description: str | None = None
    enum: list[Any] | None = None
    items: Schema | None = None
    properties: dict[str, Schema] | None = None
    required: list[str] | None = None
    additional_properties: Schema | None = Field(default=None, alias="additionalProperties")
    all_of: list[Schema] | None = Field(default=None, alias="allOf")
    one_of: list[Schema] | None = Field(default=None, alias="oneOf")

    @classmethod
    def pointer(cls, key: str) -> Schema:
        return cls(ref=f"{REF_PREFIX}{key}")

    @property
    def is_reference(self) -> bool:
        return self.ref is not None

    @property
    def pointer_key(self) -> str | None:
        """The component name a pointer targets, or None for inline schemas."""
        if self.ref is None or not self.ref.startswith(REF_PREFIX):
            return None
        return self.ref[len(REF_PREFIX):]

    def to_openapi(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# Returned for references that cannot be resolved so generation can go on.
UNRESOLVED = Schema(ref="ERR")
