"""Models for TypeDoc's JSON project dump.

TypeDoc serializes every declaration as a "reflection" and every type
annotation as a type node tagged by its ``type`` field. Only the fields
the schema compiler and endpoint assembler read are declared here;
everything else in the dump is ignored.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Discriminator, Field, Tag, field_validator

# kindString values
PROJECT = "Project"
INTERFACE = "Interface"
TYPE_ALIAS = "Type alias"
CLASS = "Class"
ENUMERATION = "Enumeration"
ENUMERATION_MEMBER = "Enumeration member"
TYPE_PARAMETER = "Type parameter"
METHOD = "Method"
PROPERTY = "Property"
PARAMETER = "Parameter"


class TypedocModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CommentTag(TypedocModel):
    """A block tag such as ``@deprecated`` or ``@param``."""

    tag_name: str = Field(validation_alias=AliasChoices("tagName", "tag", "tag_name"))
    text: str = ""


class Comment(TypedocModel):
    short_text: str = Field(default="", alias="shortText")
    text: str = ""
    returns: str = ""
    tags: list[CommentTag] = []

    def simple(self) -> str:
        """Short text and body joined by a blank line, empty parts dropped."""
        return "\n\n".join(part for part in (self.short_text, self.text) if part)

    def has_tag(self, name: str) -> bool:
        return any(tag.tag_name == name for tag in self.tags)


class Flags(TypedocModel):
    is_optional: bool = Field(default=False, alias="isOptional")
    is_public: bool = Field(default=False, alias="isPublic")
    is_private: bool = Field(default=False, alias="isPrivate")
    is_protected: bool = Field(default=False, alias="isProtected")
    is_static: bool = Field(default=False, alias="isStatic")


class Decorator(TypedocModel):
    """A decorator application; ``arguments`` values are raw source text."""

    name: str
    arguments: dict[str, Any] = {}


# -- type nodes ---------------------------------------------------------------


class LiteralType(TypedocModel):
    type: Literal["literal"] = "literal"
    value: Any = None


class ReferenceType(TypedocModel):
    type: Literal["reference"] = "reference"
    name: str
    id: int | None = None
    type_arguments: list[SomeType] = Field(default_factory=list, alias="typeArguments")


class IntrinsicType(TypedocModel):
    type: Literal["intrinsic"] = "intrinsic"
    name: str


class ArrayType(TypedocModel):
    type: Literal["array"] = "array"
    element_type: SomeType = Field(alias="elementType")


class ReflectionType(TypedocModel):
    """An inline object type literal, e.g. ``{ a: string }``."""

    type: Literal["reflection"] = "reflection"
    declaration: Reflection


class IntersectionType(TypedocModel):
    type: Literal["intersection"] = "intersection"
    types: list[SomeType] = []


class UnionType(TypedocModel):
    type: Literal["union"] = "union"
    types: list[SomeType] = []


class TupleType(TypedocModel):
    type: Literal["tuple"] = "tuple"
    elements: list[SomeType] = []


class UnknownType(TypedocModel):
    """Any type node kind the compiler does not translate (query, mapped, ...)."""

    model_config = ConfigDict(extra="allow")

    type: str


_TYPE_KINDS = {"literal", "reference", "intrinsic", "array", "reflection", "intersection", "union", "tuple"}


def _type_kind(value: Any) -> str:
    kind = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    return kind if kind in _TYPE_KINDS else "other"


SomeType = Annotated[
    Union[
        Annotated[LiteralType, Tag("literal")],
        Annotated[ReferenceType, Tag("reference")],
        Annotated[IntrinsicType, Tag("intrinsic")],
        Annotated[ArrayType, Tag("array")],
        Annotated[ReflectionType, Tag("reflection")],
        Annotated[IntersectionType, Tag("intersection")],
        Annotated[UnionType, Tag("union")],
        Annotated[TupleType, Tag("tuple")],
        Annotated[UnknownType, Tag("other")],
    ],
    Discriminator(_type_kind),
]


# -- reflections --------------------------------------------------------------


class Reflection(TypedocModel):
    """A declaration: project, module, class, interface, property, method, ..."""

    id: int | None = None
    name: str = ""
    kind_string: str = Field(default="", alias="kindString")
    flags: Flags = Field(default_factory=Flags)
    comment: Comment | None = None
    decorators: list[Decorator] = []
    children: list[Reflection] = []
    signatures: list[Reflection] = []
    parameters: list[Reflection] = []
    type: SomeType | None = None
    type_parameters: list[Reflection] = Field(
        default_factory=list,
        validation_alias=AliasChoices("typeParameters", "typeParameter", "type_parameters"),
    )
    default: SomeType | None = None
    default_value: str | None = Field(default=None, alias="defaultValue")
    index_signature: Reflection | None = Field(default=None, alias="indexSignature")
    implemented_types: list[SomeType] = Field(default_factory=list, alias="implementedTypes")

    @field_validator("index_signature", mode="before")
    @classmethod
    def _first_index_signature(cls, value: Any) -> Any:
        # TypeDoc 0.23+ emits a list of index signatures
        if isinstance(value, list):
            return value[0] if value else None
        return value

    @property
    def documentation(self) -> str:
        return self.comment.simple() if self.comment else ""

    @property
    def is_public(self) -> bool:
        return not (self.flags.is_private or self.flags.is_protected)

    @property
    def properties(self) -> list[Reflection]:
        return [child for child in self.children if child.kind_string == PROPERTY]

    def decorator(self, name: str) -> Decorator | None:
        return next((dec for dec in self.decorators if dec.name == name), None)

    def has_comment_tag(self, name: str) -> bool:
        return bool(self.comment and self.comment.has_tag(name))


for _model in (ReferenceType, ArrayType, ReflectionType, IntersectionType, UnionType, TupleType, Reflection):
    _model.model_rebuild()
