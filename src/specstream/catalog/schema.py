"""Prop schema types and builders."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FieldKind(str, Enum):
    """Value kinds a prop may declare."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ENUM = "enum"
    ARRAY = "array"
    OBJECT = "object"


class FieldSchema(BaseModel):
    """Declared type of one prop (or nested field)."""

    model_config = ConfigDict(frozen=True)

    kind: FieldKind
    nullable: bool = False
    required: bool = True
    members: tuple[str, ...] = ()
    items: "FieldSchema | None" = None
    fields: dict[str, "FieldSchema"] = Field(default_factory=dict)
    description: str = ""

    @model_validator(mode="after")
    def check_kind_arguments(self) -> "FieldSchema":
        """Enums need members, arrays need an item schema."""
        if self.kind is FieldKind.ENUM and not self.members:
            raise ValueError("enum field needs at least one member")
        if self.kind is FieldKind.ARRAY and self.items is None:
            raise ValueError("array field needs an item schema")
        return self

    def type_notation(self) -> str:
        """Render as TypeScript-like notation for prompts."""
        match self.kind:
            case FieldKind.ENUM:
                notation = " | ".join(f'"{m}"' for m in self.members)
            case FieldKind.ARRAY:
                assert self.items is not None
                inner = self.items.type_notation()
                notation = f"Array<{inner}>"
            case FieldKind.OBJECT:
                parts = [
                    f"{name}{'' if sub.required else '?'}: {sub.type_notation()}"
                    for name, sub in self.fields.items()
                ]
                notation = "{" + ", ".join(parts) + "}"
            case _:
                notation = self.kind.value
        if self.nullable:
            notation += " | null"
        return notation


FieldSchema.model_rebuild()


def _field(kind: FieldKind, **kwargs: Any) -> FieldSchema:
    return FieldSchema(kind=kind, **kwargs)


def string(*, nullable: bool = False, required: bool = True, description: str = "") -> FieldSchema:
    return _field(FieldKind.STRING, nullable=nullable, required=required, description=description)


def number(*, nullable: bool = False, required: bool = True, description: str = "") -> FieldSchema:
    return _field(FieldKind.NUMBER, nullable=nullable, required=required, description=description)


def boolean(*, nullable: bool = False, required: bool = True, description: str = "") -> FieldSchema:
    return _field(FieldKind.BOOLEAN, nullable=nullable, required=required, description=description)


def enum(
    *members: str, nullable: bool = False, required: bool = True, description: str = ""
) -> FieldSchema:
    """Closed set of string values."""
    return _field(
        FieldKind.ENUM,
        members=members,
        nullable=nullable,
        required=required,
        description=description,
    )


def array_of(
    items: FieldSchema, *, nullable: bool = False, required: bool = True, description: str = ""
) -> FieldSchema:
    """List whose entries all follow ``items``."""
    return _field(
        FieldKind.ARRAY, items=items, nullable=nullable, required=required, description=description
    )


def object_of(
    fields: dict[str, FieldSchema],
    *,
    nullable: bool = False,
    required: bool = True,
    description: str = "",
) -> FieldSchema:
    """Nested object with a fixed set of fields."""
    return _field(
        FieldKind.OBJECT,
        fields=fields,
        nullable=nullable,
        required=required,
        description=description,
    )
