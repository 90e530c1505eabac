"""Spec Data Models."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from .core.json import safe_json_dumps
from .errors import CompileError


class Element(BaseModel):
    """One visible element of the graph."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Unique, stable element key")
    type: str = Field(..., description="Catalog component name")
    props: dict[str, Any] = Field(default_factory=dict)
    children: tuple[str, ...] = ()
    final: bool = Field(default=False, description="No further patches will address it")

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "props": dict(self.props), "children": list(self.children)}


class Spec(BaseModel):
    """Key-addressed element tree. ``root`` is empty until the root element resolves."""

    model_config = ConfigDict(frozen=True)

    root: str = ""
    elements: dict[str, Element] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.elements

    def to_dict(self) -> dict[str, Any]:
        """Export in the renderer-facing shape."""
        return {
            "root": self.root,
            "elements": {key: element.to_dict() for key, element in self.elements.items()},
        }

    def to_json(self, **kwargs: Any) -> str:
        return safe_json_dumps(self.to_dict(), **kwargs)


# ============================================================================
# Patches
# ============================================================================


class _Patch(BaseModel):
    model_config = ConfigDict(frozen=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class InsertElement(_Patch):
    op: Literal["insert"] = "insert"
    key: str
    type: str
    props: dict[str, Any] = Field(default_factory=dict)
    children: tuple[str, ...] = ()


class UpdateProps(_Patch):
    """Changed or added prop fields, merged into the existing props."""

    op: Literal["update-props"] = "update-props"
    key: str
    props: dict[str, Any]


class AppendChild(_Patch):
    op: Literal["append-child"] = "append-child"
    key: str
    child: str


class SetRoot(_Patch):
    op: Literal["set-root"] = "set-root"
    root: str


class FinalizeElement(_Patch):
    op: Literal["finalize"] = "finalize"
    key: str


Patch = Annotated[
    Union[InsertElement, UpdateProps, AppendChild, SetRoot, FinalizeElement],
    Field(discriminator="op"),
]

patch_adapter: TypeAdapter[Patch] = TypeAdapter(Patch)


def parse_patch(data: dict[str, Any]) -> Patch:
    """Load a patch from its dict form."""
    return patch_adapter.validate_python(data)


# ============================================================================
# Compile results
# ============================================================================


@dataclass
class Diagnostics:
    """Non-fatal conditions, each counted once per element and location."""

    unknown_props: Counter[str] = field(default_factory=Counter)
    invalid_props: Counter[str] = field(default_factory=Counter)
    missing_props: Counter[str] = field(default_factory=Counter)
    dangling_children: int = 0
    unslotted_children: int = 0
    trailing_chars: int = 0

    @property
    def total(self) -> int:
        return (
            sum(self.unknown_props.values())
            + sum(self.invalid_props.values())
            + sum(self.missing_props.values())
            + self.dangling_children
            + self.unslotted_children
        )

    def to_dict(self) -> dict[str, Any]:
        """Export as dictionary."""
        return {
            "unknown_props": dict(self.unknown_props),
            "invalid_props": dict(self.invalid_props),
            "missing_props": dict(self.missing_props),
            "dangling_children": self.dangling_children,
            "unslotted_children": self.unslotted_children,
            "trailing_chars": self.trailing_chars,
        }


@dataclass(frozen=True)
class PushResult:
    """Outcome of one push: the current valid Spec and what changed."""

    result: Spec
    new_patches: list[Patch]
    error: CompileError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
