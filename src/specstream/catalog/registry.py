"""Catalog Registry - the closed set of element types a model may emit."""

from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from .schema import FieldSchema


class ComponentDef(BaseModel):
    """One element type: its props, child slots and description."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    props: dict[str, FieldSchema] = Field(default_factory=dict)
    slots: tuple[str, ...] = ()
    description: str = ""

    @property
    def accepts_children(self) -> bool:
        return bool(self.slots)


class ActionDef(BaseModel):
    """Action the rendering layer can bind. Not interpreted by the compiler."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    description: str = ""
    params: dict[str, FieldSchema] = Field(default_factory=dict)


class Catalog(BaseModel):
    """
    Registered components and actions.

    Component order is preserved so prompts render deterministically. Type
    lookups go through one table built at registration.

    Examples:
        >>> from specstream.catalog import define_catalog, string
        >>> catalog = define_catalog({"Greeting": {"props": {"text": string()}}})
        >>> catalog.get("Greeting") is not None
        True
        >>> catalog.get("Bogus") is None
        True
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    components: dict[str, ComponentDef] = Field(default_factory=dict)
    actions: dict[str, ActionDef] = Field(default_factory=dict)

    _lookup: dict[str, ComponentDef] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        for name in self.components:
            if not name or not isinstance(name, str):
                raise ValueError(f"Invalid component name: {name!r}")
        self._lookup = dict(self.components)

    def get(self, type_name: str) -> ComponentDef | None:
        """Resolve a type string, or None if it is not a member."""
        return self._lookup.get(type_name)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._lookup

    def __len__(self) -> int:
        return len(self._lookup)

    @property
    def type_names(self) -> list[str]:
        return list(self.components)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Catalog":
        """Load the external catalog format ({"components": ..., "actions": ...})."""
        return cls.model_validate(data)

    def prompt(self, custom_rules: Iterable[str] = ()) -> str:
        """Render the model-facing system prompt for this catalog."""
        from ..prompt import compile_prompt

        return compile_prompt(self, custom_rules)


def define_catalog(
    components: dict[str, ComponentDef | dict[str, Any]],
    actions: dict[str, ActionDef | dict[str, Any]] | None = None,
) -> Catalog:
    """
    Build a catalog from component definitions.

    Args:
        components: Type name -> ComponentDef or equivalent dict
        actions: Action name -> ActionDef or equivalent dict

    Returns:
        Frozen Catalog
    """
    return Catalog(components=components, actions=actions or {})
