"""
Component Catalog
Declarative element types and their prop schemas.
"""

from .schema import FieldKind, FieldSchema, string, number, boolean, enum, array_of, object_of
from .registry import Catalog, ComponentDef, ActionDef, define_catalog

__all__ = [
    "FieldKind",
    "FieldSchema",
    "string",
    "number",
    "boolean",
    "enum",
    "array_of",
    "object_of",
    "Catalog",
    "ComponentDef",
    "ActionDef",
    "define_catalog",
]
