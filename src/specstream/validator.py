"""Schema validation and coercion of partially parsed prop values.

Every value resolves to ``Success(value)`` or ``Failure(Unresolved)``. A
pending failure may still resolve as more text arrives; an invalid one never
will. Free-form strings expose the characters received so far. Enums,
numbers, booleans and null appear only once complete, so an exposed value is
never replaced by a different one.
"""

import re
from dataclasses import dataclass, field
from typing import Any

from returns.result import Failure, Result, Success

from .catalog import ComponentDef, FieldKind, FieldSchema
from .parser import ArrayNode, Node, ObjectNode, ScalarNode, StringNode

_NUMERIC = re.compile(r"\s*-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?\s*")


@dataclass(frozen=True)
class Unresolved:
    """Why a value is not exposed."""

    pending: bool
    reason: str


PENDING = Unresolved(pending=True, reason="pending")


def _invalid(reason: str) -> Failure[Unresolved]:
    return Failure(Unresolved(pending=False, reason=reason))


@dataclass
class Findings:
    """Non-fatal problems seen while validating one element, by path."""

    unknown: list[str] = field(default_factory=list)
    invalid: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)


def coerce_value(
    schema: FieldSchema, node: Node, findings: Findings | None = None, path: str = ""
) -> Result[Any, Unresolved]:
    """
    Validate one parsed value against its declared schema.

    Args:
        schema: Declared field schema
        node: Parse tree node (possibly incomplete)
        findings: Collector for nested unknown/invalid fields
        path: Dotted location, used in findings

    Returns:
        Success with the coerced value, or Failure with the reason
    """
    if isinstance(node, ScalarNode):
        return _coerce_scalar(schema, node.value)
    if isinstance(node, StringNode):
        return _coerce_string(schema, node)
    if isinstance(node, ArrayNode):
        if schema.kind is not FieldKind.ARRAY:
            return _invalid(f"expected {schema.kind.value}, got array")
        return _coerce_array(schema, node, findings, path)
    if isinstance(node, ObjectNode):
        if schema.kind is not FieldKind.OBJECT:
            return _invalid(f"expected {schema.kind.value}, got object")
        return coerce_object(schema.fields, node, findings, path)
    return _invalid(f"unsupported node {type(node).__name__}")


def _coerce_scalar(schema: FieldSchema, value: Any) -> Result[Any, Unresolved]:
    if value is None:
        return Success(None) if schema.nullable else _invalid("null for non-nullable field")
    if isinstance(value, bool):
        if schema.kind is FieldKind.BOOLEAN:
            return Success(value)
        return _invalid(f"expected {schema.kind.value}, got boolean")
    if schema.kind is FieldKind.NUMBER:
        return Success(value)
    return _invalid(f"expected {schema.kind.value}, got number")


def _coerce_string(schema: FieldSchema, node: StringNode) -> Result[Any, Unresolved]:
    text = node.value

    match schema.kind:
        case FieldKind.STRING:
            return Success(text)
        case FieldKind.ENUM:
            if not node.complete:
                return Failure(PENDING)
            if text in schema.members:
                return Success(text)
            return _invalid(f"{text!r} is not one of {list(schema.members)}")
        case FieldKind.NUMBER:
            if not node.complete:
                return Failure(PENDING)
            if _NUMERIC.fullmatch(text):
                stripped = text.strip()
                if any(ch in stripped for ch in ".eE"):
                    return Success(float(stripped))
                return Success(int(stripped))
            return _invalid(f"{text!r} is not a number")
        case FieldKind.BOOLEAN:
            if not node.complete:
                return Failure(PENDING)
            if text in ("true", "false"):
                return Success(text == "true")
            return _invalid(f"{text!r} is not a boolean")
        case _:
            return _invalid(f"expected {schema.kind.value}, got string")


def _coerce_array(
    schema: FieldSchema, node: ArrayNode, findings: Findings | None, path: str
) -> Result[Any, Unresolved]:
    assert schema.items is not None
    streams_text = schema.items.kind is FieldKind.STRING
    values = []
    for index, item in enumerate(node.items):
        if not item.complete and not (streams_text and isinstance(item, StringNode)):
            # An open entry could still turn out invalid and have to be removed
            break
        item_path = f"{path}[{index}]"
        match coerce_value(schema.items, item, findings, item_path):
            case Success(value):
                values.append(value)
            case Failure(reason) if reason.pending:
                # Later entries wait so the exposed list only ever grows at the end
                break
            case Failure(_):
                if findings is not None:
                    findings.invalid.append(item_path)
    return Success(values)


def _resolve_fields(
    fields: dict[str, FieldSchema], node: ObjectNode, findings: Findings | None, path: str
) -> tuple[dict[str, Any], bool]:
    """Resolve declared fields. Returns (values, a required field is invalid)."""
    values: dict[str, Any] = {}
    broken = False

    for name, entry in node.entries.items():
        field_path = f"{path}.{name}" if path else name
        schema = fields.get(name)
        if schema is None:
            if findings is not None:
                findings.unknown.append(field_path)
            continue
        if entry is None:
            continue
        match coerce_value(schema, entry, findings, field_path):
            case Success(value):
                values[name] = value
            case Failure(reason) if not reason.pending:
                if findings is not None:
                    findings.invalid.append(field_path)
                if schema.required:
                    broken = True

    if node.complete:
        for name, schema in fields.items():
            if name in node.entries or not schema.required:
                continue
            if schema.nullable:
                values[name] = None
            else:
                if findings is not None:
                    findings.missing.append(f"{path}.{name}" if path else name)
                broken = True

    return values, broken


def coerce_object(
    fields: dict[str, FieldSchema],
    node: ObjectNode,
    findings: Findings | None = None,
    path: str = "",
) -> Result[dict[str, Any], Unresolved]:
    """
    Validate a nested object.

    The object is ready once every required field has resolved; optional
    fields still in progress are left out.
    """
    values, broken = _resolve_fields(fields, node, findings, path)
    if broken:
        return _invalid(f"required field of {path or 'object'} is invalid or missing")
    if not node.complete:
        for name, schema in fields.items():
            if schema.required and name not in values:
                return Failure(PENDING)
    return Success(values)


def coerce_props(
    component: ComponentDef, node: ObjectNode | None, findings: Findings | None = None
) -> dict[str, Any]:
    """
    Resolve an element's props.

    Unlike nested objects, props are never withheld as a whole: every field
    that has resolved is exposed and the rest are left out.
    """
    if node is None:
        return {}
    values, _ = _resolve_fields(component.props, node, findings, "")
    return values
