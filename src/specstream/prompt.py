"""
Spec Generation Prompts
System prompt rendered from a catalog for streaming spec generation.
"""

from typing import Iterable

from .catalog import Catalog, ComponentDef, FieldSchema

# ============================================================================
# Fixed Sections
# ============================================================================

PROMPT_HEADER = """You are a UI generator. You describe user interfaces as a single JSON document:
a flat map of typed elements linked into a tree by key. Your output is parsed while it streams,
so every element becomes visible as soon as its "type" has been written."""

OUTPUT_FORMAT = """=== OUTPUT FORMAT ===

{
  "root": "<key of the top element>",
  "elements": {
    "<key>": {
      "type": "<component name>",
      "props": { ... },
      "children": ["<key>", "<key>"]
    }
  }
}

Write "root" first, then each element. Write "type" first inside every element, then "props",
then "children". Parents may list children that are written later."""

OUTPUT_REQUIREMENTS = """=== REQUIREMENTS ===

- Output exactly ONE JSON object. No markdown, no explanations, nothing before or after it.
- Give every element an explicit key. Keys are unique within the document.
- Reference children by key only. Never nest element objects inside "children".
- Every element is referenced by at most one parent. Never reference the root element as a child.
- "type" MUST be one of the component names listed above: {type_names}.
- Only use the props declared for a component. Enum props must use one of the listed values.
- Only components with slots may have children.

Remember: Output ONLY the JSON object. Start immediately with the {{ character."""


# ============================================================================
# Rendering
# ============================================================================


def _format_props(props: dict[str, FieldSchema], indent: str) -> list[str]:
    lines = []
    for name, field in props.items():
        marker = "" if field.required else "?"
        line = f"{indent}{name}{marker}: {field.type_notation()}"
        if field.description:
            line += f"  // {field.description}"
        lines.append(line)
    return lines


def _format_component(name: str, component: ComponentDef) -> str:
    lines = [f"- {name}: {component.description}" if component.description else f"- {name}"]
    if component.props:
        lines.append("  props:")
        lines.extend(_format_props(component.props, "    "))
    else:
        lines.append("  props: {}")
    if component.slots:
        lines.append(f"  slots: {', '.join(component.slots)}")
    else:
        lines.append("  slots: none (no children)")
    return "\n".join(lines)


def _format_actions(catalog: Catalog) -> str:
    lines = ["=== AVAILABLE ACTIONS ===", ""]
    for name, action in catalog.actions.items():
        lines.append(f"- {name}: {action.description}" if action.description else f"- {name}")
        if action.params:
            lines.append("  params:")
            lines.extend(_format_props(action.params, "    "))
    return "\n".join(lines)


def compile_prompt(catalog: Catalog, custom_rules: Iterable[str] = ()) -> str:
    """
    Render the system prompt for a catalog.

    Pure function: the same catalog and rules always produce the same string.

    Args:
        catalog: Registered components and actions
        custom_rules: Extra rules, appended verbatim in order

    Returns:
        Prompt text
    """
    sections = [PROMPT_HEADER, OUTPUT_FORMAT]

    components = "\n\n".join(
        _format_component(name, component) for name, component in catalog.components.items()
    )
    sections.append(f"=== AVAILABLE COMPONENTS ===\n\n{components}")

    if catalog.actions:
        sections.append(_format_actions(catalog))

    rules = list(custom_rules)
    if rules:
        sections.append("=== RULES ===\n\n" + "\n".join(rules))

    type_names = ", ".join(catalog.type_names)
    sections.append(OUTPUT_REQUIREMENTS.format(type_names=type_names))

    return "\n\n".join(sections) + "\n"
