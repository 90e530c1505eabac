"""Spec Materializer - promotes parsed elements into the visible graph."""

from itertools import islice

from .catalog import Catalog
from .core.logging_config import get_logger
from .errors import InvalidReferenceError, MalformedSyntaxError, UnknownComponentTypeError
from .models import Diagnostics, Element, Spec
from .parser import ArrayNode, Node, ObjectNode, StringNode
from .validator import Findings, coerce_props

logger = get_logger(__name__)

_MISSING = object()


class Materializer:
    """
    Maintains the element graph for one document.

    ``sync`` is called after every parser feed. It revisits only elements
    whose parse nodes changed since the previous sync, plus parents waiting
    on a child that just resolved. Elements are immutable: a change replaces
    the entry, so unchanged elements stay identical across snapshots.
    """

    def __init__(self, catalog: Catalog, diagnostics: Diagnostics | None = None) -> None:
        self.catalog = catalog
        self.diagnostics = diagnostics or Diagnostics()
        self.root = ""
        self.elements: dict[str, Element] = {}

        self._root_key: str | None = None
        self._root_missing = False
        self._nodes: dict[str, ObjectNode] = {}
        self._open: dict[str, None] = {}
        self._scanned = 0
        self._synced = 0
        self._elements_closed = False

        self._cursor: dict[str, int] = {}
        self._parent: dict[str, str] = {}
        self._waiting: dict[str, dict[str, None]] = {}
        self._reported: set[tuple[str, str, str]] = set()
        self._dirty: dict[str, None] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def sync(self, document: Node | None, generation: int) -> list[str]:
        """
        Bring the graph up to date with the parse tree.

        Args:
            document: Parser root node (None before the document starts)
            generation: Parser generation the tree reflects

        Returns:
            Keys of elements inserted or changed, in the order they changed

        Raises:
            CompileError: On a fatal document error
        """
        self._dirty = {}
        if document is None:
            return []
        if not isinstance(document, ObjectNode):
            raise MalformedSyntaxError("Document must be a JSON object")

        elements_node = document.get("elements")
        if elements_node is not None:
            if not isinstance(elements_node, ObjectNode):
                raise MalformedSyntaxError("'elements' must be an object")
            self._sync_elements(elements_node)

        self._sync_root(document.get("root"))
        self._synced = generation
        return list(self._dirty)

    def snapshot(self) -> Spec:
        """Immutable view of the current graph."""
        return Spec.model_construct(root=self.root, elements=dict(self.elements))

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------

    def _sync_elements(self, node: ObjectNode) -> None:
        entries = node.entries
        if len(entries) > self._scanned:
            for key in islice(entries, self._scanned, None):
                self._open[key] = None
            self._scanned = len(entries)

        for key in list(self._open):
            entry = entries[key]
            if entry is None:
                continue
            if key in self._nodes and entry.stamp <= self._synced:
                continue
            if not isinstance(entry, ObjectNode):
                raise MalformedSyntaxError(f"Element {key!r} must be an object")
            self._nodes[key] = entry
            self._sync_element(key, entry)

        if node.complete and not self._elements_closed:
            # Every element is known now; anything still awaited does not exist
            self._elements_closed = True
            waiting, self._waiting = self._waiting, {}
            for parents in waiting.values():
                for parent in parents:
                    self._resolve_children(parent)

    def _sync_element(self, key: str, node: ObjectNode) -> None:
        element = self.elements.get(key)
        if element is None:
            type_name = self._read_type(key, node)
            if type_name is None:
                return
            props = self._read_props(key, type_name, node)
            self.elements[key] = Element(key=key, type=type_name, props=props)
            self._dirty[key] = None
            logger.debug("element_materialized", key=key, type=type_name)

            self._resolve_children(key)
            for parent in self._waiting.pop(key, {}):
                self._resolve_children(parent)
            return

        props = self._read_props(key, element.type, node)
        if any(element.props.get(name, _MISSING) != value for name, value in props.items()):
            # Fields are never removed once exposed
            merged = {**element.props, **props}
            self.elements[key] = element.model_copy(update={"props": merged})
            self._dirty[key] = None
        self._resolve_children(key)

    def _read_type(self, key: str, node: ObjectNode) -> str | None:
        type_node = node.get("type")
        if type_node is None:
            if node.complete:
                raise UnknownComponentTypeError(key, None)
            return None
        if not isinstance(type_node, StringNode):
            raise MalformedSyntaxError(f"Element {key!r} type must be a string")
        if not type_node.complete:
            return None
        if type_node.value not in self.catalog:
            raise UnknownComponentTypeError(key, type_node.value)
        return type_node.value

    def _read_props(self, key: str, type_name: str, node: ObjectNode) -> dict:
        props_node = node.get("props")
        if props_node is not None and not isinstance(props_node, ObjectNode):
            raise MalformedSyntaxError(f"Element {key!r} props must be an object")

        component = self.catalog.get(type_name)
        assert component is not None
        findings = Findings()
        props = coerce_props(component, props_node, findings)
        self._report(key, type_name, findings)
        return props

    def _report(self, key: str, type_name: str, findings: Findings) -> None:
        for kind, paths, counter in (
            ("unknown", findings.unknown, self.diagnostics.unknown_props),
            ("invalid", findings.invalid, self.diagnostics.invalid_props),
            ("missing", findings.missing, self.diagnostics.missing_props),
        ):
            for path in paths:
                marker = (key, kind, path)
                if marker in self._reported:
                    continue
                self._reported.add(marker)
                counter[f"{type_name}.{path}"] += 1
                logger.debug(f"{kind}_prop", element=key, type=type_name, prop=path)

    # ------------------------------------------------------------------
    # Children
    # ------------------------------------------------------------------

    def _resolve_children(self, key: str) -> None:
        element = self.elements.get(key)
        if element is None or element.final:
            return

        node = self._nodes[key]
        children_node = node.get("children")
        if children_node is None:
            self._maybe_finalize(key, node, 0)
            return
        if not isinstance(children_node, ArrayNode):
            raise MalformedSyntaxError(f"Element {key!r} children must be an array")

        items = children_node.items
        cursor = self._cursor.get(key, 0)
        appended: list[str] = []

        # Only the resolved prefix is exposed, so order matches the source
        while cursor < len(items):
            item = items[cursor]
            if not isinstance(item, StringNode):
                raise MalformedSyntaxError(f"Element {key!r} children must be element keys")
            if not item.complete:
                break
            child = item.value
            if child in self.elements:
                self._check_reference(key, child)
                self._parent[child] = key
                appended.append(child)
            elif self._elements_closed:
                self.diagnostics.dangling_children += 1
                logger.warning("dangling_child_dropped", element=key, child=child)
            else:
                self._waiting.setdefault(child, {})[key] = None
                break
            cursor += 1

        self._cursor[key] = cursor
        if appended:
            if not self.catalog.get(element.type).accepts_children:
                self.diagnostics.unslotted_children += len(appended)
                logger.debug("unslotted_children", element=key, type=element.type)
            element = element.model_copy(update={"children": element.children + tuple(appended)})
            self.elements[key] = element
            self._dirty[key] = None

        if children_node.complete:
            self._maybe_finalize(key, node, len(items) - cursor)

    def _check_reference(self, parent: str, child: str) -> None:
        if child in self._parent:
            raise InvalidReferenceError(parent, child, f"already a child of {self._parent[child]!r}")
        if child == self._root_key:
            raise InvalidReferenceError(parent, child, "it is the root element")
        current: str | None = parent
        while current is not None:
            if current == child:
                raise InvalidReferenceError(parent, child, "cycle")
            current = self._parent.get(current)

    def _maybe_finalize(self, key: str, node: ObjectNode, remaining: int) -> None:
        if not node.complete or remaining:
            return
        element = self.elements[key]
        self.elements[key] = element.model_copy(update={"final": True})
        self._dirty[key] = None
        self._open.pop(key, None)

    # ------------------------------------------------------------------
    # Root
    # ------------------------------------------------------------------

    def _sync_root(self, node: Node | None) -> None:
        if self.root or node is None:
            return
        if not isinstance(node, StringNode):
            raise MalformedSyntaxError("'root' must be a string")
        if not node.complete:
            return

        if self._root_key is None:
            self._root_key = node.value
            if node.value in self._parent:
                raise InvalidReferenceError(
                    self._parent[node.value], node.value, "it is the root element"
                )

        if self._root_key in self.elements:
            self.root = self._root_key
            logger.debug("root_resolved", root=self.root)
        elif self._elements_closed and not self._root_missing:
            self._root_missing = True
            logger.warning("root_missing", root=self._root_key)

