"""Parse tree nodes for partially received JSON."""

from typing import Any


class Node:
    """Base parse tree node.

    ``complete`` is set once the value can no longer change. ``stamp`` is the
    parser generation that last touched this node or anything below it.
    """

    __slots__ = ("complete", "stamp")

    def __init__(self, stamp: int, complete: bool = False) -> None:
        self.complete = complete
        self.stamp = stamp

    def to_value(self) -> Any:
        raise NotImplementedError


class ObjectNode(Node):
    """JSON object. A key whose value has not started maps to None."""

    __slots__ = ("entries",)

    def __init__(self, stamp: int) -> None:
        super().__init__(stamp)
        self.entries: dict[str, Node | None] = {}

    def get(self, key: str) -> Node | None:
        return self.entries.get(key)

    def to_value(self) -> dict[str, Any]:
        return {k: v.to_value() for k, v in self.entries.items() if v is not None}


class ArrayNode(Node):
    __slots__ = ("items",)

    def __init__(self, stamp: int) -> None:
        super().__init__(stamp)
        self.items: list[Node] = []

    def to_value(self) -> list[Any]:
        return [item.to_value() for item in self.items]


class StringNode(Node):
    """String value; ``value`` holds the decoded characters received so far."""

    __slots__ = ("_parts", "_value")

    def __init__(self, stamp: int) -> None:
        super().__init__(stamp)
        self._parts: list[str] = []
        self._value: str | None = ""

    def append(self, text: str) -> None:
        self._parts.append(text)
        self._value = None

    @property
    def value(self) -> str:
        if self._value is None:
            self._value = "".join(self._parts)
            self._parts = [self._value]
        return self._value

    def to_value(self) -> str:
        return self.value


class ScalarNode(Node):
    """Number, boolean or null. Only created once its token is complete."""

    __slots__ = ("value",)

    def __init__(self, stamp: int, value: int | float | bool | None) -> None:
        super().__init__(stamp, complete=True)
        self.value = value

    def to_value(self) -> int | float | bool | None:
        return self.value


def from_value(value: Any, stamp: int = 0) -> Node:
    """Build a complete parse tree from an already decoded value."""
    if isinstance(value, dict):
        obj = ObjectNode(stamp)
        for key, item in value.items():
            obj.entries[key] = from_value(item, stamp)
        obj.complete = True
        return obj
    if isinstance(value, list):
        arr = ArrayNode(stamp)
        arr.items = [from_value(item, stamp) for item in value]
        arr.complete = True
        return arr
    if isinstance(value, str):
        node = StringNode(stamp)
        node.append(value)
        node.complete = True
        return node
    return ScalarNode(stamp, value)
