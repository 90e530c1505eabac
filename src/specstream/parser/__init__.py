"""
Incremental Parser
Truncation-tolerant JSON parsing over arbitrarily split chunks.
"""

from .nodes import Node, ObjectNode, ArrayNode, StringNode, ScalarNode, from_value
from .incremental import IncrementalParser

__all__ = [
    "Node",
    "ObjectNode",
    "ArrayNode",
    "StringNode",
    "ScalarNode",
    "from_value",
    "IncrementalParser",
]
