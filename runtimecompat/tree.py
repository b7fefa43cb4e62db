"""API tree parsing and navigation."""

from __future__ import annotations

from typing import Any, Optional

from .models import APINode, Interior, Leaf, TypeTag
from .exceptions import TreeParseError

# Synthetic key a runtime dump emits for the default export of a placeholder module
MOCK_DEFAULT_KEY = "*default*"

_TAGS = {tag.value: tag for tag in TypeTag}


def parse_tree(data: Any, path: tuple[str, ...] = ()) -> APINode:
    """
    Convert a JSON-decoded API dump into an APINode tree.

    Objects become Interior nodes (key order preserved), type tag strings
    become Leaf nodes. An empty object parses to an Interior with no children;
    the aggregator compares it as a leaf that no type tag matches.

    Args:
        data: Decoded JSON value
        path: Key path of data within the whole tree (for error messages)

    Returns:
        The parsed node
    """
    if isinstance(data, dict):
        return Interior({
            str(key): parse_tree(value, path + (str(key),))
            for key, value in data.items()
        })

    if isinstance(data, str) and data in _TAGS:
        return Leaf(_TAGS[data])

    raise TreeParseError(f"Invalid API tree value: {data!r}", path)


def lookup(node: Optional[APINode], path: tuple[str, ...]) -> Optional[APINode]:
    """Return the node at path, or None when the path does not exist."""
    for key in path:
        if not isinstance(node, Interior):
            return None
        node = node.children.get(key)
    return node


def is_mock_module(target: APINode, module: str) -> bool:
    """
    Check whether a top-level target module is an opaque placeholder.

    A placeholder has exactly one key, "default", which in turn has exactly
    one key, the synthetic "*default*" export.
    """
    module_node = lookup(target, (module,))
    if not isinstance(module_node, Interior):
        return False
    if list(module_node.children) != ["default"]:
        return False

    default = module_node.children["default"]
    return isinstance(default, Interior) and list(default.children) == [MOCK_DEFAULT_KEY]

