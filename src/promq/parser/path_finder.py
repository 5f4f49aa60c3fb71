# promq.parser.path_finder - Tree navigation helpers
"""
Pure helpers to move up and down a SyntaxTree by node name.

None is a normal answer ("not found"); none of these raise on missing
parents or children.
"""
from typing import Optional

from promq.parser.tree import SyntaxNode


def walk_backward(node: Optional[SyntaxNode], name: str) -> Optional[SyntaxNode]:
    """
    Ascend from a node (inclusive) until one named `name` is found.

    Args:
        node: Starting node
        name: Node name to look for

    Returns:
        The first matching node, or None once the root has been passed
    """
    cursor = node
    while cursor is not None:
        if cursor.name == name:
            return cursor
        cursor = cursor.parent
    return None


def walk_through(node: Optional[SyntaxNode], *path: str) -> Optional[SyntaxNode]:
    """
    Descend from a node through a chain of child names.

    Each step picks the first child with the expected name, e.g.
    walk_through(selector, "MetricIdentifier", "Identifier").

    Returns:
        The node at the end of the chain, or None if a link is missing
    """
    cursor = node
    for name in path:
        if cursor is None:
            return None
        cursor = next((c for c in cursor.children if c.name == name), None)
    return cursor


def ancestor(node: Optional[SyntaxNode], depth: int) -> Optional[SyntaxNode]:
    """The ancestor `depth` levels above a node (0 is the node itself)."""
    cursor = node
    for _ in range(depth):
        if cursor is None:
            return None
        cursor = cursor.parent
    return cursor


def is_descendant_of_kind_at_depth(node: Optional[SyntaxNode], name: str, depth: int) -> bool:
    """True when the ancestor exactly `depth` levels up is named `name`."""
    found = ancestor(node, depth)
    return found is not None and found.name == name
