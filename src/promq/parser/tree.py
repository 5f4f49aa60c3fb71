# promq.parser.tree - Syntax tree nodes
"""
Read-only syntax tree consumed by the completion engine.

Nodes carry a type name, start/end offsets into the source text and
links to their parent and children. The completion engine never mutates
a tree; a new keystroke produces a new tree.
"""
from dataclasses import dataclass, field
from typing import Iterator, Optional

from promq.parser.nodes import ERROR


@dataclass(eq=False)
class SyntaxNode:
    """A node of the parsed query."""
    name: str
    start: int
    end: int
    parent: Optional["SyntaxNode"] = field(default=None, repr=False)
    children: list["SyntaxNode"] = field(default_factory=list, repr=False)

    @property
    def is_error(self) -> bool:
        return self.name == ERROR

    @property
    def first_child(self) -> Optional["SyntaxNode"]:
        return self.children[0] if self.children else None

    @property
    def last_child(self) -> Optional["SyntaxNode"]:
        return self.children[-1] if self.children else None

    @property
    def next_sibling(self) -> Optional["SyntaxNode"]:
        if self.parent is None:
            return None
        siblings = self.parent.children
        index = siblings.index(self)
        return siblings[index + 1] if index + 1 < len(siblings) else None

    @property
    def prev_sibling(self) -> Optional["SyntaxNode"]:
        if self.parent is None:
            return None
        siblings = self.parent.children
        index = siblings.index(self)
        return siblings[index - 1] if index > 0 else None

    def append(self, child: "SyntaxNode") -> "SyntaxNode":
        """Attach a child and widen this node to cover it."""
        child.parent = self
        self.children.append(child)
        if child.end > self.end:
            self.end = child.end
        return child

    def walk(self) -> Iterator["SyntaxNode"]:
        """Iterate this node and its descendants in document order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "start": self.start,
            "end": self.end,
            "children": [c.to_dict() for c in self.children],
        }


@dataclass
class SyntaxTree:
    """A parsed query: the root node plus the text it was parsed from."""
    root: SyntaxNode
    text: str

    def resolve(self, pos: int) -> SyntaxNode:
        """
        Find the innermost node at a cursor position.

        A child is entered when it covers the position from the left
        (start < pos <= end). A zero-width child sitting exactly at the
        position is entered only when no sibling covers it, so a node
        ending at the cursor wins over an empty placeholder after it.

        Args:
            pos: Cursor offset

        Returns:
            The innermost matching node, the root when nothing else matches
        """
        node = self.root
        while True:
            covering = None
            empty = None
            for child in node.children:
                if child.start < pos <= child.end:
                    covering = child
                    break
                if empty is None and child.start == child.end == pos:
                    empty = child
            nxt = covering or empty
            if nxt is None:
                return node
            node = nxt

    def slice(self, node: Optional[SyntaxNode]) -> str:
        """Text covered by a node, empty for None."""
        if node is None:
            return ""
        return self.text[node.start:node.end]

    def outline(self) -> str:
        """Indented outline of the tree, one node per line."""
        lines = []

        def visit(node: SyntaxNode, depth: int) -> None:
            label = f"{'  ' * depth}{node.name} [{node.start}..{node.end}]"
            if not node.children and node.end > node.start:
                label += f" {self.text[node.start:node.end]!r}"
            lines.append(label)
            for child in node.children:
                visit(child, depth + 1)

        visit(self.root, 0)
        return "\n".join(lines)
