# promq.complete.resolver - Classify the cursor position
"""
Decides what is being typed at the cursor.

Classification walks an ordered list of rules. Each rule pairs a
structural predicate on the resolved node with a handler building the
Classification; the first rule whose predicate holds wins, which is how
overlapping grammar situations are disambiguated.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, NamedTuple, Optional

from promq.complete.terms import KIND_CONSTANT, KIND_TEXT, GrammarCategory
from promq.parser import nodes as n
from promq.parser.path_finder import (
    is_descendant_of_kind_at_depth,
    walk_backward,
    walk_through,
)
from promq.parser.tree import SyntaxNode, SyntaxTree

# Reserved label holding the metric name
METRIC_NAME_LABEL = "__name__"

# Identifier -> MetricIdentifier -> VectorSelector -> Expr -> BinaryExpr
BINARY_EXPR_DEPTH = 4


class Situation(Enum):
    """Grammar situations the cursor can be in, in precedence order."""
    METRIC_NAME = 1
    GROUPING_LABELS = 2
    LABEL_MATCHERS = 3
    LABEL_VALUE = 4
    INVALID_MATCH_OP = 5
    MATCH_OP = 6
    BINARY_OP = 7
    FUNCTION_IDENTIFIER = 8
    AGGREGATE_OP = 9
    KEYWORD = 10


@dataclass(frozen=True)
class MetadataQuery:
    """A lookup against the metadata provider."""
    label_name: Optional[str] = None  # None asks for label names
    metric_name: Optional[str] = None
    kind: str = KIND_CONSTANT

    @property
    def wants_values(self) -> bool:
        return self.label_name is not None


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying one cursor position."""
    situation: Situation
    from_: int
    categories: tuple[GrammarCategory, ...] = ()
    metadata: Optional[MetadataQuery] = None
    include_snippets: bool = False


class Rule(NamedTuple):
    situation: Situation
    matches: Callable[[SyntaxTree, SyntaxNode, int], bool]
    build: Callable[[SyntaxTree, SyntaxNode, int], Classification]


# Closing bracket of each list node
LIST_CLOSERS = {
    n.GROUPING_LABELS: ")",
    n.LABEL_MATCHERS: "}",
}


def _parent_name(node: SyntaxNode) -> Optional[str]:
    return node.parent.name if node.parent is not None else None


def metric_name_in_vector_selector(tree: SyntaxTree, node: SyntaxNode) -> Optional[str]:
    """
    Metric name of the selector enclosing a node, if it has one.

    Finds the enclosing VectorSelector first, then its
    MetricIdentifier/Identifier child.
    """
    selector = walk_backward(node, n.VECTOR_SELECTOR)
    if selector is None:
        return None
    identifier = walk_through(selector, n.METRIC_IDENTIFIER, n.IDENTIFIER)
    if identifier is None:
        return None
    return tree.slice(identifier) or None


def _inside_list(tree: SyntaxTree, node: SyntaxNode, pos: int) -> bool:
    """True when the cursor is in a list node and not after its closing bracket."""
    closer = LIST_CLOSERS.get(node.name)
    if closer is None:
        return False
    closed = tree.slice(node).endswith(closer)
    return not (closed and pos == node.end)


def _list_start(node: SyntaxNode, pos: int) -> int:
    if node.name not in LIST_CLOSERS:
        return node.start
    # An empty list keeps its opening bracket, a non-empty one keeps its items
    if not node.children:
        return node.start + 1
    return pos


# 1. sum(metr|  or  metric / ignor|
def _is_metric_name(tree: SyntaxTree, node: SyntaxNode, pos: int) -> bool:
    return node.name == n.IDENTIFIER and _parent_name(node) == n.METRIC_IDENTIFIER


def _build_metric_name(tree: SyntaxTree, node: SyntaxNode, pos: int) -> Classification:
    # Could be a metric, a function or an aggregation: offer everything
    categories = [
        GrammarCategory.FUNCTION_IDENTIFIER,
        GrammarCategory.AGGREGATE_OP,
        GrammarCategory.BIN_OP,
    ]
    if is_descendant_of_kind_at_depth(node, n.BINARY_EXPR, BINARY_EXPR_DEPTH):
        categories.append(GrammarCategory.BIN_OP_MODIFIER)
    return Classification(
        situation=Situation.METRIC_NAME,
        from_=node.start,
        categories=tuple(categories),
        metadata=MetadataQuery(label_name=METRIC_NAME_LABEL),
        include_snippets=True,
    )


# 2. sum by(|)  or  sum by(jo|)  or  sum by(job, |)
def _is_grouping_label(tree: SyntaxTree, node: SyntaxNode, pos: int) -> bool:
    if node.name == n.GROUPING_LABELS:
        return _inside_list(tree, node, pos)
    return node.name == n.LABEL_NAME and _parent_name(node) == n.GROUPING_LABEL


def _build_grouping_label(tree: SyntaxTree, node: SyntaxNode, pos: int) -> Classification:
    return Classification(
        situation=Situation.GROUPING_LABELS,
        from_=_list_start(node, pos),
        metadata=MetadataQuery(),
    )


# 3. metric{|}  or  {jo|}  or  metric{job="a", |}
def _is_label_matcher_name(tree: SyntaxTree, node: SyntaxNode, pos: int) -> bool:
    if node.name == n.LABEL_MATCHERS:
        return _inside_list(tree, node, pos)
    return node.name == n.LABEL_NAME and _parent_name(node) == n.LABEL_MATCHER


def _build_label_matcher_name(tree: SyntaxTree, node: SyntaxNode, pos: int) -> Classification:
    return Classification(
        situation=Situation.LABEL_MATCHERS,
        from_=_list_start(node, pos),
        metadata=MetadataQuery(metric_name=metric_name_in_vector_selector(tree, node)),
    )


# 4. metric{job="|"}
def _is_label_value(tree: SyntaxTree, node: SyntaxNode, pos: int) -> bool:
    return node.name == n.STRING_LITERAL and _parent_name(node) == n.LABEL_MATCHER


def _build_label_value(tree: SyntaxTree, node: SyntaxNode, pos: int) -> Classification:
    matcher = node.parent
    label_name = ""
    # The label name is the matcher's first child by grammar
    if matcher.first_child is not None and matcher.first_child.name == n.LABEL_NAME:
        label_name = tree.slice(matcher.first_child)
    return Classification(
        situation=Situation.LABEL_VALUE,
        # Keep the opening quote
        from_=node.start + 1,
        metadata=MetadataQuery(
            label_name=label_name,
            metric_name=metric_name_in_vector_selector(tree, node),
            kind=KIND_TEXT,
        ),
    )


# 5. metric{job!|}
def _dangling_match_op(node: SyntaxNode) -> Optional[SyntaxNode]:
    """The invalid operator token after a label name, if the node shows one."""
    if node.name == n.LABEL_MATCHER:
        matcher, error = node, node.last_child
    elif node.is_error and _parent_name(node) == n.LABEL_MATCHER:
        matcher, error = node.parent, node
    else:
        return None
    if (
        error is not None
        and error.is_error
        and error.next_sibling is None
        # foo{bar==} has a lexed token inside the error and gets nothing
        and error.first_child is None
        and matcher.first_child is not None
        and matcher.first_child.name == n.LABEL_NAME
    ):
        return error
    return None


def _is_dangling_match_op(tree: SyntaxTree, node: SyntaxNode, pos: int) -> bool:
    return _dangling_match_op(node) is not None


def _build_dangling_match_op(tree: SyntaxTree, node: SyntaxNode, pos: int) -> Classification:
    error = _dangling_match_op(node)
    return Classification(
        situation=Situation.INVALID_MATCH_OP,
        from_=error.start,
        categories=(GrammarCategory.MATCH_OP,),
    )


# 6. metric{job=|}, can still grow into =~
def _is_match_op(tree: SyntaxTree, node: SyntaxNode, pos: int) -> bool:
    return node.name == n.MATCH_OP or _parent_name(node) == n.MATCH_OP


def _category_rule(situation: Situation, category: GrammarCategory):
    def build(tree: SyntaxTree, node: SyntaxNode, pos: int) -> Classification:
        return Classification(situation=situation, from_=node.start, categories=(category,))
    return build


def _parent_is(name: str) -> Callable[[SyntaxTree, SyntaxNode, int], bool]:
    return lambda tree, node, pos: _parent_name(node) == name


# 10. sum b|  or  sum(metric) b|  or  metric / unle| inside an error
def _is_keyword_like(tree: SyntaxTree, node: SyntaxNode, pos: int) -> bool:
    # Also fires in places where neither keyword fits
    if node.name == n.IDENTIFIER and node.parent is not None and node.parent.is_error:
        return True
    return node.is_error and _parent_name(node) != n.LABEL_MATCHERS


def _build_keyword_like(tree: SyntaxTree, node: SyntaxNode, pos: int) -> Classification:
    return Classification(
        situation=Situation.KEYWORD,
        from_=node.start,
        categories=(GrammarCategory.AGGREGATE_OP_MODIFIER, GrammarCategory.BIN_OP),
    )


RULES: tuple[Rule, ...] = (
    Rule(Situation.METRIC_NAME, _is_metric_name, _build_metric_name),
    Rule(Situation.GROUPING_LABELS, _is_grouping_label, _build_grouping_label),
    Rule(Situation.LABEL_MATCHERS, _is_label_matcher_name, _build_label_matcher_name),
    Rule(Situation.LABEL_VALUE, _is_label_value, _build_label_value),
    Rule(Situation.INVALID_MATCH_OP, _is_dangling_match_op, _build_dangling_match_op),
    Rule(
        Situation.MATCH_OP,
        _is_match_op,
        _category_rule(Situation.MATCH_OP, GrammarCategory.MATCH_OP),
    ),
    Rule(
        Situation.BINARY_OP,
        _parent_is(n.BINARY_EXPR),
        _category_rule(Situation.BINARY_OP, GrammarCategory.BIN_OP),
    ),
    Rule(
        Situation.FUNCTION_IDENTIFIER,
        _parent_is(n.FUNCTION_IDENTIFIER),
        _category_rule(Situation.FUNCTION_IDENTIFIER, GrammarCategory.FUNCTION_IDENTIFIER),
    ),
    Rule(
        Situation.AGGREGATE_OP,
        _parent_is(n.AGGREGATE_OP),
        _category_rule(Situation.AGGREGATE_OP, GrammarCategory.AGGREGATE_OP),
    ),
    Rule(Situation.KEYWORD, _is_keyword_like, _build_keyword_like),
)


def classify(tree: SyntaxTree, node: SyntaxNode, pos: Optional[int] = None) -> Optional[Classification]:
    """
    Classify a resolved node.

    Args:
        tree: The parsed query
        node: Node resolved at the cursor
        pos: Cursor offset, defaults to the end of the node

    Returns:
        Classification of the first matching rule, None when no rule matches
    """
    if pos is None:
        pos = node.end
    for rule in RULES:
        if rule.matches(tree, node, pos):
            return rule.build(tree, node, pos)
    return None
