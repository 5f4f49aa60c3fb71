# tests/test_parser.py - Parser tests
"""
Tests for the lexer, the tolerant PromQL parser and tree navigation.
"""
import pytest

from promq.parser import Lexer, parse, walk_backward, walk_through
from promq.parser import nodes as n
from promq.parser.lexer import DURATION, EOF, ERROR, IDENT, NUMBER, OP, STRING
from promq.parser.path_finder import ancestor, is_descendant_of_kind_at_depth


def path_to_root(tree, pos):
    """Node names from the resolved node up to the root."""
    names = []
    node = tree.resolve(pos)
    while node is not None:
        names.append(node.name)
        node = node.parent
    return names


class TestLexer:
    """Tests for the Lexer class."""

    def test_tokenize_selector(self):
        """Test tokens of a selector with a matcher."""
        tokens = Lexer().tokenize('up{job=~"api"}')

        assert [t.kind for t in tokens] == [IDENT, OP, IDENT, OP, STRING, OP, EOF]
        assert tokens[3].text == "=~"
        assert tokens[4].start == 8

    def test_duration_and_number(self):
        """Test durations are told apart from numbers."""
        tokens = Lexer().tokenize("x[5m] > 1.5e3")

        kinds = [t.kind for t in tokens]
        assert DURATION in kinds
        assert NUMBER in kinds

    def test_lone_bang_is_error(self):
        """Test an invalid character becomes an error token."""
        tokens = Lexer().tokenize("{job!}")

        bang = tokens[2]
        assert bang.kind == ERROR
        assert bang.text == "!"

    def test_unterminated_string(self):
        """Test an unterminated string runs to the end."""
        tokens = Lexer().tokenize('up{job="no')

        assert tokens[-2].kind == STRING
        assert tokens[-2].text == '"no'

    def test_eof_after_whitespace(self):
        """Test the EOF token sits at the end of the text."""
        tokens = Lexer().tokenize("up  ")
        assert tokens[-1].kind == EOF
        assert tokens[-1].start == 4


class TestParser:
    """Tests for the PromQLParser tree shapes."""

    def test_metric_identifier(self):
        """Test a bare metric name."""
        tree = parse("http_requests_total")

        assert path_to_root(tree, 5) == [
            n.IDENTIFIER, n.METRIC_IDENTIFIER, n.VECTOR_SELECTOR, n.EXPR, n.PROMQL,
        ]

    def test_binary_expr_operand(self):
        """Test a metric on the right of a binary operator."""
        tree = parse("metric / ignor")

        assert path_to_root(tree, 14)[:5] == [
            n.IDENTIFIER, n.METRIC_IDENTIFIER, n.VECTOR_SELECTOR, n.EXPR, n.BINARY_EXPR,
        ]

    def test_missing_operand(self):
        """Test a missing right operand is a zero-width error."""
        text = "sum(rate(http_requests_total[5m])) / "
        tree = parse(text)

        node = tree.resolve(len(text))
        assert node.is_error
        assert node.start == node.end == len(text)
        assert node.parent.name == n.EXPR
        assert node.parent.parent.name == n.BINARY_EXPR

    def test_function_and_matrix(self):
        """Test function call with a range selector."""
        tree = parse("rate(http_requests_total[5m])")
        names = [node.name for node in tree.root.walk()]

        assert n.FUNCTION_CALL in names
        assert n.FUNCTION_IDENTIFIER in names
        assert n.MATRIX_SELECTOR in names
        assert n.DURATION in names

    def test_function_name_without_paren_is_metric(self):
        """Test a function name not followed by ( is a metric name."""
        tree = parse("rate")
        assert tree.resolve(4).parent.name == n.METRIC_IDENTIFIER

    def test_aggregation_with_grouping(self):
        """Test aggregation with a by clause."""
        tree = parse("sum by(job, instance) (up)")
        labels = [node for node in tree.root.walk() if node.name == n.LABEL_NAME]

        assert [tree.slice(label) for label in labels] == ["job", "instance"]
        assert labels[0].parent.name == n.GROUPING_LABEL

    def test_empty_grouping_labels(self):
        """Test an empty by() list resolves to the list."""
        tree = parse("sum by()")
        node = tree.resolve(7)

        assert node.name == n.GROUPING_LABELS
        assert node.start == 6

    def test_unclosed_label_matchers(self):
        """Test an unclosed { is still a LabelMatchers node."""
        tree = parse("up{")
        node = tree.resolve(3)

        assert node.name == n.LABEL_MATCHERS
        assert node.start == 2

    @pytest.mark.parametrize("text,name", [
        ('up{job="a",', n.LABEL_MATCHERS),
        ('up{job="a", ', n.LABEL_MATCHERS),
        ("sum by(job,", n.GROUPING_LABELS),
    ])
    def test_unclosed_list_runs_to_end(self, text, name):
        """Test an unclosed list runs to the end of the input."""
        tree = parse(text)
        node = tree.resolve(len(text))

        assert node.name == name
        assert node.end == len(text)

    @pytest.mark.parametrize("text,pos", [
        ("rate(", 5),
        ("rate()", 5),
        ("sum(", 4),
    ])
    def test_empty_call_body_has_placeholder(self, text, pos):
        """Test an empty argument list holds a missing operand."""
        node = parse(text).resolve(pos)

        assert node.is_error
        assert node.start == node.end == pos
        assert node.parent.name == n.EXPR
        assert node.parent.parent.name == n.FUNCTION_CALL_ARGS

    def test_label_value_string(self):
        """Test string literal inside a matcher."""
        tree = parse('up{job="')
        node = tree.resolve(8)

        assert node.name == n.STRING_LITERAL
        assert node.parent.name == n.LABEL_MATCHER

    def test_dangling_match_operator(self):
        """Test a lone ! after a label name is an empty error node."""
        tree = parse("up{job!}")
        matcher = tree.resolve(7).parent

        assert matcher.name == n.LABEL_MATCHER
        assert matcher.first_child.name == n.LABEL_NAME
        assert matcher.last_child.is_error
        assert matcher.last_child.first_child is None

    def test_double_equal_in_matcher(self):
        """Test == inside a matcher keeps its token under the error."""
        tree = parse("foo{bar==}")
        node = tree.resolve(9)

        assert node.parent.is_error
        assert node.name == "Eql"

    def test_stray_identifier_after_aggregation(self):
        """Test `sum b` wraps the identifier in an error node."""
        tree = parse("sum b")
        node = tree.resolve(5)

        assert node.name == n.IDENTIFIER
        assert node.parent.is_error

    def test_precedence(self):
        """Test * binds tighter than +."""
        tree = parse("a + b * c")
        top = tree.root.first_child.first_child

        assert top.name == n.BINARY_EXPR
        assert top.children[1].name == "Add"
        right = top.last_child.first_child
        assert right.name == n.BINARY_EXPR
        assert right.children[1].name == "Mul"

    def test_bin_modifiers(self):
        """Test on(...) group_left after an operator."""
        tree = parse("a / on(job) group_left b")
        names = [node.name for node in tree.root.walk()]

        assert n.BIN_MODIFIERS in names
        assert n.ON in names
        assert n.GROUP_LEFT in names

    @pytest.mark.parametrize("text", [
        "",
        ")",
        "{{{",
        'sum(rate(x{a="b",c!~"d"}[5m] offset 1h)) by (job) > bool 0.5',
        "-x ^ 2",
        "x[1h:5m] @ start()",
        "(((",
        "foo{=",
        'label_replace(up, "a", "$1", "b", "(.*)")',
    ])
    def test_never_raises(self, text):
        """Test any input produces a tree covering the text."""
        tree = parse(text)

        assert tree.root.name == n.PROMQL
        assert tree.root.start == 0
        assert tree.root.end == len(text)
        for node in tree.root.walk():
            assert 0 <= node.start <= node.end <= len(text)


class TestSyntaxNode:
    """Tests for node links."""

    def test_siblings(self):
        """Test sibling links around a binary operator."""
        binary = parse("a + b").root.first_child.first_child
        left, op, right = binary.children

        assert op.prev_sibling is left
        assert op.next_sibling is right
        assert left.prev_sibling is None
        assert right.next_sibling is None

    def test_root_has_no_siblings(self):
        root = parse("up").root

        assert root.next_sibling is None
        assert root.prev_sibling is None


class TestPathFinder:
    """Tests for tree navigation helpers."""

    def test_walk_backward_finds_selector(self):
        """Test ascending from a matcher to its selector."""
        tree = parse('up{job="x"}')
        selector = walk_backward(tree.resolve(5), n.VECTOR_SELECTOR)

        assert selector is not None
        assert selector.start == 0

    def test_walk_backward_not_found(self):
        """Test ascending past the root gives None."""
        tree = parse("up")
        assert walk_backward(tree.resolve(2), n.LABEL_MATCHERS) is None
        assert walk_backward(None, n.EXPR) is None

    def test_walk_through_metric_name(self):
        """Test descending to the metric identifier."""
        tree = parse('up{job="x"}')
        selector = walk_backward(tree.resolve(5), n.VECTOR_SELECTOR)
        identifier = walk_through(selector, n.METRIC_IDENTIFIER, n.IDENTIFIER)

        assert tree.slice(identifier) == "up"

    def test_walk_through_missing_link(self):
        """Test a selector without metric name gives None."""
        tree = parse('{job="x"}')
        selector = walk_backward(tree.resolve(2), n.VECTOR_SELECTOR)

        assert selector is not None
        assert walk_through(selector, n.METRIC_IDENTIFIER, n.IDENTIFIER) is None

    def test_ancestor_depth(self):
        """Test depth-based ancestor checks."""
        tree = parse("metric / ignor")
        node = tree.resolve(14)

        assert ancestor(node, 0) is node
        assert is_descendant_of_kind_at_depth(node, n.BINARY_EXPR, 4)
        assert not is_descendant_of_kind_at_depth(node, n.BINARY_EXPR, 3)
        assert not is_descendant_of_kind_at_depth(node, n.BINARY_EXPR, 50)
