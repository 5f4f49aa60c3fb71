# promq.parser.promql_parser - Error tolerant PromQL parser
"""
Recursive-descent PromQL parser producing a SyntaxTree.

The parser is built for half-typed input: it never raises. Unexpected
tokens are wrapped in error nodes, a missing operand becomes a zero-width
error node inside an Expr, and unclosed brackets simply end at the last
token they contain.
"""
from typing import Optional

from promq.parser import nodes as n
from promq.parser.keywords import (
    AGGREGATE_OPERATORS,
    FUNCTION_IDENTIFIERS,
    RESERVED_WORDS,
    WORD_BINARY_OPERATORS,
)
from promq.parser.lexer import (
    DURATION,
    EOF,
    ERROR,
    IDENT,
    NUMBER,
    OP,
    STRING,
    Lexer,
    Token,
)
from promq.parser.tree import SyntaxNode, SyntaxTree


# Binary operator precedence, higher binds tighter
PRECEDENCE = {
    "or": 1,
    "and": 2,
    "unless": 2,
    "==": 3,
    "!=": 3,
    "<=": 3,
    "<": 3,
    ">=": 3,
    ">": 3,
    "+": 4,
    "-": 4,
    "*": 5,
    "/": 5,
    "%": 5,
    "atan2": 5,
    "^": 6,
}

RIGHT_ASSOCIATIVE = {"^"}

AGGREGATORS = set(AGGREGATE_OPERATORS)
FUNCTIONS = set(FUNCTION_IDENTIFIERS)


class PromQLParser:
    """
    Parses PromQL into a tree whose node names follow the PromQL grammar.

    Usage:
        tree = PromQLParser().parse('sum(rate(http_requests_total[5m]))')
        node = tree.resolve(10)
    """

    def __init__(self):
        self.lexer = Lexer()
        self.tokens: list[Token] = []
        self.index = 0

    def parse(self, text: str) -> SyntaxTree:
        """
        Parse a query.

        Args:
            text: Query text, possibly incomplete

        Returns:
            SyntaxTree rooted at a PromQL node spanning the whole text
        """
        self.tokens = self.lexer.tokenize(text)
        self.index = 0

        root = SyntaxNode(n.PROMQL, 0, len(text))
        if self.peek.kind != EOF:
            root.append(self._parse_expr())
        while self.peek.kind != EOF:
            root.append(self._error_token())
        return SyntaxTree(root=root, text=text)

    # Token helpers

    @property
    def peek(self) -> Token:
        return self.tokens[self.index]

    def _peek_at(self, offset: int) -> Token:
        index = min(self.index + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def _advance(self) -> Token:
        token = self.tokens[self.index]
        if token.kind != EOF:
            self.index += 1
        return token

    def _leaf(self, name: str, token: Token) -> SyntaxNode:
        return SyntaxNode(name, token.start, token.end)

    def _error_token(self) -> SyntaxNode:
        """Consume one unexpected token into an error node."""
        token = self._advance()
        error = SyntaxNode(n.ERROR, token.start, token.end)
        if token.kind == IDENT:
            error.append(self._leaf(n.IDENTIFIER, token))
        elif token.kind == OP and token.text in n.BINARY_OP_TOKENS:
            error.append(self._leaf(n.BINARY_OP_TOKENS[token.text], token))
        return error

    def _missing_expr(self) -> SyntaxNode:
        """Zero-width placeholder where an operand is expected."""
        at = self.peek.start
        expr = SyntaxNode(n.EXPR, at, at)
        expr.append(SyntaxNode(n.ERROR, at, at))
        return expr

    def _wrap(self, inner: SyntaxNode) -> SyntaxNode:
        expr = SyntaxNode(n.EXPR, inner.start, inner.start)
        expr.append(inner)
        return expr

    # Expressions

    def _starts_expr(self, token: Token) -> bool:
        if token.kind in (NUMBER, DURATION, STRING):
            return True
        if token.kind == IDENT:
            return token.text.lower() not in RESERVED_WORDS
        return token.is_op("(", "{", "-", "+")

    def _binary_op(self, token: Token) -> Optional[str]:
        """Operator text if the token is a binary operator."""
        if token.kind == OP and token.text in PRECEDENCE:
            return token.text
        if token.kind == IDENT and token.text.lower() in WORD_BINARY_OPERATORS:
            return token.text.lower()
        return None

    def _parse_expr(self, min_prec: int = 1) -> SyntaxNode:
        """Parse an expression with precedence climbing. Returns an Expr node."""
        if not self._starts_expr(self.peek):
            return self._missing_expr()

        left = self._parse_unary()
        while True:
            op = self._binary_op(self.peek)
            if op is None or PRECEDENCE[op] < min_prec:
                return left

            op_token = self._advance()
            binary = SyntaxNode(n.BINARY_EXPR, left.start, left.start)
            binary.append(left)
            binary.append(self._leaf(n.BINARY_OP_TOKENS[op], op_token))

            modifiers = self._parse_bin_modifiers()
            if modifiers is not None:
                binary.append(modifiers)

            next_prec = PRECEDENCE[op] if op in RIGHT_ASSOCIATIVE else PRECEDENCE[op] + 1
            binary.append(self._parse_expr(next_prec))
            left = self._wrap(binary)

    def _parse_bin_modifiers(self) -> Optional[SyntaxNode]:
        token = self.peek
        if not token.is_word("bool", "on", "ignoring", "group_left", "group_right"):
            return None

        modifiers = SyntaxNode(n.BIN_MODIFIERS, token.start, token.start)
        if self.peek.is_word("bool"):
            modifiers.append(self._leaf(n.BOOL, self._advance()))
        if self.peek.is_word("on", "ignoring"):
            word = self._advance()
            name = n.ON if word.text.lower() == "on" else n.IGNORING
            modifiers.append(self._leaf(name, word))
            if self.peek.is_op("("):
                modifiers.append(self._parse_grouping_labels())
        if self.peek.is_word("group_left", "group_right"):
            word = self._advance()
            name = n.GROUP_LEFT if word.text.lower() == "group_left" else n.GROUP_RIGHT
            modifiers.append(self._leaf(name, word))
            if self.peek.is_op("("):
                modifiers.append(self._parse_grouping_labels())
        return modifiers

    def _parse_unary(self) -> SyntaxNode:
        token = self.peek
        if token.is_op("-", "+"):
            self._advance()
            unary = SyntaxNode(n.UNARY_EXPR, token.start, token.end)
            unary.append(self._leaf("Sub" if token.text == "-" else "Add", token))
            # Unary operators bind looser than ^ only
            unary.append(self._parse_expr(PRECEDENCE["^"]))
            return self._wrap(unary)
        return self._parse_postfix(self._parse_primary())

    def _parse_postfix(self, expr: SyntaxNode) -> SyntaxNode:
        """Range selectors, subqueries, offset and @ modifiers."""
        while True:
            token = self.peek
            if token.is_op("["):
                expr = self._wrap(self._parse_range(expr))
            elif token.is_word("offset"):
                offset = SyntaxNode(n.OFFSET_EXPR, expr.start, expr.start)
                offset.append(expr)
                offset.append(self._leaf(n.OFFSET, self._advance()))
                if self.peek.is_op("-"):
                    self._advance()
                if self.peek.kind in (DURATION, NUMBER):
                    offset.append(self._leaf(n.DURATION, self._advance()))
                expr = self._wrap(offset)
            elif token.is_op("@"):
                step = SyntaxNode(n.STEP_INVARIANT_EXPR, expr.start, expr.start)
                step.append(expr)
                step.append(self._leaf(n.AT, self._advance()))
                if self.peek.kind in (NUMBER, DURATION):
                    step.append(self._leaf(n.NUMBER_LITERAL, self._advance()))
                elif self.peek.is_word("start", "end"):
                    step.append(self._leaf(n.IDENTIFIER, self._advance()))
                    if self.peek.is_op("(") and self._peek_at(1).is_op(")"):
                        self._advance()
                        self._advance()
                expr = self._wrap(step)
            else:
                return expr

    def _parse_range(self, expr: SyntaxNode) -> SyntaxNode:
        """Parse `[range]` or `[range:step]` after an expression."""
        open_token = self._advance()
        selector = SyntaxNode(n.MATRIX_SELECTOR, expr.start, open_token.end)
        selector.append(expr)
        if self.peek.kind in (DURATION, NUMBER):
            selector.append(self._leaf(n.DURATION, self._advance()))
        if self.peek.is_op(":"):
            selector.name = n.SUBQUERY_EXPR
            self._advance()
            if self.peek.kind in (DURATION, NUMBER):
                selector.append(self._leaf(n.DURATION, self._advance()))
        while not self.peek.is_op("]") and self.peek.kind != EOF:
            selector.append(self._error_token())
        if self.peek.is_op("]"):
            selector.end = self._advance().end
        return selector

    def _parse_primary(self) -> SyntaxNode:
        token = self.peek

        if token.is_op("("):
            self._advance()
            paren = SyntaxNode(n.PAREN_EXPR, token.start, token.end)
            paren.append(self._parse_expr())
            while not self.peek.is_op(")") and self.peek.kind != EOF:
                paren.append(self._error_token())
            if self.peek.is_op(")"):
                paren.end = self._advance().end
            return self._wrap(paren)

        if token.is_op("{"):
            selector = SyntaxNode(n.VECTOR_SELECTOR, token.start, token.start)
            selector.append(self._parse_label_matchers())
            return self._wrap(selector)

        if token.kind == STRING:
            return self._wrap(self._leaf(n.STRING_LITERAL, self._advance()))

        if token.kind in (NUMBER, DURATION):
            return self._wrap(self._leaf(n.NUMBER_LITERAL, self._advance()))

        # Only identifiers remain, _starts_expr has filtered the rest
        word = token.text.lower()
        if word in AGGREGATORS:
            return self._wrap(self._parse_aggregate())
        if token.text in FUNCTIONS and self._peek_at(1).is_op("("):
            return self._wrap(self._parse_function_call())
        if word in ("inf", "nan"):
            return self._wrap(self._leaf(n.NUMBER_LITERAL, self._advance()))
        return self._wrap(self._parse_vector_selector())

    def _parse_vector_selector(self) -> SyntaxNode:
        token = self._advance()
        selector = SyntaxNode(n.VECTOR_SELECTOR, token.start, token.start)
        metric = SyntaxNode(n.METRIC_IDENTIFIER, token.start, token.start)
        metric.append(self._leaf(n.IDENTIFIER, token))
        selector.append(metric)
        if self.peek.is_op("{"):
            selector.append(self._parse_label_matchers())
        return selector

    def _parse_label_matchers(self) -> SyntaxNode:
        open_token = self._advance()
        matchers = SyntaxNode(n.LABEL_MATCHERS, open_token.start, open_token.end)

        while self.peek.kind != EOF and not self.peek.is_op("}"):
            if self.peek.is_op(","):
                self._advance()
                continue
            if self.peek.kind == IDENT:
                matchers.append(self._parse_label_matcher())
            else:
                matchers.append(self._error_token())

        if self.peek.is_op("}"):
            matchers.end = self._advance().end
        else:
            # Unclosed, the list runs to the end of the input
            matchers.end = self.peek.start
        return matchers

    def _parse_label_matcher(self) -> SyntaxNode:
        name_token = self._advance()
        matcher = SyntaxNode(n.LABEL_MATCHER, name_token.start, name_token.start)
        matcher.append(self._leaf(n.LABEL_NAME, name_token))

        token = self.peek
        if token.kind == OP and token.text in n.MATCH_OP_TOKENS:
            self._advance()
            op = SyntaxNode(n.MATCH_OP, token.start, token.start)
            op.append(self._leaf(n.MATCH_OP_TOKENS[token.text], token))
            matcher.append(op)
        elif token.kind not in (EOF, STRING) and not token.is_op(",", "}"):
            matcher.append(self._error_token())

        if self.peek.kind == STRING:
            matcher.append(self._leaf(n.STRING_LITERAL, self._advance()))

        while self.peek.kind != EOF and not self.peek.is_op(",", "}"):
            matcher.append(self._error_token())
        return matcher

    def _parse_aggregate(self) -> SyntaxNode:
        token = self._advance()
        aggregate = SyntaxNode(n.AGGREGATE_EXPR, token.start, token.start)
        op = SyntaxNode(n.AGGREGATE_OP, token.start, token.start)
        op.append(self._leaf(n.keyword_node_name(token.text.lower()), token))
        aggregate.append(op)

        has_body = False
        has_modifier = False
        while True:
            token = self.peek
            if token.is_word("by", "without") and not has_modifier:
                aggregate.append(self._parse_aggregate_modifier())
                has_modifier = True
            elif token.is_op("(") and not has_body:
                aggregate.append(self._parse_call_body())
                has_body = True
            elif token.kind == IDENT and not has_body and self._binary_op(token) is None:
                # e.g. `sum b` while typing `sum by`
                aggregate.append(self._error_token())
            else:
                return aggregate
            if has_body and has_modifier:
                return aggregate

    def _parse_aggregate_modifier(self) -> SyntaxNode:
        token = self._advance()
        modifier = SyntaxNode(n.AGGREGATE_MODIFIER, token.start, token.start)
        name = n.BY if token.text.lower() == "by" else n.WITHOUT
        modifier.append(self._leaf(name, token))
        if self.peek.is_op("("):
            modifier.append(self._parse_grouping_labels())
        return modifier

    def _parse_grouping_labels(self) -> SyntaxNode:
        open_token = self._advance()
        labels = SyntaxNode(n.GROUPING_LABELS, open_token.start, open_token.end)

        while self.peek.kind != EOF and not self.peek.is_op(")"):
            token = self.peek
            if token.is_op(","):
                self._advance()
            elif token.kind == IDENT:
                self._advance()
                label = SyntaxNode(n.GROUPING_LABEL, token.start, token.start)
                label.append(self._leaf(n.LABEL_NAME, token))
                labels.append(label)
            else:
                labels.append(self._error_token())

        if self.peek.is_op(")"):
            labels.end = self._advance().end
        else:
            labels.end = self.peek.start
        return labels

    def _parse_function_call(self) -> SyntaxNode:
        token = self._advance()
        call = SyntaxNode(n.FUNCTION_CALL, token.start, token.start)
        identifier = SyntaxNode(n.FUNCTION_IDENTIFIER, token.start, token.start)
        identifier.append(self._leaf(n.keyword_node_name(token.text), token))
        call.append(identifier)
        call.append(self._parse_call_body())
        return call

    def _parse_call_body(self) -> SyntaxNode:
        open_token = self._advance()
        body = SyntaxNode(n.FUNCTION_CALL_BODY, open_token.start, open_token.end)

        # An empty body still gets a missing operand to complete into
        args = SyntaxNode(n.FUNCTION_CALL_ARGS, self.peek.start, self.peek.start)
        args.append(self._parse_expr())
        while self.peek.kind != EOF and not self.peek.is_op(")"):
            if self.peek.is_op(","):
                self._advance()
                args.append(self._parse_expr())
            else:
                args.append(self._error_token())
        body.append(args)

        if self.peek.is_op(")"):
            body.end = self._advance().end
        return body


def parse(text: str) -> SyntaxTree:
    """Parse a query with a fresh parser."""
    return PromQLParser().parse(text)
