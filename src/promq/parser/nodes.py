# promq.parser.nodes - Node type names
"""
Node type names emitted by the PromQL parser.

The names follow the PromQL grammar used by editor tooling, so a tree
coming from another parser with the same node names can be completed too.
"""

# Error node, wraps unexpected tokens or marks a missing operand
ERROR = "⚠"

# Top level
PROMQL = "PromQL"
EXPR = "Expr"

# Expressions
AGGREGATE_EXPR = "AggregateExpr"
BINARY_EXPR = "BinaryExpr"
FUNCTION_CALL = "FunctionCall"
MATRIX_SELECTOR = "MatrixSelector"
NUMBER_LITERAL = "NumberLiteral"
OFFSET_EXPR = "OffsetExpr"
PAREN_EXPR = "ParenExpr"
STRING_LITERAL = "StringLiteral"
SUBQUERY_EXPR = "SubqueryExpr"
UNARY_EXPR = "UnaryExpr"
VECTOR_SELECTOR = "VectorSelector"
STEP_INVARIANT_EXPR = "StepInvariantExpr"

# Selector parts
METRIC_IDENTIFIER = "MetricIdentifier"
IDENTIFIER = "Identifier"
LABEL_MATCHERS = "LabelMatchers"
LABEL_MATCHER = "LabelMatcher"
LABEL_NAME = "LabelName"
MATCH_OP = "MatchOp"
DURATION = "Duration"

# Aggregations and functions
AGGREGATE_OP = "AggregateOp"
AGGREGATE_MODIFIER = "AggregateModifier"
GROUPING_LABELS = "GroupingLabels"
GROUPING_LABEL = "GroupingLabel"
FUNCTION_IDENTIFIER = "FunctionIdentifier"
FUNCTION_CALL_BODY = "FunctionCallBody"
FUNCTION_CALL_ARGS = "FunctionCallArgs"

# Binary operator modifiers
BIN_MODIFIERS = "BinModifiers"
BOOL = "Bool"
ON = "On"
IGNORING = "Ignoring"
GROUP_LEFT = "GroupLeft"
GROUP_RIGHT = "GroupRight"

# Aggregation modifiers and other keywords
BY = "By"
WITHOUT = "Without"
OFFSET = "Offset"
AT = "At"

# Match operator tokens
EQL_SINGLE = "EqlSingle"
NEQ = "Neq"
EQL_REGEX = "EqlRegex"
NEQ_REGEX = "NeqRegex"

MATCH_OP_TOKENS = {
    "=": EQL_SINGLE,
    "!=": NEQ,
    "=~": EQL_REGEX,
    "!~": NEQ_REGEX,
}

# Binary operator tokens, by operator text
BINARY_OP_TOKENS = {
    "^": "Pow",
    "*": "Mul",
    "/": "Div",
    "%": "Mod",
    "+": "Add",
    "-": "Sub",
    "==": "Eql",
    "!=": "Neq",
    "<": "Lss",
    "<=": "Lte",
    ">": "Gtr",
    ">=": "Gte",
    "and": "And",
    "or": "Or",
    "unless": "Unless",
    "atan2": "Atan2",
}


def keyword_node_name(word: str) -> str:
    """
    Node name for a keyword token, e.g. "sum" -> "Sum",
    "histogram_quantile" -> "HistogramQuantile".
    """
    return "".join(part[:1].upper() + part[1:] for part in word.split("_"))
