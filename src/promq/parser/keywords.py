# promq.parser.keywords - PromQL vocabulary
"""
Literal keyword and operator lists of the PromQL language.

Shared by the parser, which needs to recognise keywords, and by the
completion term tables, which offer them as candidates.
"""

MATCH_OPERATORS = ["=", "!=", "=~", "!~"]

BINARY_OPERATORS = [
    "^", "*", "/", "%", "+", "-",
    "==", ">=", ">", "<", "<=", "!=",
    "atan2", "and", "or", "unless",
]

BINARY_OPERATOR_MODIFIERS = ["on", "ignoring", "group_left", "group_right", "bool"]

AGGREGATE_OPERATORS = [
    "avg",
    "bottomk",
    "count",
    "count_values",
    "group",
    "max",
    "min",
    "quantile",
    "stddev",
    "stdvar",
    "sum",
    "topk",
]

AGGREGATE_OPERATOR_MODIFIERS = ["by", "without"]

FUNCTION_IDENTIFIERS = [
    "abs",
    "absent",
    "absent_over_time",
    "acos",
    "acosh",
    "asin",
    "asinh",
    "atan",
    "atanh",
    "avg_over_time",
    "ceil",
    "changes",
    "clamp",
    "clamp_max",
    "clamp_min",
    "cos",
    "cosh",
    "count_over_time",
    "days_in_month",
    "day_of_month",
    "day_of_week",
    "day_of_year",
    "deg",
    "delta",
    "deriv",
    "exp",
    "floor",
    "histogram_quantile",
    "holt_winters",
    "hour",
    "idelta",
    "increase",
    "irate",
    "label_join",
    "label_replace",
    "last_over_time",
    "ln",
    "log10",
    "log2",
    "max_over_time",
    "min_over_time",
    "minute",
    "month",
    "pi",
    "predict_linear",
    "present_over_time",
    "quantile_over_time",
    "rad",
    "rate",
    "resets",
    "round",
    "scalar",
    "sgn",
    "sin",
    "sinh",
    "sort",
    "sort_desc",
    "sqrt",
    "stddev_over_time",
    "stdvar_over_time",
    "sum_over_time",
    "tan",
    "tanh",
    "time",
    "timestamp",
    "vector",
    "year",
]

# Binary operators spelled as words
WORD_BINARY_OPERATORS = {"and", "or", "unless", "atan2"}

# Words that are never a metric name where an expression is expected
RESERVED_WORDS = (
    WORD_BINARY_OPERATORS
    | set(BINARY_OPERATOR_MODIFIERS)
    | set(AGGREGATE_OPERATOR_MODIFIERS)
    | {"offset"}
)
