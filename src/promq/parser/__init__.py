# promq.parser - PromQL parsing module
from promq.parser.tree import SyntaxNode, SyntaxTree
from promq.parser.lexer import Lexer, Token
from promq.parser.promql_parser import PromQLParser, parse
from promq.parser.path_finder import (
    walk_backward,
    walk_through,
    is_descendant_of_kind_at_depth,
)

__all__ = [
    "SyntaxNode",
    "SyntaxTree",
    "Lexer",
    "Token",
    "PromQLParser",
    "parse",
    "walk_backward",
    "walk_through",
    "is_descendant_of_kind_at_depth",
]
