# promq.complete - Completion engine
from promq.complete.base import (
    CompleteStrategy,
    Completion,
    CompletionContext,
    CompletionResult,
)
from promq.complete.terms import GrammarCategory, TermSet, SnippetTemplate
from promq.complete.assembler import fuzzy_filter, refine_result, to_completion_result
from promq.complete.resolver import Classification, Situation, classify
from promq.complete.hybrid import HybridComplete

__all__ = [
    "CompleteStrategy",
    "Completion",
    "CompletionContext",
    "CompletionResult",
    "GrammarCategory",
    "TermSet",
    "SnippetTemplate",
    "fuzzy_filter",
    "to_completion_result",
    "refine_result",
    "Classification",
    "Situation",
    "classify",
    "HybridComplete",
]
