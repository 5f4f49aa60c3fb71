# promq.complete.assembler - Build completion results
"""
Turns term sets and snippets into a filtered CompletionResult.
"""
from dataclasses import replace
from typing import Iterable, Optional

from promq.complete.base import (
    Completion,
    CompletionContext,
    CompletionFilter,
    CompletionResult,
)
from promq.complete.terms import PARSED_SNIPPETS, TermSet


def fuzzy_filter(completion: Completion, text: str) -> Optional[Completion]:
    """
    Default filter: case-insensitive subsequence match.

    Prefix matches score highest, then substring matches, then scattered
    subsequences. Labels not containing the typed characters in order
    are dropped. Empty text keeps everything with score 0.
    """
    if not text:
        return replace(completion, score=0)

    label = completion.label.lower()
    typed = text.lower()

    if label.startswith(typed):
        score = 100 - (len(label) - len(typed)) / (len(label) + 1)
    elif typed in label:
        score = 50 - label.index(typed) / (len(label) + 1)
    else:
        index = 0
        gaps = 0
        for char in label:
            if index < len(typed) and char == typed[index]:
                index += 1
            elif index:
                gaps += 1
        if index < len(typed):
            return None
        score = 10 - gaps / (len(label) + 1)

    return replace(completion, score=score)


def to_completion_result(
    data: Iterable[TermSet],
    from_: int,
    to: int,
    context: CompletionContext,
    include_snippets: bool = False,
) -> CompletionResult:
    """
    Filter every term (and optionally the snippets) against the typed text.

    Args:
        data: Term sets in display order
        from_: Start of the span being replaced
        to: End of the span, the cursor
        context: Request holding the text and the filter
        include_snippets: Append the snippet templates

    Returns:
        CompletionResult over [from_, to]
    """
    text = context.slice(from_, to)
    apply_filter = context.filter or fuzzy_filter
    options: list[Completion] = []

    for term_set in data:
        for label in term_set.labels:
            completion = apply_filter(
                Completion(label=label, apply=label, kind=term_set.kind),
                text,
            )
            if completion is not None:
                options.append(completion)

    if include_snippets:
        for snippet in PARSED_SNIPPETS:
            completion = apply_filter(
                Completion(label=snippet.label, apply=snippet.text, snippet=snippet),
                text,
            )
            if completion is not None:
                options.append(completion)

    return CompletionResult(from_=from_, to=to, options=options)


def refine_result(
    result: CompletionResult,
    text: str,
    pos: int,
    filter: Optional[CompletionFilter] = None,
) -> Optional[CompletionResult]:
    """
    Re-filter a previous result after more characters were typed.

    Args:
        result: Result of an earlier request on the same query
        text: Current query text
        pos: Current cursor offset

    Returns:
        The narrowed result, or None when the typed text left
        `valid_for` and a fresh request is needed
    """
    if pos < result.to:
        return None
    typed = text[result.from_:pos]
    if not result.valid_for.match(typed):
        return None

    apply_filter = filter or fuzzy_filter
    options = []
    for option in result.options:
        completion = apply_filter(option, typed)
        if completion is not None:
            options.append(completion)
    return CompletionResult(from_=result.from_, to=pos, options=options)
