# promq.complete.base - Completion request, result and strategy
"""
Base classes shared by the completion strategies.
"""
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, Union

from promq.complete.terms import ParsedSnippet
from promq.parser.tree import SyntaxTree


@dataclass
class Completion:
    """A single completion candidate."""
    label: str
    apply: str
    kind: str = ""
    score: float = 0
    snippet: Optional[ParsedSnippet] = None

    def to_dict(self) -> dict:
        data = {
            "label": self.label,
            "apply": self.apply,
            "kind": self.kind,
            "score": self.score,
        }
        if self.snippet:
            data["fields"] = [
                {"name": f.name, "start": f.start, "end": f.end}
                for f in self.snippet.fields
            ]
        return data


# Given a candidate and the text typed so far, returns the candidate
# (optionally re-scored) or None to drop it
CompletionFilter = Callable[[Completion, str], Optional[Completion]]


@dataclass
class CompletionResult:
    """
    Candidates for the span [from_, to] of the query.

    A host may keep using the result while the typed text still matches
    `valid_for`, re-filtering locally instead of asking again.
    """
    from_: int
    to: int
    options: list[Completion] = field(default_factory=list)

    valid_for = re.compile(r"^[a-zA-Z0-9_:]+$")

    @property
    def is_empty(self) -> bool:
        return len(self.options) == 0

    def ranked(self) -> list[Completion]:
        """Options by descending score, ties kept in insertion order."""
        return sorted(self.options, key=lambda c: -c.score)

    def labels(self) -> list[str]:
        return [c.label for c in self.options]

    def format_text(self) -> str:
        """Format result for terminal display."""
        lines = [f"Replace [{self.from_}, {self.to}]"]
        if not self.options:
            lines.append("No completions.")
            return "\n".join(lines)
        for option in self.ranked():
            kind = f"  ({option.kind})" if option.kind else ""
            lines.append(f"  {option.label}{kind}")
        lines.append(f"\n({len(self.options)} completion{'s' if len(self.options) != 1 else ''})")
        return "\n".join(lines)

    def to_json(self) -> dict:
        return {
            "from": self.from_,
            "to": self.to,
            "options": [c.to_dict() for c in self.ranked()],
        }


@dataclass
class CompletionContext:
    """A completion request: the parsed query, cursor and filter."""
    tree: SyntaxTree
    pos: int
    filter: Optional[CompletionFilter] = None

    def slice(self, start: int, end: int) -> str:
        return self.tree.text[start:end]


CompletionAnswer = Union[CompletionResult, Awaitable[CompletionResult], None]


class CompleteStrategy(ABC):
    """
    A way of answering completion requests.

    promql() returns a CompletionResult right away, an awaitable one when
    a metadata source has to be queried, or None when nothing can be
    completed at the cursor.
    """

    @abstractmethod
    def promql(self, context: CompletionContext) -> CompletionAnswer:
        pass
