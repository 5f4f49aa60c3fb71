# promq.complete.terms - Static completion term tables
"""
Grammar categories with their literal terms, and snippet templates.

Snippets are parsed once at import time and shared by every request.
"""
import re
from dataclasses import dataclass
from enum import Enum

from promq.parser.keywords import (
    AGGREGATE_OPERATOR_MODIFIERS,
    AGGREGATE_OPERATORS,
    BINARY_OPERATOR_MODIFIERS,
    BINARY_OPERATORS,
    FUNCTION_IDENTIFIERS,
    MATCH_OPERATORS,
)

# Display kinds attached to candidates
KIND_NONE = ""
KIND_CONSTANT = "constant"
KIND_KEYWORD = "keyword"
KIND_FUNCTION = "function"
KIND_TEXT = "text"


@dataclass(frozen=True)
class TermSet:
    """A list of labels that share one display kind."""
    labels: tuple[str, ...]
    kind: str = KIND_NONE


class GrammarCategory(Enum):
    """Grammatical categories with a fixed term list."""
    MATCH_OP = "match_op"
    BIN_OP = "bin_op"
    BIN_OP_MODIFIER = "bin_op_modifier"
    FUNCTION_IDENTIFIER = "function_identifier"
    AGGREGATE_OP = "aggregate_op"
    AGGREGATE_OP_MODIFIER = "aggregate_op_modifier"

    @property
    def term_set(self) -> TermSet:
        return TERM_SETS[self]

    @property
    def terms(self) -> tuple[str, ...]:
        return TERM_SETS[self].labels

    @property
    def kind(self) -> str:
        return TERM_SETS[self].kind


TERM_SETS: dict[GrammarCategory, TermSet] = {
    GrammarCategory.MATCH_OP: TermSet(tuple(MATCH_OPERATORS)),
    GrammarCategory.BIN_OP: TermSet(tuple(BINARY_OPERATORS)),
    GrammarCategory.BIN_OP_MODIFIER: TermSet(tuple(BINARY_OPERATOR_MODIFIERS), KIND_KEYWORD),
    GrammarCategory.FUNCTION_IDENTIFIER: TermSet(tuple(FUNCTION_IDENTIFIERS), KIND_FUNCTION),
    GrammarCategory.AGGREGATE_OP: TermSet(tuple(AGGREGATE_OPERATORS), KIND_KEYWORD),
    GrammarCategory.AGGREGATE_OP_MODIFIER: TermSet(tuple(AGGREGATE_OPERATOR_MODIFIERS), KIND_KEYWORD),
}


@dataclass(frozen=True)
class SnippetField:
    """A placeholder inside an expanded snippet."""
    name: str
    start: int
    end: int


@dataclass(frozen=True)
class SnippetTemplate:
    """
    A trigger keyword and its `${placeholder}` template.

    Expansion replaces each placeholder by its name and records where the
    names landed so a host can jump between them.
    """
    keyword: str
    template: str

    PLACEHOLDER = re.compile(r"\$\{([^}]*)\}")

    def expand(self) -> tuple[str, tuple[SnippetField, ...]]:
        parts = []
        fields = []
        length = 0
        last = 0
        for match in self.PLACEHOLDER.finditer(self.template):
            literal = self.template[last:match.start()]
            parts.append(literal)
            length += len(literal)
            name = match.group(1)
            fields.append(SnippetField(name, length, length + len(name)))
            parts.append(name)
            length += len(name)
            last = match.end()
        parts.append(self.template[last:])
        return "".join(parts), tuple(fields)


@dataclass(frozen=True)
class ParsedSnippet:
    """A snippet ready to offer: label, insertion text and fields."""
    label: str
    text: str
    fields: tuple[SnippetField, ...]


SNIPPETS: tuple[SnippetTemplate, ...] = (
    SnippetTemplate(
        keyword="sum(rate(__input_vector__[5m]))",
        template="sum(rate(${__input_vector__}[5m]))",
    ),
    SnippetTemplate(
        keyword="histogram_quantile(__quantile__, sum by(le) (rate(__histogram_metric__[5m])))",
        template="histogram_quantile(${__quantile__}, sum by(le) (rate(${__histogram_metric__}[5m])))",
    ),
    SnippetTemplate(
        keyword='label_replace(__input_vector__, "__dst__", "__replacement__", "__src__", "__regex__")',
        template='label_replace(${__input_vector__}, "${__dst__}", "${__replacement__}", "${__src__}", "${__regex__}")',
    ),
)


def _parse_snippets(templates) -> tuple[ParsedSnippet, ...]:
    parsed = []
    for template in templates:
        text, fields = template.expand()
        parsed.append(ParsedSnippet(label=template.keyword, text=text, fields=fields))
    return tuple(parsed)


# Must not be modified, shared by all requests
PARSED_SNIPPETS: tuple[ParsedSnippet, ...] = _parse_snippets(SNIPPETS)
