# promq.parser.lexer - PromQL tokenizer
"""
Regex-based tokenizer for PromQL.

Never fails: characters that start no valid token become single
character ERROR tokens, and an unterminated string runs to the end of
the input.
"""
import re
from dataclasses import dataclass

# Token kinds
IDENT = "ident"
NUMBER = "number"
DURATION = "duration"
STRING = "string"
OP = "op"
ERROR = "error"
EOF = "eof"


@dataclass(frozen=True)
class Token:
    """A lexed token with its offsets."""
    kind: str
    text: str
    start: int
    end: int

    def is_op(self, *texts: str) -> bool:
        return self.kind == OP and self.text in texts

    def is_word(self, *words: str) -> bool:
        return self.kind == IDENT and self.text.lower() in words


class Lexer:
    """
    Splits a PromQL query into tokens.

    Whitespace and # comments are skipped. Order of the alternatives
    matters: durations before numbers, two character operators before
    single character ones.
    """

    SKIP_PATTERN = re.compile(r"(?:\s+|#[^\n]*)+")

    TOKEN_PATTERN = re.compile(
        r"""
        (?P<duration>(?:\d+(?:ms|[smhdwy]))+(?![a-zA-Z0-9_:]))
        | (?P<number>0[xX][0-9a-fA-F]+|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)
        | (?P<string>"(?:[^"\\]|\\.)*"?|'(?:[^'\\]|\\.)*'?|`[^`]*`?)
        | (?P<ident>[a-zA-Z_:][a-zA-Z0-9_:]*)
        | (?P<op>=~|!~|!=|==|<=|>=|[-+*/%^<>=(){}\[\],:@])
        """,
        re.VERBOSE | re.DOTALL,
    )

    def tokenize(self, text: str) -> list[Token]:
        """
        Tokenize a query.

        Args:
            text: The query text

        Returns:
            Tokens in order, always terminated by an EOF token
        """
        tokens: list[Token] = []
        pos = 0
        length = len(text)

        while True:
            skipped = self.SKIP_PATTERN.match(text, pos)
            if skipped:
                pos = skipped.end()
            if pos >= length:
                break

            match = self.TOKEN_PATTERN.match(text, pos)
            if match and match.end() > pos:
                kind = match.lastgroup
                tokens.append(Token(kind, match.group(), pos, match.end()))
                pos = match.end()
            else:
                tokens.append(Token(ERROR, text[pos], pos, pos + 1))
                pos += 1

        tokens.append(Token(EOF, "", length, length))
        return tokens
