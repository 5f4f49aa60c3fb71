# promq.lsp.client - Language server completion client
"""
Completion answered by a PromQL language server behind an HTTP bridge.
"""
import logging
import re
from typing import Optional

import httpx

from promq.complete.base import (
    CompleteStrategy,
    Completion,
    CompletionContext,
    CompletionResult,
)
from promq.lsp.model import AutocompleteResponse, TextEdit

logger = logging.getLogger(__name__)

WORD_CHAR = re.compile(r"[a-zA-Z0-9_:]")


def line_start(text: str, pos: int) -> int:
    """Offset of the first character of the line holding pos."""
    return text.rfind("\n", 0, pos) + 1


def line_offset(text: str, line: int) -> Optional[int]:
    """Absolute offset of a 0-based line, None past the last line."""
    offset = 0
    for _ in range(line):
        newline = text.find("\n", offset)
        if newline < 0:
            return None
        offset = newline + 1
    return offset


def word_start(text: str, pos: int) -> int:
    """Start of the identifier-like word ending at pos."""
    start = pos
    while start > 0 and WORD_CHAR.match(text[start - 1]):
        start -= 1
    return start


class LSPClient:
    """
    Sends the whole query to the language server and maps its answer.

    The server addresses positions with 0-based line and character.
    When items carry a textEdit, every edit in a batch is the same, so
    the last one seen sets the replacement start of the whole result.
    """

    AUTOCOMPLETE_ENDPOINT = "/completion"

    def __init__(
        self,
        url: str,
        limit: int = 100,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url.rstrip("/")
        self.limit = limit
        self.timeout = timeout
        self.transport = transport

    def request_body(self, text: str, pos: int) -> dict:
        """Build the completion request for a cursor position."""
        line_from = line_start(text, pos)
        column = pos - line_from
        return {
            "expr": text,
            "limit": self.limit,
            # The server expects the character before the cursor
            "positionChar": column - 1 if column - 1 > 0 else column,
            "positionLine": text.count("\n", 0, pos),
        }

    async def autocomplete(self, context: CompletionContext) -> CompletionResult:
        """
        Ask the server for completions at the context cursor.

        Returns:
            CompletionResult, empty when the server can't be used
        """
        text = context.tree.text
        pos = context.pos
        fallback = CompletionResult(from_=word_start(text, pos), to=pos)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.url + self.AUTOCOMPLETE_ENDPOINT,
                    json=self.request_body(text, pos),
                )
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Language server request failed: %s", e)
            return fallback
        except ValueError as e:
            logger.warning("Invalid JSON from language server: %s", e)
            return fallback

        if not isinstance(payload, list):
            logger.warning("Unexpected language server payload: %r", type(payload).__name__)
            return fallback

        options: list[Completion] = []
        text_edit: Optional[TextEdit] = None
        for raw in payload:
            try:
                item = AutocompleteResponse.from_dict(raw)
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.debug("Skipping malformed completion item %r: %s", raw, e)
                continue
            label = item.label
            if item.text_edit is not None:
                label = item.text_edit.new_text
                text_edit = item.text_edit
            options.append(Completion(label=label, apply=label))

        return CompletionResult(
            from_=self._edit_start(text, pos, text_edit, fallback.from_),
            to=pos,
            options=options,
        )

    @staticmethod
    def _edit_start(text: str, pos: int, edit: Optional[TextEdit], default: int) -> int:
        if edit is None:
            return default
        start = edit.range.start
        offset = line_offset(text, start.line)
        if offset is None:
            offset = line_start(text, pos)
        # Never past the cursor
        return min(offset + start.character, pos)


class LSPComplete(CompleteStrategy):
    """
    Strategy handing every request to the language server.

    Grammar classification is skipped: the server sees the whole query
    and decides on its own what to offer.
    """

    def __init__(self, client: LSPClient):
        self.client = client

    def promql(self, context: CompletionContext):
        return self.client.autocomplete(context)
