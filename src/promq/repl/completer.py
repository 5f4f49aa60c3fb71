# promq.repl.completer - prompt_toolkit completion for PromQL
"""
Bridges PromQLSession answers to prompt_toolkit completions.
"""
import inspect
from typing import AsyncGenerator, Iterable, Optional

from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document

from promq.complete.assembler import refine_result
from promq.complete.base import CompletionResult
from promq.session import PromQLSession


class PromQLCompleter(Completer):
    """
    Completer for PromQL input.

    Meta commands (/ prefixed) are completed from the command handler,
    everything else goes to the completion session. While the user keeps
    typing the same word, the previous result is narrowed locally instead
    of asking the session again.
    """

    def __init__(self, session: PromQLSession, meta_handler=None):
        """
        Initialize completer.

        Args:
            session: Completion session
            meta_handler: Meta command handler, for /command completion
        """
        self.session = session
        self.meta_handler = meta_handler
        # (strategy, text before cursor, result) of the last request
        self._last: Optional[tuple] = None

    def get_completions(
        self,
        document: Document,
        complete_event: CompleteEvent,
    ) -> Iterable[Completion]:
        """Blocking variant, waits for metadata lookups."""
        text = document.text_before_cursor
        if text.startswith("/"):
            yield from self._complete_meta(text)
            return

        result = self._reuse(document)
        if result is None:
            result = self.session.complete_sync(document.text, document.cursor_position)
            self._remember(document, result)
        yield from self._to_completions(result, document.cursor_position)

    async def get_completions_async(
        self,
        document: Document,
        complete_event: CompleteEvent,
    ) -> AsyncGenerator[Completion, None]:
        text = document.text_before_cursor
        if text.startswith("/"):
            for completion in self._complete_meta(text):
                yield completion
            return

        result = self._reuse(document)
        if result is None:
            result = self.session.complete(document.text, document.cursor_position)
            if inspect.isawaitable(result):
                result = await result
            self._remember(document, result)
        for completion in self._to_completions(result, document.cursor_position):
            yield completion

    def _remember(self, document: Document, result: Optional[CompletionResult]) -> None:
        if result is None:
            self._last = None
        else:
            self._last = (self.session.strategy, document.text_before_cursor, result)

    def _reuse(self, document: Document) -> Optional[CompletionResult]:
        """Narrow the last result if only word characters were appended."""
        if self._last is None:
            return None
        strategy, before, result = self._last
        current = document.text_before_cursor
        if strategy is not self.session.strategy:
            return None
        if len(current) <= len(before) or not current.startswith(before):
            return None
        return refine_result(result, document.text, document.cursor_position)

    def _complete_meta(self, text: str) -> Iterable[Completion]:
        """Complete meta commands."""
        if self.meta_handler is None or " " in text:
            return
        prefix = text[1:].lower()
        for cmd in sorted(self.meta_handler.list_commands()):
            if cmd.startswith(prefix):
                yield Completion(
                    "/" + cmd,
                    start_position=-len(text),
                    display_meta=self.meta_handler.get_help_short(cmd),
                )

    def _to_completions(
        self,
        result: Optional[CompletionResult],
        cursor: int,
    ) -> Iterable[Completion]:
        if result is None:
            return
        for option in result.ranked():
            yield Completion(
                option.apply,
                start_position=result.from_ - cursor,
                display=option.label,
                display_meta=option.kind,
            )
