# promq.session - Completion session
"""
Host-owned entry point for completion.

A session holds the active completion strategy. Hosts create one per
editor and call complete() on every relevant keystroke.
"""
import asyncio
import inspect
import logging
from typing import Awaitable, Optional

from promq.client import PrometheusProvider
from promq.complete.base import (
    CompleteStrategy,
    CompletionAnswer,
    CompletionContext,
    CompletionFilter,
    CompletionResult,
)
from promq.complete.hybrid import HybridComplete
from promq.config.config import SOURCE_LSP, SOURCE_PROMETHEUS, CompleteConfig
from promq.lsp import LSPClient, LSPComplete
from promq.parser import PromQLParser

logger = logging.getLogger(__name__)


def new_complete_strategy(config: Optional[CompleteConfig] = None) -> CompleteStrategy:
    """
    Build the strategy for a completion configuration.

    Args:
        config: Completion settings, None for offline

    Returns:
        CompleteStrategy; unusable settings give the offline strategy
    """
    config = (config or CompleteConfig()).validated()

    if config.source == SOURCE_LSP:
        return LSPComplete(LSPClient(config.url, limit=config.limit, timeout=config.timeout))
    if config.source == SOURCE_PROMETHEUS:
        return HybridComplete(PrometheusProvider(config.url, timeout=config.timeout))
    return HybridComplete()


class PromQLSession:
    """
    Completion session for one editor.

    Switching the completion source replaces the strategy; answers still
    pending from the previous strategy resolve to None so they can't mix
    with answers from the new one.

    Usage:
        session = PromQLSession(CompleteConfig(source="prometheus", url=URL))
        answer = session.complete("up{", 3)
        result = await answer if inspect.isawaitable(answer) else answer
    """

    def __init__(
        self,
        config: Optional[CompleteConfig] = None,
        strategy: Optional[CompleteStrategy] = None,
    ):
        """
        Initialize session.

        Args:
            config: Completion settings
            strategy: Use this strategy instead of building one from config
        """
        self.parser = PromQLParser()
        self._generation = 0
        self._strategy = strategy or new_complete_strategy(config)

    @property
    def strategy(self) -> CompleteStrategy:
        return self._strategy

    def set_complete(
        self,
        config: Optional[CompleteConfig] = None,
        strategy: Optional[CompleteStrategy] = None,
    ) -> None:
        """Replace the completion strategy, dropping pending answers."""
        self._generation += 1
        self._strategy = strategy or new_complete_strategy(config)
        logger.debug("Completion strategy set to %s", type(self._strategy).__name__)

    def complete(
        self,
        text: str,
        pos: int,
        filter: Optional[CompletionFilter] = None,
    ) -> CompletionAnswer:
        """
        Complete a query at a cursor offset.

        Args:
            text: Full query text
            pos: Cursor offset, clamped into the text
            filter: Candidate filter, fuzzy matching when None

        Returns:
            CompletionResult, an awaitable CompletionResult, or None when
            nothing applies at the cursor
        """
        pos = max(0, min(pos, len(text)))
        context = CompletionContext(tree=self.parser.parse(text), pos=pos, filter=filter)
        answer = self._strategy.promql(context)
        if inspect.isawaitable(answer):
            return self._guard(self._generation, answer)
        return answer

    def complete_sync(
        self,
        text: str,
        pos: int,
        filter: Optional[CompletionFilter] = None,
    ) -> Optional[CompletionResult]:
        """
        Complete and wait for the answer.

        For hosts without an event loop; must not be called from a
        running loop.
        """
        answer = self.complete(text, pos, filter)
        if inspect.isawaitable(answer):
            return asyncio.run(answer)
        return answer

    async def _guard(
        self,
        generation: int,
        answer: Awaitable[CompletionResult],
    ) -> Optional[CompletionResult]:
        result = await answer
        if generation != self._generation:
            logger.debug("Dropping completion from a replaced strategy")
            return None
        return result
