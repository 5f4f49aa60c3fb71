# promq.complete.hybrid - Grammar plus metadata completion
"""
Completion from the grammar, enriched by a metadata provider when one is
available.
"""
import logging
from typing import Optional

from promq.client.base import MetadataProvider, OfflineProvider
from promq.complete.assembler import to_completion_result
from promq.complete.base import (
    CompleteStrategy,
    CompletionAnswer,
    CompletionContext,
    CompletionResult,
)
from promq.complete.resolver import Classification, MetadataQuery, Situation, classify
from promq.complete.terms import TermSet

logger = logging.getLogger(__name__)


class HybridComplete(CompleteStrategy):
    """
    Grammar driven completion with optional live metadata.

    Without a live provider, metric names are simply not offered and
    label name/value positions have nothing to complete.
    """

    def __init__(self, provider: Optional[MetadataProvider] = None):
        self.provider = provider or OfflineProvider()

    def promql(self, context: CompletionContext) -> CompletionAnswer:
        node = context.tree.resolve(context.pos)
        classification = classify(context.tree, node, context.pos)
        if classification is None:
            return None

        if classification.metadata is None:
            return self._result(classification, [], context)

        if self.provider.offline:
            if classification.situation is Situation.METRIC_NAME:
                return self._result(classification, [], context)
            return None

        return self._complete_with_metadata(classification, context)

    async def _complete_with_metadata(
        self,
        classification: Classification,
        context: CompletionContext,
    ) -> CompletionResult:
        labels = await self._fetch(classification.metadata)
        metadata = [TermSet(tuple(labels), classification.metadata.kind)]
        return self._result(classification, metadata, context)

    async def _fetch(self, query: MetadataQuery) -> list[str]:
        """Run a metadata lookup. Failures only cost the metadata candidates."""
        try:
            if query.wants_values:
                return await self.provider.label_values(query.label_name, query.metric_name)
            return await self.provider.label_names(query.metric_name)
        except Exception as e:
            logger.warning("Metadata lookup failed, completing without it: %s", e)
            return []

    def _result(
        self,
        classification: Classification,
        metadata: list[TermSet],
        context: CompletionContext,
    ) -> CompletionResult:
        # Metadata candidates come first
        data = metadata + [c.term_set for c in classification.categories]
        return to_completion_result(
            data,
            classification.from_,
            context.pos,
            context,
            include_snippets=classification.include_snippets,
        )
