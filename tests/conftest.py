# tests/conftest.py - Pytest configuration
"""
Pytest configuration and shared fixtures.
"""
import asyncio
import inspect
from typing import Optional

import pytest

from promq.client.base import MetadataProvider
from promq.complete.base import CompletionContext
from promq.parser import parse


class RecordingProvider(MetadataProvider):
    """Provider answering from fixed tables and recording every call."""

    def __init__(self, names=None, values=None, error: Optional[Exception] = None):
        self.names = names or {}
        self.values = values or {}
        self.error = error
        self.calls: list[tuple] = []

    async def label_names(self, metric_name=None):
        self.calls.append(("label_names", metric_name))
        if self.error:
            raise self.error
        return list(self.names.get(metric_name, []))

    async def label_values(self, label_name, metric_name=None):
        self.calls.append(("label_values", label_name, metric_name))
        if self.error:
            raise self.error
        return list(self.values.get((label_name, metric_name), []))


def keep_all(completion, text):
    """Filter keeping every candidate, to look at classification alone."""
    return completion


def resolve(answer):
    """Wait for a completion answer if it is deferred."""
    if inspect.isawaitable(answer):
        return asyncio.run(answer)
    return answer


def make_context(text: str, pos: Optional[int] = None, filter=None) -> CompletionContext:
    return CompletionContext(
        tree=parse(text),
        pos=len(text) if pos is None else pos,
        filter=filter,
    )


@pytest.fixture
def provider():
    """Provider knowing the `up` and `http_requests_total` metrics."""
    return RecordingProvider(
        names={
            None: ["instance", "job", "le"],
            "up": ["instance", "job"],
        },
        values={
            ("__name__", None): ["http_requests_total", "up"],
            ("job", "up"): ["node", "prometheus"],
            ("job", None): ["api", "node", "prometheus"],
        },
    )
