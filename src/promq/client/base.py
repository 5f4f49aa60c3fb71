# promq.client.base - Metadata provider interface
"""
Abstract source of metric and label metadata used during completion.
"""
from abc import ABC, abstractmethod
from typing import Optional


class MetadataProvider(ABC):
    """
    Source of label names and label values.

    Implementations are stateless apart from their endpoint settings, so
    one instance may serve concurrent requests. Both operations resolve
    to a list; a failing lookup resolves to an empty list instead of
    raising.
    """

    # True for providers that never have anything to offer
    offline: bool = False

    @abstractmethod
    async def label_names(self, metric_name: Optional[str] = None) -> list[str]:
        """
        List label names.

        Args:
            metric_name: Only labels of series of this metric

        Returns:
            Label names
        """
        pass

    @abstractmethod
    async def label_values(self, label_name: str, metric_name: Optional[str] = None) -> list[str]:
        """
        List values of a label.

        Args:
            label_name: The label, "__name__" for metric names
            metric_name: Only values of series of this metric

        Returns:
            Label values
        """
        pass


class OfflineProvider(MetadataProvider):
    """Provider used when no metadata source is configured."""

    offline = True

    async def label_names(self, metric_name: Optional[str] = None) -> list[str]:
        return []

    async def label_values(self, label_name: str, metric_name: Optional[str] = None) -> list[str]:
        return []
