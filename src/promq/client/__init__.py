# promq.client - Metadata providers
from promq.client.base import MetadataProvider, OfflineProvider
from promq.client.prometheus import PrometheusProvider

__all__ = [
    "MetadataProvider",
    "OfflineProvider",
    "PrometheusProvider",
]
