# promq.client.prometheus - Prometheus HTTP API provider
"""
Metadata provider backed by the Prometheus HTTP API.
"""
import logging
from typing import Any, Optional

import httpx

from promq.client.base import MetadataProvider

logger = logging.getLogger(__name__)


class PrometheusProvider(MetadataProvider):
    """
    Reads label names and values from a Prometheus server.

    Unscoped lookups use the labels endpoints. Lookups scoped to a metric
    go through the series endpoint and collect names/values from the
    matching series.

    Every failure (transport error, non-2xx status, unexpected payload)
    is logged and answered with an empty list.
    """

    LABELS_ENDPOINT = "/api/v1/labels"
    LABEL_VALUES_ENDPOINT = "/api/v1/label/{name}/values"
    SERIES_ENDPOINT = "/api/v1/series"

    def __init__(
        self,
        url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize provider.

        Args:
            url: Prometheus base URL, e.g. http://localhost:9090
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests inject a mock)
        """
        self.url = url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def label_names(self, metric_name: Optional[str] = None) -> list[str]:
        if not metric_name:
            return self._strings(await self._get(self.LABELS_ENDPOINT))

        names = set()
        for labels in await self.series(metric_name):
            names.update(key for key in labels if key != "__name__")
        return sorted(names)

    async def label_values(self, label_name: str, metric_name: Optional[str] = None) -> list[str]:
        if not metric_name:
            path = self.LABEL_VALUES_ENDPOINT.format(name=label_name)
            return self._strings(await self._get(path))

        values = set()
        for labels in await self.series(metric_name):
            value = labels.get(label_name)
            if isinstance(value, str):
                values.add(value)
        return sorted(values)

    async def series(self, metric_name: str) -> list[dict[str, str]]:
        """Label sets of all series of a metric."""
        data = await self._get(self.SERIES_ENDPOINT, {"match[]": metric_name})
        return [s for s in data if isinstance(s, dict)]

    async def _get(self, path: str, params: Optional[dict] = None) -> list[Any]:
        """
        GET an endpoint and return its data list.

        Accepts the Prometheus {"status", "data"} envelope or a bare list.
        """
        try:
            async with httpx.AsyncClient(
                base_url=self.url,
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.get(path, params=params)
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Request to %s%s failed: %s", self.url, path, e)
            return []
        except ValueError as e:
            logger.warning("Invalid JSON from %s%s: %s", self.url, path, e)
            return []

        if isinstance(payload, dict):
            if payload.get("status", "success") != "success":
                logger.warning(
                    "Prometheus returned %s for %s: %s",
                    payload.get("status"),
                    path,
                    payload.get("error", ""),
                )
                return []
            payload = payload.get("data")

        if not isinstance(payload, list):
            logger.warning("Unexpected payload from %s%s", self.url, path)
            return []
        return payload

    @staticmethod
    def _strings(data: list[Any]) -> list[str]:
        return sorted({item for item in data if isinstance(item, str)})
