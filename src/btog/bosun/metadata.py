"""Fetching and filtering metric metadata from the Bosun API."""

from typing import Any

import httpx
from pydantic import ValidationError

from btog.bosun.models import MetricMetaTagKeys
from btog.helpers.constants import DEFAULT_RETRIES, METADATA_METRICS_PATH
from btog.helpers.http import retry_with_backoff
from btog.helpers.logging import get_logger


logger = get_logger(__name__)


class MetadataError(RuntimeError):
    """Metric metadata could not be fetched or decoded."""


def metadata_url(base_url: str) -> str:
    """Build the metadata endpoint URL for a Bosun root URL."""
    return f"{base_url.rstrip('/')}{METADATA_METRICS_PATH}"


def parse_metrics(payload: Any) -> list[MetricMetaTagKeys]:
    """Turn the decoded API response into metric entries.

    Args:
        payload: Decoded JSON, expected to be an object keyed by metric name

    Returns:
        list[MetricMetaTagKeys]: One entry per metric, in response order

    Raises:
        MetadataError: If the payload is not an object of metric entries
    """
    if not isinstance(payload, dict):
        msg = "unable to decode metric response"
        raise MetadataError(msg)

    metrics = []
    for name, raw in payload.items():
        try:
            entry = MetricMetaTagKeys.model_validate(raw or {})
        except ValidationError as e:
            msg = "unable to decode metric response"
            raise MetadataError(msg) from e
        metrics.append(entry.model_copy(update={"metric": name}))
    return metrics


def metrics_starting_with(
    metrics: list[MetricMetaTagKeys], prefix: str
) -> list[MetricMetaTagKeys]:
    """Keep metrics whose name starts with ``prefix`` and that carry metadata."""
    filtered = []
    for m in metrics:
        if not m.metric.startswith(prefix):
            continue
        if m.metadata is None:
            logger.info("No metadata for %s, skipping", m.metric)
            continue
        filtered.append(m)
    return filtered


def sort_metrics(metrics: list[MetricMetaTagKeys]) -> list[MetricMetaTagKeys]:
    """Return metrics ordered by name."""
    return sorted(metrics, key=lambda m: m.metric)


async def get_metadata_metrics(
    client: httpx.AsyncClient,
    base_url: str,
    *,
    retries: int = DEFAULT_RETRIES,
) -> list[MetricMetaTagKeys]:
    """Fetch every metric Bosun has metadata for.

    Args:
        client: HTTP client instance
        base_url: Bosun root URL
        retries: Number of attempts for the request (1 = no retry)

    Returns:
        list[MetricMetaTagKeys]: Unfiltered, unsorted metric entries

    Raises:
        MetadataError: If the request fails or the body cannot be decoded
    """
    url = metadata_url(base_url)

    @retry_with_backoff(max_retries=retries)
    async def fetch() -> httpx.Response:
        response = await client.get(url, follow_redirects=True)
        response.raise_for_status()
        return response

    logger.debug("Fetching metric metadata from %s", url)
    try:
        response = await fetch()
    except httpx.HTTPStatusError as e:
        msg = f"failed to get metrics: {url} returned HTTP {e.response.status_code}"
        raise MetadataError(msg) from e
    except httpx.HTTPError as e:
        msg = f"failed to get metrics: {e}"
        raise MetadataError(msg) from e

    try:
        payload = response.json()
    except ValueError as e:
        msg = "unable to decode metric response"
        raise MetadataError(msg) from e

    metrics = parse_metrics(payload)
    logger.info("Fetched metadata for %d metrics", len(metrics))
    return metrics


__all__ = [
    "MetadataError",
    "get_metadata_metrics",
    "metadata_url",
    "metrics_starting_with",
    "parse_metrics",
    "sort_metrics",
]
