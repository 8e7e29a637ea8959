"""Fetch Bosun metadata and render the generated dashboard as JSON."""

import json
import sys
from pathlib import Path

from grafanalib._gen import DashboardEncoder  # noqa: PLC2701
from grafanalib.core import Dashboard
import httpx

from btog.bosun.metadata import get_metadata_metrics, metrics_starting_with
from btog.dashboard.dashboard import generate_dashboard
from btog.dashboard.settings import GeneratorSettings
from btog.helpers.http import create_http_client
from btog.helpers.logging import get_logger


logger = get_logger(__name__)


async def build_dashboard(
    settings: GeneratorSettings, client: httpx.AsyncClient | None = None
) -> Dashboard:
    """Run the fetch, filter and layout steps.

    Args:
        settings: Generation settings
        client: Optional HTTP client; one is created (and closed) when omitted

    Returns:
        Dashboard object

    Raises:
        MetadataError: If metric metadata cannot be fetched or decoded
    """
    if client is None:
        async with create_http_client(timeout=settings.timeout) as own_client:
            return await build_dashboard(settings, own_client)

    metrics = await get_metadata_metrics(
        client, settings.base_url, retries=settings.retries
    )
    filtered = metrics_starting_with(metrics, settings.metric_root)
    logger.info(
        "%d of %d metrics match prefix %r",
        len(filtered),
        len(metrics),
        settings.metric_root,
    )
    return generate_dashboard(filtered, settings)


def dashboard_to_json(dashboard: Dashboard) -> str:
    """Serialize a dashboard to indented JSON."""
    return json.dumps(
        dashboard.to_json_data(),
        indent=2,
        cls=DashboardEncoder,
        sort_keys=True,
    )


def write_dashboard(dashboard_json: str, output: Path | None = None) -> None:
    """Write dashboard JSON to a file, or to stdout when no path is given."""
    if output is None:
        sys.stdout.write(dashboard_json + "\n")
        sys.stdout.flush()
        return

    output.write_text(dashboard_json + "\n")
    logger.info("Wrote dashboard to %s", output)


__all__ = ["build_dashboard", "dashboard_to_json", "write_dashboard"]
