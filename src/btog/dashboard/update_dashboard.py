"""Publish a generated dashboard to Grafana via its HTTP API."""

import json

from typing import Any

from grafanalib._gen import DashboardEncoder  # noqa: PLC2701
from grafanalib.core import Dashboard
import httpx
from pydantic import BaseModel, Field, ValidationError
from rich.console import Console

from btog.helpers.config import (
    get_grafana_api_key,
    get_grafana_folder_id,
    get_grafana_url,
)
from btog.helpers.http import create_http_client, post_json
from btog.helpers.logging import get_logger


logger = get_logger(__name__)
console = Console(stderr=True)

DASHBOARDS_API_PATH = "/api/dashboards/db"


class PublishError(RuntimeError):
    """Grafana accepted the request but its answer could not be understood."""


class PublishConfig(BaseModel):
    """Where and how to publish the dashboard."""

    url: str = Field(..., description="Grafana instance URL")
    folder_id: int = Field(default=0, description="Grafana folder ID (0 for General)")
    overwrite: bool = Field(default=True, description="Replace an existing dashboard")
    message: str = Field(
        default="Generated from Bosun metric metadata by btog",
        description="Version history message",
    )


class GrafanaDashboardResponse(BaseModel):
    """Response from Grafana dashboard API."""

    id: int = Field(..., description="Dashboard numeric ID")
    uid: str = Field(..., description="Dashboard unique identifier")
    url: str = Field(..., description="Dashboard URL path")
    status: str = Field(..., description="Response status")
    version: int = Field(..., description="Dashboard version")
    slug: str = Field(default="", description="Dashboard slug")


class GrafanaErrorResponse(BaseModel):
    """Error response from Grafana API."""

    message: str = Field(..., description="Error message")
    status: str = Field(default="error", description="Error status")


def get_publish_config(folder_id: int | None = None) -> PublishConfig:
    """Build the publish configuration from the environment.

    Raises:
        ValueError: If GRAFANA_URL is missing or GRAFANA_FOLDER_ID is malformed
    """
    return PublishConfig(
        url=get_grafana_url(),
        folder_id=get_grafana_folder_id(folder_id),
    )


def get_dashboard_payload(
    dashboard: Dashboard, config: PublishConfig
) -> dict[str, Any]:
    """Wrap dashboard JSON data in a Grafana API payload."""
    return {
        "dashboard": dashboard.to_json_data(),
        "folderId": config.folder_id,
        "overwrite": config.overwrite,
        "message": config.message,
    }


async def publish_dashboard(
    dashboard: Dashboard,
    config: PublishConfig,
    api_key: str,
    *,
    dry_run: bool = False,
    client: httpx.AsyncClient | None = None,
) -> GrafanaDashboardResponse | None:
    """Create or update the dashboard in Grafana.

    Args:
        dashboard: Dashboard to publish
        config: Publish configuration
        api_key: Grafana API key
        dry_run: If True, only report what would be done
        client: Optional HTTP client; one is created (and closed) when omitted

    Returns:
        API response on success, None for a dry run

    Raises:
        httpx.HTTPStatusError: If the API request fails
        PublishError: If the success response is not a dashboard result
    """
    payload_json = json.dumps(
        get_dashboard_payload(dashboard, config), cls=DashboardEncoder
    )
    api_url = f"{config.url}{DASHBOARDS_API_PATH}"

    if dry_run:
        console.print("[bold]=== DRY RUN MODE ===[/bold]")
        console.print(f"Would publish dashboard to: {api_url}")
        console.print(f"Dashboard title: {dashboard.title}")
        console.print(f"Folder ID: {config.folder_id}")
        console.print(f"Payload size: {len(payload_json)} bytes")
        return None

    if client is None:
        async with create_http_client() as own_client:
            return await publish_dashboard(
                dashboard, config, api_key, client=own_client
            )

    try:
        response_data = await post_json(
            client,
            api_url,
            payload_json,
            headers={"Authorization": f"Bearer {api_key}"},
        )
    except httpx.HTTPStatusError as e:
        try:
            error = GrafanaErrorResponse.model_validate(e.response.json())
            logger.error("Error publishing dashboard: %s", error.message)
        except ValueError:
            logger.error("Error publishing dashboard: %s", e.response.text)
        raise
    except ValueError as e:
        msg = f"invalid JSON response from {api_url}"
        raise PublishError(msg) from e

    try:
        result = GrafanaDashboardResponse.model_validate(response_data)
    except ValidationError as e:
        msg = f"unexpected response from {api_url}: {response_data!r}"
        raise PublishError(msg) from e

    console.print(
        f"[green]Dashboard published[/green] id={result.id} "
        f"version={result.version} url={config.url}{result.url}"
    )
    return result


async def push(
    dashboard: Dashboard,
    *,
    folder_id: int | None = None,
    dry_run: bool = False,
) -> GrafanaDashboardResponse | None:
    """Publish using GRAFANA_URL / GRAFANA_API_KEY / GRAFANA_FOLDER_ID.

    Raises:
        ValueError: If the Grafana environment is incomplete
        httpx.HTTPStatusError: If the API request fails
        PublishError: If Grafana answers with an unexpected body
    """
    config = get_publish_config(folder_id)
    api_key = "" if dry_run else get_grafana_api_key()
    return await publish_dashboard(dashboard, config, api_key, dry_run=dry_run)


__all__ = [
    "GrafanaDashboardResponse",
    "GrafanaErrorResponse",
    "PublishConfig",
    "PublishError",
    "get_dashboard_payload",
    "get_publish_config",
    "publish_dashboard",
    "push",
]
