"""Pytest configuration and shared fixtures."""

import os
from collections.abc import Generator
from typing import Any

import pytest

from btog.bosun.metadata import parse_metrics
from btog.bosun.models import MetricMetaTagKeys


@pytest.fixture
def metadata_payload() -> dict[str, Any]:
    """A trimmed /api/metadata/metrics response.

    Mixes counters and gauges, a metric without metadata, a metric with null
    tag keys and metrics outside the haproxy.server. prefix.
    """
    return {
        "haproxy.server.bytes_out": {
            "Desc": "Bytes sent to the server.",
            "Unit": "bytes",
            "Rate": "counter",
            "LastTouched": 1700000000,
            "TagKeys": ["host", "pxname", "svname"],
        },
        "haproxy.server.bytes_in": {
            "Desc": "Bytes received from the server.",
            "Unit": "bytes",
            "Rate": "counter",
            "LastTouched": 1700000000,
            "TagKeys": ["host", "pxname", "svname"],
        },
        "haproxy.server.current_sessions": {
            "Unit": "sessions",
            "Rate": "gauge",
            "LastTouched": 1700000000,
            "TagKeys": ["host", "svname"],
        },
        "haproxy.server.weight": {
            "TagKeys": ["host"],
        },
        "haproxy.server.downtime": {
            "Desc": "Total downtime in seconds.",
            "Unit": "seconds",
            "Rate": "counter",
            "LastTouched": 1700000000,
            "TagKeys": None,
        },
        "os.cpu": {
            "Desc": "CPU time.",
            "Unit": "percent",
            "Rate": "counter",
            "LastTouched": 1700000000,
            "TagKeys": ["host"],
        },
    }


@pytest.fixture
def metrics(metadata_payload: dict[str, Any]) -> list[MetricMetaTagKeys]:
    """Parsed entries for metadata_payload."""
    return parse_metrics(metadata_payload)


@pytest.fixture
def clean_env() -> Generator[None]:
    """Clear the variables the app reads, restoring them afterwards."""
    keys = [
        "BOSUN_URL",
        "BTOG_LOG_LEVEL",
        "GRAFANA_URL",
        "GRAFANA_API_KEY",
        "GRAFANA_FOLDER_ID",
        "TEST_KEY",
    ]
    saved = {key: os.environ.get(key) for key in keys}

    for key in keys:
        os.environ.pop(key, None)

    yield

    for key, value in saved.items():
        if value is not None:
            os.environ[key] = value
        else:
            os.environ.pop(key, None)
