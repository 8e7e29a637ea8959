"""End-to-end tests for dashboard generation."""

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx
import pytest

from btog.bosun.metadata import MetadataError
from btog.dashboard.generate import build_dashboard, dashboard_to_json, write_dashboard
from btog.dashboard.settings import GeneratorSettings


if TYPE_CHECKING:
    from pytest_httpx import HTTPXMock


BOSUN_URL = "http://bosun.test"
METADATA_URL = f"{BOSUN_URL}/api/metadata/metrics"


@pytest.mark.asyncio
async def test_build_dashboard(
    httpx_mock: "HTTPXMock", metadata_payload: dict[str, Any]
) -> None:
    """Test fetch, filter and layout produce the dashboard."""
    httpx_mock.add_response(url=METADATA_URL, json=metadata_payload)

    dashboard = await build_dashboard(
        GeneratorSettings(base_url=BOSUN_URL, per_row=2)
    )

    data = json.loads(dashboard_to_json(dashboard))
    assert [len(row["panels"]) for row in data["rows"]] == [2, 2]


@pytest.mark.asyncio
async def test_build_dashboard_with_client(
    httpx_mock: "HTTPXMock", metadata_payload: dict[str, Any]
) -> None:
    """Test a caller-provided client is used."""
    httpx_mock.add_response(url=METADATA_URL, json=metadata_payload)

    async with httpx.AsyncClient() as client:
        dashboard = await build_dashboard(
            GeneratorSettings(base_url=BOSUN_URL, metric_root="os."), client
        )

    data = json.loads(dashboard_to_json(dashboard))
    assert data["rows"][0]["panels"][0]["title"] == "os.cpu"


@pytest.mark.asyncio
async def test_build_dashboard_fetch_error(httpx_mock: "HTTPXMock") -> None:
    """Test fetch failures surface as MetadataError."""
    httpx_mock.add_response(url=METADATA_URL, status_code=502)

    with pytest.raises(MetadataError):
        await build_dashboard(GeneratorSettings(base_url=BOSUN_URL))


def test_dashboard_to_json_is_indented_and_sorted() -> None:
    """Test serialization is indented with sorted keys."""
    from btog.dashboard.dashboard import generate_dashboard

    output = dashboard_to_json(generate_dashboard([], GeneratorSettings()))

    assert output.startswith("{\n  ")
    data = json.loads(output)
    assert list(data) == sorted(data)


def test_write_dashboard_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    """Test JSON goes to stdout when no output file is given."""
    write_dashboard('{"title": "x"}')

    assert capsys.readouterr().out == '{"title": "x"}\n'


def test_write_dashboard_file(tmp_path: Path) -> None:
    """Test JSON is written to the requested file."""
    output = tmp_path / "dashboard.json"

    write_dashboard('{"title": "x"}', output)

    assert output.read_text() == '{"title": "x"}\n'
