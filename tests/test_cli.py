"""Tests for the btog command line."""

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest

from btog.cli import build_parser, cli, main, settings_from_args


if TYPE_CHECKING:
    from pytest_httpx import HTTPXMock


BOSUN_URL = "http://bosun.test"
METADATA_URL = f"{BOSUN_URL}/api/metadata/metrics"


@pytest.mark.usefixtures("clean_env")
class TestSettingsFromArgs:
    """Tests for argument parsing into settings."""

    def test_defaults(self) -> None:
        """Test the flag defaults."""
        settings = settings_from_args(build_parser().parse_args([]))

        assert settings.base_url == "http://bosun"
        assert settings.metric_root == "haproxy.server."
        assert settings.per_row == 6
        assert not settings.fill_group_tags

    def test_bosun_url_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test BOSUN_URL supplies the default base URL."""
        monkeypatch.setenv("BOSUN_URL", "http://bosun.env")

        settings = settings_from_args(build_parser().parse_args([]))

        assert settings.base_url == "http://bosun.env"

    def test_all_flags(self) -> None:
        """Test every generation flag reaches the settings."""
        args = build_parser().parse_args(
            [
                "-b", BOSUN_URL,
                "-d", "Bosun2",
                "-m", "os.",
                "-p", "4",
                "-t", "host=web01",
                "-q", "%s%s{%s}{%s}",
                "--grouptags", "host=*",
                "--wheretags", "dc=ny1",
                "--fillgrouptags",
                "--fillwheretags",
                "--title", "OS",
            ]
        )  # fmt: skip

        settings = settings_from_args(args)

        assert settings.base_url == BOSUN_URL
        assert settings.datasource == "Bosun2"
        assert settings.metric_root == "os."
        assert settings.per_row == 4
        assert settings.template_var_pairs == [("host", "web01")]
        assert settings.query == "%s%s{%s}{%s}"
        assert settings.group_tag_set == {"host": "*"}
        assert settings.where_tag_set == {"dc": "ny1"}
        assert settings.fill_group_tags
        assert settings.fill_where_tags
        assert settings.title == "OS"

    def test_log_level_is_case_insensitive(self) -> None:
        """Test --log-level accepts lower case."""
        args = build_parser().parse_args(["--log-level", "debug"])

        assert args.log_level == "DEBUG"


@pytest.mark.usefixtures("clean_env")
class TestMain:
    """Tests for the async main function."""

    @pytest.mark.asyncio
    async def test_prints_dashboard(
        self,
        httpx_mock: "HTTPXMock",
        metadata_payload: dict[str, Any],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test the dashboard JSON is printed to stdout."""
        httpx_mock.add_response(url=METADATA_URL, json=metadata_payload)

        exit_code = await main(build_parser().parse_args(["-b", BOSUN_URL, "-p", "3"]))

        assert exit_code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["title"] == "Gen Dashboard"
        assert [len(row["panels"]) for row in data["rows"]] == [3, 1]

    @pytest.mark.asyncio
    async def test_writes_output_file(
        self,
        httpx_mock: "HTTPXMock",
        metadata_payload: dict[str, Any],
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test --output writes the file and keeps stdout empty."""
        httpx_mock.add_response(url=METADATA_URL, json=metadata_payload)
        output = tmp_path / "out.json"

        exit_code = await main(
            build_parser().parse_args(["-b", BOSUN_URL, "-o", str(output)])
        )

        assert exit_code == 0
        assert capsys.readouterr().out == ""
        assert json.loads(output.read_text())["rows"]

    @pytest.mark.asyncio
    async def test_fetch_failure_exits_1(
        self, httpx_mock: "HTTPXMock", capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test a failed fetch returns exit code 1 and prints nothing."""
        httpx_mock.add_response(url=METADATA_URL, status_code=500)

        exit_code = await main(build_parser().parse_args(["-b", BOSUN_URL]))

        assert exit_code == 1
        assert capsys.readouterr().out == ""

    @pytest.mark.asyncio
    async def test_invalid_settings_exit_1(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test invalid flags are reported before any request is made."""
        exit_code = await main(build_parser().parse_args(["-p", "0"]))

        assert exit_code == 1
        assert any("per_row" in record.message for record in caplog.records)

    @pytest.mark.asyncio
    async def test_bad_template_vars_exit_1(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test template vars without initial values are rejected."""
        exit_code = await main(build_parser().parse_args(["-t", "host"]))

        assert exit_code == 1
        assert any("initial value" in record.message for record in caplog.records)

    @pytest.mark.asyncio
    async def test_push_without_grafana_url_exits_1(
        self, httpx_mock: "HTTPXMock", metadata_payload: dict[str, Any]
    ) -> None:
        """Test --push needs GRAFANA_URL."""
        httpx_mock.add_response(url=METADATA_URL, json=metadata_payload)

        exit_code = await main(build_parser().parse_args(["-b", BOSUN_URL, "--push"]))

        assert exit_code == 1

    @pytest.mark.asyncio
    async def test_push_dry_run(
        self,
        httpx_mock: "HTTPXMock",
        metadata_payload: dict[str, Any],
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test --push --dry-run succeeds without contacting Grafana."""
        monkeypatch.setenv("GRAFANA_URL", "https://grafana.example.com")
        httpx_mock.add_response(url=METADATA_URL, json=metadata_payload)

        exit_code = await main(
            build_parser().parse_args(["-b", BOSUN_URL, "--push", "--dry-run"])
        )

        assert exit_code == 0
        assert capsys.readouterr().out == ""
        assert len(httpx_mock.get_requests()) == 1


    @pytest.mark.asyncio
    async def test_push_unexpected_response_exits_1(
        self,
        httpx_mock: "HTTPXMock",
        metadata_payload: dict[str, Any],
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test a malformed Grafana answer is reported as a publish failure."""
        monkeypatch.setenv("GRAFANA_URL", "https://grafana.example.com")
        monkeypatch.setenv("GRAFANA_API_KEY", "secret")
        httpx_mock.add_response(url=METADATA_URL, json=metadata_payload)
        httpx_mock.add_response(
            method="POST",
            url="https://grafana.example.com/api/dashboards/db",
            json={"status": "ok"},
        )

        exit_code = await main(build_parser().parse_args(["-b", BOSUN_URL, "--push"]))

        assert exit_code == 1
        messages = [record.message for record in caplog.records]
        assert any("Publishing failed" in m for m in messages)
        assert not any("Configuration error" in m for m in messages)

@pytest.mark.usefixtures("clean_env")
def test_cli_exits_with_status(httpx_mock: "HTTPXMock") -> None:
    """Test cli() exits with main's return code."""
    httpx_mock.add_response(url=METADATA_URL, status_code=404)

    with pytest.raises(SystemExit) as exc_info:
        cli(["-b", BOSUN_URL])

    assert exc_info.value.code == 1
