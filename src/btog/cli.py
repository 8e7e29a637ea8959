"""Command-line entry point: Bosun metric metadata to a Grafana dashboard.

Usage:
    btog -b http://bosun -m haproxy.server. -p 4 > dashboard.json
    btog -m os.cpu -t host=web01 --wheretags host='$host' --fillgrouptags
    btog -m os. --push --dry-run
"""

import argparse
import asyncio
import sys
from pathlib import Path

import httpx
from pydantic import ValidationError

from btog.bosun.metadata import MetadataError
from btog.dashboard.generate import build_dashboard, dashboard_to_json, write_dashboard
from btog.dashboard.settings import GeneratorSettings
from btog.dashboard.update_dashboard import PublishError, push
from btog.helpers.config import get_bosun_url, get_optional_env
from btog.helpers.constants import (
    DEFAULT_DASHBOARD_TITLE,
    DEFAULT_DATASOURCE,
    DEFAULT_METRIC_ROOT,
    DEFAULT_PER_ROW,
    DEFAULT_QUERY,
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT,
)
from btog.helpers.logging import LOG_LEVELS, configure_logging, get_logger


logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="btog",
        description=(
            "Generate a Grafana dashboard with one graph per Bosun metric "
            "matching a name prefix"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print a dashboard for all haproxy server metrics, 4 graphs per row
  btog -b http://bosun -p 4

  # Use a $host dashboard variable in the where clause
  btog -m os.cpu -t host=web01 --wheretags 'host=$host'

  # Publish to Grafana (GRAFANA_URL / GRAFANA_API_KEY), dry run first
  btog -m os. --push --dry-run
        """,
    )

    parser.add_argument(
        "-b",
        dest="base_url",
        default=None,
        help="bosun root url (default: $BOSUN_URL or http://bosun)",
    )
    parser.add_argument(
        "-d",
        dest="datasource",
        default=DEFAULT_DATASOURCE,
        help="datasource to use (default: %(default)s)",
    )
    parser.add_argument(
        "-m",
        dest="metric_root",
        default=DEFAULT_METRIC_ROOT,
        help="get all metrics that start with this string (default: %(default)s)",
    )
    parser.add_argument(
        "-p",
        dest="per_row",
        type=int,
        default=DEFAULT_PER_ROW,
        help="number of graph panels per row, 1-12 (default: %(default)s)",
    )
    parser.add_argument(
        "-t",
        dest="template_vars",
        default="",
        help=(
            "csv of template vars with an initial value, i.e. host=foo,group=baz; "
            "referenced as $host and $group in the query"
        ),
    )
    parser.add_argument(
        "-q",
        dest="query",
        default=DEFAULT_QUERY,
        help=(
            "query template; the four %%s are, in order: counter rate prefix, "
            "metric, group-by tags, where tags (default: %(default)s)"
        ),
    )
    parser.add_argument(
        "--grouptags",
        dest="group_tags",
        default="",
        help="tags to use in the groupby field, i.e. host=*",
    )
    parser.add_argument(
        "--wheretags",
        dest="where_tags",
        default="",
        help="tags to use in the filter/where field, i.e. host=*",
    )
    parser.add_argument(
        "--fillgrouptags",
        dest="fill_group_tags",
        action="store_true",
        help="add tagk=* groupby tags for all tag keys not in --grouptags",
    )
    parser.add_argument(
        "--fillwheretags",
        dest="fill_where_tags",
        action="store_true",
        help="add tagk=* where tags for all tag keys not in --wheretags",
    )
    parser.add_argument(
        "--title",
        default=DEFAULT_DASHBOARD_TITLE,
        help="dashboard title (default: %(default)s)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="write the dashboard JSON to this file instead of stdout",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help="HTTP timeout in seconds (default: %(default)s)",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=DEFAULT_RETRIES,
        help="attempts for the metadata request (default: %(default)s)",
    )
    parser.add_argument(
        "--push",
        action="store_true",
        help="publish the dashboard to Grafana instead of printing it",
    )
    parser.add_argument(
        "--folder-id",
        type=int,
        default=None,
        help="Grafana folder ID for --push (default: $GRAFANA_FOLDER_ID or 0)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="with --push, show what would be published without sending it",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=list(LOG_LEVELS),
        default=get_optional_env("BTOG_LOG_LEVEL", "INFO").upper(),
        help="log level (default: $BTOG_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--log-color",
        action="store_true",
        help="colour log output",
    )
    return parser


def settings_from_args(args: argparse.Namespace) -> GeneratorSettings:
    """Validate parsed arguments into generator settings.

    Raises:
        ValueError: If any setting is invalid
    """
    return GeneratorSettings(
        base_url=get_bosun_url(args.base_url),
        datasource=args.datasource,
        metric_root=args.metric_root,
        per_row=args.per_row,
        template_vars=args.template_vars,
        query=args.query,
        group_tags=args.group_tags,
        where_tags=args.where_tags,
        fill_group_tags=args.fill_group_tags,
        fill_where_tags=args.fill_where_tags,
        title=args.title,
        timeout=args.timeout,
        retries=args.retries,
    )


async def main(args: argparse.Namespace) -> int:
    """Main entry point.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        settings = settings_from_args(args)
    except ValidationError as e:
        for error in e.errors():
            field = ".".join(str(loc) for loc in error["loc"])
            logger.error("Configuration error: %s: %s", field, error["msg"])
        return 1

    try:
        dashboard = await build_dashboard(settings)

        if args.push:
            await push(dashboard, folder_id=args.folder_id, dry_run=args.dry_run)
        else:
            write_dashboard(dashboard_to_json(dashboard), args.output)

    except MetadataError as e:
        logger.error("%s", e)
        return 1
    except (httpx.HTTPError, PublishError) as e:
        logger.error("Publishing failed: %s", e)
        return 1
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        return 1
    except OSError as e:
        logger.error("Failed to write dashboard: %s", e)
        return 1

    return 0


def cli(argv: list[str] | None = None) -> None:
    """Command-line interface entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        configure_logging(args.log_level, log_color=args.log_color)
    except ValueError as e:
        parser.error(str(e))
    sys.exit(asyncio.run(main(args)))


if __name__ == "__main__":
    cli()
