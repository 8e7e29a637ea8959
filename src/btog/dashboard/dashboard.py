"""Bosun metrics dashboard - Grafanalib implementation."""

from grafanalib.core import (
    DARK_STYLE,
    UTC,
    Dashboard,
    Graph,
    Row,
    Templating,
)

from btog.bosun.metadata import sort_metrics
from btog.bosun.models import MetricMetaTagKeys
from btog.bosun.queries import build_expression
from btog.dashboard.panels import create_graph, create_row, create_template
from btog.dashboard.settings import GeneratorSettings
from btog.helpers.logging import get_logger


logger = get_logger(__name__)


def layout_rows(panels: list[Graph], per_row: int) -> list[Row]:
    """Group panels into rows of at most ``per_row``, keeping order.

    The last row holds the remainder and is emitted even when partial.
    """
    rows = []
    for start in range(0, len(panels), per_row):
        chunk = panels[start : start + per_row]
        logger.debug("Appending row with %d panels", len(chunk))
        rows.append(create_row(chunk))
    return rows


def generate_dashboard(
    metrics: list[MetricMetaTagKeys], settings: GeneratorSettings
) -> Dashboard:
    """Generate a dashboard with one graph per metric.

    Args:
        metrics: Metrics to chart, already filtered; they are sorted by name here
        settings: Generation settings

    Returns:
        Dashboard object that can be converted to JSON
    """
    group_tags = settings.group_tag_set
    where_tags = settings.where_tag_set
    span = settings.span

    panels = []
    for panel_id, metric in enumerate(sort_metrics(metrics), start=1):
        expr = build_expression(
            settings.query,
            metric,
            group_tags,
            where_tags,
            fill_group_tags=settings.fill_group_tags,
            fill_where_tags=settings.fill_where_tags,
        )
        panels.append(
            create_graph(
                metric,
                expr=expr,
                datasource=settings.datasource,
                span=span,
                panel_id=panel_id,
            )
        )

    rows = layout_rows(panels, settings.per_row)
    logger.info("Generated %d panels in %d rows", len(panels), len(rows))

    templates = [
        create_template(name, value) for name, value in settings.template_var_pairs
    ]

    return Dashboard(
        title=settings.title,
        rows=rows,
        templating=Templating(list=templates),
        style=DARK_STYLE,
        timezone=UTC,
        editable=True,
    )


__all__ = ["generate_dashboard", "layout_rows"]
