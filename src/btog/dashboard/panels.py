"""Helper functions for creating Grafana panels."""

from typing import Any

import attr
from grafanalib.core import (
    REFRESH_NEVER,
    SHORT_FORMAT,
    Graph,
    Legend,
    Row,
    Template,
    XAxis,
    YAxes,
    YAxis,
)

from btog.bosun.models import MetricMetaTagKeys


@attr.s
class BosunTarget:
    """Query target understood by the Bosun Grafana datasource."""

    expr: str = attr.ib()
    refId: str = attr.ib(default="A")  # noqa: N815
    aggregator: str = attr.ib(default="")
    downsampleAggregator: str = attr.ib(default="")  # noqa: N815

    def to_json_data(self) -> dict[str, Any]:
        """Convert to JSON data for Grafana."""
        return {
            "aggregator": self.aggregator,
            "downsampleAggregator": self.downsampleAggregator,
            "errors": {},
            "expr": self.expr,
            "refId": self.refId,
        }


@attr.s
class CustomTemplate(Template):
    """Custom template variable with glob formatting for Bosun tag filters."""

    allFormat: str = attr.ib(default="glob")  # noqa: N815
    multiFormat: str = attr.ib(default="glob")  # noqa: N815

    def to_json_data(self) -> dict[str, Any]:
        """Convert to JSON data for Grafana."""
        template_json = super().to_json_data()
        template_json["allFormat"] = self.allFormat
        template_json["multiFormat"] = self.multiFormat
        return template_json


def create_template(name: str, value: str) -> CustomTemplate:
    """Create a custom dashboard variable with a single selected option.

    Args:
        name: Variable name, referenced as ``$name`` in queries
        value: Initial (and only) value

    Returns:
        CustomTemplate object
    """
    return CustomTemplate(
        name=name,
        query=value,
        default=value,
        type="custom",
        refresh=REFRESH_NEVER,
    )


def create_graph(
    metric: MetricMetaTagKeys,
    expr: str,
    datasource: str,
    span: int,
    panel_id: int,
) -> Graph:
    """Create the graph panel for one metric.

    Args:
        metric: Metric the panel charts; its unit labels the left axis and its
            description, when present, becomes a panel link
        expr: Bosun query expression
        datasource: Grafana datasource name
        span: Panel width in row columns
        panel_id: Unique panel ID within the dashboard

    Returns:
        Graph object
    """
    links = []
    if metric.desc:
        links.append({"type": "Absolute", "title": metric.desc})

    return Graph(
        title=metric.metric,
        dataSource=datasource,
        targets=[BosunTarget(expr=expr)],
        span=span,
        id=panel_id,
        legend=Legend(show=False),
        lines=True,
        lineWidth=2,
        renderer="flot",
        links=links,
        xAxis=XAxis(show=True),
        yAxes=YAxes(
            left=YAxis(
                show=True,
                label=metric.unit or None,
                logBase=1,
                format=SHORT_FORMAT,
            ),
            right=YAxis(show=False),
        ),
    )


def create_row(panels: list[Graph], title: str | None = None) -> Row:
    """Create a legacy dashboard row holding the given panels.

    Args:
        panels: Panels in display order
        title: Optional row title; rows without one render an empty, hidden title

    Returns:
        Row object
    """
    return Row(
        panels=panels,
        title=title or "",
        showTitle=bool(title),
        collapse=False,
        editable=True,
    )


__all__ = [
    "BosunTarget",
    "CustomTemplate",
    "create_graph",
    "create_row",
    "create_template",
]
