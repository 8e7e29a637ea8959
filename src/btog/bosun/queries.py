"""Building Bosun query expressions for generated panels."""

from btog.bosun.models import MetricMetaTagKeys
from btog.bosun.tags import TagSet
from btog.helpers.constants import COUNTER_RATE_PREFIX


TEMPLATE_FIELDS = 4
"""Number of %s slots a query template takes: rate, metric, group tags, where tags"""


def rate_query_string(metric: MetricMetaTagKeys) -> str:
    """Return the rate prefix for counters, an empty string otherwise."""
    return COUNTER_RATE_PREFIX if metric.is_counter else ""


def validate_query_template(template: str) -> str:
    """Check that a query template takes exactly four ``%s`` substitutions.

    Literal percent signs must be written as ``%%``.

    Raises:
        ValueError: If the template cannot be formatted with four strings
    """
    try:
        template % (("",) * TEMPLATE_FIELDS)
    except (TypeError, ValueError) as e:
        msg = (
            f"query template must take exactly {TEMPLATE_FIELDS} %s substitutions "
            f"(rate, metric, group tags, where tags): {e}"
        )
        raise ValueError(msg) from None
    return template


def build_expression(
    template: str,
    metric: MetricMetaTagKeys,
    group_tags: TagSet,
    where_tags: TagSet,
    *,
    fill_group_tags: bool = False,
    fill_where_tags: bool = False,
) -> str:
    """Fill a query template for one metric.

    Args:
        template: Template with four %s slots
        metric: Metric the expression is built for
        group_tags: Tags for the group-by slot (not modified)
        where_tags: Tags for the where/filter slot (not modified)
        fill_group_tags: Add ``key=*`` group tags for the metric's other tag keys
        fill_where_tags: Add ``key=*`` where tags for the metric's other tag keys

    Returns:
        str: The expression

    Example:
        >>> build_expression("%s%s{%s}{%s}", m, TagSet(host="*"), TagSet())
        'rate{counter,,1}:haproxy.server.bytes{host=*}{}'
    """
    group = group_tags.copy()
    where = where_tags.copy()
    if fill_group_tags:
        group.fill_wildcards(metric.tag_keys)
    if fill_where_tags:
        where.fill_wildcards(metric.tag_keys)

    return template % (
        rate_query_string(metric),
        metric.metric,
        group.tags(),
        where.tags(),
    )


__all__ = [
    "TEMPLATE_FIELDS",
    "build_expression",
    "rate_query_string",
    "validate_query_template",
]
