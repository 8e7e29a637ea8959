"""Common configuration constants used across the application."""

# Bosun source defaults
DEFAULT_BASE_URL = "http://bosun"
"""Bosun root URL used when neither -b nor BOSUN_URL is given"""

DEFAULT_DATASOURCE = "Bosun"
"""Grafana datasource name attached to every generated panel"""

DEFAULT_METRIC_ROOT = "haproxy.server."
"""Metric-name prefix selecting which metrics get a panel"""

DEFAULT_QUERY = 'q("sum:$ds-avg:%s%s{%s}{%s}", "$start", "")'
"""Expression template: rate prefix, metric, group tags, where tags"""

METADATA_METRICS_PATH = "/api/metadata/metrics"
"""Bosun endpoint returning metric metadata keyed by metric name"""

COUNTER_RATE = "counter"
"""Metadata rate value marking a monotonically increasing counter"""

COUNTER_RATE_PREFIX = "rate{counter,,1}:"
"""Expression prefix applied to counter metrics"""

# Dashboard layout
GRID_COLUMNS = 12
"""Width of a legacy Grafana row in span units"""

DEFAULT_PER_ROW = 6
"""Default number of graph panels per row"""

DEFAULT_DASHBOARD_TITLE = "Gen Dashboard"
"""Title of the generated dashboard"""

# HTTP and Network Constants
DEFAULT_TIMEOUT = 30.0
"""Default HTTP request timeout in seconds"""

DEFAULT_RETRIES = 1
"""Default number of attempts for the metadata request (1 = no retry)"""

RETRY_BASE_DELAY = 1.0
"""Base delay for exponential backoff in seconds"""

RETRY_MAX_DELAY = 60.0
"""Maximum delay between retries in seconds"""


__all__ = [
    "COUNTER_RATE",
    "COUNTER_RATE_PREFIX",
    "DEFAULT_BASE_URL",
    "DEFAULT_DASHBOARD_TITLE",
    "DEFAULT_DATASOURCE",
    "DEFAULT_METRIC_ROOT",
    "DEFAULT_PER_ROW",
    "DEFAULT_QUERY",
    "DEFAULT_RETRIES",
    "DEFAULT_TIMEOUT",
    "GRID_COLUMNS",
    "METADATA_METRICS_PATH",
    "RETRY_BASE_DELAY",
    "RETRY_MAX_DELAY",
]
