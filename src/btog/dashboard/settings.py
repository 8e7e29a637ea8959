"""Validated settings for a dashboard generation run."""

from pydantic import BaseModel, Field, field_validator

from btog.bosun.queries import validate_query_template
from btog.bosun.tags import TagSet, parse_tags
from btog.helpers.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_DASHBOARD_TITLE,
    DEFAULT_DATASOURCE,
    DEFAULT_METRIC_ROOT,
    DEFAULT_PER_ROW,
    DEFAULT_QUERY,
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT,
    GRID_COLUMNS,
)


def parse_template_vars(text: str) -> list[tuple[str, str]]:
    """Parse ``name=initial,name2=initial2`` into (name, initial value) pairs.

    Raises:
        ValueError: If an entry has no initial value
    """
    if not text:
        return []

    pairs = []
    for entry in text.split(","):
        kv = entry.split("=")
        if len(kv) != 2:
            msg = "Template vars must have an initial value"
            raise ValueError(msg)
        pairs.append((kv[0], kv[1]))
    return pairs


class GeneratorSettings(BaseModel):
    """Everything that shapes the generated dashboard."""

    base_url: str = Field(default=DEFAULT_BASE_URL, description="Bosun root URL")
    datasource: str = Field(
        default=DEFAULT_DATASOURCE, description="Grafana datasource for every panel"
    )
    metric_root: str = Field(
        default=DEFAULT_METRIC_ROOT, description="Metric name prefix to include"
    )
    per_row: int = Field(
        default=DEFAULT_PER_ROW,
        ge=1,
        le=GRID_COLUMNS,
        description="Graph panels per row",
    )
    template_vars: str = Field(
        default="", description="CSV of dashboard variables with initial values"
    )
    query: str = Field(default=DEFAULT_QUERY, description="Query expression template")
    group_tags: str = Field(default="", description="Tags for the group-by slot")
    where_tags: str = Field(default="", description="Tags for the where slot")
    fill_group_tags: bool = Field(
        default=False, description="Add key=* group tags for missing tag keys"
    )
    fill_where_tags: bool = Field(
        default=False, description="Add key=* where tags for missing tag keys"
    )
    title: str = Field(default=DEFAULT_DASHBOARD_TITLE, description="Dashboard title")
    timeout: float = Field(
        default=DEFAULT_TIMEOUT, gt=0, description="HTTP timeout in seconds"
    )
    retries: int = Field(
        default=DEFAULT_RETRIES, ge=1, description="Attempts for the metadata request"
    )

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("template_vars")
    @classmethod
    def _check_template_vars(cls, value: str) -> str:
        parse_template_vars(value)
        return value

    @field_validator("query")
    @classmethod
    def _check_query(cls, value: str) -> str:
        return validate_query_template(value)

    @field_validator("group_tags", "where_tags")
    @classmethod
    def _check_tags(cls, value: str) -> str:
        parse_tags(value)
        return value

    @property
    def span(self) -> int:
        """Width of each panel in a 12-column row."""
        return GRID_COLUMNS // self.per_row

    @property
    def template_var_pairs(self) -> list[tuple[str, str]]:
        return parse_template_vars(self.template_vars)

    @property
    def group_tag_set(self) -> TagSet:
        return parse_tags(self.group_tags)

    @property
    def where_tag_set(self) -> TagSet:
        return parse_tags(self.where_tags)


__all__ = ["GeneratorSettings", "parse_template_vars"]
