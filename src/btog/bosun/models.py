"""Pydantic models for the Bosun metric metadata API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from btog.helpers.constants import COUNTER_RATE


METADATA_KEYS = frozenset({"Desc", "Unit", "Rate", "LastTouched"})
"""Keys whose presence marks an entry as carrying metadata"""


class MetricMetadata(BaseModel):
    """Descriptive metadata Bosun stores for a metric."""

    desc: str = Field(default="", description="Human description", alias="Desc")
    unit: str = Field(default="", description="Unit label", alias="Unit")
    rate: str = Field(
        default="", description="gauge, counter or rate", alias="Rate"
    )
    last_touched: int = Field(
        default=0, description="Unix time of last update", alias="LastTouched"
    )

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class MetricMetaTagKeys(BaseModel):
    """One entry of ``/api/metadata/metrics``: a metric, its metadata and tag keys."""

    metric: str = Field(default="", description="Metric name")
    metadata: MetricMetadata | None = Field(
        default=None, description="Metadata, None when Bosun has none"
    )
    tag_keys: list[str] = Field(
        default_factory=list, description="Tag keys seen on the metric", alias="TagKeys"
    )

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _split_metadata(cls, data: Any) -> Any:
        # Bosun inlines the metadata fields next to TagKeys
        if not isinstance(data, dict) or "metadata" in data:
            return data
        values = dict(data)
        if METADATA_KEYS & values.keys():
            fields = {k: values.pop(k) for k in METADATA_KEYS if k in values}
            values["metadata"] = {k: v for k, v in fields.items() if v is not None}
        if values.get("TagKeys") is None:
            values.pop("TagKeys", None)
        return values

    @property
    def is_counter(self) -> bool:
        return self.metadata is not None and self.metadata.rate == COUNTER_RATE

    @property
    def unit(self) -> str:
        return self.metadata.unit if self.metadata else ""

    @property
    def desc(self) -> str:
        return self.metadata.desc if self.metadata else ""


__all__ = ["METADATA_KEYS", "MetricMetaTagKeys", "MetricMetadata"]
