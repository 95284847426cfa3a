"""Measures of Gnocchi metrics: list, create and create in batches.

Example::

    opts = CreateOpts(
        measures=[
            MeasureOpts(datetime(2018, 1, 18, 12, 31), 101.2),
            MeasureOpts(datetime(2018, 1, 18, 14, 32), 102),
        ]
    )
    create(client, "9e5a6441-1044-4181-b66e-34e180753040", opts)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable
from urllib.parse import urlencode

from gnocchikit.client import GnocchiError, ServiceClient

RESOURCE_PATH = "metric"
BATCH_CREATE_METRICS_PATH = "batch/metrics"
BATCH_CREATE_RESOURCES_METRICS_PATH = "batch/resources/metrics"

_WRITE_HEADERS = {"Accept": "application/json, */*"}

_TIMESTAMP_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})"
)


def format_timestamp(timestamp: datetime) -> str:
    """Format a timestamp without a time zone, dropping trailing fraction zeros."""
    text = timestamp.strftime("%Y-%m-%dT%H:%M:%S")
    if timestamp.microsecond:
        text += "." + f"{timestamp.microsecond:06d}".rstrip("0")
    return text


def parse_timestamp(text: str) -> datetime:
    """Parse a timestamp that carries a time zone offset."""
    match = _TIMESTAMP_RE.fullmatch(text)
    if match is None:
        raise GnocchiError(f"cannot parse timestamp {text!r}")
    year, month, day, hour, minute, second, fraction, offset = match.groups()
    microsecond = int((fraction or "")[:6].ljust(6, "0"))
    if offset == "Z":
        tz = timezone.utc
    else:
        sign = -1 if offset[0] == "-" else 1
        hours, minutes = int(offset[1:3]), int(offset[4:6])
        tz = timezone(sign * timedelta(hours=hours, minutes=minutes))
    try:
        return datetime(
            int(year), int(month), int(day),
            int(hour), int(minute), int(second), microsecond, tzinfo=tz,
        )
    except ValueError as exc:
        raise GnocchiError(f"cannot parse timestamp {text!r}: {exc}") from exc


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class Measure:
    """A datapoint made of a timestamp, a granularity and a value."""

    timestamp: datetime
    granularity: float
    value: float

    @classmethod
    def from_json(cls, data: Any) -> Measure:
        """Build a measure from a ``[timestamp, granularity, value]`` triple."""
        if not isinstance(data, list) or len(data) != 3:
            raise GnocchiError(f"got an invalid measure: {data}")
        raw_timestamp, granularity, value = data
        if not isinstance(raw_timestamp, str):
            raise GnocchiError(
                f"got an invalid timestamp of a measure {data}: {raw_timestamp}"
            )
        timestamp = parse_timestamp(raw_timestamp)
        if not _is_number(granularity):
            raise GnocchiError(
                f"got an invalid granularity of a measure {data}: {granularity}"
            )
        if not _is_number(value):
            raise GnocchiError(f"got an invalid value of a measure {data}: {value}")
        return cls(timestamp, float(granularity), float(value))


@dataclass
class ListOpts:
    """Options of a measures list request."""

    refresh: bool = False
    start: datetime | None = None
    stop: datetime | None = None
    aggregation: str = ""
    granularity: str = ""
    resample: str = ""

    def to_query(self) -> str:
        """Format the options as a query string, empty when nothing is set."""
        params: dict[str, str] = {}
        if self.refresh:
            params["refresh"] = "true"
        if self.aggregation:
            params["aggregation"] = self.aggregation
        if self.granularity:
            params["granularity"] = self.granularity
        if self.resample:
            params["resample"] = self.resample
        if self.start is not None:
            params["start"] = format_timestamp(self.start)
        if self.stop is not None:
            params["stop"] = format_timestamp(self.stop)
        if not params:
            return ""
        return "?" + urlencode(sorted(params.items()))


@dataclass
class MeasureOpts:
    """A single measure to create."""

    timestamp: datetime | None
    value: float

    def to_dict(self) -> dict[str, Any]:
        if self.timestamp is None:
            raise GnocchiError("missing input for the MeasureOpts 'Timestamp' argument")
        return {"value": self.value, "timestamp": format_timestamp(self.timestamp)}


def _measure_dicts(measures: Iterable[MeasureOpts]) -> list[dict[str, Any]]:
    return [measure.to_dict() for measure in measures]


@dataclass
class CreateOpts:
    """Measures to create inside a single metric."""

    measures: list[MeasureOpts] = field(default_factory=list)

    def to_body(self) -> list[dict[str, Any]]:
        """Build the request body: a list of measures."""
        return _measure_dicts(self.measures)


@dataclass
class MetricOpts:
    """Measures of one metric in a batch request by metric ID."""

    id: str = ""
    measures: list[MeasureOpts] | None = None

    def to_dict(self) -> dict[str, Any]:
        if not self.id:
            raise GnocchiError("missing input for the MetricOpts 'ID' argument")
        if self.measures is None:
            raise GnocchiError("missing input for the MetricOpts 'Measures' argument")
        return {self.id: _measure_dicts(self.measures)}


@dataclass
class ResourcesMetricsOpts:
    """Measures of one named metric of a resource."""

    metric_name: str = ""
    measures: list[MeasureOpts] | None = None
    archive_policy_name: str = ""
    unit: str = ""

    def to_dict(self) -> dict[str, Any]:
        if not self.metric_name:
            raise GnocchiError(
                "missing input for the ResourcesMetricsOpts 'MetricName' argument"
            )
        if self.measures is None:
            raise GnocchiError(
                "missing input for the ResourcesMetricsOpts 'Measures' argument"
            )
        metric: dict[str, Any] = {}
        if self.archive_policy_name:
            metric["archive_policy_name"] = self.archive_policy_name
        if self.unit:
            metric["unit"] = self.unit
        metric["measures"] = _measure_dicts(self.measures)
        return {self.metric_name: metric}


@dataclass
class BatchResourcesMetricsOpts:
    """Metrics of a single resource in a batch request."""

    resource_id: str = ""
    resources_metrics: list[ResourcesMetricsOpts] | None = None

    def to_dict(self) -> dict[str, Any]:
        if not self.resource_id:
            raise GnocchiError(
                "missing input for the BatchResourcesMetricsOpts 'ResourceID' argument"
            )
        if self.resources_metrics is None:
            raise GnocchiError(
                "missing input for the BatchResourcesMetricsOpts "
                "'ResourcesMetrics' argument"
            )
        metrics: dict[str, Any] = {}
        for item in self.resources_metrics:
            metrics.update(item.to_dict())
        return {self.resource_id: metrics}


@dataclass
class BatchCreateResourcesMetricsOpts:
    """Measures to create inside metrics addressed by resource IDs and names."""

    batch_resources_metrics: list[BatchResourcesMetricsOpts] = field(default_factory=list)
    create_metrics: bool = False

    def to_body(self) -> dict[str, Any]:
        """Build the request body keyed by resource ID."""
        body: dict[str, Any] = {}
        for item in self.batch_resources_metrics:
            body.update(item.to_dict())
        return body

    def to_query(self) -> str:
        """Format the query string, empty when no option is set."""
        if self.create_metrics:
            return "?" + urlencode({"create_metrics": "true"})
        return ""


def batch_create_metrics_body(opts: Iterable[MetricOpts]) -> dict[str, Any]:
    """Build the body of a batch request keyed by metric ID."""
    body: dict[str, Any] = {}
    for metric_opts in opts:
        body.update(metric_opts.to_dict())
    return body


def extract_measures(data: list[Any] | None) -> list[Measure]:
    """Interpret a list response body as measures."""
    return [Measure.from_json(item) for item in data or []]


def list_measures(
    client: ServiceClient, metric_id: str, opts: ListOpts | None = None
) -> list[Measure]:
    """List measures of a metric."""
    url = client.service_url(RESOURCE_PATH, metric_id, "measures")
    if opts is not None:
        url += opts.to_query()
    return extract_measures(client.get(url))


def create(client: ServiceClient, metric_id: str, opts: CreateOpts) -> None:
    """Create measures inside a single metric."""
    client.post(
        client.service_url(RESOURCE_PATH, metric_id, "measures"),
        opts.to_body(),
        ok_codes=[202],
        headers=_WRITE_HEADERS,
    )


def batch_create_metrics(client: ServiceClient, opts: Iterable[MetricOpts]) -> None:
    """Create measures inside several metrics addressed by ID."""
    body = batch_create_metrics_body(opts)
    client.post(
        client.service_url(BATCH_CREATE_METRICS_PATH, "measures"),
        body,
        ok_codes=[202],
        headers=_WRITE_HEADERS,
    )


def batch_create_resources_metrics(
    client: ServiceClient, opts: BatchCreateResourcesMetricsOpts
) -> None:
    """Create measures inside metrics addressed by resource IDs and metric names."""
    url = client.service_url(BATCH_CREATE_RESOURCES_METRICS_PATH, "measures")
    url += opts.to_query()
    body = opts.to_body()
    client.post(url, body, ok_codes=[202], headers=_WRITE_HEADERS)