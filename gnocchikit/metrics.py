"""Metrics of the Gnocchi API: list, get, create and delete.

Example::

    opts = CreateOpts(
        archive_policy_name="low",
        name="network.incoming.packets.rate",
        unit="packet/s",
    )
    metric = create(client, opts)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlencode

from gnocchikit.archivepolicies import ArchivePolicy
from gnocchikit.client import ServiceClient

RESOURCE_PATH = "metric"

_DELETE_HEADERS = {"Accept": "application/json, */*"}


@dataclass
class Metric:
    """An entity storing aggregates, identified by a UUID."""

    archive_policy: ArchivePolicy = field(default_factory=ArchivePolicy)
    archive_policy_name: str = ""
    created_by_project_id: str = ""
    created_by_user_id: str = ""
    creator: str = ""
    id: str = ""
    name: str = ""
    resource_id: str = ""
    resource: dict[str, Any] = field(default_factory=dict)
    unit: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Metric:
        data = data or {}
        return cls(
            archive_policy=ArchivePolicy.from_dict(data.get("archive_policy")),
            archive_policy_name=data.get("archive_policy_name") or "",
            created_by_project_id=data.get("created_by_project_id") or "",
            created_by_user_id=data.get("created_by_user_id") or "",
            creator=data.get("creator") or "",
            id=data.get("id") or "",
            name=data.get("name") or "",
            resource_id=data.get("resource_id") or "",
            resource=dict(data.get("resource") or {}),
            unit=data.get("unit") or "",
        )


@dataclass
class ListOpts:
    """Limiting and sorting options of a metrics list request.

    Only ``limit``, ``marker``, ``sort_key`` and ``sort_dir`` are sent in the
    query string; the owner fields are kept for callers that filter locally.
    """

    limit: int = 0
    marker: str = ""
    sort_key: str = ""
    sort_dir: str = ""
    creator: str = ""
    project_id: str = ""
    user_id: str = ""

    def to_query(self) -> str:
        """Format the options as a query string, empty when nothing is set."""
        params: dict[str, str] = {}
        if self.limit:
            params["limit"] = str(self.limit)
        if self.marker:
            params["marker"] = self.marker
        if self.sort_key:
            params["sort_key"] = self.sort_key
        if self.sort_dir:
            params["sort_dir"] = self.sort_dir
        if not params:
            return ""
        return "?" + urlencode(sorted(params.items()))


@dataclass
class CreateOpts:
    """Parameters of a new metric."""

    archive_policy_name: str = ""
    name: str = ""
    resource_id: str = ""
    unit: str = ""

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.archive_policy_name:
            body["archive_policy_name"] = self.archive_policy_name
        if self.name:
            body["name"] = self.name
        if self.resource_id:
            body["resource_id"] = self.resource_id
        if self.unit:
            body["unit"] = self.unit
        return body


def extract_metrics(data: list[dict[str, Any]] | None) -> list[Metric]:
    """Interpret a list response body as metrics."""
    return [Metric.from_dict(item) for item in data or []]


def list_metrics(client: ServiceClient, opts: ListOpts | None = None) -> list[Metric]:
    """List metrics, optionally limited and sorted."""
    url = client.service_url(RESOURCE_PATH)
    if opts is not None:
        url += opts.to_query()
    return extract_metrics(client.get(url))


def get(client: ServiceClient, metric_id: str) -> Metric:
    """Retrieve one metric by its ID."""
    return Metric.from_dict(client.get(client.service_url(RESOURCE_PATH, metric_id)))


def create(client: ServiceClient, opts: CreateOpts) -> Metric:
    """Create a new metric."""
    data = client.post(client.service_url(RESOURCE_PATH), opts.to_dict(), ok_codes=[201])
    return Metric.from_dict(data)


def delete(client: ServiceClient, metric_id: str) -> None:
    """Delete the metric with the given ID."""
    client.delete(client.service_url(RESOURCE_PATH, metric_id), headers=_DELETE_HEADERS)