"""Archive policies of the Gnocchi API: list, get, create, update and delete.

Example::

    opts = CreateOpts(
        name="test_policy",
        back_window=31,
        aggregation_methods=["sum", "mean", "count"],
        definition=[
            ArchivePolicyDefinitionOpts("1:00:00", "90 days, 0:00:00"),
            ArchivePolicyDefinitionOpts("1 day, 0:00:00", "100 days, 0:00:00"),
        ],
    )
    policy = create(client, opts)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from gnocchikit.client import ServiceClient

RESOURCE_PATH = "archive_policy"

_DELETE_HEADERS = {"Accept": "application/json, */*"}


@dataclass
class ArchivePolicyDefinition:
    """Precision and timespan of one archive policy level."""

    granularity: str = ""
    points: int = 0
    timespan: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ArchivePolicyDefinition:
        data = data or {}
        return cls(
            granularity=data.get("granularity") or "",
            points=data.get("points") or 0,
            timespan=data.get("timespan") or "",
        )


@dataclass
class ArchivePolicy:
    """An aggregate storage policy attached to a metric."""

    aggregation_methods: list[str] = field(default_factory=list)
    back_window: int = 0
    definition: list[ArchivePolicyDefinition] = field(default_factory=list)
    name: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ArchivePolicy:
        data = data or {}
        return cls(
            aggregation_methods=list(data.get("aggregation_methods") or []),
            back_window=data.get("back_window") or 0,
            definition=[
                ArchivePolicyDefinition.from_dict(item)
                for item in data.get("definition") or []
            ],
            name=data.get("name") or "",
        )


@dataclass
class ArchivePolicyDefinitionOpts:
    """Definition of one level of a new or updated archive policy."""

    granularity: str
    timespan: str
    points: int | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"granularity": self.granularity, "timespan": self.timespan}
        if self.points is not None:
            body["points"] = self.points
        return body


def _definitions(items: Iterable[ArchivePolicyDefinitionOpts]) -> list[dict[str, Any]]:
    return [item.to_dict() for item in items]


@dataclass
class CreateOpts:
    """Parameters of a new archive policy."""

    name: str
    definition: list[ArchivePolicyDefinitionOpts]
    aggregation_methods: list[str] = field(default_factory=list)
    back_window: int = 0

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.aggregation_methods:
            body["aggregation_methods"] = list(self.aggregation_methods)
        if self.back_window:
            body["back_window"] = self.back_window
        body["definition"] = _definitions(self.definition)
        body["name"] = self.name
        return body


@dataclass
class UpdateOpts:
    """Options used to update an archive policy."""

    definition: list[ArchivePolicyDefinitionOpts]

    def to_dict(self) -> dict[str, Any]:
        return {"definition": _definitions(self.definition)}


def extract_archive_policies(data: list[dict[str, Any]] | None) -> list[ArchivePolicy]:
    """Interpret a list response body as archive policies."""
    return [ArchivePolicy.from_dict(item) for item in data or []]


def list_archive_policies(client: ServiceClient) -> list[ArchivePolicy]:
    """List all archive policies."""
    return extract_archive_policies(client.get(client.service_url(RESOURCE_PATH)))


def get(client: ServiceClient, archive_policy_name: str) -> ArchivePolicy:
    """Retrieve one archive policy by its name."""
    return ArchivePolicy.from_dict(
        client.get(client.service_url(RESOURCE_PATH, archive_policy_name))
    )


def create(client: ServiceClient, opts: CreateOpts) -> ArchivePolicy:
    """Create a new archive policy."""
    data = client.post(client.service_url(RESOURCE_PATH), opts.to_dict(), ok_codes=[201])
    return ArchivePolicy.from_dict(data)


def update(client: ServiceClient, archive_policy_name: str, opts: UpdateOpts) -> ArchivePolicy:
    """Update an existing archive policy."""
    data = client.patch(
        client.service_url(RESOURCE_PATH, archive_policy_name),
        opts.to_dict(),
        ok_codes=[200],
    )
    return ArchivePolicy.from_dict(data)


def delete(client: ServiceClient, archive_policy_name: str) -> None:
    """Delete an archive policy by its name."""
    client.delete(
        client.service_url(RESOURCE_PATH, archive_policy_name),
        headers=_DELETE_HEADERS,
    )