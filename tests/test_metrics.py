import json

import pytest
import responses

from gnocchikit import metrics
from gnocchikit.archivepolicies import ArchivePolicy, ArchivePolicyDefinition
from gnocchikit.client import UnexpectedStatusError, new_gnocchi_v1

ENDPOINT = "http://gnocchi.example.com/"
TOKEN = "token"

METRICS_LIST_RESULT = [
    {
        "archive_policy": {
            "aggregation_methods": ["max", "min"],
            "back_window": 0,
            "definition": [
                {"granularity": "1:00:00", "points": 2304, "timespan": "96 days, 0:00:00"},
                {"granularity": "0:05:00", "points": 9216, "timespan": "32 days, 0:00:00"},
                {"granularity": "1 day, 0:00:00", "points": 400, "timespan": "400 days, 0:00:00"},
            ],
            "name": "precise",
        },
        "created_by_project_id": "e9dc821ca664406e981820a477e9a761",
        "created_by_user_id": "a23c5b98d42d4df3b961e54d5167eb6d",
        "creator": "a23c5b98d42d4df3b961e54d5167eb6d:e9dc821ca664406e981820a477e9a761",
        "id": "777a01d6-4694-49cb-b86a-5ba9fd4e609e",
        "name": "memory.usage",
        "resource_id": "1f3a0724-1807-4bd1-81f9-ee18c8ff6ccc",
        "unit": "MB",
    },
    {
        "archive_policy": {
            "aggregation_methods": ["mean", "sum"],
            "back_window": 12,
            "definition": [
                {"granularity": "1:00:00", "points": 2160, "timespan": "90 days, 0:00:00"},
                {"granularity": "1 day, 0:00:00", "points": 200, "timespan": "200 days, 0:00:00"},
            ],
            "name": "not_so_precise",
        },
        "created_by_project_id": "c6b68a6b413648b0a0eb191bf3222f4d",
        "created_by_user_id": "cb072aacdb494419aeeba5f1c62d1a65",
        "creator": "cb072aacdb494419aeeba5f1c62d1a65:c6b68a6b413648b0a0eb191bf3222f4d",
        "id": "6dbc97c5-bfdf-47a2-b184-02e7fa348d21",
        "name": "cpu.delta",
        "resource_id": "c5dc0c47-f43c-425c-a82f-44d61ee91175",
        "unit": "ns",
    },
]

METRIC_1 = metrics.Metric(
    archive_policy=ArchivePolicy(
        aggregation_methods=["max", "min"],
        back_window=0,
        definition=[
            ArchivePolicyDefinition("1:00:00", 2304, "96 days, 0:00:00"),
            ArchivePolicyDefinition("0:05:00", 9216, "32 days, 0:00:00"),
            ArchivePolicyDefinition("1 day, 0:00:00", 400, "400 days, 0:00:00"),
        ],
        name="precise",
    ),
    created_by_project_id="e9dc821ca664406e981820a477e9a761",
    created_by_user_id="a23c5b98d42d4df3b961e54d5167eb6d",
    creator="a23c5b98d42d4df3b961e54d5167eb6d:e9dc821ca664406e981820a477e9a761",
    id="777a01d6-4694-49cb-b86a-5ba9fd4e609e",
    name="memory.usage",
    resource_id="1f3a0724-1807-4bd1-81f9-ee18c8ff6ccc",
    unit="MB",
)

METRIC_2 = metrics.Metric(
    archive_policy=ArchivePolicy(
        aggregation_methods=["mean", "sum"],
        back_window=12,
        definition=[
            ArchivePolicyDefinition("1:00:00", 2160, "90 days, 0:00:00"),
            ArchivePolicyDefinition("1 day, 0:00:00", 200, "200 days, 0:00:00"),
        ],
        name="not_so_precise",
    ),
    created_by_project_id="c6b68a6b413648b0a0eb191bf3222f4d",
    created_by_user_id="cb072aacdb494419aeeba5f1c62d1a65",
    creator="cb072aacdb494419aeeba5f1c62d1a65:c6b68a6b413648b0a0eb191bf3222f4d",
    id="6dbc97c5-bfdf-47a2-b184-02e7fa348d21",
    name="cpu.delta",
    resource_id="c5dc0c47-f43c-425c-a82f-44d61ee91175",
    unit="ns",
)

METRIC_GET_RESULT = {
    "archive_policy": {
        "aggregation_methods": ["mean", "sum"],
        "back_window": 12,
        "definition": [
            {"granularity": "1:00:00", "points": 2160, "timespan": "90 days, 0:00:00"},
            {"granularity": "1 day, 0:00:00", "points": 200, "timespan": "200 days, 0:00:00"},
        ],
        "name": "not_so_precise",
    },
    "created_by_project_id": "c6b68a6b413648b0a0eb191bf3222f4d",
    "created_by_user_id": "cb072aacdb494419aeeba5f1c62d1a65",
    "creator": "cb072aacdb494419aeeba5f1c62d1a65:c6b68a6b413648b0a0eb191bf3222f4d",
    "id": "0ddf61cf-3747-4f75-bf13-13c28ff03ae3",
    "name": "network.incoming.packets.rate",
    "resource": {
        "created_by_project_id": "c6b68a6b413648b0a0eb191bf3222f4d",
        "created_by_user_id": "cb072aacdb494419aeeba5f1c62d1a65",
        "creator": "cb072aacdb494419aeeba5f1c62d1a65:c6b68a6b413648b0a0eb191bf3222f4d",
        "ended_at": None,
        "id": "75274f99-faf6-4112-a6d5-2794cb07c789",
        "original_resource_id": "75274f99-faf6-4112-a6d5-2794cb07c789",
        "project_id": "4154f08883334e0494c41155c33c0fc9",
        "revision_end": None,
        "revision_start": "2018-01-08T00:59:33.767815+00:00",
        "started_at": "2018-01-08T00:59:33.767795+00:00",
        "type": "compute_instance_network",
        "user_id": "bd5874d666624b24a9f01c128871e4ac",
    },
    "unit": "packet/s",
}

METRIC_CREATE_REQUEST = {
    "archive_policy_name": "high",
    "name": "network.incoming.bytes.rate",
    "resource_id": "23d5d3f7-9dfa-4f73-b72b-8b0b0063ec55",
    "unit": "B/s",
}

METRIC_CREATE_RESPONSE = {
    "archive_policy_name": "high",
    "created_by_project_id": "3d40ca37-7234-4911-8987b9f288f4ae84",
    "created_by_user_id": "fdcfb420-c096-45e6-9e177a0bb1950884",
    "creator": "fdcfb420-c096-45e6-9e177a0bb1950884:3d40ca37-7234-4911-8987b9f288f4ae84",
    "id": "01b2953e-de74-448a-a305-c84440697933",
    "name": "network.incoming.bytes.rate",
    "resource_id": "23d5d3f7-9dfa-4f73-b72b-8b0b0063ec55",
    "unit": "B/s",
}


@pytest.fixture
def client():
    return new_gnocchi_v1(ENDPOINT, token=TOKEN)


@pytest.fixture
def mocked():
    with responses.RequestsMock() as rsps:
        yield rsps


def test_list(client, mocked):
    mocked.add(responses.GET, ENDPOINT + "v1/metric", json=METRICS_LIST_RESULT, status=200)

    actual = metrics.list_metrics(client, metrics.ListOpts())

    assert actual == [METRIC_1, METRIC_2]
    request = mocked.calls[0].request
    assert request.headers["X-Auth-Token"] == TOKEN
    assert request.url == ENDPOINT + "v1/metric"


def test_list_sends_query(client, mocked):
    mocked.add(responses.GET, ENDPOINT + "v1/metric", json=[], status=200)

    actual = metrics.list_metrics(client, metrics.ListOpts(limit=25, sort_dir="asc"))

    assert actual == []
    assert mocked.calls[0].request.url == ENDPOINT + "v1/metric?limit=25&sort_dir=asc"


def test_list_opts_query_empty():
    assert metrics.ListOpts().to_query() == ""


def test_list_opts_query_ignores_owner_fields():
    opts = metrics.ListOpts(
        limit=10, marker="abc", sort_key="name", creator="someone", user_id="u", project_id="p"
    )
    assert opts.to_query() == "?limit=10&marker=abc&sort_key=name"


def test_get(client, mocked):
    metric_id = "0ddf61cf-3747-4f75-bf13-13c28ff03ae3"
    mocked.add(
        responses.GET, ENDPOINT + "v1/metric/" + metric_id, json=METRIC_GET_RESULT, status=200
    )

    s = metrics.get(client, metric_id)

    assert s.archive_policy == ArchivePolicy(
        aggregation_methods=["mean", "sum"],
        back_window=12,
        definition=[
            ArchivePolicyDefinition("1:00:00", 2160, "90 days, 0:00:00"),
            ArchivePolicyDefinition("1 day, 0:00:00", 200, "200 days, 0:00:00"),
        ],
        name="not_so_precise",
    )
    assert s.created_by_project_id == "c6b68a6b413648b0a0eb191bf3222f4d"
    assert s.created_by_user_id == "cb072aacdb494419aeeba5f1c62d1a65"
    assert s.creator == "cb072aacdb494419aeeba5f1c62d1a65:c6b68a6b413648b0a0eb191bf3222f4d"
    assert s.id == metric_id
    assert s.name == "network.incoming.packets.rate"
    assert s.resource["id"] == "75274f99-faf6-4112-a6d5-2794cb07c789"
    assert s.resource["original_resource_id"] == "75274f99-faf6-4112-a6d5-2794cb07c789"
    assert s.resource["project_id"] == "4154f08883334e0494c41155c33c0fc9"
    assert s.resource["type"] == "compute_instance_network"
    assert s.resource["user_id"] == "bd5874d666624b24a9f01c128871e4ac"
    assert s.resource["ended_at"] is None
    assert s.unit == "packet/s"
    assert mocked.calls[0].request.headers["X-Auth-Token"] == TOKEN


def test_create_opts_to_dict_omits_empty():
    assert metrics.CreateOpts(name="memory.usage", unit="MB").to_dict() == {
        "name": "memory.usage",
        "unit": "MB",
    }


def test_create(client, mocked):
    mocked.add(
        responses.POST, ENDPOINT + "v1/metric", json=METRIC_CREATE_RESPONSE, status=201
    )

    opts = metrics.CreateOpts(
        archive_policy_name="high",
        name="network.incoming.bytes.rate",
        resource_id="23d5d3f7-9dfa-4f73-b72b-8b0b0063ec55",
        unit="B/s",
    )
    s = metrics.create(client, opts)

    request = mocked.calls[0].request
    assert json.loads(request.body) == METRIC_CREATE_REQUEST
    assert request.headers["X-Auth-Token"] == TOKEN
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["Accept"] == "application/json"

    assert s.archive_policy_name == "high"
    assert s.created_by_project_id == "3d40ca37-7234-4911-8987b9f288f4ae84"
    assert s.created_by_user_id == "fdcfb420-c096-45e6-9e177a0bb1950884"
    assert s.creator == "fdcfb420-c096-45e6-9e177a0bb1950884:3d40ca37-7234-4911-8987b9f288f4ae84"
    assert s.id == "01b2953e-de74-448a-a305-c84440697933"
    assert s.name == "network.incoming.bytes.rate"
    assert s.resource_id == "23d5d3f7-9dfa-4f73-b72b-8b0b0063ec55"
    assert s.unit == "B/s"


def test_create_rejects_unexpected_status(client, mocked):
    mocked.add(responses.POST, ENDPOINT + "v1/metric", json=METRIC_CREATE_RESPONSE, status=200)

    with pytest.raises(UnexpectedStatusError) as info:
        metrics.create(client, metrics.CreateOpts(name="x"))
    assert info.value.status == 200


def test_delete(client, mocked):
    metric_id = "01b2953e-de74-448a-a305-c84440697933"
    mocked.add(responses.DELETE, ENDPOINT + "v1/metric/" + metric_id, status=204)

    assert metrics.delete(client, metric_id) is None

    assert len(mocked.calls) == 1
    request = mocked.calls[0].request
    assert request.method == "DELETE"
    assert request.headers["X-Auth-Token"] == TOKEN
    assert request.headers["Accept"] == "application/json, */*"


def test_delete_not_found(client, mocked):
    mocked.add(responses.DELETE, ENDPOINT + "v1/metric/missing", status=404)

    with pytest.raises(UnexpectedStatusError) as info:
        metrics.delete(client, "missing")
    assert info.value.status == 404


def test_extract_metrics_empty():
    assert metrics.extract_metrics(None) == []


def test_metric_from_dict_defaults():
    metric = metrics.Metric.from_dict({"id": "abc"})
    assert metric == metrics.Metric(id="abc")
    assert metric.archive_policy == ArchivePolicy()