# gnocchikit

A small Python client for the Gnocchi v1 metric API. It covers archive
policies, metrics and measures, including batch creation of measures.

## Installation

```
pip install gnocchikit
```

## Connecting

```python
from gnocchikit.client import new_gnocchi_v1

client = new_gnocchi_v1("https://gnocchi.example.com/", token="token")
```

`new_gnocchi_v1(endpoint, token="", session=None)` builds a
`ServiceClient` whose resource base is the endpoint (with a trailing `/`
added if missing) followed by `v1/`. When a token is given, every request
sends it in the `X-Auth-Token` header. A `requests.Session` may be passed
in; otherwise a new one is created.

`ServiceClient` offers `get`, `post`, `patch`, `delete` and the lower-level
`request`, each taking the accepted status codes (`ok_codes`) and extra
headers. A response with a status code outside the accepted ones raises
`UnexpectedStatusError`, which carries `method`, `url`, `status`,
`expected` and `body`. A body that is not valid JSON raises `GnocchiError`,
the base class of all errors in this package.

## Archive policies

```python
from gnocchikit import archivepolicies

for policy in archivepolicies.list_archive_policies(client):
    print(policy.name, policy.aggregation_methods)

opts = archivepolicies.CreateOpts(
    name="test_policy",
    back_window=31,
    aggregation_methods=["sum", "mean", "count"],
    definition=[
        archivepolicies.ArchivePolicyDefinitionOpts(
            granularity="1:00:00", timespan="90 days, 0:00:00"
        ),
    ],
)
policy = archivepolicies.create(client, opts)

policy = archivepolicies.update(
    client,
    "test_policy",
    archivepolicies.UpdateOpts(
        definition=[
            archivepolicies.ArchivePolicyDefinitionOpts(
                granularity="12:00:00", timespan="30 days, 0:00:00"
            ),
        ]
    ),
)
archivepolicies.delete(client, "test_policy")
```

`get(client, name)` fetches a single policy. Results are `ArchivePolicy`
objects holding a list of `ArchivePolicyDefinition` entries.

## Metrics

```python
from gnocchikit import metrics

metric = metrics.create(
    client,
    metrics.CreateOpts(archive_policy_name="low", name="memory.usage", unit="MB"),
)
for m in metrics.list_metrics(client, metrics.ListOpts(limit=25)):
    print(m.id, m.name)
metrics.delete(client, metric.id)
```

`metrics.ListOpts` sends only `limit`, `marker`, `sort_key` and `sort_dir`
in the query string; its `creator`, `project_id` and `user_id` fields are
not sent. A `Metric` carries its `archive_policy` as an `ArchivePolicy`;
its `resource` is kept as the plain dictionary the server returned.

## Measures

```python
from datetime import datetime, timezone
from gnocchikit import measures

stamp = datetime(2018, 1, 18, 12, 31, tzinfo=timezone.utc)
measures.create(
    client,
    "9e5a6441-1044-4181-b66e-34e180753040",
    measures.CreateOpts(measures=[measures.MeasureOpts(timestamp=stamp, value=101.2)]),
)

for measure in measures.list_measures(
    client,
    "9e5a6441-1044-4181-b66e-34e180753040",
    measures.ListOpts(granularity="1h", start=stamp),
):
    print(measure.timestamp, measure.granularity, measure.value)
```

Timestamps are sent without a time zone (`2018-01-18T12:31:00`, with
trailing zeros of the fraction dropped), as `format_timestamp` does.
Timestamps in responses must carry an offset and are parsed by
`parse_timestamp` into time-zone-aware `datetime` objects.

Measures can also be written to many metrics in one request:

- `measures.batch_create_metrics(client, [MetricOpts(id=..., measures=[...]), ...])`
  addresses metrics by ID.
- `measures.batch_create_resources_metrics(client, BatchCreateResourcesMetricsOpts(...))`
  addresses metrics by resource ID and metric name, each given as a
  `BatchResourcesMetricsOpts` holding `ResourcesMetricsOpts`. Setting
  `create_metrics=True` adds `create_metrics=true` to the query string.

Missing IDs, names, measure lists or timestamps in these options raise
`GnocchiError` before any request is sent.

## What this package does not do

- It does not authenticate: you supply an endpoint and an already issued
  token.
- It has no functions for Gnocchi resources or resource types, and no
  command-line tool.
- List calls return everything in a single response; there is no paging
  beyond passing `limit` and `marker` to `metrics.list_metrics` yourself.

## Running the tests

```
pip install -e ".[test]"
pytest
```