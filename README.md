# driftwatch

A library for analysing and tracking configuration drift. Drift means the
differences between what a service's manifest declares and what the running
service reports.

## Installation

```
pip install driftwatch
```

To install the test tools as well:

```
pip install "driftwatch[test]"
```

## Inputs

- `driftwatch.manifest.load_file(path)` reads one YAML manifest into a
  `Manifest`. The manifest has the fields `name`, `version`, `namespace`,
  `env`, `image` and `replicas`.
- `driftwatch.manifest.load_dir(directory)` loads every `.yaml` and `.yml`
  file directly inside a directory, in file-name order.
- Both raise `ManifestError` when a file cannot be read or parsed, or when
  `name` is missing.
- `driftwatch.fetcher.Fetcher(base_url, timeout)` fetches live configuration.
  `.fetch(service_name)` sends a GET to `<base_url>/services/<name>/config` and
  returns a `ServiceConfig`. It raises `FetchError` on a non-200 status, a
  network failure or a malformed body.
- `driftwatch.configbody.parse_config_body(data)` parses `KEY=VALUE` lines.
  It skips blank lines and `#` comments, and raises `ConfigParseError` for a
  line without `=` or with an empty key.

## Comparison results

`driftwatch.model.CompareResult` holds a service name and a list of
`DiffEntry` records. Each `DiffEntry` has:

- `key`
- `expected`
- `actual`
- an optional `DiffKind`: `changed`, `missing` or `unexpected`
- `status`

Both types convert to and from plain dicts with `to_dict` and `from_dict`.

## Analysis

- `severity.classify_key` and `severity.max_severity` rank keys as `Severity`
  `NONE`, `LOW`, `MEDIUM` or `HIGH`.
- `score.score_results` and `score.format_score` produce a weighted score per
  service.
- `impact.assess_impact` rates services by impact. `score_to_impact` and
  `format_impact` go with it.
- `maturity.assess_maturity` rates services by maturity. `score_to_maturity`,
  `save_maturity_report`, `load_maturity_report` and `format_maturity` go with
  it.
- `sorter.sort_results` orders results by a `SortOrder`: service, drift
  count or severity.
- `groupby.group_results` groups results by a `GroupByField`: service,
  severity or key. `format_grouped` renders the groups.
- `summary.summarize` and `format_summary` count services and diffs.
- `rollup.build_rollup` and `format_rollup` give per-service diff counts by
  severity.
- `heatmap.build_heatmap` and `format_heatmap` give drift frequency per
  service and key.
- `fingerprint.build_fingerprint_store` builds a stable hash of each drifted
  service's keys. `diff_fingerprint_store` reports the services that changed,
  and `save_fingerprint_store` and `load_fingerprint_store` persist the store.
- `projection.apply_projection` and `format_projection` show the live values
  of chosen keys.
- `reachability.build_reachability` and `format_reachability` find drifted
  upstream services through a list of `Dependency` edges.
- `velocity.compute_velocity` and `format_velocity` compute drifts per day
  from `TrendEntry` records and flag services whose drift is accelerating.
- `report.Reporter` writes `[OK]` and `[DRIFT]` lines for `DriftResult`
  values to a stream, and `.summary` returns a one-line summary.

## Filtering

These functions each return new result lists:

- `ignore.apply_ignore_list` applies ignore rules, matching exact keys or
  prefixes that end in `*`.
- `pinned.apply_pins` removes diffs whose live value equals the pinned value.
- `suppress.apply_suppress` applies time-limited suppressions. A key of `*`
  suppresses every key.
- `label.filter_by_label` keeps services with a given label value.
- `watchlist.match_watchlist` keeps watched services that have at least
  their threshold of diffs.

These functions return lists of violations:

- `threshold.check_thresholds`
- `policy.apply_policy`, which checks values against allowed lists.

`tag.filter_by_tag` returns the services that carry a tag.

## State on disk

Each of these modules keeps a JSON file and provides load, save, add and
remove functions as suits it:

- `history`, which appends dated runs and offers `latest_history`
- `snapshot`, with `diff_snapshot`
- `trend`
- `stale`, with `find_stale_services`, which reads a history file
- `profile`
- `lifecycle`
- `ownership`, with `lookup_owner`, which matches names case-insensitively
- `remediation`
- `schedule`, with `Schedule.upsert` and `Schedule.due_services`
- `ttl`, with `expired_services`
- `notify`, with `generate_notify_events`
- `ignore`
- `pinned`
- `suppress`
- `label`
- `tag`
- `watchlist`
- `threshold`

Most loaders treat a missing file as empty. Some raise `FileNotFoundError`
instead:

- `history.load_history`
- `snapshot.load_snapshot`
- `watchlist.load_watchlist`
- `policy.load_policy`

Removing an entry that does not exist raises `KeyError`. Malformed JSON and
invalid arguments raise `ValueError`.

## Example

```python
from driftwatch.model import CompareResult, DiffEntry
from driftwatch.impact import assess_impact, format_impact
from driftwatch.ignore import IgnoreList, IgnoreRule, apply_ignore_list

results = [
    CompareResult(service="api", diffs=[DiffEntry(key="replicas"), DiffEntry(key="timeout")]),
    CompareResult(service="worker", diffs=[]),
]

ignored = IgnoreList(rules=[IgnoreRule(service="api", key="timeout")])
print(format_impact(assess_impact(apply_ignore_list(results, ignored)))
```

## What it does not do

- It has no command-line program.
- It has no function that compares a `Manifest` with a `ServiceConfig` to
  produce `CompareResult` values. You build those results yourself.
- Notification events are generated and stored, but they are not sent to
  Slack, e-mail or webhooks.

## Running the tests

```
pytest
```