from driftwatch.model import CompareResult, DiffEntry
from driftwatch.rollup import RollupReport, build_rollup, format_rollup


def make_rollup_results():
    return [
        CompareResult(
            service="alpha",
            diffs=[
                DiffEntry(key="secret_key", expected="x", actual="y"),
                DiffEntry(key="replicas", expected="2", actual="3"),
            ],
        ),
        CompareResult(service="beta", diffs=[]),
        CompareResult(
            service="gamma",
            diffs=[DiffEntry(key="timeout", expected="30", actual="60")],
        ),
    ]


def test_build_rollup_skips_clean():
    report = build_rollup(make_rollup_results())
    assert len(report.entries) == 2
    assert [e.service for e in report.entries] == ["alpha", "gamma"]


def test_build_rollup_total_diffs():
    assert build_rollup(make_rollup_results()).total == 3


def test_build_rollup_by_severity():
    report = build_rollup(make_rollup_results())
    alpha = next(e for e in report.entries if e.service == "alpha")
    assert alpha.by_severity.get("high") == 1
    assert alpha.by_severity.get("low") == 1


def test_build_rollup_top_keys_unique_and_limited():
    keys = ["a", "b", "a", "c", "d", "e", "f", "g"]
    report = build_rollup([CompareResult(service="svc", diffs=[DiffEntry(key=k) for k in keys])])
    assert report.entries[0].top_keys == ["a", "b", "c", "d", "e"]
    assert report.entries[0].total_diffs == 8


def test_format_rollup_contains_service_name():
    out = format_rollup(build_rollup(make_rollup_results()))
    assert "alpha" in out


def test_format_rollup_exact():
    out = format_rollup(build_rollup(make_rollup_results()))
    assert out == (
        "Rollup: 3 total diffs across 2 service(s)\n"
        "  alpha: 2 diffs [high:1]\n"
        "  gamma: 1 diffs [medium:1]\n"
    )


def test_format_rollup_no_drift():
    out = format_rollup(build_rollup([CompareResult(service="clean", diffs=[])]))
    assert "No drift" in out


def test_format_rollup_empty_report():
    assert format_rollup(RollupReport()) == "No drift detected across all services.\n"