from driftwatch.model import CompareResult, DiffEntry
from driftwatch.reachability import Dependency, build_reachability, format_reachability


def make_results():
    return [
        CompareResult(service="api", diffs=[DiffEntry(key="timeout", expected="30", actual="60")]),
        CompareResult(service="worker", diffs=[]),
        CompareResult(service="gateway", diffs=[DiffEntry(key="port", expected="8080", actual="9090")]),
    ]


def make_deps():
    return [
        Dependency(service="worker", depends_on="api"),
        Dependency(service="gateway", depends_on="worker"),
    ]


def by_service(out):
    return {r.service: r for r in out}


def test_build_reachability_affected_by():
    out = by_service(build_reachability(make_results(), make_deps()))
    assert out["gateway"].affected_by == ["api"]
    assert out["gateway"].total_exposure == 1


def test_build_reachability_clean_service_exposure():
    out = by_service(build_reachability(make_results(), make_deps()))
    assert out["worker"].affected_by == ["api"]
    assert out["worker"].reachable_from == ["gateway"]
    assert out["api"].total_exposure == 0
    assert out["api"].reachable_from == ["worker"]


def test_build_reachability_no_deps():
    out = build_reachability(make_results(), None)
    assert len(out) == 3
    assert all(r.total_exposure == 0 for r in out)


def test_build_reachability_sorted_by_exposure():
    out = build_reachability(make_results(), make_deps())
    assert [r.service for r in out] == ["gateway", "worker", "api"]
    exposures = [r.total_exposure for r in out]
    assert exposures == sorted(exposures, reverse=True)


def test_format_reachability_contains_service():
    formatted = format_reachability(build_reachability(make_results(), make_deps()))
    assert formatted.startswith("=== Drift Reachability ===\n")
    assert "service: gateway (exposure: 1)\n" in formatted
    assert "  affected by drifted: api\n" in formatted
    assert "  downstream dependents: worker\n" in formatted


def test_format_reachability_empty():
    assert format_reachability([]) == "no reachability data\n"