import pytest

from driftwatch.maturity import (
    MaturityLevel,
    assess_maturity,
    format_maturity,
    load_maturity_report,
    save_maturity_report,
    score_to_maturity,
)
from driftwatch.model import CompareResult, DiffEntry


def make_maturity_results():
    return [
        CompareResult("svc-stable", [DiffEntry(key="log_level", expected="info", actual="debug")]),
        CompareResult("svc-clean", []),
        CompareResult(
            "svc-unstable",
            [
                DiffEntry(key="db_password", expected="secret", actual="changed"),
                DiffEntry(key="api_key", expected="abc", actual="xyz"),
                DiffEntry(key="timeout", expected="30", actual="60"),
            ],
        ),
    ]


def levels():
    return {e.service: e.level for e in assess_maturity(make_maturity_results())}


def test_assess_maturity_clean_is_mature():
    assert levels()["svc-clean"] is MaturityLevel.MATURE


def test_assess_maturity_high_drift_is_not_stable():
    level = levels()["svc-unstable"]
    assert level not in (MaturityLevel.MATURE, MaturityLevel.STABLE)
    assert level is MaturityLevel.DEVELOPING


def test_assess_maturity_single_medium_is_stable():
    assert levels()["svc-stable"] is MaturityLevel.STABLE


def test_assess_maturity_all_services_present():
    results = make_maturity_results()
    entries = assess_maturity(results)
    assert [e.service for e in entries] == [r.service for r in results]


def test_save_and_load_maturity_report(tmp_path):
    path = tmp_path / "maturity.json"
    entries = assess_maturity(make_maturity_results())
    save_maturity_report(path, entries)
    assert load_maturity_report(path) == entries


def test_load_maturity_report_not_found(tmp_path):
    assert load_maturity_report(tmp_path / "nonexistent" / "maturity.json") == []


def test_load_maturity_report_invalid_json(tmp_path):
    path = tmp_path / "maturity.json"
    path.write_text("not-json")
    with pytest.raises(ValueError):
        load_maturity_report(path)


def test_format_maturity_contains_service_name():
    out = format_maturity(assess_maturity(make_maturity_results()))
    assert "svc-clean" in out
    assert out.startswith("Service Maturity Report\n")


def test_format_maturity_empty():
    assert format_maturity([]) == "no maturity data available\n"


def test_score_to_maturity_zero():
    assert score_to_maturity(0) is MaturityLevel.MATURE


def test_score_to_maturity_high():
    assert score_to_maturity(50) is MaturityLevel.UNKNOWN


@pytest.mark.parametrize(
    "score,level",
    [
        (5, MaturityLevel.STABLE),
        (15, MaturityLevel.DEVELOPING),
        (30, MaturityLevel.UNSTABLE),
        (30.5, MaturityLevel.UNKNOWN),
    ],
)
def test_score_to_maturity_boundaries(score, level):
    assert score_to_maturity(score) is level