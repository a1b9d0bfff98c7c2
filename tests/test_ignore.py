import pytest

from driftwatch.ignore import (
    IgnoreList,
    IgnoreRule,
    add_ignore_rule,
    apply_ignore_list,
    load_ignore_list,
    save_ignore_list,
)
from driftwatch.model import CompareResult, DiffEntry


@pytest.fixture
def path(tmp_path):
    return tmp_path / "ignore.json"


def make_ignore_results():
    return [
        CompareResult(
            "api",
            [
                DiffEntry(key="replicas", expected="3", actual="2"),
                DiffEntry(key="image", expected="v1", actual="v2"),
            ],
        ),
        CompareResult("worker", [DiffEntry(key="timeout", expected="30", actual="60")]),
    ]


def remaining(ignore_list):
    results = apply_ignore_list(make_ignore_results(), ignore_list)
    return {r.service: [d.key for d in r.diffs] for r in results}


def test_load_ignore_list_not_found(tmp_path):
    assert load_ignore_list(tmp_path / "nonexistent" / "ignore.json").rules == []


def test_add_and_load_ignore_rule(path):
    add_ignore_rule(path, "api", "replicas", "managed by HPA")
    assert load_ignore_list(path).rules == [
        IgnoreRule(service="api", key="replicas", reason="managed by HPA")
    ]


@pytest.mark.parametrize(
    "rule, expected",
    [
        (IgnoreRule(service="api", key="replicas"), {"api": ["image"], "worker": ["timeout"]}),
        (IgnoreRule(key="image*"), {"api": ["replicas"], "worker": ["timeout"]}),
        (
            IgnoreRule(service="other", key="timeout"),
            {"api": ["replicas", "image"], "worker": ["timeout"]},
        ),
        (IgnoreRule(key="*"), {"api": [], "worker": []}),
    ],
)
def test_apply_ignore_list(rule, expected):
    assert remaining(IgnoreList([rule])) == expected


def test_apply_ignore_list_none_returns_all():
    assert remaining(None) == {"api": ["replicas", "image"], "worker": ["timeout"]}


def test_apply_ignore_list_does_not_mutate_input():
    original = make_ignore_results()
    apply_ignore_list(original, IgnoreList([IgnoreRule(key="replicas")]))
    assert [d.key for d in original[0].diffs] == ["replicas", "image"]


def test_save_ignore_list_round_trip(path):
    il = IgnoreList([IgnoreRule(service="", key="debug_mode", reason="always off")])
    save_ignore_list(path, il)
    assert load_ignore_list(path) == il


def test_load_ignore_list_invalid_json(path):
    path.write_text("not-json")
    with pytest.raises(ValueError):
        load_ignore_list(path)