from datetime import datetime, timedelta, timezone

from driftwatch.model import CompareResult, DiffEntry
from driftwatch.suppress import (
    SuppressList,
    SuppressRule,
    add_suppress_rule,
    apply_suppress,
    load_suppress_list,
    save_suppress_list,
)


def in_one_hour():
    return datetime.now(timezone.utc) + timedelta(hours=1)


def test_add_and_load_suppress_rule(tmp_path):
    path = tmp_path / "suppress.json"
    add_suppress_rule(path, SuppressRule("api", "replicas", "planned maintenance", in_one_hour()))
    loaded = load_suppress_list(path)
    assert len(loaded.rules) == 1
    assert loaded.rules[0].key == "replicas"
    assert loaded.rules[0].reason == "planned maintenance"


def test_load_suppress_list_not_found(tmp_path):
    assert load_suppress_list(tmp_path / "nonexistent" / "suppress.json").rules == []


def test_apply_suppress_removes_suppressed_diff():
    results = [CompareResult("api", [DiffEntry(key="replicas"), DiffEntry(key="image")])]
    sl = SuppressList(rules=[SuppressRule("api", "replicas", expires_at=in_one_hour())])
    out = apply_suppress(results, sl)
    assert [d.key for d in out[0].diffs] == ["image"]


def test_apply_suppress_expired_rule_ignored():
    results = [CompareResult("api", [DiffEntry(key="replicas")])]
    expired = datetime.now(timezone.utc) - timedelta(hours=1)
    sl = SuppressList(rules=[SuppressRule("api", "replicas", expires_at=expired)])
    assert len(apply_suppress(results, sl)[0].diffs) == 1


def test_apply_suppress_wildcard_key():
    results = [CompareResult("worker", [DiffEntry(key="cpu"), DiffEntry(key="mem")])]
    sl = SuppressList(rules=[SuppressRule("worker", "*", expires_at=in_one_hour())])
    assert apply_suppress(results, sl)[0].diffs == []


def test_apply_suppress_other_service_untouched():
    results = [CompareResult("worker", [DiffEntry(key="cpu")])]
    sl = SuppressList(rules=[SuppressRule("api", "*", expires_at=in_one_hour())])
    assert [d.key for d in apply_suppress(results, sl)[0].diffs] == ["cpu"]


def test_save_suppress_list_roundtrip(tmp_path):
    path = tmp_path / "s.json"
    expiry = in_one_hour().replace(microsecond=0)
    save_suppress_list(path, SuppressList(rules=[SuppressRule("svc", "timeout", "test", expiry)]))
    loaded = load_suppress_list(path)
    assert loaded.rules[0].service == "svc"
    assert loaded.rules[0].expires_at == expiry