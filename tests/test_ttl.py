import json
import time
from datetime import datetime, timedelta, timezone

import pytest

from driftwatch.ttl import (
    TTLList,
    TTLRule,
    add_ttl_rule,
    expired_services,
    load_ttl_list,
    save_ttl_list,
)


@pytest.fixture
def ttl_path(tmp_path):
    return tmp_path / "ttl.json"


def test_add_and_load_ttl_rule(ttl_path):
    add_ttl_rule(ttl_path, "svc-a", timedelta(hours=2))
    ttl_list = load_ttl_list(ttl_path)
    assert [r.service for r in ttl_list.rules] == ["svc-a"]
    assert ttl_list.rules[0].ttl == timedelta(hours=2)


def test_ttl_stored_as_nanoseconds(ttl_path):
    add_ttl_rule(ttl_path, "svc-a", timedelta(hours=2))
    raw = json.loads(ttl_path.read_text())
    assert raw["rules"][0]["ttl_ns"] == 7_200_000_000_000


def test_add_ttl_rule_updates_existing(ttl_path):
    add_ttl_rule(ttl_path, "svc-a", timedelta(hours=1))
    add_ttl_rule(ttl_path, "svc-a", timedelta(hours=3))
    ttl_list = load_ttl_list(ttl_path)
    assert len(ttl_list.rules) == 1
    assert ttl_list.rules[0].ttl == timedelta(hours=3)


def test_add_ttl_rule_missing_service(ttl_path):
    with pytest.raises(ValueError):
        add_ttl_rule(ttl_path, "", timedelta(hours=1))


def test_add_ttl_rule_invalid_ttl(ttl_path):
    with pytest.raises(ValueError):
        add_ttl_rule(ttl_path, "svc-a", timedelta(0))


def test_load_ttl_list_not_found(tmp_path):
    assert load_ttl_list(tmp_path / "nonexistent" / "ttl.json").rules == []


def test_load_ttl_list_invalid_json(ttl_path):
    ttl_path.write_text("not-json")
    with pytest.raises(ValueError):
        load_ttl_list(ttl_path)


def test_expired_services_detects_expired(ttl_path):
    add_ttl_rule(ttl_path, "svc-old", timedelta(milliseconds=1))
    time.sleep(0.01)
    add_ttl_rule(ttl_path, "svc-new", timedelta(hours=24))
    assert expired_services(load_ttl_list(ttl_path)) == ["svc-old"]


def test_expired_services_none_expired():
    ttl_list = TTLList(
        rules=[TTLRule(service="svc-a", ttl=timedelta(hours=24), created_at=datetime.now(timezone.utc))]
    )
    assert expired_services(ttl_list) == []


def test_save_ttl_list_persists(tmp_path):
    path = tmp_path / "ttl.json"
    created = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    save_ttl_list(path, TTLList(rules=[TTLRule(service="svc-x", ttl=timedelta(hours=1), created_at=created)]))
    assert path.exists()
    loaded = load_ttl_list(path)
    assert loaded.rules == [TTLRule(service="svc-x", ttl=timedelta(hours=1), created_at=created)]