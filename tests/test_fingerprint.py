import pytest

from driftwatch.fingerprint import (
    Fingerprint,
    build_fingerprint,
    build_fingerprint_store,
    diff_fingerprint_store,
    format_fingerprint_store,
    load_fingerprint_store,
    save_fingerprint_store,
)
from driftwatch.model import CompareResult, DiffEntry


@pytest.fixture
def results():
    return [
        CompareResult(
            "alpha",
            [
                DiffEntry(key="timeout", expected="30s", actual="60s"),
                DiffEntry(key="replicas", expected="3", actual="1"),
            ],
        ),
        CompareResult("beta", [DiffEntry(key="log_level", expected="info", actual="debug")]),
        CompareResult("gamma", []),
    ]


def test_build_fingerprint_stable_hash(results):
    fp1 = build_fingerprint(results[0])
    fp2 = build_fingerprint(results[0])
    assert fp1.hash == fp2.hash
    assert fp1.drift_count == 2


def test_build_fingerprint_order_independent(results):
    reversed_result = CompareResult("alpha", list(reversed(results[0].diffs)))
    assert build_fingerprint(reversed_result).hash == build_fingerprint(results[0]).hash
    assert build_fingerprint(results[0]).drift_keys == ["replicas", "timeout"]


def test_build_fingerprint_hash_shape(results):
    fp = build_fingerprint(results[0])
    assert len(fp.hash) == 16
    int(fp.hash, 16)


def test_empty_fingerprint_is_sha256_of_nothing():
    assert build_fingerprint(CompareResult("x", [])).hash == "e3b0c44298fc1c14"


def test_build_store_skips_clean(results):
    store = build_fingerprint_store(results)
    assert "gamma" not in store
    assert len(store) == 2


def test_save_and_load_store(tmp_path, results):
    store = build_fingerprint_store(results)
    path = tmp_path / "fingerprints.json"
    save_fingerprint_store(path, store)
    loaded = load_fingerprint_store(path)
    assert loaded["alpha"].hash == store["alpha"].hash
    assert loaded == store


def test_load_store_not_found(tmp_path):
    assert load_fingerprint_store(tmp_path / "nonexistent" / "fingerprints.json") == {}


def test_load_store_invalid_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("not-json")
    with pytest.raises(ValueError):
        load_fingerprint_store(path)


def test_diff_store_detects_change():
    old = {"alpha": Fingerprint(service="alpha", hash="aabbccdd11223344")}
    current = {
        "alpha": Fingerprint(service="alpha", hash="deadbeefcafebabe"),
        "beta": Fingerprint(service="beta", hash="1234567890abcdef"),
    }
    assert diff_fingerprint_store(old, current) == ["alpha", "beta"]


def test_diff_store_no_difference():
    store = {"alpha": Fingerprint(service="alpha", hash="aabbccdd11223344")}
    assert diff_fingerprint_store(store, store) == []


def test_format_store_empty():
    assert format_fingerprint_store({}) == "no drifted services fingerprinted\n"


def test_format_store_contains_service(results):
    out = format_fingerprint_store(build_fingerprint_store(results))
    assert "alpha" in out
    assert "keys=[replicas,timeout]" in out