"""
Tests for the verification key manifest.
"""

import json

import pytest

from zkkeys import embedded
from zkkeys.embedded import (
    VerificationKey,
    VerificationKeyStore,
    commit_staged,
    digest,
    discard_staged,
    staging_path,
)
from zkkeys.errors import EmbeddedKeyError, MissingVerificationKeyError
from zkkeys.pipeline import CircuitVariant


@pytest.fixture
def store(tmp_path):
    s = VerificationKeyStore(tmp_path / "verification_keys.json")
    yield s
    s.close()


@pytest.fixture
def packaged(tmp_path, monkeypatch):
    """임시 manifest를 패키지 manifest로 사용."""
    path = tmp_path / "packaged.json"
    monkeypatch.setattr(embedded, "MANIFEST_PATH", path)
    embedded.embedded_keys.cache_clear()
    yield path
    embedded.embedded_keys.cache_clear()


def _fill(path, *entries):
    with VerificationKeyStore(path) as store:
        for circuit, data in entries:
            store.add(circuit, data)


class TestVerificationKeyStore:

    def test_new_store_is_empty(self, store):
        assert store.entries == []
        assert store.circuits() == []

    def test_add_and_get(self, store):
        entry = store.add("transfer", b"\x01\x02")
        assert entry["version"] == 1
        assert entry["sha256"] == digest(b"\x01\x02")
        assert store.get("transfer") == b"\x01\x02"

    def test_same_bytes_same_entry(self, store):
        first = store.add("transfer", b"abc")
        second = store.add("transfer", b"abc")
        assert first == second
        assert store.versions("transfer") == [1]
        assert len(store.entries) == 1

    def test_new_bytes_new_version(self, store):
        store.add("transfer", b"v1")
        store.add("transfer", b"v2")
        assert store.versions("transfer") == [1, 2]
        assert store.get("transfer") == b"v2"
        assert store.get("transfer", version=1) == b"v1"

    def test_versions_per_circuit(self, store):
        store.add("transfer", b"same")
        entry = store.add("reclaim", b"same")
        assert entry["version"] == 1
        assert store.circuits() == ["reclaim", "transfer"]

    def test_persisted_as_tinydb_table(self, store):
        store.add("reclaim", b"\xff" * 10)
        doc = json.loads(store.path.read_text())
        (entry,) = doc["verification_keys"].values()
        assert entry["circuit"] == "reclaim"
        assert entry["data"] == "ff" * 10

        with VerificationKeyStore(store.path) as again:
            assert again.get("reclaim") == b"\xff" * 10

    def test_missing_circuit(self, store):
        with pytest.raises(MissingVerificationKeyError):
            store.get("transfer")

    def test_missing_version(self, store):
        store.add("transfer", b"x")
        with pytest.raises(MissingVerificationKeyError):
            store.get("transfer", version=2)

    def test_digest_mismatch(self, store):
        store.add("transfer", b"good")
        store.table.update({"data": b"evil".hex()}, VerificationKey.circuit == "transfer")
        with pytest.raises(EmbeddedKeyError):
            store.get("transfer")

    def test_unreadable_manifest(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(EmbeddedKeyError):
            VerificationKeyStore(path)

    def test_list_table_rejected(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text(json.dumps({"verification_keys": []}))
        with pytest.raises(EmbeddedKeyError):
            VerificationKeyStore(path)

    def test_malformed_entry(self, tmp_path):
        path = tmp_path / "partial.json"
        path.write_text(json.dumps({"verification_keys": {"1": {"circuit": "transfer"}}}))
        with pytest.raises(EmbeddedKeyError):
            VerificationKeyStore(path)


class TestStagedWrites:

    def test_commit_replaces_targets(self, tmp_path):
        a, b = tmp_path / "a.bin", tmp_path / "b.bin"
        a.write_bytes(b"old")
        staged = {a: staging_path(a), b: staging_path(b)}
        staged[a].write_bytes(b"new-a")
        staged[b].write_bytes(b"new-b")
        commit_staged(staged)
        assert a.read_bytes() == b"new-a"
        assert b.read_bytes() == b"new-b"
        assert sorted(tmp_path.iterdir()) == [a, b]

    def test_discard_leaves_targets(self, tmp_path):
        a = tmp_path / "a.bin"
        a.write_bytes(b"old")
        staged = {a: staging_path(a)}
        staged[a].write_bytes(b"new")
        discard_staged(staged)
        assert a.read_bytes() == b"old"
        assert list(tmp_path.iterdir()) == [a]


class TestEmbeddedKeys:

    def test_packaged_manifest_loads(self):
        embedded.embedded_keys.cache_clear()
        keys = embedded.embedded_keys()
        assert set(keys) <= {"transfer", "reclaim"}

    def test_missing_manifest_is_empty(self, packaged):
        assert dict(embedded.embedded_keys()) == {}
        assert not packaged.exists()

    def test_lookup(self, packaged):
        _fill(packaged, ("transfer", b"transfer-vk"))
        assert embedded.embedded_verification_key(CircuitVariant.TRANSFER) == b"transfer-vk"
        assert embedded.embedded_verification_key("transfer") == b"transfer-vk"

    def test_missing_variant(self, packaged):
        _fill(packaged, ("transfer", b"transfer-vk"))
        with pytest.raises(MissingVerificationKeyError):
            embedded.embedded_verification_key(CircuitVariant.RECLAIM)

    def test_latest_version_wins(self, packaged):
        _fill(packaged, ("reclaim", b"old"), ("reclaim", b"new"))
        assert embedded.embedded_keys()["reclaim"] == b"new"

    def test_read_only(self, packaged):
        _fill(packaged)
        keys = embedded.embedded_keys()
        with pytest.raises(TypeError):
            keys["transfer"] = b"x"

    def test_loaded_once(self, packaged):
        _fill(packaged)
        first = embedded.embedded_keys()
        _fill(packaged, ("transfer", b"late"))
        assert embedded.embedded_keys() is first
