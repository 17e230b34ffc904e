"""
내장 검증 키(Embedded Verification Keys)
========================================

검증 키는 TinyDB manifest ``zkkeys/data/verification_keys.json`` 에 담겨
패키지와 함께 배포된다. 각 레코드는 ``verification_keys`` 테이블의 문서이다:

    {"circuit": "transfer", "version": 1, "sha256": "<hex>", "data": "<hex>"}

**내용 주소(content addressing)**:
  같은 회로에 이미 저장된 digest의 바이트를 다시 추가하면 기존 문서를
  돌려주고, 다른 바이트는 다음 버전이 된다.

**무결성**:
  읽을 때마다 sha256을 다시 계산해 저장된 digest와 비교한다.

패키지 manifest는 ``write_zkp_keys(out_dir, embed=True)`` 로 갱신한다.
"""

import hashlib
import logging
import os
import tempfile
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType

from tinydb import Query, TinyDB

from zkkeys.config import VK_MANIFEST_FILE
from zkkeys.errors import EmbeddedKeyError, MissingVerificationKeyError

logger = logging.getLogger(__name__)

MANIFEST_PATH = Path(__file__).resolve().parent / "data" / VK_MANIFEST_FILE
_TABLE = "verification_keys"
_FIELDS = {"circuit", "version", "sha256", "data"}

VerificationKey = Query()


def digest(data):
    return hashlib.sha256(data).hexdigest()


# ── staged writes ──

def staging_path(target):
    """Empty temp file next to ``target``; ``commit_staged`` renames it into place."""
    target = Path(target)
    fd, tmp = tempfile.mkstemp(dir=str(target.parent), prefix="." + target.name, suffix=".tmp")
    os.close(fd)
    return Path(tmp)


def commit_staged(staged):
    """Rename every staged temp file over its target (``staged``: target → temp)."""
    for target, tmp in staged.items():
        os.replace(str(tmp), str(target))


def discard_staged(staged):
    for tmp in staged.values():
        if tmp.exists():
            tmp.unlink()


class VerificationKeyStore:
    """TinyDB 테이블에 저장된 버전별 검증 키.

    패키지 manifest는 읽기 전용(``access_mode="r"``)으로 연다. 쓰기 가능한
    store는 ``add`` 마다 바로 파일에 반영된다.
    """

    def __init__(self, path=MANIFEST_PATH, access_mode="r+"):
        self.path = Path(path)
        self.db = TinyDB(str(self.path), access_mode=access_mode, indent=2, sort_keys=True)
        self.table = self.db.table(_TABLE)
        try:
            entries = self.table.all()
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            self.db.close()
            raise EmbeddedKeyError("unreadable manifest {}: {}".format(self.path, exc)) from exc
        for entry in entries:
            if not _FIELDS <= set(entry):
                self.db.close()
                raise EmbeddedKeyError("malformed manifest entry: {!r}".format(dict(entry)))

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        self.db.close()

    @property
    def entries(self):
        return self.table.all()

    def circuits(self):
        return sorted({e["circuit"] for e in self.table.all()})

    def versions(self, circuit):
        return sorted(e["version"] for e in self.table.search(VerificationKey.circuit == circuit))

    def add(self, circuit, data):
        data = bytes(data)
        key_digest = digest(data)
        found = self.table.get(
            (VerificationKey.circuit == circuit) & (VerificationKey.sha256 == key_digest)
        )
        if found is not None:
            return found
        version = max(self.versions(circuit), default=0) + 1
        entry = {
            "circuit": circuit,
            "version": version,
            "sha256": key_digest,
            "data": data.hex(),
        }
        self.table.insert(entry)
        logger.info("%s verification key v%d: sha256 %s", circuit, version, key_digest)
        return entry

    def get(self, circuit, version=None):
        """Bytes of ``circuit``'s key; the latest version unless one is named."""
        versions = self.versions(circuit)
        if not versions:
            raise MissingVerificationKeyError(
                "no verification key embedded for {!r}".format(circuit)
            )
        if version is None:
            version = versions[-1]
        entry = self.table.get(
            (VerificationKey.circuit == circuit) & (VerificationKey.version == version)
        )
        if entry is None:
            raise MissingVerificationKeyError(
                "no version {} of the {!r} verification key".format(version, circuit)
            )
        return _checked_bytes(entry)


def _checked_bytes(entry):
    try:
        data = bytes.fromhex(entry["data"])
    except ValueError as exc:
        raise EmbeddedKeyError("{} v{}: data is not hex".format(
            entry["circuit"], entry["version"])) from exc
    if digest(data) != entry["sha256"]:
        raise EmbeddedKeyError(
            "{} v{}: sha256 mismatch, the embedded key is corrupt".format(
                entry["circuit"], entry["version"]
            )
        )
    return data


@lru_cache(maxsize=None)
def embedded_keys():
    """Latest packaged key per circuit, loaded once per process."""
    if not MANIFEST_PATH.exists():
        return MappingProxyType({})
    with VerificationKeyStore(MANIFEST_PATH, access_mode="r") as store:
        return MappingProxyType({name: store.get(name) for name in store.circuits()})


def embedded_verification_key(variant):
    name = getattr(variant, "value", variant)
    keys = embedded_keys()
    if name not in keys:
        raise MissingVerificationKeyError(
            "no verification key embedded for {!r}; generate it with "
            "write_zkp_keys(out_dir, embed=True)".format(name)
        )
    return keys[name]
