"""
자산, 송신자, 수신자
====================

**AssetRecord**:
  사용 가능한 자산 단위. 샘플링은 호출자의 RNG에서 serial nonce rho와
  커밋먼트 randomness를 이 순서로 뽑는다.

**SenderWitness**:
  AssetRecord에 원장 멤버십 경로와 void number를 더한 것.
  해시 파라미터, 레코드, 원장 스냅샷만으로 결정된다.

**FullReceiver → ReceiverWitness**:
  수신자는 먼저 (secret key, public key, rho)로 샘플링되고, 이후 금액을
  정해 처리(process)할 때 커밋먼트 randomness를 뽑는다.
"""

from dataclasses import dataclass

from zkkeys.errors import AssetNotInLedgerError
from zkkeys.field import FR
from zkkeys.primitives import hash as crh
from zkkeys.primitives.commitment import commit, derive_public_key
from zkkeys.primitives.merkle import MerklePath, MerkleTree

SECRET_KEY_SIZE = 32


def secret_scalar(secret_key):
    """Owner secret key bytes (little-endian) reduced into FR."""
    if len(secret_key) != SECRET_KEY_SIZE:
        raise ValueError("secret keys are {} bytes".format(SECRET_KEY_SIZE))
    return FR(int.from_bytes(secret_key, "little"))


@dataclass(frozen=True)
class AssetRecord:
    secret_key: bytes
    asset_id: int
    value: int
    public_key: FR
    rho: FR
    randomness: FR
    commitment: FR

    @classmethod
    def sample(cls, commit_param, secret_key, asset_id, value, rng):
        public_key = derive_public_key(commit_param, secret_scalar(secret_key))
        rho = rng.gen_scalar()
        randomness = rng.gen_scalar()
        commitment = commit(commit_param, [asset_id, value, public_key, rho], randomness)
        return cls(bytes(secret_key), asset_id, value, public_key, rho, randomness, commitment)

    def void_number(self, hash_param):
        return crh.evaluate(hash_param, secret_scalar(self.secret_key), self.rho)


def _ledger_position(ledger, commitment):
    for index, entry in enumerate(ledger):
        if entry == commitment:
            return index
    raise AssetNotInLedgerError("commitment {!r} is not in the ledger".format(commitment))


@dataclass(frozen=True)
class SenderWitness:
    hash_param: object
    asset: AssetRecord
    path: MerklePath
    root: FR
    void_number: FR

    @classmethod
    def build(cls, hash_param, asset, ledger):
        index = _ledger_position(ledger, asset.commitment)
        tree = MerkleTree(hash_param, list(ledger))
        return cls(
            hash_param=hash_param,
            asset=asset,
            path=tree.path(index),
            root=tree.root,
            void_number=asset.void_number(hash_param),
        )

    @property
    def value(self):
        return self.asset.value


@dataclass(frozen=True)
class ReceiverWitness:
    asset_id: int
    value: int
    public_key: FR
    rho: FR
    randomness: FR
    commitment: FR


@dataclass(frozen=True)
class PreparedReceiver:
    """송신자가 보는 수신자 정보: 어디로, 어떤 키로 지불할지."""

    commit_param: object
    asset_id: int
    public_key: FR
    rho: FR

    def process(self, value, rng):
        randomness = rng.gen_scalar()
        commitment = commit(
            self.commit_param, [self.asset_id, value, self.public_key, self.rho], randomness
        )
        return ReceiverWitness(self.asset_id, value, self.public_key, self.rho, randomness, commitment)


@dataclass(frozen=True)
class FullReceiver:
    secret_key: bytes
    prepared: PreparedReceiver

    @classmethod
    def sample(cls, commit_param, secret_key, asset_id, rng):
        public_key = derive_public_key(commit_param, secret_scalar(secret_key))
        rho = rng.gen_scalar()
        return cls(bytes(secret_key), PreparedReceiver(commit_param, asset_id, public_key, rho))
