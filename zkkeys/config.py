"""키 생성 실행의 고정 시드와 픽스처 값.

이 리터럴들은 테스트 벡터 계약이다: 원장 금액, 송신자 위치, 송금 금액은
재현성 테스트에서 바이트 단위로 비교된다. 내장 키와 함께만 바꿀 것.
"""

from dataclasses import dataclass, field

from zkkeys.rng import derive_seed

# ── seeds ──
HASH_PARAM_SEED = bytes([1] * 32)
COMMIT_PARAM_SEED = bytes([2] * 32)
MASTER_SEED = bytes([3] * 32)
# b"this is a seed for manta zk test"
RNG_SALT = bytes([
    0x74, 0x68, 0x69, 0x73, 0x20, 0x69, 0x73, 0x20, 0x61, 0x20, 0x73, 0x65, 0x65, 0x64, 0x20,
    0x66, 0x6f, 0x72, 0x20, 0x6d, 0x61, 0x6e, 0x74, 0x61, 0x20, 0x7a, 0x6b, 0x20, 0x74, 0x65,
    0x73, 0x74,
])

# ── synthetic ledger ──
TEST_ASSET_ID = 2
LEDGER_SIZE = 128
VALUE_OFFSET = 100
# sender's total value is (0 + 100) + (10 + 100) = 210
SENDER_INDICES = (0, 10)

# ── receivers ──
# receiver's total value is also 210
TRANSFER_AMOUNTS = (80, 130)
RECLAIM_RECEIVER_AMOUNT = 80
RECLAIM_VALUE = 130

# ── output artifacts ──
TRANSFER_PK_FILE = "transfer_pk.bin"
RECLAIM_PK_FILE = "reclaim_pk.bin"
VK_MANIFEST_FILE = "verification_keys.json"


@dataclass(frozen=True)
class GenerationConfig:
    """키 생성 실행이 의존하는 모든 값.

    ``DEFAULT_CONFIG`` 는 배포된 키를 재현한다. 테스트는 시드 하나만 바꾼
    인스턴스를 직접 만든다.
    """

    master_seed: bytes = MASTER_SEED
    rng_salt: bytes = RNG_SALT
    hash_param_seed: bytes = HASH_PARAM_SEED
    commit_param_seed: bytes = COMMIT_PARAM_SEED
    asset_id: int = TEST_ASSET_ID
    ledger_size: int = LEDGER_SIZE
    value_offset: int = VALUE_OFFSET
    sender_indices: tuple = SENDER_INDICES
    transfer_amounts: tuple = TRANSFER_AMOUNTS
    reclaim_receiver_amount: int = RECLAIM_RECEIVER_AMOUNT
    reclaim_value: int = RECLAIM_VALUE
    _circuit_seed: bytes = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        if len(self.sender_indices) != 2:
            raise ValueError("both circuits spend exactly two senders")
        for index in self.sender_indices:
            if not 0 <= index < self.ledger_size:
                raise ValueError(
                    "sender index {} outside a ledger of {} records".format(index, self.ledger_size)
                )
        object.__setattr__(self, "_circuit_seed", derive_seed(self.master_seed, self.rng_salt))

    @property
    def circuit_seed(self):
        """Seed of the ledger / circuit sampling stream and of the setup stream."""
        return self._circuit_seed


DEFAULT_CONFIG = GenerationConfig()
