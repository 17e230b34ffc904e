"""합성 원장(Synthetic ledger): 샘플링한 자산들의 커밋먼트가 원장을 이룬다.

실제로 소비되는 레코드는 두 개뿐이고, 나머지는 멤버십 증명에 현실적인
익명 집합(anonymity set)을 주는 decoy이다.
"""

import logging
from dataclasses import dataclass

from zkkeys.asset import SECRET_KEY_SIZE, AssetRecord
from zkkeys.config import LEDGER_SIZE, SENDER_INDICES, TEST_ASSET_ID, VALUE_OFFSET

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyntheticLedger:
    records: tuple
    # insertion order == sampling order; membership paths are positional
    commitments: tuple

    def __len__(self):
        return len(self.commitments)

    def senders(self, indices=SENDER_INDICES):
        return tuple(self.records[i] for i in indices)


def build_ledger(commit_param, rng, size=LEDGER_SIZE, asset_id=TEST_ASSET_ID,
                 value_offset=VALUE_OFFSET):
    """Sample ``size`` records from ``rng``; record e holds value e + offset."""
    records = []
    for e in range(size):
        sk = rng.fill_bytes(SECRET_KEY_SIZE)
        records.append(AssetRecord.sample(commit_param, sk, asset_id, e + value_offset, rng))
    ledger = SyntheticLedger(
        records=tuple(records),
        commitments=tuple(r.commitment for r in records),
    )
    logger.info("sampled a ledger of %d commitments", len(ledger))
    return ledger
