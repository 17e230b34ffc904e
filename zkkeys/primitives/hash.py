"""void number와 원장 Merkle tree에 쓰는 two-to-one 해시."""

from dataclasses import dataclass

from zkkeys.gadgets import Num
from zkkeys.primitives.permutation import (
    ROUNDS,
    permute,
    permute_gadget,
    sample_round_constants,
)


@dataclass(frozen=True)
class HashParam:
    round_constants: tuple

    @classmethod
    def setup(cls, rng, rounds=ROUNDS):
        return cls(sample_round_constants(rng, rounds))


def evaluate(param, left, right):
    """H(left, right): ``left`` keyed by ``right``."""
    return permute(param.round_constants, left, right)


def evaluate_gadget(cs, param, left, right, name="hash"):
    if not isinstance(right, Num):
        right = Num.constant(right)
    return permute_gadget(cs, param.round_constants, left, right, name)
