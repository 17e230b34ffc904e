"""
커밋먼트 스킴
=============

    com(m₀..m₃; r) = P_r(g₀·m₀ + g₁·m₁ + g₂·m₂ + g₃·m₃)

P_r은 커밋먼트 전용 라운드 상수를 쓰는 keyed permutation이고, gᵢ는
샘플링한 생성원이다. 메시지는 순서대로 asset id, 금액, 소유자 public key,
serial nonce rho이다.

소유자 public key는 같은 permutation을 키 0으로 적용해 얻는다:
pk = P_0(sk).
"""

from dataclasses import dataclass

from zkkeys.field import FR
from zkkeys.gadgets import Num
from zkkeys.primitives.permutation import (
    ROUNDS,
    permute,
    permute_gadget,
    sample_round_constants,
)

NUM_MESSAGES = 4


@dataclass(frozen=True)
class CommitParam:
    generators: tuple
    round_constants: tuple

    @classmethod
    def setup(cls, rng, rounds=ROUNDS):
        generators = tuple(rng.gen_scalar() for _ in range(NUM_MESSAGES))
        return cls(generators, sample_round_constants(rng, rounds))


def _check_arity(messages):
    if len(messages) != NUM_MESSAGES:
        raise ValueError(
            "commitment takes {} messages, got {}".format(NUM_MESSAGES, len(messages))
        )


def commit(param, messages, randomness):
    _check_arity(messages)
    packed = FR(0)
    for g, m in zip(param.generators, messages):
        packed = packed + g * FR(m)
    return permute(param.round_constants, packed, randomness)


def commit_gadget(cs, param, messages, randomness, name="commit"):
    _check_arity(messages)
    packed = Num.constant(0)
    for g, m in zip(param.generators, messages):
        packed = packed + m.scale(g)
    return permute_gadget(cs, param.round_constants, packed, randomness, name)


def derive_public_key(param, secret):
    return permute(param.round_constants, secret, 0)


def derive_public_key_gadget(cs, param, secret, name="public_key"):
    return permute_gadget(cs, param.round_constants, secret, Num.constant(0), name)
