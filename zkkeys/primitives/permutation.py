"""해시와 커밋먼트 스킴이 공유하는 keyed x⁵ permutation.

    x ← (x + k + cᵢ)^5   라운드 상수 cᵢ마다
    out = x + k

gcd(5, r - 1) = 1 이므로 x ↦ x^5 는 FR 위의 전단사이다. 회로에서는
라운드마다 곱셈 제약 세 개가 든다.
"""

from zkkeys.field import FR

ROUNDS = 6


def sample_round_constants(rng, rounds=ROUNDS):
    return tuple(rng.gen_scalar() for _ in range(rounds))


def permute(round_constants, x, key):
    x = FR(x)
    key = FR(key)
    for c in round_constants:
        x = (x + key + c) ** 5
    return x + key


def permute_gadget(cs, round_constants, x, key, name="permute"):
    """In-circuit ``permute``; ``x`` and ``key`` are Num gadgets."""
    for i, c in enumerate(round_constants):
        x = (x + key + c).pow5(cs, "{}/round_{}".format(name, i))
    return x + key
