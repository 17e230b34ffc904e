"""
BLS12-381 유한체 및 타원곡선 헬퍼
=================================

**스칼라 필드 FR**:
  BLS12-381의 스칼라 필드. 제약 시스템, witness, setup의 toxic waste가
  모두 이 필드 위에 있다.
  - 위수(order) r ≈ 2^255, 소수체(prime field)

**그룹**:
  ``py_ecc.optimized_bls12_381`` 의 사영 좌표 (x, y, z) G1, G2 점.
  두 점의 동일성은 ``eq`` 로 판단한다. 튜플 비교는 표현에 따라 달라진다.

**고정 기저 테이블(Fixed-base tables)**:
  setup은 같은 두 생성원에 수천 개의 스칼라를 곱한다.
  ``j · 2^(w·i) · base`` 테이블을 쓰면 곱셈 하나가 최대
  ``ceil(255 / w)`` 번의 덧셈이 된다.

**다중 스칼라 곱(MSM)**:
  prover는 서로 다른 점들에 대해 Σ sᵢ·Pᵢ 를 계산한다. 버킷(Pippenger)
  누적으로 doubling을 모든 항이 공유한다.

사용 예시:
    >>> from zkkeys.field import FR, G1, ec_mul
    >>> P = ec_mul(G1, FR(5))  # 5·G1
"""

from py_ecc import optimized_bls12_381 as bls12_381
from py_ecc.fields import bls12_381_FQ as FQ


class FR(FQ):
    """Element of the BLS12-381 scalar field."""
    field_modulus = bls12_381.curve_order


CURVE_ORDER = bls12_381.curve_order
FIELD_MODULUS = bls12_381.field_modulus
SCALAR_BITS = CURVE_ORDER.bit_length()

G1 = bls12_381.G1
G2 = bls12_381.G2
Z1 = bls12_381.Z1
Z2 = bls12_381.Z2

# Elliptic Curve operations
add = bls12_381.add
double = bls12_381.double
neg = bls12_381.neg
eq = bls12_381.eq
is_inf = bls12_381.is_inf
normalize = bls12_381.normalize

WINDOW_BITS = 4


def ec_mul(point, scalar):
    """scalar · point for a G1 or G2 point."""
    if isinstance(scalar, FQ):
        scalar = int(scalar)
    return bls12_381.multiply(point, scalar % CURVE_ORDER)


def infinity_like(point):
    """Point at infinity of the group ``point`` belongs to."""
    one, zero = point[0].one(), point[0].zero()
    return (one, one, zero)


def is_on_curve(point):
    """Curve membership for either group, dispatched on the coordinate type."""
    if isinstance(point[0], bls12_381.FQ2):
        return bls12_381.is_on_curve(point, bls12_381.b2)
    return bls12_381.is_on_curve(point, bls12_381.b)


class FixedBaseTable:
    """한 기저점의 반복 스칼라 곱을 위한 window 사전 계산.

    rows[i][j] = j · 2^(w·i) · base, so a scalar with base-2^w digits dᵢ maps to
    Σ rows[i][dᵢ].
    """

    def __init__(self, base, window_bits=WINDOW_BITS):
        self.base = base
        self.window_bits = window_bits
        self.zero = infinity_like(base)
        self.rows = []
        row_base = base
        num_windows = -(-SCALAR_BITS // window_bits)
        for _ in range(num_windows):
            row = [self.zero]
            for _ in range((1 << window_bits) - 1):
                row.append(add(row[-1], row_base))
            self.rows.append(row)
            # 2^w · row_base starts the next window
            row_base = add(row[-1], row_base)

    def mul(self, scalar):
        k = int(scalar) % CURVE_ORDER
        mask = (1 << self.window_bits) - 1
        acc = self.zero
        for row in self.rows:
            if not k:
                break
            digit = k & mask
            if digit:
                acc = add(acc, row[digit])
            k >>= self.window_bits
        return acc

    def batch_mul(self, scalars):
        return [self.mul(s) for s in scalars]


def _msm_window_bits(n):
    if n < 32:
        return 3
    return n.bit_length() - 3


def multi_scalar_mul(points, scalars, zero):
    """Σ scalars[i] · points[i] using bucket accumulation.

    Args:
        points: G1 or G2 points (projective)
        scalars: FR elements or ints, same length as ``points``
        zero: point at infinity of the group, returned for an empty sum

    Returns:
        the accumulated point
    """
    if len(points) != len(scalars):
        raise ValueError(
            "msm length mismatch: {} points, {} scalars".format(len(points), len(scalars))
        )
    terms = []
    for point, scalar in zip(points, scalars):
        k = int(scalar) % CURVE_ORDER
        if k and not is_inf(point):
            terms.append((point, k))
    if not terms:
        return zero

    c = _msm_window_bits(len(terms))
    mask = (1 << c) - 1
    window_sums = []
    for shift in range(0, SCALAR_BITS, c):
        buckets = [None] * mask
        for point, k in terms:
            digit = (k >> shift) & mask
            if digit:
                slot = buckets[digit - 1]
                buckets[digit - 1] = point if slot is None else add(slot, point)
        # Σ j·bucket[j] via running sums
        running = zero
        total = zero
        for bucket in reversed(buckets):
            if bucket is not None:
                running = add(running, bucket)
            total = add(total, running)
        window_sums.append(total)

    result = zero
    for total in reversed(window_sums):
        if not is_inf(result):
            for _ in range(c):
                result = double(result)
        result = add(result, total)
    return result
