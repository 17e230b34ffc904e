"""필드 원소 가젯: 값과 그 선형 결합(linear combination)을 함께 들고 다닌다.

덧셈, 뺄셈, 상수배는 선형 결합만 바꾸므로 공짜이다.
곱셈마다 witness 하나와 제약 하나가 추가된다.
"""

from zkkeys.field import FR
from zkkeys.r1cs import LinearCombination, ONE


class Num:

    __slots__ = ("lc", "value")

    def __init__(self, lc, value):
        self.lc = lc
        self.value = FR(value)

    @classmethod
    def alloc(cls, cs, value):
        value = FR(value)
        return cls(LinearCombination.of(cs.new_witness_variable(value)), value)

    @classmethod
    def input(cls, cs, value):
        value = FR(value)
        return cls(LinearCombination.of(cs.new_input_variable(value)), value)

    @classmethod
    def constant(cls, value):
        value = FR(value)
        return cls(LinearCombination.constant(int(value)), value)

    def _coerce(self, other):
        if isinstance(other, Num):
            return other
        return Num.constant(other)

    def __add__(self, other):
        other = self._coerce(other)
        return Num(self.lc + other.lc, self.value + other.value)

    __radd__ = __add__

    def __sub__(self, other):
        other = self._coerce(other)
        return Num(self.lc - other.lc, self.value - other.value)

    def __neg__(self):
        return Num(-self.lc, -self.value)

    def scale(self, coeff):
        return Num(self.lc.scale(coeff), self.value * FR(coeff))

    def mul(self, cs, other, name=None):
        other = self._coerce(other)
        product = Num.alloc(cs, self.value * other.value)
        cs.enforce(self.lc, other.lc, product.lc, name)
        return product

    def square(self, cs, name=None):
        return self.mul(cs, self, name)

    def pow5(self, cs, name="pow5"):
        x2 = self.square(cs, name + "/x2")
        x4 = x2.square(cs, name + "/x4")
        return x4.mul(cs, self, name + "/x5")

    def enforce_equal(self, cs, other, name=None):
        other = self._coerce(other)
        cs.enforce(self.lc, LinearCombination.of(ONE), other.lc, name)

    def enforce_boolean(self, cs, name=None):
        # b · (b - 1) = 0
        cs.enforce(self.lc, self.lc - LinearCombination.of(ONE), LinearCombination.zero(), name)

    def __repr__(self):
        return "Num({!r})".format(self.value)
