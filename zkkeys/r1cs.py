"""
Rank-1 제약 시스템(R1CS)
========================

모든 제약은 ⟨A, z⟩ · ⟨B, z⟩ = ⟨C, z⟩ 꼴이다. z는 전체 할당으로,
instance 벡터(상수 ONE, 그다음 공개 입력) 뒤에 witness 벡터가 온다.

회로는 ``generate_constraints(cs)`` 로 시스템을 채운다. 같은 시스템이
할당이 모든 제약을 만족하는지 답하고, QAP 변환용 희소 A, B, C 행렬을
내보낸다.

사용 예시 (x³ + x + 5 = 35, x = 3):
    >>> cs = ConstraintSystem()
    >>> x = cs.new_witness_variable(3)
    >>> x2 = cs.new_witness_variable(9)
    >>> cs.enforce(LinearCombination.of(x), LinearCombination.of(x), LinearCombination.of(x2))
    >>> cs.is_satisfied()
    True
"""

from collections import namedtuple
from contextlib import contextmanager

from zkkeys.field import FR, CURVE_ORDER

INSTANCE = "instance"
WITNESS = "witness"

Variable = namedtuple("Variable", ["kind", "index"])

ONE = Variable(INSTANCE, 0)


class LinearCombination:
    """Σ coeffᵢ · variableᵢ with integer coefficients reduced mod r."""

    __slots__ = ("terms",)

    def __init__(self, terms=None):
        self.terms = {}
        for var, coeff in (terms or ()):
            self._accumulate(var, coeff)

    def _accumulate(self, var, coeff):
        value = (self.terms.get(var, 0) + int(coeff)) % CURVE_ORDER
        if value:
            self.terms[var] = value
        else:
            self.terms.pop(var, None)

    @classmethod
    def zero(cls):
        return cls()

    @classmethod
    def of(cls, var, coeff=1):
        return cls([(var, coeff)])

    @classmethod
    def constant(cls, value):
        return cls([(ONE, value)])

    def copy(self):
        lc = LinearCombination()
        lc.terms = dict(self.terms)
        return lc

    def __add__(self, other):
        lc = self.copy()
        for var, coeff in other.terms.items():
            lc._accumulate(var, coeff)
        return lc

    def __sub__(self, other):
        lc = self.copy()
        for var, coeff in other.terms.items():
            lc._accumulate(var, -coeff)
        return lc

    def __neg__(self):
        return self.scale(-1)

    def scale(self, coeff):
        c = int(coeff) % CURVE_ORDER
        lc = LinearCombination()
        if c:
            lc.terms = {var: v * c % CURVE_ORDER for var, v in self.terms.items()}
        return lc

    def __len__(self):
        return len(self.terms)

    def __repr__(self):
        return "LinearCombination({!r})".format(sorted(self.terms.items()))


class ConstraintSystem:
    """할당(assignment)과 제약들.

    Attributes:
        instance_assignment: [1, public inputs...] as FR
        witness_assignment: private values as FR
        constraints: (a, b, c, name) tuples
    """

    def __init__(self):
        self.instance_assignment = [FR(1)]
        self.witness_assignment = []
        self.constraints = []
        self._namespace = []

    @property
    def num_instance_variables(self):
        return len(self.instance_assignment)

    @property
    def num_witness_variables(self):
        return len(self.witness_assignment)

    @property
    def num_constraints(self):
        return len(self.constraints)

    @contextmanager
    def namespace(self, name):
        """Prefix the names of the constraints enforced inside the block."""
        self._namespace.append(name)
        try:
            yield self
        finally:
            self._namespace.pop()

    def _qualified(self, name):
        if name is None:
            name = "constraint_{}".format(len(self.constraints))
        return "/".join(self._namespace + [name])

    def new_input_variable(self, value):
        self.instance_assignment.append(FR(value))
        return Variable(INSTANCE, len(self.instance_assignment) - 1)

    def new_witness_variable(self, value):
        self.witness_assignment.append(FR(value))
        return Variable(WITNESS, len(self.witness_assignment) - 1)

    def enforce(self, a, b, c, name=None):
        self.constraints.append((a, b, c, self._qualified(name)))

    def assigned_value(self, var):
        if var.kind == INSTANCE:
            return self.instance_assignment[var.index]
        return self.witness_assignment[var.index]

    def evaluate(self, lc):
        acc = 0
        for var, coeff in lc.terms.items():
            acc += coeff * int(self.assigned_value(var))
        return FR(acc)

    def which_is_unsatisfied(self):
        """Name of the first violated constraint, or None."""
        for a, b, c, name in self.constraints:
            if self.evaluate(a) * self.evaluate(b) != self.evaluate(c):
                return name
        return None

    def is_satisfied(self):
        return self.which_is_unsatisfied() is None

    def instance_values(self):
        """Public inputs, without the leading ONE."""
        return list(self.instance_assignment[1:])

    def full_assignment(self):
        return self.instance_assignment + self.witness_assignment

    def column(self, var):
        """Position of ``var`` in the full assignment."""
        if var.kind == INSTANCE:
            return var.index
        return self.num_instance_variables + var.index

    def matrices(self):
        """Sparse A, B, C: one list of (coeff, column) pairs per constraint."""
        a_rows, b_rows, c_rows = [], [], []
        for a, b, c, _ in self.constraints:
            a_rows.append([(coeff, self.column(var)) for var, coeff in a.terms.items()])
            b_rows.append([(coeff, self.column(var)) for var, coeff in b.terms.items()])
            c_rows.append([(coeff, self.column(var)) for var, coeff in c.terms.items()])
        return a_rows, b_rows, c_rows
