"""
Tests for the constraint system and the Num gadget.

Covers:
- LinearCombination arithmetic (cancellation, scaling, constants)
- satisfaction checks and the name of the first failing constraint
- namespaces in constraint names
- sparse matrix export (column layout: instance first, then witness)
- Num multiplication, pow5, boolean and equality constraints
"""

import pytest

from zkkeys.field import CURVE_ORDER, FR
from zkkeys.gadgets import Num
from zkkeys.r1cs import (
    INSTANCE,
    ONE,
    WITNESS,
    ConstraintSystem,
    LinearCombination,
    Variable,
)


@pytest.fixture
def cubic_cs():
    """x³ + x + 5 = 35 with x = 3."""
    cs = ConstraintSystem()
    x = Num.alloc(cs, 3)
    out = Num.input(cs, 35)
    x2 = x.square(cs, "x2")
    x3 = x2.mul(cs, x, "x3")
    (x3 + x + 5).enforce_equal(cs, out, "out")
    return cs


class TestLinearCombination:

    def test_cancellation_drops_term(self):
        v = Variable(WITNESS, 0)
        lc = LinearCombination.of(v, 3) - LinearCombination.of(v, 3)
        assert len(lc) == 0

    def test_coefficients_reduced(self):
        v = Variable(WITNESS, 0)
        lc = LinearCombination.of(v, CURVE_ORDER + 2)
        assert lc.terms == {v: 2}

    def test_constant_uses_one(self):
        lc = LinearCombination.constant(7)
        assert lc.terms == {ONE: 7}

    def test_scale_and_negate(self):
        v = Variable(INSTANCE, 1)
        lc = LinearCombination.of(v, 2).scale(5)
        assert lc.terms == {v: 10}
        assert (-lc).terms == {v: CURVE_ORDER - 10}
        assert len(lc.scale(0)) == 0

    def test_copy_is_independent(self):
        v = Variable(WITNESS, 0)
        lc = LinearCombination.of(v)
        other = lc.copy()
        other.terms[v] = 9
        assert lc.terms[v] == 1


class TestConstraintSystem:

    def test_counts(self, cubic_cs):
        assert cubic_cs.num_instance_variables == 2
        assert cubic_cs.num_witness_variables == 3
        assert cubic_cs.num_constraints == 3

    def test_satisfied(self, cubic_cs):
        assert cubic_cs.is_satisfied()
        assert cubic_cs.which_is_unsatisfied() is None

    def test_instance_values(self, cubic_cs):
        assert cubic_cs.instance_values() == [FR(35)]
        assert cubic_cs.full_assignment() == [FR(v) for v in (1, 35, 3, 9, 27)]

    def test_first_failing_constraint_named(self):
        cs = ConstraintSystem()
        x = Num.alloc(cs, 3)
        out = Num.input(cs, 36)
        x2 = x.square(cs, "x2")
        x3 = x2.mul(cs, x, "x3")
        (x3 + x + 5).enforce_equal(cs, out, "out")
        assert not cs.is_satisfied()
        assert cs.which_is_unsatisfied() == "out"

    def test_namespaces(self):
        cs = ConstraintSystem()
        with cs.namespace("outer"):
            with cs.namespace("inner"):
                Num.alloc(cs, 2).enforce_equal(cs, 3, "eq")
            Num.alloc(cs, 1).enforce_boolean(cs)
        names = [c[3] for c in cs.constraints]
        assert names[0] == "outer/inner/eq"
        assert names[1] == "outer/constraint_1"
        assert cs.which_is_unsatisfied() == "outer/inner/eq"

    def test_matrices_columns(self, cubic_cs):
        a_rows, b_rows, c_rows = cubic_cs.matrices()
        assert len(a_rows) == len(b_rows) == len(c_rows) == 3
        # x2 = x · x; x is witness 0 → column 2, x2 is witness 1 → column 3
        assert a_rows[0] == [(1, 2)]
        assert b_rows[0] == [(1, 2)]
        assert c_rows[0] == [(1, 3)]
        # x3 + x + 5 = out: C side is the public input in column 1
        assert c_rows[2] == [(1, 1)]
        assert sorted(a_rows[2]) == [(1, 2), (1, 4), (5, 0)]

    def test_evaluate(self, cubic_cs):
        lc = LinearCombination.of(Variable(WITNESS, 2)) + LinearCombination.constant(8)
        assert cubic_cs.evaluate(lc) == 35


class TestNum:

    def test_free_linear_ops(self):
        cs = ConstraintSystem()
        a = Num.alloc(cs, 5)
        b = Num.alloc(cs, 7)
        c = (a + b).scale(3) - 2 + (-a)
        assert c.value == 29
        assert cs.num_constraints == 0
        assert (4 + a).value == 9

    def test_pow5(self):
        cs = ConstraintSystem()
        y = Num.alloc(cs, 3).pow5(cs, "p")
        assert y.value == 243
        assert cs.num_constraints == 3
        assert [c[3] for c in cs.constraints] == ["p/x2", "p/x4", "p/x5"]
        assert cs.evaluate(y.lc) == 243
        assert cs.is_satisfied()

    def test_boolean(self):
        cs = ConstraintSystem()
        Num.alloc(cs, 1).enforce_boolean(cs, "one")
        Num.alloc(cs, 0).enforce_boolean(cs, "zero")
        assert cs.is_satisfied()
        Num.alloc(cs, 2).enforce_boolean(cs, "two")
        assert cs.which_is_unsatisfied() == "two"

    def test_constant_mul(self):
        cs = ConstraintSystem()
        p = Num.alloc(cs, 6).mul(cs, 7, "times_seven")
        assert p.value == 42
        assert cs.is_satisfied()
