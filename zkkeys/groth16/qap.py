"""
R1CS → QAP
==========

평가 도메인은 1..n, n = num_constraints + num_instance_variables.
1..m 행은 회로 제약이고, 나머지 행은 instance 변수 x_i마다 ``x_i · 0 = 0``
을 추가해 할당의 공개 부분이 나머지와 선형 독립이 되게 한다.

``instance_map_with_evaluation`` 은 각 열의 A, B, C 다항식을 tau에서 평가한
값을 준다 (setup 측). ``witness_map`` 은 구체적인 할당에 대해
h(X) = (A(X)·B(X) - C(X)) / Z(X) 의 계수를 준다 (prover 측).
"""

from zkkeys.errors import SynthesisError
from zkkeys.field import FR
from zkkeys.polynomial import (
    divide_polys,
    interpolate_many,
    lagrange_at,
    multiply_polys,
    subtract_polys,
    vanishing_at,
    vanishing_poly,
)
from zkkeys.r1cs import ConstraintSystem


def synthesize(circuit):
    cs = ConstraintSystem()
    circuit.generate_constraints(cs)
    return cs


def domain_size(cs):
    return cs.num_constraints + cs.num_instance_variables


def instance_map_with_evaluation(cs, tau):
    """Column polynomials at tau.

    Returns:
        (a, b, c, zt, n): per-column evaluations, Z(tau) and the domain size
    """
    n = domain_size(cs)
    lagrange = lagrange_at(tau, n)
    num_columns = cs.num_instance_variables + cs.num_witness_variables
    a = [FR(0)] * num_columns
    b = [FR(0)] * num_columns
    c = [FR(0)] * num_columns

    a_rows, b_rows, c_rows = cs.matrices()
    for row, (ra, rb, rc) in enumerate(zip(a_rows, b_rows, c_rows)):
        u = lagrange[row]
        for coeff, col in ra:
            a[col] = a[col] + u * coeff
        for coeff, col in rb:
            b[col] = b[col] + u * coeff
        for coeff, col in rc:
            c[col] = c[col] + u * coeff

    for i in range(cs.num_instance_variables):
        a[i] = a[i] + lagrange[cs.num_constraints + i]

    return a, b, c, vanishing_at(tau, n), n


def _evaluations(cs):
    n = domain_size(cs)
    a_eval, b_eval, c_eval = [], [], []
    for a, b, c, _ in cs.constraints:
        a_eval.append(cs.evaluate(a))
        b_eval.append(cs.evaluate(b))
        c_eval.append(cs.evaluate(c))
    a_eval += cs.instance_assignment
    b_eval += [FR(0)] * cs.num_instance_variables
    c_eval += [FR(0)] * cs.num_instance_variables
    if len(a_eval) != n:
        raise SynthesisError(
            "{} evaluation rows for a domain of {} points".format(len(a_eval), n)
        )
    return a_eval, b_eval, c_eval, n


def witness_map(cs):
    """Coefficients h_0..h_{n-2} of the quotient polynomial."""
    a_eval, b_eval, c_eval, n = _evaluations(cs)
    a_poly, b_poly, c_poly = interpolate_many([a_eval, b_eval, c_eval], n)
    p = subtract_polys(multiply_polys(a_poly, b_poly), c_poly)
    h, remainder = divide_polys(p, vanishing_poly(n))
    if any(coeff != 0 for coeff in remainder):
        raise SynthesisError("assignment does not satisfy the constraint system")
    return h + [FR(0)] * (n - 1 - len(h))
