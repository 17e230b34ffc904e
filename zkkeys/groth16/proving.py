"""Groth16 prover.

    A = α + Σ zᵢ·Aᵢ(τ) + r·δ
    B = β + Σ zᵢ·Bᵢ(τ) + s·δ
    C = Σ wⱼ·Lⱼ + Σ hₖ·τ^k·Z(τ)/δ + s·A + r·B - r·s·δ
"""

from zkkeys.field import Z1, Z2, add, ec_mul, multi_scalar_mul, neg
from zkkeys.groth16.keys import Proof
from zkkeys.groth16.qap import synthesize, witness_map


def proof_a(pk, assignment, r):
    proof_A = add(pk.vk.alpha_g1, multi_scalar_mul(pk.a_query, assignment, Z1))
    return add(proof_A, ec_mul(pk.delta_g1, r))


def proof_b(pk, assignment, s):
    proof_B = add(pk.vk.beta_g2, multi_scalar_mul(pk.b_g2_query, assignment, Z2))
    return add(proof_B, ec_mul(pk.vk.delta_g2, s))


def proof_b_g1(pk, assignment, s):
    temp_proof_B = add(pk.beta_g1, multi_scalar_mul(pk.b_g1_query, assignment, Z1))
    return add(temp_proof_B, ec_mul(pk.delta_g1, s))


def proof_c(pk, witness, h, prf_A, prf_B_g1, r, s):
    proof_C = multi_scalar_mul(pk.l_query, witness, Z1)
    proof_C = add(proof_C, multi_scalar_mul(pk.h_query, h, Z1))
    proof_C = add(proof_C, ec_mul(prf_A, s))
    proof_C = add(proof_C, ec_mul(prf_B_g1, r))
    return add(proof_C, neg(ec_mul(pk.delta_g1, r * s)))


def create_proof(pk, circuit, rng):
    cs = synthesize(circuit)
    r = rng.gen_scalar()
    s = rng.gen_scalar()

    h = witness_map(cs)
    assignment = cs.full_assignment()

    prf_A = proof_a(pk, assignment, r)
    prf_B = proof_b(pk, assignment, s)
    prf_B_g1 = proof_b_g1(pk, assignment, s)
    prf_C = proof_c(pk, cs.witness_assignment, h, prf_A, prf_B_g1, r, s)
    return Proof(a=prf_A, b=prf_B, c=prf_C)
