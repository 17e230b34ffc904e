"""Groth16 verifier.

e(A, B) = e(α, β) · e(Σ xᵢ·γ_abcᵢ, γ) · e(C, δ) 를 Miller loop 곱
e(-A, B)·e(α, β)·e(acc, γ)·e(C, δ) 하나와 final exponentiation 한 번으로
확인한다.
"""

from py_ecc import optimized_bls12_381 as bls12_381

from zkkeys.field import add, ec_mul, neg


def prepare_inputs(vk, public_inputs):
    """γ_abc₀ + Σ xᵢ·γ_abcᵢ₊₁."""
    if len(public_inputs) != vk.num_public_inputs:
        raise ValueError(
            "verifying key expects {} public inputs, got {}".format(
                vk.num_public_inputs, len(public_inputs)
            )
        )
    acc = vk.gamma_abc_g1[0]
    for x, base in zip(public_inputs, vk.gamma_abc_g1[1:]):
        acc = add(acc, ec_mul(base, x))
    return acc


def verify_proof(vk, proof, public_inputs):
    acc = prepare_inputs(vk, public_inputs)
    f = bls12_381.pairing(proof.b, neg(proof.a), final_exponentiate=False)
    f = f * bls12_381.pairing(vk.beta_g2, vk.alpha_g1, final_exponentiate=False)
    f = f * bls12_381.pairing(vk.gamma_g2, acc, final_exponentiate=False)
    f = f * bls12_381.pairing(vk.delta_g2, proof.c, final_exponentiate=False)
    return bls12_381.final_exponentiate(f) == bls12_381.FQ12.one()
