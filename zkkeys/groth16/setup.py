"""
Groth16 setup
=============

toxic waste (alpha, beta, gamma, delta, tau)를 호출자의 RNG에서 이 순서로
뽑는다. tau가 평가 도메인 안에 있으면 다시 뽑는다.

    sigma11 = [α, β, δ]·G1
    sigma21 = [β, γ, δ]·G2
    sigma13 = (β·Aᵢ(τ) + α·Bᵢ(τ) + Cᵢ(τ)) / γ · G1   instance 열
    sigma14 = (β·Aᵢ(τ) + α·Bᵢ(τ) + Cᵢ(τ)) / δ · G1   witness 열
    sigma15 = τ^i · Z(τ) / δ · G1                     i = 0..n-2

그리고 모든 열에 대한 query 벡터 Aᵢ(τ)·G1, Bᵢ(τ)·G1, Bᵢ(τ)·G2.
"""

import logging

from zkkeys.errors import SetupError
from zkkeys.field import FR, G1, G2, FixedBaseTable
from zkkeys.groth16.keys import ProvingKey, VerifyingKey
from zkkeys.groth16.qap import domain_size, instance_map_with_evaluation, synthesize

logger = logging.getLogger(__name__)


def sample_toxic_waste(rng, n):
    alpha = rng.gen_scalar()
    beta = rng.gen_scalar()
    gamma = rng.gen_scalar()
    delta = rng.gen_scalar()
    tau = rng.gen_scalar()
    while 1 <= int(tau) <= n:
        tau = rng.gen_scalar()
    if gamma == 0 or delta == 0:
        raise SetupError("sampled a zero gamma or delta")
    return alpha, beta, gamma, delta, tau


def sigma11(g1_table, alpha, beta, delta):
    return g1_table.batch_mul([alpha, beta, delta])


def sigma21(g2_table, beta, gamma, delta):
    return g2_table.batch_mul([beta, gamma, delta])


def _combined(alpha, beta, a, b, c, columns):
    return [beta * a[i] + alpha * b[i] + c[i] for i in columns]


def sigma13(g1_table, num_instance, alpha, beta, gamma, a, b, c):
    gamma_inv = FR(1) / gamma
    vals = _combined(alpha, beta, a, b, c, range(num_instance))
    return g1_table.batch_mul([v * gamma_inv for v in vals])


def sigma14(g1_table, num_instance, alpha, beta, delta, a, b, c):
    delta_inv = FR(1) / delta
    vals = _combined(alpha, beta, a, b, c, range(num_instance, len(a)))
    return g1_table.batch_mul([v * delta_inv for v in vals])


def sigma15(g1_table, n, tau, zt, delta):
    scalars = []
    acc = zt / delta
    for _ in range(n - 1):
        scalars.append(acc)
        acc = acc * tau
    return g1_table.batch_mul(scalars)


def generate_parameters(circuit, rng):
    """Run the setup for ``circuit`` and return the proving key (vk inside)."""
    cs = synthesize(circuit)
    n = domain_size(cs)
    alpha, beta, gamma, delta, tau = sample_toxic_waste(rng, n)

    a, b, c, zt, n = instance_map_with_evaluation(cs, tau)
    if zt == 0:
        raise SetupError("tau landed on the evaluation domain")
    logger.info(
        "setup: %d constraints, %d instance and %d witness variables, domain %d",
        cs.num_constraints, cs.num_instance_variables, cs.num_witness_variables, n,
    )

    g1_table = FixedBaseTable(G1)
    g2_table = FixedBaseTable(G2)

    alpha_g1, beta_g1, delta_g1 = sigma11(g1_table, alpha, beta, delta)
    beta_g2, gamma_g2, delta_g2 = sigma21(g2_table, beta, gamma, delta)

    logger.debug("setup: computing %d A and B queries", len(a))
    a_query = g1_table.batch_mul(a)
    b_g1_query = g1_table.batch_mul(b)
    b_g2_query = g2_table.batch_mul(b)

    gamma_abc_g1 = sigma13(g1_table, cs.num_instance_variables, alpha, beta, gamma, a, b, c)
    l_query = sigma14(g1_table, cs.num_instance_variables, alpha, beta, delta, a, b, c)
    h_query = sigma15(g1_table, n, tau, zt, delta)

    vk = VerifyingKey(
        alpha_g1=alpha_g1,
        beta_g2=beta_g2,
        gamma_g2=gamma_g2,
        delta_g2=delta_g2,
        gamma_abc_g1=gamma_abc_g1,
    )
    return ProvingKey(
        vk=vk,
        beta_g1=beta_g1,
        delta_g1=delta_g1,
        a_query=a_query,
        b_g1_query=b_g1_query,
        b_g2_query=b_g2_query,
        h_query=h_query,
        l_query=l_query,
    )
