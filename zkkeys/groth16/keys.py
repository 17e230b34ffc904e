"""Groth16 키와 증명 컨테이너.

점은 사영 좌표 py_ecc 점이라 같은 그룹 원소를 담은 두 컨테이너도 필드별로는
다를 수 있다. 비교는 직렬화한 바이트로 한다.
"""

from dataclasses import dataclass


@dataclass(eq=False)
class VerifyingKey:
    alpha_g1: tuple
    beta_g2: tuple
    gamma_g2: tuple
    delta_g2: tuple
    # gamma_abc_g1[0] belongs to the constant ONE, then one entry per public input
    gamma_abc_g1: list

    @property
    def num_public_inputs(self):
        return len(self.gamma_abc_g1) - 1


@dataclass(eq=False)
class ProvingKey:
    vk: VerifyingKey
    beta_g1: tuple
    delta_g1: tuple
    a_query: list
    b_g1_query: list
    b_g2_query: list
    h_query: list
    l_query: list


@dataclass(eq=False)
class Proof:
    a: tuple
    b: tuple
    c: tuple
