import os
import sys

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from zkkeys.config import COMMIT_PARAM_SEED, DEFAULT_CONFIG, HASH_PARAM_SEED
from zkkeys.field import FR
from zkkeys.gadgets import Num
from zkkeys.groth16 import generate_parameters
from zkkeys.ledger import build_ledger
from zkkeys.params import build_parameters
from zkkeys.pipeline import CircuitVariant, build_circuit
from zkkeys.rng import ChaChaRng


# ── 테스트 상수 ──
SETUP_SEED = bytes([7] * 32)


class CubicCircuit:
    """x³ + x + 5 = out, with x private and out public."""

    name = "cubic"

    def __init__(self, x=3, out=35):
        self.x = x
        self.out = out

    def generate_constraints(self, cs):
        x = Num.alloc(cs, self.x)
        out = Num.input(cs, self.out)
        x2 = x.square(cs, "x2")
        x3 = x2.mul(cs, x, "x3")
        (x3 + x + 5).enforce_equal(cs, out, "out")

    def public_inputs(self):
        return [FR(self.out)]


@pytest.fixture(scope="session")
def cubic_circuit():
    return CubicCircuit()


@pytest.fixture(scope="session")
def cubic_pk(cubic_circuit):
    """소형 회로의 Groth16 proving key."""
    return generate_parameters(cubic_circuit, ChaChaRng(SETUP_SEED))


@pytest.fixture(scope="session")
def parameters():
    return build_parameters(HASH_PARAM_SEED, COMMIT_PARAM_SEED)


@pytest.fixture(scope="session")
def ledger(parameters):
    return build_ledger(parameters.commit_param, ChaChaRng(DEFAULT_CONFIG.circuit_seed))


@pytest.fixture(scope="session")
def transfer_circuit():
    return build_circuit(CircuitVariant.TRANSFER)


@pytest.fixture(scope="session")
def reclaim_circuit():
    return build_circuit(CircuitVariant.RECLAIM)
