import pytest

from zkkeys.groth16 import create_proof
from zkkeys.rng import ChaChaRng

PROVER_SEED = bytes([9] * 32)


@pytest.fixture(scope="session")
def cubic_proof(cubic_pk, cubic_circuit):
    """setup → proving 결과."""
    return create_proof(cubic_pk, cubic_circuit, ChaChaRng(PROVER_SEED))
