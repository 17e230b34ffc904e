from zkkeys.groth16.keys import Proof, ProvingKey, VerifyingKey
from zkkeys.groth16.proving import create_proof
from zkkeys.groth16.setup import generate_parameters
from zkkeys.groth16.verifying import prepare_inputs, verify_proof

__all__ = [
    "Proof",
    "ProvingKey",
    "VerifyingKey",
    "create_proof",
    "generate_parameters",
    "prepare_inputs",
    "verify_proof",
]
