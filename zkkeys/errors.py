"""키 생성 파이프라인의 예외.

모든 실패는 실행을 중단시킨다. 잡아서 재시도하라고 만든 예외는 없다.
"""


class KeyGenerationError(Exception):
    """Base class for every fatal pipeline error."""


class ParameterSetupError(KeyGenerationError):
    """Hash or commitment parameters could not be built from their seeds."""


class SynthesisError(KeyGenerationError):
    """A circuit could not be turned into constraints."""


class AssetNotInLedgerError(SynthesisError):
    """A sender's commitment is missing from the ledger snapshot."""


class UnsatisfiedConstraintsError(KeyGenerationError):
    """The sanity check found a constraint the witness does not satisfy."""

    def __init__(self, constraint, circuit=None):
        self.constraint = constraint
        self.circuit = circuit
        where = " in {}".format(circuit) if circuit else ""
        super().__init__(
            "constraint system is not satisfied{}: first failing constraint is {!r}".format(
                where, constraint
            )
        )


class SetupError(KeyGenerationError):
    """The Groth16 setup could not produce a key pair."""


class SerializationError(KeyGenerationError):
    """Key material could not be encoded or decoded."""


class EmbeddedKeyError(KeyGenerationError):
    """An embedded verification key failed its integrity check."""


class MissingVerificationKeyError(EmbeddedKeyError):
    """No verification key has been embedded for a circuit."""
