from zkkeys.config import DEFAULT_CONFIG, GenerationConfig
from zkkeys.embedded import embedded_verification_key
from zkkeys.pipeline import CircuitVariant, generate_all, generate_keys, write_zkp_keys

__all__ = [
    "DEFAULT_CONFIG",
    "GenerationConfig",
    "CircuitVariant",
    "embedded_verification_key",
    "generate_all",
    "generate_keys",
    "write_zkp_keys",
]
