"""
키 생성 파이프라인
==================

회로 종류마다:

  1. 시드로부터 해시와 커밋먼트 파라미터를 다시 만든다
  2. circuit seed로 합성 원장을 샘플링한다
  3. 같은 스트림에서 두 송신자와 회로별 수신자를 만든다
  4. witness가 모든 제약을 만족하는지 확인한다
  5. circuit seed의 새 스트림으로 Groth16 setup을 실행한다
  6. proving key와 verifying key를 직렬화한다

두 회로의 키를 모두 만든 뒤에야 디스크에 쓰므로, 어느 쪽이 실패해도
출력 디렉터리는 그대로 남는다.
"""

import enum
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from zkkeys.asset import SECRET_KEY_SIZE, FullReceiver, SenderWitness
from zkkeys.circuits import ReclaimCircuit, TransferCircuit
from zkkeys.config import (
    DEFAULT_CONFIG,
    RECLAIM_PK_FILE,
    TRANSFER_PK_FILE,
    VK_MANIFEST_FILE,
)
from zkkeys import embedded
from zkkeys.embedded import (
    VerificationKeyStore,
    commit_staged,
    digest,
    discard_staged,
    staging_path,
)
from zkkeys.errors import KeyGenerationError, UnsatisfiedConstraintsError
from zkkeys.groth16 import generate_parameters
from zkkeys.groth16.qap import synthesize
from zkkeys.ledger import build_ledger
from zkkeys.params import build_parameters
from zkkeys.rng import ChaChaRng
from zkkeys.serialize import serialize_proving_key, serialize_verifying_key

logger = logging.getLogger(__name__)


class CircuitVariant(enum.Enum):
    TRANSFER = "transfer"
    RECLAIM = "reclaim"

    @property
    def proving_key_file(self):
        if self is CircuitVariant.TRANSFER:
            return TRANSFER_PK_FILE
        return RECLAIM_PK_FILE


@dataclass(eq=False)
class GeneratedKeys:
    variant: CircuitVariant
    proving_key: object
    proving_key_bytes: bytes
    verifying_key_bytes: bytes
    verifying_key_digest: str


def _receiver(parameters, sk, asset_id, amount, rng):
    full = FullReceiver.sample(parameters.commit_param, sk, asset_id, rng)
    return full.prepared.process(amount, rng)


def assemble_circuit(variant, parameters, ledger, rng, config=DEFAULT_CONFIG):
    """Build the senders from ``ledger`` and draw the variant's receivers from ``rng``.

    Each transfer receiver draws a fresh secret key first. The reclaim
    receiver draws none and reuses the secret key of the last ledger record,
    so its rho comes from the words a transfer spends on that key.
    """
    senders = [
        SenderWitness.build(parameters.hash_param, asset, ledger.commitments)
        for asset in ledger.senders(config.sender_indices)
    ]
    sent = sum(s.value for s in senders)

    if variant is CircuitVariant.TRANSFER:
        receivers = [
            _receiver(parameters, rng.fill_bytes(SECRET_KEY_SIZE), config.asset_id, amount, rng)
            for amount in config.transfer_amounts
        ]
        if sum(r.value for r in receivers) != sent:
            logger.warning(
                "transfer receivers take %d but the senders spend %d",
                sum(r.value for r in receivers), sent,
            )
        return TransferCircuit(parameters, senders[0], senders[1], receivers[0], receivers[1])

    receiver = _receiver(
        parameters, ledger.records[-1].secret_key, config.asset_id,
        config.reclaim_receiver_amount, rng,
    )
    if receiver.value + config.reclaim_value != sent:
        logger.warning(
            "reclaim moves %d + %d but the senders spend %d",
            receiver.value, config.reclaim_value, sent,
        )
    return ReclaimCircuit(
        parameters, senders[0], senders[1], receiver, config.asset_id, config.reclaim_value
    )


def sanity_check(circuit):
    """Synthesize ``circuit`` and fail loudly on the first unsatisfied constraint."""
    cs = synthesize(circuit)
    failing = cs.which_is_unsatisfied()
    if failing is not None:
        raise UnsatisfiedConstraintsError(failing, circuit.name)
    logger.info(
        "%s circuit satisfied: %d constraints, %d public inputs",
        circuit.name, cs.num_constraints, cs.num_instance_variables - 1,
    )
    return cs


def run_setup(circuit, seed):
    return generate_parameters(circuit, ChaChaRng(seed))


def build_circuit(variant, config=DEFAULT_CONFIG):
    """Parameters, ledger and circuit for ``variant``; consumes no setup randomness."""
    parameters = build_parameters(config.hash_param_seed, config.commit_param_seed)
    rng = ChaChaRng(config.circuit_seed)
    ledger = build_ledger(
        parameters.commit_param, rng, config.ledger_size, config.asset_id, config.value_offset
    )
    return assemble_circuit(variant, parameters, ledger, rng, config)


def generate_keys(variant, config=DEFAULT_CONFIG):
    logger.info("generating %s keys", variant.value)
    circuit = build_circuit(variant, config)
    sanity_check(circuit)
    pk = run_setup(circuit, config.circuit_seed)
    pk_bytes = serialize_proving_key(pk)
    vk_bytes = serialize_verifying_key(pk.vk)
    keys = GeneratedKeys(
        variant=variant,
        proving_key=pk,
        proving_key_bytes=pk_bytes,
        verifying_key_bytes=vk_bytes,
        verifying_key_digest=digest(vk_bytes),
    )
    logger.info(
        "%s: proving key %d bytes, verifying key %d bytes (sha256 %s)",
        variant.value, len(pk_bytes), len(vk_bytes), keys.verifying_key_digest,
    )
    return keys


def generate_all(config=DEFAULT_CONFIG):
    return {variant: generate_keys(variant, config) for variant in CircuitVariant}


def _fill_manifest(manifest, staged, generated):
    """Copy ``manifest`` (if any) to ``staged`` and add the generated keys there."""
    if manifest.exists():
        shutil.copyfile(str(manifest), str(staged))
    with VerificationKeyStore(staged) as store:
        for variant, keys in generated.items():
            store.add(variant.value, keys.verifying_key_bytes)


def write_zkp_keys(out_dir=".", config=DEFAULT_CONFIG, embed=False):
    """Generate both key pairs, then write the proving keys and the vk manifest.

    Every output is staged next to its target and renamed into place only once
    all of them are on disk. With ``embed`` the packaged manifest is updated
    in the same step.

    Returns:
        dict of output name → path
    """
    out_dir = Path(out_dir)
    if not out_dir.is_dir():
        raise KeyGenerationError("output directory {} does not exist".format(out_dir))

    generated = generate_all(config)

    manifest = out_dir / VK_MANIFEST_FILE
    targets = [manifest]
    if embed and embedded.MANIFEST_PATH != manifest.resolve():
        targets.append(embedded.MANIFEST_PATH)
    staged = {}
    try:
        for target in targets:
            staged[target] = staging_path(target)
            _fill_manifest(target, staged[target], generated)
        for variant, keys in generated.items():
            path = out_dir / variant.proving_key_file
            staged[path] = staging_path(path)
            staged[path].write_bytes(keys.proving_key_bytes)
        commit_staged(staged)
    except BaseException:
        discard_staged(staged)
        raise

    if embed:
        embedded.embedded_keys.cache_clear()
    for path in staged:
        logger.info("wrote %s", path)
    written = {variant.proving_key_file: out_dir / variant.proving_key_file
               for variant in generated}
    written[VK_MANIFEST_FILE] = manifest
    return written
