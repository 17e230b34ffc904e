"""두 회로가 공유하는 공개 파라미터."""

import logging
from dataclasses import dataclass

from zkkeys.errors import ParameterSetupError
from zkkeys.primitives.commitment import CommitParam
from zkkeys.primitives.hash import HashParam
from zkkeys.rng import ChaChaRng

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParameterSet:
    hash_param: HashParam
    commit_param: CommitParam


def build_parameters(hash_param_seed, commit_param_seed):
    """Rebuild the hash and commitment parameters, each from its own stream."""
    try:
        commit_rng = ChaChaRng(commit_param_seed)
        hash_rng = ChaChaRng(hash_param_seed)
    except ValueError as exc:
        raise ParameterSetupError("malformed parameter seed: {}".format(exc)) from exc

    commit_param = CommitParam.setup(commit_rng)
    hash_param = HashParam.setup(hash_rng)
    logger.debug(
        "parameters ready: %d commitment rounds, %d hash rounds",
        len(commit_param.round_constants),
        len(hash_param.round_constants),
    )
    return ParameterSet(hash_param=hash_param, commit_param=commit_param)
