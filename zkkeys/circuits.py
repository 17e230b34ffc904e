"""
송금(transfer) / 회수(reclaim) 회로
===================================

두 회로 모두 원장의 자산 두 개를 소비한다. transfer는 두 수신자에게
지불하고, reclaim은 한 수신자에게 지불한 뒤 남은 금액을 공개 금액으로
shielded pool 밖으로 내보낸다.

**송신자 가젯(Sender gadget)**:
  sk, rho, 커밋먼트 randomness, 금액, asset id를 witness로 두고
  - sk에서 public key를 다시 유도
  - 커밋먼트를 다시 계산해 공개 root 아래의 멤버십을 증명
  - void number H(sk, rho)를 공개해 이중 사용을 막음

**수신자 가젯(Receiver gadget)**:
  수신자 커밋먼트를 opening으로부터 다시 계산해 공개한다.

**공개 입력 순서**:
  송신자마다 (root, void number), 수신자마다 커밋먼트, reclaim은 마지막에
  asset id와 회수 금액.
"""

from zkkeys.asset import secret_scalar
from zkkeys.errors import SynthesisError
from zkkeys.field import FR
from zkkeys.gadgets import Num
from zkkeys.primitives import hash as crh
from zkkeys.primitives.commitment import commit_gadget, derive_public_key_gadget
from zkkeys.primitives.merkle import membership_gadget


def _check_sender(sender, label):
    # a witness from other hash parameters is left to the satisfiability check
    if sender.path.depth == 0:
        raise SynthesisError("{} has an empty membership path".format(label))


def sender_gadget(cs, parameters, sender):
    """Constrain one spent asset; returns its (asset_id, value) Nums."""
    asset = sender.asset
    sk = Num.alloc(cs, secret_scalar(asset.secret_key))
    rho = Num.alloc(cs, asset.rho)
    randomness = Num.alloc(cs, asset.randomness)
    value = Num.alloc(cs, asset.value)
    asset_id = Num.alloc(cs, asset.asset_id)

    pk = derive_public_key_gadget(cs, parameters.commit_param, sk)
    commitment = commit_gadget(
        cs, parameters.commit_param, [asset_id, value, pk, rho], randomness
    )

    root = membership_gadget(cs, parameters.hash_param, commitment, sender.path)
    root.enforce_equal(cs, Num.input(cs, sender.root), "root")

    void_number = crh.evaluate_gadget(cs, parameters.hash_param, sk, rho, "void_number")
    void_number.enforce_equal(cs, Num.input(cs, sender.void_number), "void_number/public")
    return asset_id, value


def receiver_gadget(cs, parameters, receiver):
    asset_id = Num.alloc(cs, receiver.asset_id)
    value = Num.alloc(cs, receiver.value)
    pk = Num.alloc(cs, receiver.public_key)
    rho = Num.alloc(cs, receiver.rho)
    randomness = Num.alloc(cs, receiver.randomness)

    commitment = commit_gadget(
        cs, parameters.commit_param, [asset_id, value, pk, rho], randomness
    )
    commitment.enforce_equal(cs, Num.input(cs, receiver.commitment), "commitment/public")
    return asset_id, value


class _TwoSenderCircuit:

    name = None

    def __init__(self, parameters, sender_1, sender_2):
        _check_sender(sender_1, "sender_1")
        _check_sender(sender_2, "sender_2")
        self.parameters = parameters
        self.sender_1 = sender_1
        self.sender_2 = sender_2

    def _senders(self, cs):
        with cs.namespace("sender_1"):
            id_1, value_1 = sender_gadget(cs, self.parameters, self.sender_1)
        with cs.namespace("sender_2"):
            id_2, value_2 = sender_gadget(cs, self.parameters, self.sender_2)
        id_1.enforce_equal(cs, id_2, "asset_id/senders")
        return id_1, value_1 + value_2

    def _sender_inputs(self):
        return [
            self.sender_1.root,
            self.sender_1.void_number,
            self.sender_2.root,
            self.sender_2.void_number,
        ]

    def __repr__(self):
        return "{}()".format(type(self).__name__)


class TransferCircuit(_TwoSenderCircuit):
    """송신자 2 → 같은 자산의 수신자 2, 금액 보존."""

    name = "transfer"

    def __init__(self, parameters, sender_1, sender_2, receiver_1, receiver_2):
        super().__init__(parameters, sender_1, sender_2)
        self.receiver_1 = receiver_1
        self.receiver_2 = receiver_2

    def generate_constraints(self, cs):
        asset_id, sent = self._senders(cs)
        with cs.namespace("receiver_1"):
            id_1, value_1 = receiver_gadget(cs, self.parameters, self.receiver_1)
        with cs.namespace("receiver_2"):
            id_2, value_2 = receiver_gadget(cs, self.parameters, self.receiver_2)
        asset_id.enforce_equal(cs, id_1, "asset_id/receiver_1")
        asset_id.enforce_equal(cs, id_2, "asset_id/receiver_2")
        sent.enforce_equal(cs, value_1 + value_2, "value_conservation")

    def public_inputs(self):
        return self._sender_inputs() + [self.receiver_1.commitment, self.receiver_2.commitment]


class ReclaimCircuit(_TwoSenderCircuit):
    """송신자 2 → 수신자 1 + pool 밖으로 나가는 공개 금액."""

    name = "reclaim"

    def __init__(self, parameters, sender_1, sender_2, receiver, asset_id, reclaim_value):
        super().__init__(parameters, sender_1, sender_2)
        self.receiver = receiver
        self.asset_id = asset_id
        self.reclaim_value = reclaim_value

    def generate_constraints(self, cs):
        asset_id, sent = self._senders(cs)
        with cs.namespace("receiver"):
            receiver_id, received = receiver_gadget(cs, self.parameters, self.receiver)
        public_id = Num.input(cs, self.asset_id)
        reclaimed = Num.input(cs, self.reclaim_value)
        asset_id.enforce_equal(cs, receiver_id, "asset_id/receiver")
        asset_id.enforce_equal(cs, public_id, "asset_id/public")
        sent.enforce_equal(cs, received + reclaimed, "value_conservation")

    def public_inputs(self):
        return self._sender_inputs() + [
            self.receiver.commitment,
            FR(self.asset_id),
            FR(self.reclaim_value),
        ]
