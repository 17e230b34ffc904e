"""
원장 Merkle tree
================

원장은 커밋먼트의 순서 있는 리스트이다. leaf의 위치가 멤버십 증명의
일부이므로 원장 순서를 바꾸면 모든 경로가 무효가 된다.

leaf 리스트는 다음 2의 거듭제곱까지 0으로 채운다. 위치 비트는 최하위
비트부터 읽는다: 비트 ℓ은 level ℓ의 노드가 오른쪽 자식인지를 나타낸다.
"""

from dataclasses import dataclass

from zkkeys.field import FR
from zkkeys.gadgets import Num
from zkkeys.primitives import hash as crh


def tree_depth(num_leaves):
    return max(1, (num_leaves - 1).bit_length())


@dataclass(frozen=True)
class MerklePath:
    leaf_index: int
    siblings: tuple

    @property
    def depth(self):
        return len(self.siblings)

    def position_bits(self):
        return [(self.leaf_index >> level) & 1 for level in range(self.depth)]

    def compute_root(self, hash_param, leaf):
        node = FR(leaf)
        for bit, sibling in zip(self.position_bits(), self.siblings):
            if bit:
                node = crh.evaluate(hash_param, sibling, node)
            else:
                node = crh.evaluate(hash_param, node, sibling)
        return node


class MerkleTree:
    """원장 커밋먼트 위의 완전 이진 트리.

    Attributes:
        levels: levels[0] are the padded leaves, levels[-1] == [root]
    """

    def __init__(self, hash_param, leaves):
        if not leaves:
            raise ValueError("cannot build a Merkle tree without leaves")
        self.hash_param = hash_param
        self.num_leaves = len(leaves)
        width = 1 << tree_depth(len(leaves))
        level = [FR(leaf) for leaf in leaves] + [FR(0)] * (width - len(leaves))
        self.levels = [level]
        while len(level) > 1:
            level = [
                crh.evaluate(hash_param, level[i], level[i + 1])
                for i in range(0, len(level), 2)
            ]
            self.levels.append(level)

    @property
    def depth(self):
        return len(self.levels) - 1

    @property
    def root(self):
        return self.levels[-1][0]

    def path(self, index):
        if not 0 <= index < self.num_leaves:
            raise IndexError("leaf {} outside a tree of {} leaves".format(index, self.num_leaves))
        siblings = []
        position = index
        for level in self.levels[:-1]:
            siblings.append(level[position ^ 1])
            position >>= 1
        return MerklePath(index, tuple(siblings))


def membership_gadget(cs, hash_param, leaf, path, name="membership"):
    """Recompute the root from ``leaf`` (a Num) and the witnessed ``path``."""
    node = leaf
    for level, (bit, sibling) in enumerate(zip(path.position_bits(), path.siblings)):
        prefix = "{}/level_{}".format(name, level)
        bit = Num.alloc(cs, bit)
        bit.enforce_boolean(cs, prefix + "/bit")
        sibling = Num.alloc(cs, sibling)
        # left = node + bit·(sibling - node), right = node + sibling - left
        swap = bit.mul(cs, sibling - node, prefix + "/swap")
        left = node + swap
        right = sibling - swap
        node = crh.evaluate_gadget(cs, hash_param, left, right, prefix + "/hash")
    return node
