"""
Tests for the canonical uncompressed key encoding.

Covers:
- fixed sizes and little-endian coordinates
- infinity flag
- proving / verifying key and proof round trips
- rejection of truncated, trailing, non-canonical and off-curve input
"""

import struct

import pytest

from zkkeys.errors import SerializationError
from zkkeys.field import FIELD_MODULUS, G1, G2, Z1, Z2, ec_mul, eq, is_inf
from zkkeys.groth16 import Proof, VerifyingKey
from zkkeys.serialize import (
    G1_SIZE,
    G2_SIZE,
    deserialize_proof,
    deserialize_proving_key,
    deserialize_verifying_key,
    serialize_g1,
    serialize_g2,
    serialize_proof,
    serialize_proving_key,
    serialize_verifying_key,
)

G1_X = 0x17F1D3A73197D7942695638C4FA9AC0FC3688C4F9774B905A14E3A3F171BAC586C55E83FF97A1AEFFB3AF00ADB22C6BB


@pytest.fixture
def proof():
    return Proof(a=ec_mul(G1, 5), b=ec_mul(G2, 7), c=ec_mul(G1, 11))


@pytest.fixture
def vk():
    return VerifyingKey(
        alpha_g1=ec_mul(G1, 2),
        beta_g2=ec_mul(G2, 3),
        gamma_g2=ec_mul(G2, 4),
        delta_g2=ec_mul(G2, 5),
        gamma_abc_g1=[ec_mul(G1, 6), Z1, ec_mul(G1, 8)],
    )


class TestPoints:

    def test_sizes(self):
        assert len(serialize_g1(G1)) == G1_SIZE == 96
        assert len(serialize_g2(G2)) == G2_SIZE == 192

    def test_generator_little_endian(self):
        assert int.from_bytes(serialize_g1(G1)[:48], "little") == G1_X

    def test_projective_representation_irrelevant(self):
        x, y, z = ec_mul(G1, 9)
        scaled = (x * 5, y * 5, z * 5)
        assert serialize_g1(scaled) == serialize_g1(ec_mul(G1, 9))

    def test_infinity(self):
        encoded = serialize_g1(Z1)
        assert encoded[:-1] == bytes(G1_SIZE - 1)
        assert encoded[-1] == 0x40
        assert serialize_g2(Z2)[-1] == 0x40


class TestProof:

    def test_round_trip(self, proof):
        data = serialize_proof(proof)
        assert len(data) == 2 * G1_SIZE + G2_SIZE
        decoded = deserialize_proof(data)
        assert eq(decoded.a, proof.a)
        assert eq(decoded.b, proof.b)
        assert serialize_proof(decoded) == data

    def test_infinity_round_trip(self):
        data = serialize_proof(Proof(a=Z1, b=Z2, c=G1))
        decoded = deserialize_proof(data)
        assert is_inf(decoded.a) and is_inf(decoded.b)

    def test_truncated(self, proof):
        with pytest.raises(SerializationError):
            deserialize_proof(serialize_proof(proof)[:-1])

    def test_trailing(self, proof):
        with pytest.raises(SerializationError):
            deserialize_proof(serialize_proof(proof) + b"\x00")

    def test_non_canonical_coordinate(self, proof):
        data = bytearray(serialize_proof(proof))
        data[:48] = FIELD_MODULUS.to_bytes(48, "little")
        with pytest.raises(SerializationError):
            deserialize_proof(bytes(data))

    def test_off_curve(self, proof):
        data = bytearray(serialize_proof(proof))
        data[48] ^= 1
        with pytest.raises(SerializationError):
            deserialize_proof(bytes(data))

    def test_unknown_flag(self, proof):
        data = bytearray(serialize_proof(proof))
        data[G1_SIZE - 1] |= 0x80
        with pytest.raises(SerializationError):
            deserialize_proof(bytes(data))

    def test_flagged_non_zero_infinity(self, proof):
        data = bytearray(serialize_proof(proof))
        data[G1_SIZE - 1] |= 0x40
        with pytest.raises(SerializationError):
            deserialize_proof(bytes(data))

    def test_not_bytes(self):
        with pytest.raises(SerializationError):
            deserialize_proof("00" * 384)


class TestVerifyingKey:

    def test_layout(self, vk):
        data = serialize_verifying_key(vk)
        assert len(data) == G1_SIZE + 3 * G2_SIZE + 8 + 3 * G1_SIZE
        offset = G1_SIZE + 3 * G2_SIZE
        assert struct.unpack("<Q", data[offset:offset + 8]) == (3,)

    def test_round_trip(self, vk):
        data = serialize_verifying_key(vk)
        decoded = deserialize_verifying_key(data)
        assert len(decoded.gamma_abc_g1) == 3
        assert is_inf(decoded.gamma_abc_g1[1])
        assert serialize_verifying_key(decoded) == data

    def test_length_prefix_too_large(self, vk):
        data = bytearray(serialize_verifying_key(vk))
        offset = G1_SIZE + 3 * G2_SIZE
        data[offset:offset + 8] = struct.pack("<Q", 4)
        with pytest.raises(SerializationError):
            deserialize_verifying_key(bytes(data))

    def test_length_prefix_too_small(self, vk):
        data = bytearray(serialize_verifying_key(vk))
        offset = G1_SIZE + 3 * G2_SIZE
        data[offset:offset + 8] = struct.pack("<Q", 2)
        with pytest.raises(SerializationError):
            deserialize_verifying_key(bytes(data))


class TestProvingKey:

    def test_round_trip(self, cubic_pk):
        data = serialize_proving_key(cubic_pk)
        decoded = deserialize_proving_key(data)
        assert serialize_proving_key(decoded) == data
        assert serialize_verifying_key(decoded.vk) == serialize_verifying_key(cubic_pk.vk)

    def test_starts_with_verifying_key(self, cubic_pk):
        vk_bytes = serialize_verifying_key(cubic_pk.vk)
        assert serialize_proving_key(cubic_pk).startswith(vk_bytes)

    def test_truncated(self, cubic_pk):
        data = serialize_proving_key(cubic_pk)
        with pytest.raises(SerializationError):
            deserialize_proving_key(data[:len(data) // 2])
