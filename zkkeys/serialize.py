"""
키 직렬화/역직렬화
==================

BLS12-381 점의 비압축 little-endian 인코딩:

  - 기저 필드 원소: 48바이트 little-endian, 값 < p
  - G1: x ‖ y                          (96바이트)
  - G2: x.c0 ‖ x.c1 ‖ y.c0 ‖ y.c1       (192바이트)
  - 무한원점: 모두 0이고 마지막 바이트에 플래그 0x40
  - 시퀀스: u64 little-endian 길이, 그다음 원소들

p는 381비트이므로 마지막 바이트의 상위 2비트는 값이 아니라 플래그에 쓴다.

키 레이아웃 (필드 순서):

  VerifyingKey: alpha_g1, beta_g2, gamma_g2, delta_g2, [gamma_abc_g1]
  ProvingKey:   vk, beta_g1, delta_g1, [a_query], [b_g1_query], [b_g2_query],
                [h_query], [l_query]
  Proof:        a (G1), b (G2), c (G1)
"""

import struct

from py_ecc import optimized_bls12_381 as bls12_381

from zkkeys.errors import SerializationError
from zkkeys.field import FIELD_MODULUS, is_inf, is_on_curve, normalize
from zkkeys.groth16.keys import Proof, ProvingKey, VerifyingKey

FQ_SIZE = 48
G1_SIZE = 2 * FQ_SIZE
G2_SIZE = 4 * FQ_SIZE
LENGTH_SIZE = 8

INFINITY_FLAG = 0x40
_FLAG_MASK = 0xC0


# ── encoding ──

def _fq_bytes(value):
    return int(value).to_bytes(FQ_SIZE, "little")


def _infinity(size):
    out = bytearray(size)
    out[-1] = INFINITY_FLAG
    return bytes(out)


def serialize_g1(point):
    if is_inf(point):
        return _infinity(G1_SIZE)
    x, y = normalize(point)
    return _fq_bytes(x.n) + _fq_bytes(y.n)


def serialize_g2(point):
    if is_inf(point):
        return _infinity(G2_SIZE)
    x, y = normalize(point)
    return b"".join(_fq_bytes(c) for c in list(x.coeffs) + list(y.coeffs))


def _length(n):
    return struct.pack("<Q", n)


def _g1_vec(points):
    return _length(len(points)) + b"".join(serialize_g1(p) for p in points)


def _g2_vec(points):
    return _length(len(points)) + b"".join(serialize_g2(p) for p in points)


def serialize_verifying_key(vk):
    return b"".join([
        serialize_g1(vk.alpha_g1),
        serialize_g2(vk.beta_g2),
        serialize_g2(vk.gamma_g2),
        serialize_g2(vk.delta_g2),
        _g1_vec(vk.gamma_abc_g1),
    ])


def serialize_proving_key(pk):
    return b"".join([
        serialize_verifying_key(pk.vk),
        serialize_g1(pk.beta_g1),
        serialize_g1(pk.delta_g1),
        _g1_vec(pk.a_query),
        _g1_vec(pk.b_g1_query),
        _g2_vec(pk.b_g2_query),
        _g1_vec(pk.h_query),
        _g1_vec(pk.l_query),
    ])


def serialize_proof(proof):
    return serialize_g1(proof.a) + serialize_g2(proof.b) + serialize_g1(proof.c)


# ── decoding ──

class _Reader:

    def __init__(self, data):
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise SerializationError("expected bytes, got {}".format(type(data).__name__))
        self.data = bytes(data)
        self.offset = 0

    def take(self, n, what):
        end = self.offset + n
        if end > len(self.data):
            raise SerializationError(
                "truncated input: {} needs {} bytes at offset {}, {} left".format(
                    what, n, self.offset, len(self.data) - self.offset
                )
            )
        chunk = self.data[self.offset:end]
        self.offset = end
        return chunk

    def length(self, element_size, what):
        (n,) = struct.unpack("<Q", self.take(LENGTH_SIZE, what + " length"))
        if n * element_size > len(self.data) - self.offset:
            raise SerializationError(
                "{} claims {} elements but only {} bytes remain".format(
                    what, n, len(self.data) - self.offset
                )
            )
        return n

    def finish(self):
        if self.offset != len(self.data):
            raise SerializationError(
                "{} trailing bytes after the encoded value".format(len(self.data) - self.offset)
            )


def _split_flags(raw, what):
    flags = raw[-1] & _FLAG_MASK
    if flags not in (0, INFINITY_FLAG):
        raise SerializationError("{}: unknown flag bits 0x{:02x}".format(what, flags))
    body = raw[:-1] + bytes([raw[-1] & ~_FLAG_MASK & 0xFF])
    if flags == INFINITY_FLAG and any(body):
        raise SerializationError("{}: infinity flag on a non-zero encoding".format(what))
    return flags == INFINITY_FLAG, body


def _fq_ints(body, count, what):
    out = []
    for i in range(count):
        value = int.from_bytes(body[i * FQ_SIZE:(i + 1) * FQ_SIZE], "little")
        if value >= FIELD_MODULUS:
            raise SerializationError("{}: coordinate is not a canonical field element".format(what))
        out.append(value)
    return out


def _checked(point, what):
    if not is_on_curve(point):
        raise SerializationError("{}: point is not on the curve".format(what))
    return point


def _read_g1(reader, what):
    infinity, body = _split_flags(reader.take(G1_SIZE, what), what)
    if infinity:
        return bls12_381.Z1
    x, y = _fq_ints(body, 2, what)
    return _checked((bls12_381.FQ(x), bls12_381.FQ(y), bls12_381.FQ.one()), what)


def _read_g2(reader, what):
    infinity, body = _split_flags(reader.take(G2_SIZE, what), what)
    if infinity:
        return bls12_381.Z2
    x0, x1, y0, y1 = _fq_ints(body, 4, what)
    point = (bls12_381.FQ2([x0, x1]), bls12_381.FQ2([y0, y1]), bls12_381.FQ2.one())
    return _checked(point, what)


def _read_g1_vec(reader, what):
    n = reader.length(G1_SIZE, what)
    return [_read_g1(reader, "{}[{}]".format(what, i)) for i in range(n)]


def _read_g2_vec(reader, what):
    n = reader.length(G2_SIZE, what)
    return [_read_g2(reader, "{}[{}]".format(what, i)) for i in range(n)]


def _read_verifying_key(reader):
    return VerifyingKey(
        alpha_g1=_read_g1(reader, "alpha_g1"),
        beta_g2=_read_g2(reader, "beta_g2"),
        gamma_g2=_read_g2(reader, "gamma_g2"),
        delta_g2=_read_g2(reader, "delta_g2"),
        gamma_abc_g1=_read_g1_vec(reader, "gamma_abc_g1"),
    )


def deserialize_verifying_key(data):
    reader = _Reader(data)
    vk = _read_verifying_key(reader)
    reader.finish()
    return vk


def deserialize_proving_key(data):
    reader = _Reader(data)
    pk = ProvingKey(
        vk=_read_verifying_key(reader),
        beta_g1=_read_g1(reader, "beta_g1"),
        delta_g1=_read_g1(reader, "delta_g1"),
        a_query=_read_g1_vec(reader, "a_query"),
        b_g1_query=_read_g1_vec(reader, "b_g1_query"),
        b_g2_query=_read_g2_vec(reader, "b_g2_query"),
        h_query=_read_g1_vec(reader, "h_query"),
        l_query=_read_g1_vec(reader, "l_query"),
    )
    reader.finish()
    return pk


def deserialize_proof(data):
    reader = _Reader(data)
    proof = Proof(
        a=_read_g1(reader, "proof.a"),
        b=_read_g2(reader, "proof.b"),
        c=_read_g1(reader, "proof.c"),
    )
    reader.finish()
    return proof
