"""
시드 유도와 결정적 RNG
======================

**시드 유도(Seed derivation)**:
  ``derive_seed`` 는 SHA-512/256 기반 HKDF의 extract 단계이다. salt가
  도메인을 분리한다: 같은 master seed도 salt가 다르면 서로 무관한
  32바이트 시드가 된다.

**ChaChaRng**:
  32바이트 시드를 키로 하는 ChaCha20 keystream (nonce 0, 블록 카운터 0부터).
  서브시스템마다 자기 인스턴스를 가지며 공유하지 않으므로 각 스트림을
  따로 재현할 수 있다.

  출력은 32비트 word 단위로 나간다. 3바이트를 요청하면 word 하나를 쓰고
  마지막 바이트는 버린다. 다음 요청은 그다음 word부터 시작한다.

사용 예시:
    >>> rng = ChaChaRng(bytes(32))
    >>> rng.fill_bytes(4).hex()
    '76b8e0ad'
"""

from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms

from zkkeys.field import FR, CURVE_ORDER, SCALAR_BITS

SEED_SIZE = 32
WORD_SIZE = 4

_SCALAR_MASK = (1 << SCALAR_BITS) - 1


def _check_seed(name, value):
    if not isinstance(value, (bytes, bytearray)) or len(value) != SEED_SIZE:
        raise ValueError("{} must be {} bytes".format(name, SEED_SIZE))


def derive_seed(master_seed, salt):
    """HKDF-extract(salt, master_seed) with SHA-512/256; the PRK is the seed."""
    _check_seed("master seed", master_seed)
    _check_seed("salt", salt)
    mac = hmac.HMAC(bytes(salt), hashes.SHA512_256())
    mac.update(bytes(master_seed))
    return mac.finalize()[:SEED_SIZE]


class ChaChaRng:
    """시드로 초기화하는 ChaCha20 생성기.

    Attributes:
        seed: the 32-byte key this stream was created from
        words_consumed: number of 32-bit words handed out so far
    """

    def __init__(self, seed):
        _check_seed("rng seed", seed)
        self.seed = bytes(seed)
        cipher = Cipher(algorithms.ChaCha20(self.seed, bytes(16)), mode=None)
        self._keystream = cipher.encryptor()
        self.words_consumed = 0

    def _words(self, count):
        self.words_consumed += count
        return self._keystream.update(bytes(count * WORD_SIZE))

    def fill_bytes(self, n):
        """Return ``n`` fresh bytes, consuming ceil(n / 4) words."""
        if n < 0:
            raise ValueError("cannot draw a negative number of bytes")
        count = -(-n // WORD_SIZE)
        return self._words(count)[:n]

    def next_u32(self):
        return int.from_bytes(self._words(1), "little")

    def next_u64(self):
        return int.from_bytes(self._words(2), "little")

    def gen_scalar(self):
        """Uniform FR element: 255-bit little-endian draws, rejected when >= r."""
        while True:
            candidate = int.from_bytes(self._words(8), "little") & _SCALAR_MASK
            if candidate < CURVE_ORDER:
                return FR(candidate)
