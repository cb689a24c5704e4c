"""
Digest Primitives

Pure-Python Keccak and RIPEMD-160, plus thin hashlib wrappers.

hashlib only exposes SHA3 (pad byte 0x06), not the original Keccak
submission (pad byte 0x01) that Ethereum uses, and only exposes RIPEMD-160
when OpenSSL still loads its legacy provider. Both are therefore computed
here. Every function builds its state from scratch per call.
"""

from __future__ import annotations
import hashlib
import struct
from abc import ABC, abstractmethod


# =============================================================================
# SPONGE CONSTRUCTION
# =============================================================================

class SpongePermutation(ABC):
    """
    Abstract permutation for sponge construction.
    The permutation is the cryptographic core.
    """

    @property
    @abstractmethod
    def state_size(self) -> int:
        """Total state size in bytes."""
        pass

    @property
    @abstractmethod
    def rate(self) -> int:
        """Rate (absorb/squeeze size) in bytes."""
        pass

    @abstractmethod
    def permute(self, state: bytearray) -> None:
        """Apply the permutation in-place."""
        pass


class Keccak1600Permutation(SpongePermutation):
    """
    Keccak-f[1600] permutation.

    State: 1600 bits = 200 bytes
    """

    # Keccak round constants
    RC = [
        0x0000000000000001, 0x0000000000008082, 0x800000000000808a,
        0x8000000080008000, 0x000000000000808b, 0x0000000080000001,
        0x8000000080008081, 0x8000000000008009, 0x000000000000008a,
        0x0000000000000088, 0x0000000080008009, 0x000000008000000a,
        0x000000008000808b, 0x800000000000008b, 0x8000000000008089,
        0x8000000000008003, 0x8000000000008002, 0x8000000000000080,
        0x000000000000800a, 0x800000008000000a, 0x8000000080008081,
        0x8000000000008080, 0x0000000080000001, 0x8000000080008008,
    ]

    # Rotation offsets, indexed [x][y]
    ROTATIONS = [
        [0, 36, 3, 41, 18],
        [1, 44, 10, 45, 2],
        [62, 6, 43, 15, 61],
        [28, 55, 25, 21, 56],
        [27, 20, 39, 8, 14],
    ]

    def __init__(self, capacity_bits: int = 512):
        """
        capacity=512 gives the 136-byte rate used by Keccak-256 and SHA3-256.
        """
        self._rate_bits = 1600 - capacity_bits

    @property
    def state_size(self) -> int:
        return 200  # 1600 bits

    @property
    def rate(self) -> int:
        return self._rate_bits // 8

    def permute(self, state: bytearray) -> None:
        """Apply Keccak-f[1600] permutation."""
        # Convert to 5x5 array of 64-bit lanes
        lanes = [[0] * 5 for _ in range(5)]
        for x in range(5):
            for y in range(5):
                offset = 8 * (x + 5 * y)
                lanes[x][y] = int.from_bytes(state[offset:offset+8], 'little')

        # 24 rounds
        for rc in self.RC:
            # θ (theta)
            C = [lanes[x][0] ^ lanes[x][1] ^ lanes[x][2] ^ lanes[x][3] ^ lanes[x][4]
                 for x in range(5)]
            D = [C[(x - 1) % 5] ^ self._rot64(C[(x + 1) % 5], 1) for x in range(5)]
            for x in range(5):
                for y in range(5):
                    lanes[x][y] ^= D[x]

            # ρ (rho) and π (pi)
            B = [[0] * 5 for _ in range(5)]
            for x in range(5):
                for y in range(5):
                    B[y][(2 * x + 3 * y) % 5] = self._rot64(
                        lanes[x][y], self.ROTATIONS[x][y]
                    )

            # χ (chi)
            for x in range(5):
                for y in range(5):
                    lanes[x][y] = B[x][y] ^ ((~B[(x + 1) % 5][y]) & B[(x + 2) % 5][y])

            # ι (iota)
            lanes[0][0] ^= rc

        for x in range(5):
            for y in range(5):
                offset = 8 * (x + 5 * y)
                state[offset:offset+8] = lanes[x][y].to_bytes(8, 'little')

    @staticmethod
    def _rot64(x: int, n: int) -> int:
        """64-bit rotation."""
        return ((x << n) | (x >> (64 - n))) & 0xFFFFFFFFFFFFFFFF


class Sponge:
    """
    Plain sponge construction with pad10*1 and a selectable domain byte.

    pad_byte=0x01 is original Keccak, 0x06 is FIPS-202 SHA3.
    """

    KECCAK_PAD = 0x01
    SHA3_PAD = 0x06

    def __init__(self, permutation: SpongePermutation, pad_byte: int = KECCAK_PAD):
        self.perm = permutation
        self.pad_byte = pad_byte
        self.state = bytearray(permutation.state_size)
        self.absorbed = 0
        self.squeezing = False

    def absorb(self, data: bytes) -> 'Sponge':
        """Absorb data into the sponge."""
        if self.squeezing:
            raise RuntimeError("Cannot absorb after squeezing")

        rate = self.perm.rate
        offset = self.absorbed % rate

        for byte in data:
            self.state[offset] ^= byte
            offset += 1
            if offset == rate:
                self.perm.permute(self.state)
                offset = 0

        self.absorbed += len(data)
        return self

    def _finalize_absorb(self) -> None:
        if self.squeezing:
            return

        rate = self.perm.rate
        offset = self.absorbed % rate

        self.state[offset] ^= self.pad_byte
        self.state[rate - 1] ^= 0x80

        self.perm.permute(self.state)
        self.squeezing = True

    def squeeze(self, length: int) -> bytes:
        """Squeeze output from the sponge."""
        self._finalize_absorb()

        rate = self.perm.rate
        output = bytearray()
        offset = 0

        while len(output) < length:
            if offset == rate:
                self.perm.permute(self.state)
                offset = 0
            output.append(self.state[offset])
            offset += 1

        return bytes(output)


def keccak256(data: bytes) -> bytes:
    """Keccak-256 as used by Ethereum (not SHA3-256)."""
    sponge = Sponge(Keccak1600Permutation(capacity_bits=512), Sponge.KECCAK_PAD)
    return sponge.absorb(data).squeeze(32)


# =============================================================================
# RIPEMD-160
# =============================================================================

_MASK32 = 0xFFFFFFFF

_R_LEFT = [
    0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15,
    7, 4, 13, 1, 10, 6, 15, 3, 12, 0, 9, 5, 2, 14, 11, 8,
    3, 10, 14, 4, 9, 15, 8, 1, 2, 7, 0, 6, 13, 11, 5, 12,
    1, 9, 11, 10, 0, 8, 12, 4, 13, 3, 7, 15, 14, 5, 6, 2,
    4, 0, 5, 9, 7, 12, 2, 10, 14, 1, 3, 8, 11, 6, 15, 13,
]

_R_RIGHT = [
    5, 14, 7, 0, 9, 2, 11, 4, 13, 6, 15, 8, 1, 10, 3, 12,
    6, 11, 3, 7, 0, 13, 5, 10, 14, 15, 8, 12, 4, 9, 1, 2,
    15, 5, 1, 3, 7, 14, 6, 9, 11, 8, 12, 2, 10, 0, 4, 13,
    8, 6, 4, 1, 3, 11, 15, 0, 5, 12, 2, 13, 9, 7, 10, 14,
    12, 15, 10, 4, 1, 5, 8, 7, 6, 2, 13, 14, 0, 3, 9, 11,
]

_S_LEFT = [
    11, 14, 15, 12, 5, 8, 7, 9, 11, 13, 14, 15, 6, 7, 9, 8,
    7, 6, 8, 13, 11, 9, 7, 15, 7, 12, 15, 9, 11, 7, 13, 12,
    11, 13, 6, 7, 14, 9, 13, 15, 14, 8, 13, 6, 5, 12, 7, 5,
    11, 12, 14, 15, 14, 15, 9, 8, 9, 14, 5, 6, 8, 6, 5, 12,
    9, 15, 5, 11, 6, 8, 13, 12, 5, 12, 13, 14, 11, 8, 5, 6,
]

_S_RIGHT = [
    8, 9, 9, 11, 13, 15, 15, 5, 7, 7, 8, 11, 14, 14, 12, 6,
    9, 13, 15, 7, 12, 8, 9, 11, 7, 7, 12, 7, 6, 15, 13, 11,
    9, 7, 15, 11, 8, 6, 6, 14, 12, 13, 5, 14, 13, 13, 7, 5,
    15, 5, 8, 11, 14, 14, 6, 14, 6, 9, 12, 9, 12, 5, 15, 8,
    8, 5, 12, 9, 12, 5, 14, 6, 8, 13, 6, 5, 15, 13, 11, 11,
]

_K_LEFT = [0x00000000, 0x5A827999, 0x6ED9EBA1, 0x8F1BBCDC, 0xA953FD4E]
_K_RIGHT = [0x50A28BE6, 0x5C4DD124, 0x6D703EF3, 0x7A6D76E9, 0x00000000]

_RIPEMD160_IV = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476, 0xC3D2E1F0)


def _rol32(x: int, n: int) -> int:
    return ((x << n) | (x >> (32 - n))) & _MASK32


def _ripemd_f(j: int, x: int, y: int, z: int) -> int:
    """Boolean function for round group j // 16."""
    group = j >> 4
    if group == 0:
        return x ^ y ^ z
    if group == 1:
        return (x & y) | (~x & z)
    if group == 2:
        return (x | ~y) ^ z
    if group == 3:
        return (x & z) | (y & ~z)
    return x ^ (y | ~z)


def _ripemd160_compress(h: list, block: bytes) -> None:
    X = struct.unpack('<16I', block)

    al, bl, cl, dl, el = h
    ar, br, cr, dr, er = h

    for j in range(80):
        t = (al + _ripemd_f(j, bl, cl, dl) + X[_R_LEFT[j]] + _K_LEFT[j >> 4]) & _MASK32
        t = (_rol32(t, _S_LEFT[j]) + el) & _MASK32
        al, el, dl, cl, bl = el, dl, _rol32(cl, 10), bl, t

        t = (ar + _ripemd_f(79 - j, br, cr, dr) + X[_R_RIGHT[j]] + _K_RIGHT[j >> 4]) & _MASK32
        t = (_rol32(t, _S_RIGHT[j]) + er) & _MASK32
        ar, er, dr, cr, br = er, dr, _rol32(cr, 10), br, t

    t = (h[1] + cl + dr) & _MASK32
    h[1] = (h[2] + dl + er) & _MASK32
    h[2] = (h[3] + el + ar) & _MASK32
    h[3] = (h[4] + al + br) & _MASK32
    h[4] = (h[0] + bl + cr) & _MASK32
    h[0] = t


def ripemd160(data: bytes) -> bytes:
    """RIPEMD-160 digest of data (20 bytes)."""
    h = list(_RIPEMD160_IV)

    # MD-strengthening: 0x80, zeros to 56 mod 64, bit length little-endian
    padded = (
        bytes(data) + b'\x80' +
        b'\x00' * ((55 - len(data)) % 64) +
        struct.pack('<Q', (len(data) * 8) & 0xFFFFFFFFFFFFFFFF)
    )

    for i in range(0, len(padded), 64):
        _ripemd160_compress(h, padded[i:i+64])

    return struct.pack('<5I', *h)


# =============================================================================
# HASHLIB-BACKED DIGESTS
# =============================================================================

def sha1(data: bytes) -> bytes:
    return hashlib.sha1(data).digest()


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()
