"""SipHash-2-4 keyed pseudo-random function."""

from __future__ import annotations

import struct
from dataclasses import dataclass

_MASK = (1 << 64) - 1


def _rotl(word: int, shift: int) -> int:
    return ((word << shift) | (word >> (64 - shift))) & _MASK


def _sipround(v0: int, v1: int, v2: int, v3: int) -> tuple[int, int, int, int]:
    v0 = (v0 + v1) & _MASK
    v1 = _rotl(v1, 13) ^ v0
    v0 = _rotl(v0, 32)
    v2 = (v2 + v3) & _MASK
    v3 = _rotl(v3, 16) ^ v2
    v0 = (v0 + v3) & _MASK
    v3 = _rotl(v3, 21) ^ v0
    v2 = (v2 + v1) & _MASK
    v1 = _rotl(v1, 17) ^ v2
    v2 = _rotl(v2, 32)
    return v0, v1, v2, v3


@dataclass(frozen=True)
class SipHashKey:
    """A 128-bit SipHash key held as two 64-bit words."""

    k0: int
    k1: int

    @classmethod
    def from_bytes(cls, data: bytes) -> "SipHashKey":
        """Build a key from 16 bytes, each word read little-endian."""
        if len(data) != 16:
            raise ValueError("SipHash key must be 16 bytes")
        k0, k1 = struct.unpack("<2Q", data)
        return cls(k0, k1)

    def is_zero(self) -> bool:
        """Return True if both key words are zero."""
        return not (self.k0 | self.k1)


def siphash(data: bytes, key: SipHashKey) -> int:
    """Return the 64-bit SipHash-2-4 of ``data`` under ``key``."""
    data = bytes(data)
    v0 = 0x736F6D6570736575 ^ key.k0
    v1 = 0x646F72616E646F6D ^ key.k1
    v2 = 0x6C7967656E657261 ^ key.k0
    v3 = 0x7465646279746573 ^ key.k1

    end = len(data) - len(data) % 8
    for (m,) in struct.iter_unpack("<Q", data[:end]):
        v3 ^= m
        v0, v1, v2, v3 = _sipround(v0, v1, v2, v3)
        v0, v1, v2, v3 = _sipround(v0, v1, v2, v3)
        v0 ^= m

    b = ((len(data) << 56) & _MASK) | int.from_bytes(data[end:], "little")

    v3 ^= b
    v0, v1, v2, v3 = _sipround(v0, v1, v2, v3)
    v0, v1, v2, v3 = _sipround(v0, v1, v2, v3)
    v0 ^= b
    v2 ^= 0xFF
    for _ in range(4):
        v0, v1, v2, v3 = _sipround(v0, v1, v2, v3)
    return v0 ^ v1 ^ v2 ^ v3


def siphash_to_le64(data: bytes, key: SipHashKey) -> bytes:
    """Return the hash as 8 little-endian bytes."""
    return siphash(data, key).to_bytes(8, "little")


def siphash_to_be64(data: bytes, key: SipHashKey) -> bytes:
    """Return the hash as 8 big-endian bytes."""
    return siphash(data, key).to_bytes(8, "big")