"""Source of cryptographically secure random bytes."""

from __future__ import annotations

import os

_CHUNK_SIZE = 256


def randombytes(length: int) -> bytes:
    """Return ``length`` random bytes from the operating system's CSPRNG.

    The bytes are requested in chunks of at most 256 bytes.
    """
    if length < 0:
        raise ValueError("length must not be negative")

    chunks = []
    remaining = length
    while remaining > 0:
        size = min(remaining, _CHUNK_SIZE)
        chunks.append(os.urandom(size))
        remaining -= size
    return b"".join(chunks)