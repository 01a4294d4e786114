"""Streamlined NTRU Prime 761 key encapsulation (sntrup761)."""

from __future__ import annotations

import hmac
import struct
from typing import Sequence

from unetkit.random import randombytes
from unetkit.sha512 import sha512
from unetkit.sntrup_arith import (
    f3_freeze,
    is_zero_mod3,
    r3_inv,
    r3_mult,
    round_poly,
    rq_mult3,
    rq_mult_small,
    rq_recip3,
    short_fromlist,
    wforce,
)
from unetkit.sntrup_encoding import (
    P,
    ROUNDED_BYTES,
    RQ_BYTES,
    SMALL_BYTES,
    rounded_decode,
    rounded_encode,
    rq_decode,
    rq_encode,
    small_decode,
    small_encode,
)
from unetkit.sntrup_fastmult import rq_inv_big, rq_mult_big

CIPHERTEXT_SIZE = 1039
SECRET_KEY_SIZE = 1763
PUBLIC_KEY_SIZE = 1158
SHARED_KEY_SIZE = 32

HASH_BYTES = 32
CONFIRM_BYTES = 32
INPUTS_BYTES = SMALL_BYTES
SECRET_KEYS_BYTES = 2 * SMALL_BYTES

_PK_OFFSET = SECRET_KEYS_BYTES
_RHO_OFFSET = _PK_OFFSET + PUBLIC_KEY_SIZE
_CACHE_OFFSET = _RHO_OFFSET + INPUTS_BYTES

_SIZE_LABELS = {
    CIPHERTEXT_SIZE: "ciphertext",
    SECRET_KEY_SIZE: "secret key",
    PUBLIC_KEY_SIZE: "public key",
}


def _hash_prefix(prefix: int, data: bytes) -> bytes:
    return sha512(bytes([prefix]) + data)[:HASH_BYTES]


def _random_words() -> list[int]:
    return list(struct.unpack(f"<{P}I", randombytes(4 * P)))


def _short_random() -> list[int]:
    return short_fromlist(_random_words())


def _small_random() -> list[int]:
    return [(((word & 0x3FFFFFFF) * 3) >> 30) - 1 for word in _random_words()]


def _small_from_bytes(data: bytes) -> list[int]:
    # An out-of-range 2-bit field reads as 0, as in the reference bit tricks.
    return [c if c != 2 else 0 for c in small_decode(data)]


def _encrypt(r: Sequence[int], public_key: bytes) -> bytes:
    h = rq_decode(public_key)
    return rounded_encode(round_poly(rq_mult_small(h, r)))


def _decrypt(ciphertext: bytes, secret_key: bytes) -> list[int]:
    d = rounded_decode(ciphertext[:ROUNDED_BYTES])
    f = _small_from_bytes(secret_key[:SMALL_BYTES])
    d = rq_mult3(rq_mult_small(d, f))
    e = [f3_freeze(c) for c in d]
    v = _small_from_bytes(secret_key[SMALL_BYTES:SECRET_KEYS_BYTES])
    return wforce(r3_mult(e, v))


def _hash_confirm(r_enc: bytes, cache: bytes) -> bytes:
    return _hash_prefix(2, _hash_prefix(3, r_enc) + cache)


def _hash_session(prefix: int, r_enc: bytes, ciphertext: bytes) -> bytes:
    return _hash_prefix(prefix, _hash_prefix(3, r_enc) + ciphertext)


def _hide(r: Sequence[int], public_key: bytes, cache: bytes) -> tuple[bytes, bytes]:
    r_enc = small_encode(r)
    ciphertext = _encrypt(r, public_key) + _hash_confirm(r_enc, cache)
    return ciphertext, r_enc


def _assemble_secret_key(f: Sequence[int], ginv: Sequence[int],
                         public_key: bytes, rho: bytes) -> bytes:
    return (small_encode(f) + small_encode(ginv) + public_key + rho
            + _hash_prefix(4, public_key))


def _check_size(data: bytes, size: int) -> bytes:
    data = bytes(data)
    if len(data) != size:
        raise ValueError(f"{_SIZE_LABELS[size]} must be {size} bytes")
    return data


def keypair() -> tuple[bytes, bytes]:
    """Generate a new key pair and return ``(public_key, secret_key)``."""
    while True:
        g = _small_random()
        try:
            ginv = r3_inv(g)
        except ValueError:
            continue
        break

    f = _short_random()
    h = rq_mult_small(rq_recip3(f), g)
    public_key = rq_encode(h)
    rho = randombytes(INPUTS_BYTES)
    return public_key, _assemble_secret_key(f, ginv, public_key, rho)


def batch_keypair(count: int) -> list[tuple[bytes, bytes]]:
    """Generate ``count`` key pairs sharing one inversion in each ring."""
    if count < 1:
        raise ValueError("count must be at least 1")
    if count == 1:
        return [keypair()]

    gs: list[list[int]] = []
    fs: list[list[int]] = []
    rhos: list[bytes] = []
    for _ in range(count):
        while True:
            g = _small_random()
            if not is_zero_mod3(g):
                break
        gs.append(g)
        fs.append(_short_random())
        rhos.append(randombytes(INPUTS_BYTES))

    # Inverses of all g in R3 from one inversion of their product.
    g_prefix = [gs[0]]
    for g in gs[1:]:
        g_prefix.append(r3_mult(g_prefix[-1], g))
    v = r3_inv(g_prefix[-1])
    ginvs: list[list[int]] = [[] for _ in range(count)]
    for i in range(count - 1, 0, -1):
        ginvs[i] = r3_mult(v, g_prefix[i - 1])
        v = r3_mult(v, gs[i])
    ginvs[0] = v

    # Values 1/(3 f) in Rq from one inversion of the product of all f.
    f_prefix = [list(fs[0])]
    for f in fs[1:]:
        f_prefix.append(rq_mult_small(f_prefix[-1], f))
    temp = rq_inv_big(f_prefix[-1])
    finvs: list[list[int]] = [[] for _ in range(count)]
    for i in range(count - 1, 0, -1):
        finvs[i] = rq_mult_big(temp, f_prefix[i - 1])
        temp = rq_mult_small(temp, fs[i])
    finvs[0] = temp

    pairs = []
    for f, g, ginv, finv, rho in zip(fs, gs, ginvs, finvs, rhos):
        public_key = rq_encode(rq_mult_small(finv, g))
        pairs.append((public_key, _assemble_secret_key(f, ginv, public_key, rho)))
    return pairs


def pubkey(secret_key: bytes) -> bytes:
    """Return the public key stored inside ``secret_key``."""
    secret_key = _check_size(secret_key, SECRET_KEY_SIZE)
    return secret_key[_PK_OFFSET:_PK_OFFSET + PUBLIC_KEY_SIZE]


def encapsulate(public_key: bytes) -> tuple[bytes, bytes]:
    """Return ``(ciphertext, shared_key)`` for ``public_key``."""
    public_key = _check_size(public_key, PUBLIC_KEY_SIZE)
    cache = _hash_prefix(4, public_key)
    r = _short_random()
    ciphertext, r_enc = _hide(r, public_key, cache)
    return ciphertext, _hash_session(1, r_enc, ciphertext)


def decapsulate(ciphertext: bytes, secret_key: bytes) -> bytes:
    """Return the shared key carried by ``ciphertext``.

    A ciphertext that does not match yields a pseudo-random key derived from
    the secret key instead of an error.
    """
    ciphertext = _check_size(ciphertext, CIPHERTEXT_SIZE)
    secret_key = _check_size(secret_key, SECRET_KEY_SIZE)
    public_key = secret_key[_PK_OFFSET:_RHO_OFFSET]
    rho = secret_key[_RHO_OFFSET:_CACHE_OFFSET]
    cache = secret_key[_CACHE_OFFSET:]

    r = _decrypt(ciphertext, secret_key)
    expected, r_enc = _hide(r, public_key, cache)
    if hmac.compare_digest(expected, ciphertext):
        return _hash_session(1, r_enc, ciphertext)
    return _hash_session(0, rho, ciphertext)