"""Multiplication and inversion of general polynomials in the sntrup761 ring Rq.

These routines accept arbitrary coefficients (not only small ones). That lets a
batch of key pairs share one inversion.
"""

from __future__ import annotations

from typing import Sequence

from unetkit.sntrup_arith import fq_recip
from unetkit.sntrup_encoding import P, Q, Q12

PADDED_LENGTH = 768
PRODUCT_LENGTH = 2 * PADDED_LENGTH - 1

_INV64 = pow(64, -1, Q)


def _center(x: int) -> int:
    return (x + Q12) % Q - Q12


def _check_length(poly: Sequence[int], length: int) -> None:
    if len(poly) != length:
        raise ValueError(f"polynomial must have {length} coefficients")


def _pack(coeffs: Sequence[int], slot_bytes: int) -> int:
    return int.from_bytes(
        b"".join(c.to_bytes(slot_bytes, "little") for c in coeffs), "little"
    )


def _plain_product(a: Sequence[int], b: Sequence[int]) -> list[int]:
    """Product of polynomials with coefficients in [0, q), reduced mod q."""
    bound = min(len(a), len(b)) * (Q - 1) ** 2
    slot_bytes = (bound.bit_length() + 8) // 8
    raw = (_pack(a, slot_bytes) * _pack(b, slot_bytes)).to_bytes(
        slot_bytes * (len(a) + len(b) - 1), "little"
    )
    return [
        int.from_bytes(raw[i:i + slot_bytes], "little") % Q
        for i in range(0, len(raw), slot_bytes)
    ]


def mult768_over64(f: Sequence[int], g: Sequence[int]) -> list[int]:
    """Return ``f * g / 64`` in GF(q)[y] for two 768-coefficient polynomials.

    The result has 1535 centred coefficients; no reduction modulo x^p-x-1 is done.
    """
    _check_length(f, PADDED_LENGTH)
    _check_length(g, PADDED_LENGTH)
    product = _plain_product([c % Q for c in f], [c % Q for c in g])
    return [_center(c * _INV64) for c in product]


def rq_mult_big(f: Sequence[int], g: Sequence[int]) -> list[int]:
    """Return ``f * g`` in Rq for two general polynomials; the result is centred."""
    _check_length(f, P)
    _check_length(g, P)
    padding = [0] * (PADDED_LENGTH - P)
    h = mult768_over64(list(f) + padding, list(g) + padding)
    low = h[:P]
    high = h[P:2 * P - 1]
    # x^p = x + 1: each high coefficient lands on positions j and j + 1.
    return [
        _center((lo + hi + hi_shifted) * 64)
        for lo, hi, hi_shifted in zip(low, high + [0], [0] + high)
    ]


def rq_inv_big(f: Sequence[int]) -> list[int]:
    """Return ``1 / (3 * f)`` in Rq for a general polynomial ``f``.

    Raises ValueError if ``f`` is not invertible.
    """
    _check_length(f, P)
    ff = [1] + [0] * (P - 2) + [Q - 1, Q - 1]
    g = [c % Q for c in reversed(f)] + [0]
    v = [0] * (P + 1)
    r = [fq_recip(3) % Q] + [0] * P
    delta = 1

    for _ in range(2 * P - 1):
        v = [0] + v[:-1]
        if delta > 0 and g[0] != 0:
            delta = -delta
            ff, g = g, ff
            v, r = r, v
        delta += 1
        f0 = ff[0]
        g0 = g[0]
        g = [(f0 * gi - g0 * fi) % Q for gi, fi in zip(g, ff)]
        r = [(f0 * ri - g0 * vi) % Q for ri, vi in zip(r, v)]
        g = g[1:] + [0]

    if delta != 0:
        raise ValueError("polynomial is not invertible in Rq")
    scale = fq_recip(ff[0])
    return [_center(scale * c) for c in reversed(v[:P])]