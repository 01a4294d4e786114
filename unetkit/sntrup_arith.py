"""Arithmetic in the sntrup761 rings R3 = GF(3)[x]/(x^p-x-1) and Rq = GF(q)[x]/(x^p-x-1)."""

from __future__ import annotations

from typing import Sequence

from unetkit.sntrup_encoding import P, Q, Q12, W

_UINT32_LIMIT = 1 << 32

# F3 reduction of a value in -2..2, indexed by value + 2.
_F3_SMALL = (1, -1, 0, 1, -1)


def f3_freeze(x: int) -> int:
    """Return the representative of ``x`` mod 3 in {-1, 0, 1}.

    Valid for -16384 <= x < 16384.
    """
    if not -16384 <= x < 16384:
        raise ValueError("f3_freeze input must lie in [-16384, 16384)")
    return x - 3 * ((10923 * x + 16384) >> 15)


def fq_freeze(x: int) -> int:
    """Return the representative of ``x`` mod q in [-(q-1)/2, (q-1)/2].

    Valid for -7000000 < x < 7000000.
    """
    if not -7000000 < x < 7000000:
        raise ValueError("fq_freeze input must lie in (-7000000, 7000000)")
    x -= Q * ((57 * x) >> 18)
    x -= Q * ((29235 * x + 67108864) >> 27)
    return x


def fq_bigfreeze(x: int) -> int:
    """Return the centred representative of ``x`` mod q for larger inputs."""
    x -= Q * ((4 * x) >> 14)
    x -= Q * ((57 * x) >> 18)
    x -= Q * ((29235 * x + 67108864) >> 27)
    x -= Q * ((29235 * x + 67108864) >> 27)
    return x


def _center_q(x: int) -> int:
    return (x + Q12) % Q - Q12


def _center_3(x: int) -> int:
    return (x + 1) % 3 - 1


def fq_recip(a: int) -> int:
    """Return the inverse of ``a`` in GF(q), centred; 0 maps to 0."""
    return _center_q(pow(a % Q, Q - 2, Q))


def _check_length(poly: Sequence[int]) -> None:
    if len(poly) != P:
        raise ValueError(f"polynomial must have {P} coefficients")


def _check_small(poly: Sequence[int]) -> None:
    _check_length(poly)
    if any(c not in (-1, 0, 1) for c in poly):
        raise ValueError("coefficients must be -1, 0 or 1")


def _check_uint32(values: Sequence[int]) -> None:
    if any(not 0 <= v < _UINT32_LIMIT for v in values):
        raise ValueError("values must be 32-bit unsigned integers")


def sort_uint32(values: Sequence[int]) -> list[int]:
    """Return the 32-bit unsigned ``values`` in ascending order."""
    _check_uint32(values)
    return sorted(values)


def short_fromlist(values: Sequence[int]) -> list[int]:
    """Turn ``p`` random 32-bit words into a polynomial with exactly ``w`` nonzero coefficients."""
    if len(values) != P:
        raise ValueError(f"list must hold {P} values")
    _check_uint32(values)
    marked = [v & 0xFFFFFFFE for v in values[:W]]
    marked += [(v & 0xFFFFFFFC) | 1 for v in values[W:]]
    return [(v & 3) - 1 for v in sorted(marked)]


def wforce(poly: Sequence[int]) -> list[int]:
    """Return ``poly`` if its weight is ``w``, else the fixed weight-``w`` polynomial."""
    _check_small(poly)
    weight = sum(c & 1 for c in poly)
    if weight == W:
        return list(poly)
    return [1] * W + [0] * (P - W)


def _kronecker_mul(a: Sequence[int], b: Sequence[int], slot_bytes: int) -> list[int]:
    """Multiply polynomials with nonnegative coefficients by packing them into integers."""
    packed_a = int.from_bytes(b"".join(c.to_bytes(slot_bytes, "little") for c in a), "little")
    packed_b = int.from_bytes(b"".join(c.to_bytes(slot_bytes, "little") for c in b), "little")
    raw = (packed_a * packed_b).to_bytes(slot_bytes * (len(a) + len(b) - 1), "little")
    return [int.from_bytes(raw[i:i + slot_bytes], "little") for i in range(0, len(raw), slot_bytes)]


def _ring_mul(a: Sequence[int], b: Sequence[int], modulus: int) -> list[int]:
    """Product of residues in GF(modulus)[x]/(x^p-x-1), coefficients in [0, modulus)."""
    bound = P * (modulus - 1) ** 2
    slot_bytes = (bound.bit_length() + 8) // 8
    product = _kronecker_mul(a, b, slot_bytes)
    low = product[:P]
    high = product[P:]
    # x^p = x + 1: fold each high coefficient onto positions j and j + 1.
    return [
        (lo + hi + hi_shifted) % modulus
        for lo, hi, hi_shifted in zip(low, high + [0], [0] + high)
    ]


def r3_mult(f: Sequence[int], g: Sequence[int]) -> list[int]:
    """Return ``f * g`` in R3 with coefficients in {-1, 0, 1}."""
    _check_small(f)
    _check_small(g)
    product = _ring_mul([c % 3 for c in f], [c % 3 for c in g], 3)
    return [_center_3(c) for c in product]


def _r3_divsteps(g: Sequence[int]) -> tuple[int, int, list[int]]:
    f = [1] + [0] * (P - 2) + [-1, -1]
    gg = list(reversed(g)) + [0]
    v = [0] * (P + 1)
    r = [1] + [0] * P
    delta = 1

    for _ in range(2 * P - 1):
        v = [0] + v[:-1]
        sign = -gg[0] * f[0]
        if delta > 0 and gg[0] != 0:
            delta = -delta
            f, gg = gg, f
            v, r = r, v
        delta += 1
        gg = [_F3_SMALL[gi + sign * fi + 2] for gi, fi in zip(gg, f)]
        r = [_F3_SMALL[ri + sign * vi + 2] for ri, vi in zip(r, v)]
        gg = gg[1:] + [0]

    return delta, f[0], v


def is_zero_mod3(poly: Sequence[int]) -> bool:
    """Return True if ``poly`` shares a factor with x^p-x-1 over GF(3).

    Such a polynomial vanishes modulo one of the irreducible factors and has
    no inverse in R3.
    """
    _check_small(poly)
    delta, _, _ = _r3_divsteps(poly)
    return delta != 0


def r3_inv(g: Sequence[int]) -> list[int]:
    """Return the inverse of ``g`` in R3.

    Raises ValueError if ``g`` is not invertible.
    """
    _check_small(g)
    delta, f0, v = _r3_divsteps(g)
    if delta != 0:
        raise ValueError("polynomial is not invertible in R3")
    return [f0 * c for c in reversed(v[:P])]


def rq_mult_small(f: Sequence[int], g: Sequence[int]) -> list[int]:
    """Return ``f * g`` in Rq for a small ``g``; the result is centred."""
    _check_length(f)
    _check_small(g)
    product = _ring_mul([c % Q for c in f], [c % Q for c in g], Q)
    return [_center_q(c) for c in product]


def rq_mult3(f: Sequence[int]) -> list[int]:
    """Return ``3 * f`` in Rq; ``f`` must have centred coefficients."""
    _check_length(f)
    if any(not -Q12 <= c <= Q12 for c in f):
        raise ValueError(f"coefficients must lie in [-{Q12}, {Q12}]")
    return [_center_q(3 * c) for c in f]


def rq_recip3(f: Sequence[int]) -> list[int]:
    """Return ``1 / (3 * f)`` in Rq for a small ``f``.

    Raises ValueError if ``f`` is not invertible.
    """
    _check_small(f)
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
    return [_center_q(scale * c) for c in reversed(v[:P])]


def round_poly(poly: Sequence[int]) -> list[int]:
    """Round every coefficient to the nearest multiple of 3."""
    _check_length(poly)
    return [c - f3_freeze(c) for c in poly]