"""Byte encodings of polynomials used by the sntrup761 key encapsulation."""

from __future__ import annotations

from typing import Sequence

P = 761
Q = 4591
Q12 = (Q - 1) // 2
W = 286

SMALL_BYTES = (P + 3) // 4
RQ_BYTES = 1158
ROUNDED_BYTES = 1007

_ROUNDED_MODULUS = (Q + 2) // 3
_MAX_MODULUS = 16384
_UINT32_LIMIT = 1 << 32


def uint32_divmod_uint14(x: int, m: int) -> tuple[int, int]:
    """Return ``(x // m, x % m)`` for a 32-bit ``x`` and ``0 < m < 16384``."""
    if not 0 < m < _MAX_MODULUS:
        raise ValueError("modulus must be between 1 and 16383")
    if not 0 <= x < _UINT32_LIMIT:
        raise ValueError("dividend must be a 32-bit unsigned integer")
    return divmod(x, m)


def _check_encode_input(values: Sequence[int], moduli: Sequence[int]) -> None:
    if len(values) != len(moduli):
        raise ValueError("values and moduli must have the same length")
    for value, modulus in zip(values, moduli):
        if not 0 < modulus < _MAX_MODULUS:
            raise ValueError("each modulus must be between 1 and 16383")
        if not 0 <= value < modulus:
            raise ValueError("each value must lie in [0, modulus)")


def encode(values: Sequence[int], moduli: Sequence[int]) -> bytes:
    """Pack ``values[i]`` in range ``[0, moduli[i])`` into a compact byte string."""
    _check_encode_input(values, moduli)
    out = bytearray()
    rs = list(values)
    ms = list(moduli)

    while len(rs) > 1:
        next_rs = []
        next_ms = []
        for r_lo, r_hi, m_lo, m_hi in zip(rs[0::2], rs[1::2], ms[0::2], ms[1::2]):
            r = r_lo + r_hi * m_lo
            m = m_hi * m_lo
            while m >= _MAX_MODULUS:
                out.append(r & 0xFF)
                r >>= 8
                m = (m + 255) >> 8
            next_rs.append(r)
            next_ms.append(m)
        if len(rs) % 2:
            next_rs.append(rs[-1])
            next_ms.append(ms[-1])
        rs, ms = next_rs, next_ms

    if rs:
        r, m = rs[0], ms[0]
        while m > 1:
            out.append(r & 0xFF)
            r >>= 8
            m = (m + 255) >> 8
    return bytes(out)


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0

    def byte(self) -> int:
        if self._pos >= len(self._data):
            raise ValueError("encoded data is too short")
        value = self._data[self._pos]
        self._pos += 1
        return value


def _decode(reader: _Reader, moduli: list[int]) -> list[int]:
    n = len(moduli)
    if n == 0:
        return []
    if n == 1:
        m = moduli[0]
        if m == 1:
            return [0]
        if m <= 256:
            return [uint32_divmod_uint14(reader.byte(), m)[1]]
        low = reader.byte()
        return [uint32_divmod_uint14(low + (reader.byte() << 8), m)[1]]

    bottoms: list[tuple[int, int]] = []
    upper_moduli: list[int] = []
    for m_lo, m_hi in zip(moduli[0::2], moduli[1::2]):
        m = m_lo * m_hi
        if m > 256 * 16383:
            low = reader.byte()
            bottoms.append((256 * 256, low + 256 * reader.byte()))
            upper_moduli.append((((m + 255) >> 8) + 255) >> 8)
        elif m >= _MAX_MODULUS:
            bottoms.append((256, reader.byte()))
            upper_moduli.append((m + 255) >> 8)
        else:
            bottoms.append((1, 0))
            upper_moduli.append(m)
    if n % 2:
        upper_moduli.append(moduli[-1])

    upper = _decode(reader, upper_moduli)
    out: list[int] = []
    for (scale, bottom), top, m_lo, m_hi in zip(bottoms, upper, moduli[0::2], moduli[1::2]):
        value = (bottom + scale * top) & (_UINT32_LIMIT - 1)
        quotient, r0 = uint32_divmod_uint14(value, m_lo)
        r1 = uint32_divmod_uint14(quotient, m_hi)[1]
        out.extend((r0, r1))
    if n % 2:
        out.append(upper[-1])
    return out


def decode(data: bytes, moduli: Sequence[int]) -> list[int]:
    """Unpack values written by :func:`encode` for the same ``moduli``.

    Raises ValueError if ``data`` holds too few bytes.
    """
    ms = list(moduli)
    if any(not 0 < m < _MAX_MODULUS for m in ms):
        raise ValueError("each modulus must be between 1 and 16383")
    return _decode(_Reader(bytes(data)), ms)


def _check_length(poly: Sequence[int]) -> None:
    if len(poly) != P:
        raise ValueError(f"polynomial must have {P} coefficients")


def small_encode(poly: Sequence[int]) -> bytes:
    """Pack a polynomial with coefficients in {-1, 0, 1}, four per byte."""
    _check_length(poly)
    if any(c not in (-1, 0, 1) for c in poly):
        raise ValueError("coefficients must be -1, 0 or 1")
    out = bytearray()
    full = P - P % 4
    for a, b, c, d in zip(*(iter(poly[:full]),) * 4):
        out.append(((a + 1) + ((b + 1) << 2) + ((c + 1) << 4) + ((d + 1) << 6)) & 0xFF)
    out.append(poly[full] + 1)
    return bytes(out)


def small_decode(data: bytes) -> list[int]:
    """Unpack a polynomial written by :func:`small_encode`."""
    if len(data) != SMALL_BYTES:
        raise ValueError(f"small encoding must be {SMALL_BYTES} bytes")
    poly: list[int] = []
    for byte in data[:-1]:
        poly.extend(((byte >> shift) & 3) - 1 for shift in (0, 2, 4, 6))
    poly.append((data[-1] & 3) - 1)
    return poly


def rq_encode(poly: Sequence[int]) -> bytes:
    """Pack a polynomial with coefficients in [-(q-1)/2, (q-1)/2]."""
    _check_length(poly)
    if any(not -Q12 <= c <= Q12 for c in poly):
        raise ValueError("coefficients must lie in [-2295, 2295]")
    return encode([c + Q12 for c in poly], [Q] * P)


def rq_decode(data: bytes) -> list[int]:
    """Unpack a polynomial written by :func:`rq_encode`."""
    if len(data) != RQ_BYTES:
        raise ValueError(f"Rq encoding must be {RQ_BYTES} bytes")
    return [r - Q12 for r in decode(data, [Q] * P)]


def rounded_encode(poly: Sequence[int]) -> bytes:
    """Pack a polynomial, rounding each coefficient to a multiple of 3."""
    _check_length(poly)
    if any(not -Q12 <= c <= Q12 for c in poly):
        raise ValueError("coefficients must lie in [-2295, 2295]")
    values = []
    for c in poly:
        rounded = 3 * ((10923 * c + 16384) >> 15)
        values.append((((rounded + Q12) & 16383) * 10923) >> 15)
    return encode(values, [_ROUNDED_MODULUS] * P)


def rounded_decode(data: bytes) -> list[int]:
    """Unpack a polynomial written by :func:`rounded_encode`."""
    if len(data) != ROUNDED_BYTES:
        raise ValueError(f"rounded encoding must be {ROUNDED_BYTES} bytes")
    return [3 * r - Q12 for r in decode(data, [_ROUNDED_MODULUS] * P)]