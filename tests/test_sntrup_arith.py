import random

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from unetkit.sntrup_arith import (
    f3_freeze,
    fq_bigfreeze,
    fq_freeze,
    fq_recip,
    is_zero_mod3,
    r3_inv,
    r3_mult,
    round_poly,
    rq_mult3,
    rq_mult_small,
    rq_recip3,
    short_fromlist,
    sort_uint32,
    wforce,
)
from unetkit.sntrup_encoding import P, Q, Q12, W

ONE = [1] + [0] * (P - 1)


def _monomial(degree):
    poly = [0] * P
    poly[degree] = 1
    return poly


def _random_small(seed):
    rng = random.Random(seed)
    return [rng.choice((-1, 0, 1)) for _ in range(P)]


def _random_short(seed):
    rng = random.Random(seed)
    return short_fromlist([rng.getrandbits(32) for _ in range(P)])


@given(st.integers(min_value=-16384, max_value=16383))
def test_f3_freeze_is_centred_residue(x):
    result = f3_freeze(x)
    assert result in (-1, 0, 1)
    assert (x - result) % 3 == 0


def test_f3_freeze_rejects_out_of_range():
    with pytest.raises(ValueError):
        f3_freeze(16384)


@given(st.integers(min_value=-6999999, max_value=6999999))
def test_fq_freeze_is_centred_residue(x):
    result = fq_freeze(x)
    assert -Q12 <= result <= Q12
    assert (x - result) % Q == 0


def test_fq_freeze_rejects_out_of_range():
    with pytest.raises(ValueError):
        fq_freeze(7000000)


@given(st.integers(min_value=-20_000_000, max_value=20_000_000))
def test_fq_bigfreeze_is_centred_residue(x):
    result = fq_bigfreeze(x)
    assert -Q12 <= result <= Q12
    assert (x - result) % Q == 0


@given(st.integers(min_value=1, max_value=Q - 1))
def test_fq_recip_inverts(a):
    inverse = fq_recip(a)
    assert -Q12 <= inverse <= Q12
    assert (a * inverse) % Q == 1


def test_fq_recip_of_zero_is_zero():
    assert fq_recip(0) == 0


@given(st.lists(st.integers(min_value=0, max_value=2**32 - 1), max_size=50))
def test_sort_uint32_orders_values(values):
    result = sort_uint32(values)
    assert sorted(values) == result


def test_sort_uint32_rejects_negative():
    with pytest.raises(ValueError):
        sort_uint32([1, -1])


def test_short_fromlist_of_zeros():
    assert short_fromlist([0] * P) == [-1] * W + [0] * (P - W)


def test_short_fromlist_has_weight_w():
    poly = _random_short(7)
    assert len(poly) == P
    assert sum(1 for c in poly if c) == W
    assert set(poly) <= {-1, 0, 1}


def test_short_fromlist_rejects_wrong_length():
    with pytest.raises(ValueError):
        short_fromlist([0] * (P - 1))


def test_wforce_keeps_weight_w_polynomial():
    poly = _random_short(3)
    assert wforce(poly) == poly


def test_wforce_replaces_other_weight():
    assert wforce([0] * P) == [1] * W + [0] * (P - W)


def test_r3_mult_wraps_through_ring():
    result = r3_mult(_monomial(1), _monomial(P - 1))
    assert result == [1, 1] + [0] * (P - 2)


def test_r3_mult_identity():
    poly = _random_small(11)
    assert r3_mult(poly, ONE) == poly


def test_r3_mult_commutes():
    f = _random_small(1)
    g = _random_small(2)
    assert r3_mult(f, g) == r3_mult(g, f)


def test_r3_inv_roundtrip():
    g = _random_small(5)
    assert not is_zero_mod3(g)
    assert r3_mult(g, r3_inv(g)) == ONE


def test_r3_inv_of_one():
    assert r3_inv(ONE) == ONE


def test_r3_inv_rejects_zero():
    with pytest.raises(ValueError):
        r3_inv([0] * P)


def test_is_zero_mod3():
    assert is_zero_mod3([0] * P) is True
    assert is_zero_mod3(ONE) is False


def test_r3_mult_rejects_non_small():
    with pytest.raises(ValueError):
        r3_mult([2] + [0] * (P - 1), ONE)


def test_rq_mult_small_wraps_through_ring():
    result = rq_mult_small(_monomial(1), _monomial(P - 1))
    assert result == [1, 1] + [0] * (P - 2)


def test_rq_mult_small_identity_centres():
    rng = random.Random(4)
    f = [rng.randrange(-Q12, Q12 + 1) for _ in range(P)]
    assert rq_mult_small(f, ONE) == f
    shifted = [c + Q for c in f]
    assert rq_mult_small(shifted, ONE) == f


@settings(max_examples=30)
@given(st.lists(st.integers(min_value=-Q12, max_value=Q12), min_size=P, max_size=P))
def test_rq_mult3_scales_by_three(f):
    result = rq_mult3(f)
    for original, scaled in zip(f, result):
        assert -Q12 <= scaled <= Q12
        assert (3 * original - scaled) % Q == 0


def test_rq_mult3_rejects_uncentred():
    with pytest.raises(ValueError):
        rq_mult3([Q12 + 1] + [0] * (P - 1))


def test_rq_recip3_inverts_three_times_f():
    f = _random_short(9)
    h = rq_recip3(f)
    assert rq_mult_small(rq_mult3(h), f) == ONE


def test_rq_recip3_rejects_zero():
    with pytest.raises(ValueError):
        rq_recip3([0] * P)


@settings(max_examples=30)
@given(st.lists(st.integers(min_value=-Q12, max_value=Q12), min_size=P, max_size=P))
def test_round_poly_rounds_to_multiples_of_three(poly):
    rounded = round_poly(poly)
    for original, value in zip(poly, rounded):
        assert value % 3 == 0
        assert abs(value - original) <= 1


def test_round_poly_rejects_wrong_length():
    with pytest.raises(ValueError):
        round_poly([0] * 3)