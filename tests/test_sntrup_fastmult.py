import random

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from unetkit.sntrup_arith import rq_mult3, rq_mult_small, rq_recip3
from unetkit.sntrup_encoding import P, Q, Q12
from unetkit.sntrup_fastmult import mult768_over64, rq_inv_big, rq_mult_big

ONE = [1] + [0] * (P - 1)


def _random_rq(seed):
    rng = random.Random(seed)
    return [rng.randint(-Q12, Q12) for _ in range(P)]


def _random_small(seed):
    rng = random.Random(seed)
    return [rng.choice((-1, 0, 1)) for _ in range(P)]


def _centered(x):
    return (x + Q12) % Q - Q12


def test_mult768_scales_by_inverse_of_64():
    f = [64] + [0] * 767
    g = [1] + [0] * 767
    h = mult768_over64(f, g)
    assert len(h) == 1535
    assert h[0] == 1
    assert all(c == 0 for c in h[1:])


def test_mult768_times_64_recovers_shifted_factor():
    rng = random.Random(7)
    g = [rng.randint(-Q12, Q12) for _ in range(768)]
    f = [0, 64] + [0] * 766
    h = mult768_over64(f, g)
    assert h[0] == 0
    assert h[1:769] == g
    assert all(c == 0 for c in h[769:])


@settings(max_examples=20, deadline=None)
@given(
    st.lists(st.integers(-Q12, Q12), min_size=768, max_size=768),
    st.lists(st.integers(-Q12, Q12), min_size=768, max_size=768),
)
def test_mult768_is_commutative_and_centred(f, g):
    h = mult768_over64(f, g)
    assert h == mult768_over64(g, f)
    assert all(-Q12 <= c <= Q12 for c in h)


def test_mult768_rejects_wrong_length():
    with pytest.raises(ValueError):
        mult768_over64([0] * 767, [0] * 768)


def test_rq_mult_big_identity():
    f = _random_rq(1)
    assert rq_mult_big(f, ONE) == f
    assert rq_mult_big(ONE, f) == f


def test_rq_mult_big_matches_small_multiplication():
    f = _random_rq(2)
    g = _random_small(3)
    assert rq_mult_big(f, g) == rq_mult_small(f, g)


def test_rq_mult_big_wraps_x_to_the_p():
    x = [0, 1] + [0] * (P - 2)
    x_top = [0] * (P - 1) + [1]
    # x * x^(p-1) = x^p = x + 1
    assert rq_mult_big(x, x_top) == [1, 1] + [0] * (P - 2)


def test_rq_mult_big_is_commutative():
    f = _random_rq(4)
    g = _random_rq(5)
    assert rq_mult_big(f, g) == rq_mult_big(g, f)


def test_rq_mult_big_rejects_wrong_length():
    with pytest.raises(ValueError):
        rq_mult_big([0] * P, [0] * (P + 1))


def test_rq_inv_big_inverts_three_times_input():
    f = _random_rq(6)
    inverse = rq_inv_big(f)
    assert all(-Q12 <= c <= Q12 for c in inverse)
    assert rq_mult_big(inverse, rq_mult3(f)) == ONE


def test_rq_inv_big_agrees_with_small_reciprocal():
    f = _random_small(8)
    assert rq_inv_big(f) == rq_recip3(f)


def test_rq_inv_big_of_one_is_inverse_of_three():
    inverse = rq_inv_big(ONE)
    assert _centered(3 * inverse[0]) == 1
    assert all(c == 0 for c in inverse[1:])


def test_rq_inv_big_rejects_zero():
    with pytest.raises(ValueError):
        rq_inv_big([0] * P)


def test_rq_inv_big_rejects_wrong_length():
    with pytest.raises(ValueError):
        rq_inv_big([1] * (P - 1))