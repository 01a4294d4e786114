import pytest

from unetkit.random import randombytes


@pytest.mark.parametrize("length", [1, 16, 255, 256, 257, 1000])
def test_returns_requested_length(length):
    data = randombytes(length)
    assert isinstance(data, bytes)
    assert len(data) == length


def test_zero_length_is_empty():
    assert randombytes(0) == b""


def test_negative_length_rejected():
    with pytest.raises(ValueError):
        randombytes(-1)


def test_successive_calls_differ():
    first = randombytes(64)
    second = randombytes(64)
    assert len(first) == len(second) == 64
    assert first != second


def test_large_request_is_not_repeated_chunks():
    data = randombytes(1024)
    chunks = {data[offset:offset + 256] for offset in range(0, 1024, 256)}
    assert len(chunks) == 4