from seqshrink import TargetedShrinker, shrink_preserving
from hypothesis import given, strategies as st
import math


def test_targeted_shrink_int_toward_zero():
    shrunk = list(TargetedShrinker(100, 0).shrink())
    assert shrunk[-1] == 0
    for u, v in zip(shrunk, shrunk[1:]):
        assert u > v


def test_targeted_shrink_int_toward_target():
    shrunk = list(TargetedShrinker(100, 42))
    assert shrunk[-1] == 42
    assert all(42 <= x <= 100 for x in shrunk)


@given(st.integers(-1000, 1000), st.integers(-1000, 1000))
def test_targeted_int_always_reaches_target(current, target):
    shrunk = list(TargetedShrinker(current, target))
    if current == target:
        assert shrunk == []
    else:
        assert shrunk[-1] == target
        distances = [abs(current - target)] + [abs(x - target) for x in shrunk]
        for u, v in zip(distances, distances[1:]):
            assert v < u


def test_targeted_shrink_float():
    prev = 100.0
    shrunk = []
    for value in TargetedShrinker(100.0, 42.0):
        shrunk.append(value)
        if len(shrunk) == 10:
            break
    assert shrunk
    for value in shrunk:
        assert abs(value - 42.0) < abs(prev - 42.0)
        prev = value


def test_targeted_float_terminates():
    shrunk = list(TargetedShrinker(1.0, 0.0))
    assert shrunk
    assert len(shrunk) < 2000
    assert not list(TargetedShrinker(math.inf, 0.0))


def test_shrink_preserving_sorted():
    for candidate in shrink_preserving(
        [1, 3, 5, 7, 9], lambda v: all(u <= w for u, w in zip(v, v[1:]))
    ):
        assert candidate == sorted(candidate)


def test_shrink_preserving_even():
    candidates = list(shrink_preserving(
        [2, 4, 6, 8], lambda v: all(x % 2 == 0 for x in v)))
    assert candidates
    assert all(x % 2 == 0 for c in candidates for x in c)


def test_shrink_preserving_int_positive():
    candidates = list(shrink_preserving(100, lambda x: x > 0))
    assert candidates == list(range(99, 89, -1))
    assert list(shrink_preserving(3, lambda x: x > 0)) == [2, 1]
