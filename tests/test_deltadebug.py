from seqshrink import DeltaDebugShrinker
from seqshrink.deltadebug import partition
from hypothesis import given, strategies as st, example
import math
import pytest


def test_finds_non_contiguous_pair():
    shrinker = DeltaDebugShrinker([1, 2, 3, 4, 5, 6, 7, 8])
    assert shrinker.find_minimal(lambda xs: 3 in xs and 7 in xs) == [3, 7]


def test_finds_single_element():
    shrinker = DeltaDebugShrinker([1, 2, 3, 4, 5])
    assert shrinker.find_minimal(lambda xs: 3 in xs) == [3]


def test_keeps_relative_order():
    shrinker = DeltaDebugShrinker(list('zyxwvutsrq'))
    assert shrinker.find_minimal(
        lambda xs: 'w' in xs and 'r' in xs and 'y' in xs) == ['y', 'w', 'r']


def test_works_on_strings():
    shrinker = DeltaDebugShrinker('hello world')
    assert shrinker.find_minimal(lambda s: 'o w' in s) == 'o w'


def test_single_element_can_shrink_to_empty():
    assert DeltaDebugShrinker([1]).find_minimal(lambda xs: True) == []
    assert DeltaDebugShrinker([1]).find_minimal(lambda xs: len(xs) > 0) == [1]


@example(([1, 1, 2], {1}))
@given(
    st.lists(st.integers(0, 20), min_size=1, max_size=30).flatmap(
        lambda ls: st.tuples(st.just(ls), st.sets(st.sampled_from(ls)))))
def test_result_is_one_minimal(data):
    ls, targets = data

    def oracle(xs):
        return all(t in xs for t in targets)

    result = DeltaDebugShrinker(ls).find_minimal(oracle)
    assert oracle(result)
    assert len(result) <= len(ls)
    for i in range(len(result)):
        assert not oracle(result[:i] + result[i + 1:])


@given(st.integers(2, 128), st.data())
def test_uses_few_oracle_calls(n, data):
    a = data.draw(st.integers(0, n - 1))
    b = data.draw(st.integers(0, n - 1))
    shrinker = DeltaDebugShrinker(list(range(n)))
    minimal, calls = shrinker.minimize_with_stats(
        lambda xs: a in xs and b in xs)
    assert minimal == sorted({a, b})
    assert calls <= 4 * n * max(1, math.ceil(math.log2(n)))


def test_far_fewer_calls_than_subsets():
    shrinker = DeltaDebugShrinker(list(range(64)))
    minimal, calls = shrinker.minimize_with_stats(
        lambda xs: 10 in xs and 50 in xs)
    assert minimal == [10, 50]
    assert calls < 64 * 6


def test_shrink_steps_get_smaller():
    shrinker = DeltaDebugShrinker([1, 2, 3, 4, 5, 6])
    steps = list(shrinker.shrink_steps(lambda xs: 2 in xs and 5 in xs))
    assert steps
    for u, v in zip(steps, steps[1:]):
        assert len(v) < len(u)
    assert steps[-1] == [2, 5]


def test_shrink_steps_only_does_the_work_asked_for():
    calls = []

    def oracle(xs):
        calls.append(xs)
        return 10 in xs and 50 in xs

    steps = DeltaDebugShrinker(list(range(64))).shrink_steps(oracle)
    first = next(steps)
    assert len(first) == 48
    assert len(calls) <= 5
    steps.close()
    assert len(calls) <= 5


def test_shrink_steps_ends_when_budget_runs_out():
    shrinker = DeltaDebugShrinker(list(range(64)), max_calls=5)
    steps = list(shrinker.shrink_steps(lambda xs: 10 in xs and 50 in xs))
    assert [len(s) for s in steps] == [48]
    assert shrinker.stop_reason == 'budget'


def test_rejects_numbers():
    with pytest.raises(ValueError):
        DeltaDebugShrinker(100)


def test_returns_original_when_already_minimal():
    minimal, calls = DeltaDebugShrinker([1, 2]).minimize_with_stats(
        lambda xs: len(xs) == 2)
    assert minimal == [1, 2]
    assert calls > 0


@given(st.integers(1, 50), st.integers(1, 50))
def test_partition_covers_range(n, granularity):
    chunks = partition(n, granularity)
    assert chunks[0][0] == 0
    assert chunks[-1][1] == n
    for (_, v), (u, _) in zip(chunks, chunks[1:]):
        assert v == u
    assert len(chunks) == min(n, granularity)
