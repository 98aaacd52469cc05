from numbers import Number
import math


def size_of(value):
    """The default size metric: length for anything sized, magnitude for
    numbers."""
    if isinstance(value, Number):
        return abs(value)
    return len(value)


def shrinkable(value):
    """Whether the structural moves apply to value: numbers, or sequences
    that support len, slicing and concatenation."""
    if isinstance(value, Number):
        return True
    return hasattr(value, '__len__') and hasattr(value, '__getitem__')


def cache_key(value):
    """A hashable key identifying value, or None if there isn't one.

    Keys carry types, so 1, 1.0 and True (or sequences of them) never share
    an oracle answer.
    """
    if isinstance(value, (str, bytes, Number)):
        return (type(value), value)
    try:
        key = (type(value),) + tuple((type(x), x) for x in value)
        hash(key)
    except TypeError:
        return None
    return key


def chunk_bounds(n):
    """Half-open intervals removed by the chunk moves for a length n
    sequence."""
    bounds = []
    if n >= 2:
        h = n // 2
        bounds.append((0, h))
        bounds.append((h, n))
    if n >= 3:
        a = n // 3
        b = 2 * n // 3
        bounds.append((0, a))
        bounds.append((a, b))
        bounds.append((b, n))
    if n >= 4:
        q = n // 4
        bounds.append((q, q + n // 2))
    return bounds


def integer_reductions(n):
    """Integers closer to zero than n: zero, then -n for negative n, then
    n moved towards zero by half its magnitude, a quarter, and so on down
    to a step of one."""
    if n == 0:
        return
    yield 0
    if n < 0:
        yield -n
    sign = 1 if n > 0 else -1
    magnitude = abs(n)
    step = magnitude // 2
    while step > 0:
        yield sign * (magnitude - step)
        step //= 2


def float_reductions(x):
    if x == 0 or math.isnan(x) or math.isinf(x):
        return
    yield 0.0
    if x < 0:
        yield -x
    truncated = float(math.trunc(x))
    if truncated != x:
        yield truncated
    yield x / 2
    if truncated == x:
        for n in integer_reductions(int(x)):
            yield float(n)


def number_reductions(value):
    if isinstance(value, bool):
        if value:
            yield False
    elif isinstance(value, int):
        yield from integer_reductions(value)
    else:
        yield from float_reductions(float(value))


def reductions(seq):
    """Yield the structural reductions of seq in their canonical order.

    Single removals, then chunk removals, then the empty sequence, then
    adjacent pair removals. Every candidate has the same type as seq.
    Numbers instead get number_reductions, which move them towards zero.
    """
    if isinstance(seq, Number):
        yield from number_reductions(seq)
        return
    n = len(seq)
    for i in range(n):
        yield seq[:i] + seq[i + 1:]
    for u, v in chunk_bounds(n):
        yield seq[:u] + seq[v:]
    if n > 0:
        yield seq[:0]
    for i in range(n - 1):
        yield seq[:i] + seq[i + 2:]


def count_reductions(n):
    if n == 0:
        return 0
    return n + (n - 1) + len(chunk_bounds(n)) + 1


def drop_reductions(seq):
    """The smaller vocabulary used on operation sequences: drop one element,
    keep either half, drop the first or the last element. Never yields an
    empty sequence."""
    n = len(seq)
    for i in range(n):
        if n > 1:
            yield seq[:i] + seq[i + 1:]
    if n > 2:
        h = n // 2
        yield seq[:h]
        yield seq[h:]
    if n > 1:
        yield seq[1:]
        yield seq[:n - 1]
