import math

from seqshrink.moves import reductions


class TargetedShrinker(object):
    """Moves a number towards a chosen target rather than towards zero,
    halving the remaining distance each step."""

    def __init__(self, current, target):
        self.current = current
        self.target = target

    def shrink(self):
        if isinstance(self.current, int) and isinstance(self.target, int):
            return self.__integers()
        return self.__floats()

    def __iter__(self):
        return self.shrink()

    def __integers(self):
        current = self.current
        target = self.target
        while current != target:
            diff = current - target
            step = max(abs(diff) // 2, 1)
            if diff > 0:
                current = max(current - step, target)
            else:
                current = min(current + step, target)
            yield current

    def __floats(self):
        current = float(self.current)
        target = float(self.target)
        if math.isnan(current) or math.isinf(current):
            return
        while abs(current - target) >= 2 ** -52:
            new = target + (current - target) / 2
            if new == current:
                return
            current = new
            yield current


def shrink_preserving(value, invariant, limit=10):
    """Simpler versions of value for which invariant still holds.

    Sequences yield the structural reductions that satisfy invariant;
    integers yield up to limit values counting down from value - 1 towards
    zero.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        found = 0
        for candidate in range(value - 1, -1, -1):
            if found >= limit:
                return
            if invariant(candidate):
                found += 1
                yield candidate
        return
    for candidate in reductions(value):
        if invariant(candidate):
            yield candidate
