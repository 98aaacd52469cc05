from enum import Enum

from seqshrink.moves import cache_key, reductions, size_of
from seqshrink.shrinker import Shrinker, phase


class CascadingShrinker(object):
    """Enumerates every structural reduction of a sequence without asking
    an oracle. Callers filter and pick."""

    def __init__(self, original):
        self.original = original

    def shrink(self):
        return reductions(self.original)

    def __iter__(self):
        return self.shrink()

    def smallest(self, oracle, size=size_of):
        """The smallest candidate satisfying oracle, earliest first among
        equals, or None if no candidate does."""
        best = None
        for candidate in self.shrink():
            if best is not None and size(candidate) >= size(best):
                continue
            if oracle(candidate):
                best = candidate
        return best


class GuidedShrinker(Shrinker):
    """Greedy descent over the structural reductions.

    Each pass tries the reductions of the current value in order and
    restarts from the first one that is strictly smaller and still
    satisfies the oracle. Stops when a whole pass finds nothing. The result
    is only locally minimal: failures that need two elements removed at
    once are invisible to it (use DeltaDebugShrinker for those).
    """

    name = 'guided'

    def find_minimal(self, oracle):
        return self.run(oracle).minimal

    def find_minimal_with_stats(self, oracle):
        result = self.run(oracle)
        return result.minimal, result.calls

    def search(self, current):
        passes = 0
        while True:
            passes += 1
            self.debug('Pass %d from size %d' % (passes, self.size(current)))
            for candidate in reductions(current):
                if self.smaller(candidate, current) and self.criterion(
                    candidate
                ):
                    current = candidate
                    break
            else:
                return current


class ShrinkStrategy(Enum):
    DEPTH_FIRST = 'depth-first'
    BREADTH_FIRST = 'breadth-first'


DEFAULT_MAX_DEPTH = 20


class ConfigurableShrinker(Shrinker):
    """Depth-first or breadth-first search over the structural reductions,
    bounded by max_depth.

    Depth first commits to the first reduction that works at each step, so
    it is cheap but depends on the order of the reductions. Breadth first
    expands every still-failing candidate of a level before moving on and
    returns the smallest one found, so it finds the minimum reachable in
    max_depth steps at a cost that can grow exponentially with depth.
    """

    def __init__(self, original, strategy, **kwargs):
        super().__init__(original, **kwargs)
        self.strategy = ShrinkStrategy(strategy)
        self.max_depth = DEFAULT_MAX_DEPTH

    @property
    def name(self):
        return self.strategy.value

    def with_max_depth(self, max_depth):
        if max_depth < 0:
            raise ValueError('max_depth must be non-negative')
        self.max_depth = max_depth
        return self

    def find_minimal(self, oracle):
        return self.run(oracle).minimal

    def find_minimal_with_stats(self, oracle):
        result = self.run(oracle)
        return result.minimal, result.calls

    def search(self, initial):
        if self.strategy is ShrinkStrategy.DEPTH_FIRST:
            return self.depth_first(initial)
        else:
            return self.breadth_first(initial)

    @phase('descend')
    def depth_first(self, current):
        for depth in range(self.max_depth):
            for candidate in reductions(current):
                if self.smaller(candidate, current) and self.criterion(
                    candidate
                ):
                    self.debug('Depth %d: size %d' % (
                        depth + 1, self.size(candidate)))
                    current = candidate
                    break
            else:
                return current
        self.stop_reason = 'depth'
        return current

    @phase('level')
    def breadth_first(self, initial):
        best = initial
        frontier = [initial]
        seen = set()
        for level in range(self.max_depth):
            children = []
            for parent in frontier:
                for candidate in reductions(parent):
                    if not self.smaller(candidate, parent):
                        continue
                    key = cache_key(candidate)
                    if key is not None:
                        if key in seen:
                            continue
                        seen.add(key)
                    if self.criterion(candidate):
                        children.append(candidate)
                        if self.smaller(candidate, best):
                            best = candidate
            self.debug('Level %d: %d candidates, best size %d' % (
                level + 1, len(children), self.size(best)))
            if not children:
                return best
            frontier = children
        self.stop_reason = 'depth'
        return best
