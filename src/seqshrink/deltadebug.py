from numbers import Number

from seqshrink.shrinker import Shrinker, Stop


def partition(n, granularity):
    """Split range(n) into granularity contiguous, near-equal intervals."""
    bounds = [i * n // granularity for i in range(granularity + 1)]
    return [
        (u, v) for u, v in zip(bounds, bounds[1:]) if u < v
    ]


class DeltaDebugShrinker(Shrinker):
    """Delta debugging (ddmin) over an ordered sequence.

    The current sequence is cut into n chunks, starting with n = 2. Every
    chunk's complement and then every chunk on its own is tried; the first
    one that still fails becomes the current sequence and n goes back to 2.
    When nothing works n doubles, until the chunks are single elements, at
    which point no single element can be removed and the result is
    1-minimal. Elements keep their original relative order, and since
    complements at fine granularity remove arbitrary elements the failing
    subset does not have to be contiguous.
    """

    name = 'ddmin'

    def __init__(self, items, **kwargs):
        if isinstance(items, Number):
            raise ValueError('ddmin needs a sequence, not %r' % (items,))
        super().__init__(items, **kwargs)

    def find_minimal(self, oracle):
        return self.run(oracle).minimal

    def minimize_with_stats(self, oracle):
        result = self.run(oracle)
        return result.minimal, result.calls

    def shrink_steps(self, oracle):
        """Yield each intermediate sequence ddmin adopts, smallest last.

        Work happens only as steps are asked for, so a caller that stops
        iterating makes no further oracle calls. A budget running out ends
        the iteration.
        """
        here = self.begin(oracle)
        try:
            if self.size(self.initial) == 0:
                return
            with self.in_phase(self.name):
                self.check_initial(self.initial)
                yield from self.steps(self.initial)
        except Stop as stop:
            if stop.args[1] is not here:
                raise
            self.stop_reason = stop.args[0]
        finally:
            self.end()

    def search(self, current):
        for current in self.steps(current):
            pass
        return current

    def steps(self, current):
        granularity = 2
        while len(current) >= 2:
            with self.in_phase('n=%d' % (granularity,)):
                adopted = self.reduce_once(current, granularity)
            if adopted is not None:
                current = adopted
                granularity = 2
                yield current
            elif granularity < len(current):
                granularity = min(granularity * 2, len(current))
            else:
                break
        if len(current) == 1 and self.criterion(current[:0]):
            yield current[:0]

    def reduce_once(self, current, granularity):
        chunks = partition(len(current), granularity)
        for u, v in chunks:
            complement = current[:u] + current[v:]
            if self.smaller(complement, current) and self.criterion(
                complement
            ):
                self.debug('Removed [%d:%d]' % (u, v))
                return complement
        for u, v in chunks:
            chunk = current[u:v]
            if self.smaller(chunk, current) and self.criterion(chunk):
                self.debug('Kept only [%d:%d]' % (u, v))
                return chunk
        return None
