from seqshrink.deltadebug import DeltaDebugShrinker
from seqshrink.shrinker import Shrinker
from seqshrink.stateful import OperationSequence


DEFAULT_MAX_ATTEMPTS = 1000


class SequenceShrinker(Shrinker):
    """Greedy shrinking of an OperationSequence over the moves of
    OperationSequence.shrink().

    A candidate is only handed to the oracle if, with preserve_preconditions
    set, replaying it from a copy of initial_state meets every operation's
    precondition. Every candidate generated counts as an attempt, whether or
    not it reaches the oracle; after max_attempts the smallest accepted
    sequence is returned.
    """

    name = 'sequence'

    def __init__(
        self, sequence, initial_state, *,
        preserve_preconditions=True, max_attempts=DEFAULT_MAX_ATTEMPTS,
        **kwargs
    ):
        super().__init__(OperationSequence(sequence), **kwargs)
        self.initial_state = initial_state
        self.preserve_preconditions = preserve_preconditions
        self.max_attempts = max_attempts
        self.attempts = 0

    def valid(self, candidate):
        if not self.preserve_preconditions:
            return True
        return candidate.satisfies_preconditions(self.initial_state)

    def search(self, current):
        self.attempts = 0
        while True:
            for candidate in current.shrink():
                if self.attempts >= self.max_attempts:
                    self.stop('attempts')
                self.attempts += 1
                if not self.valid(candidate):
                    self.debug('Rejected %r: precondition failed' % (
                        candidate.descriptions(),))
                    continue
                if self.smaller(candidate, current) and self.criterion(
                    candidate
                ):
                    current = candidate
                    break
            else:
                return current


class SmartSequenceShrinking(object):
    """Configuration for shrinking operation sequences, built up with
    chained calls::

        SmartSequenceShrinking().preserve_preconditions(True).max_attempts(200)
    """

    def __init__(self, **kwargs):
        self.preserve = True
        self.attempts = DEFAULT_MAX_ATTEMPTS
        self.options = kwargs

    def preserve_preconditions(self, preserve):
        self.preserve = preserve
        return self

    def max_attempts(self, attempts):
        self.attempts = attempts
        return self

    def shrinker(self, sequence, initial_state):
        return SequenceShrinker(
            sequence, initial_state,
            preserve_preconditions=self.preserve,
            max_attempts=self.attempts, **self.options
        )

    def shrink(self, sequence, initial_state, oracle):
        return self.shrink_with_stats(sequence, initial_state, oracle)[0]

    def shrink_with_stats(self, sequence, initial_state, oracle):
        shrinker = self.shrinker(sequence, initial_state)
        result = shrinker.run(oracle)
        return result.minimal, shrinker.attempts


class DeltaDebugSequenceShrinker(object):
    """ddmin over the operations of a sequence."""

    def __init__(self, sequence, **kwargs):
        self.sequence = OperationSequence(sequence)
        self.options = kwargs

    def minimize(self, test):
        return self.minimize_with_stats(test)[0]

    def minimize_with_stats(self, test):
        shrinker = DeltaDebugShrinker(self.sequence, **self.options)
        return shrinker.minimize_with_stats(test)
