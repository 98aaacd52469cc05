from contextlib import contextmanager
from enum import IntEnum
import time

from seqshrink.moves import cache_key, shrinkable, size_of


class Volume(IntEnum):
    quiet = 0
    normal = 1
    debug = 2


def phase(name):
    def wrap(function):
        def accept(self, *args, **kwargs):
            with self.in_phase(name):
                return function(self, *args, **kwargs)
        accept.__name__ = function.__name__
        accept.__doc__ = function.__doc__
        return accept
    return wrap


class Stop(Exception):
    """Raised at an oracle call boundary to end a run early. The first
    argument is the reason, the second identifies the run that raised it."""


class ShrinkResult(object):

    def __init__(
        self, original, minimal, shrink_steps, calls, shrink_duration,
        stop_reason=None
    ):
        self.original = original
        self.minimal = minimal
        self.shrink_steps = shrink_steps
        self.calls = calls
        self.shrink_duration = shrink_duration
        self.stop_reason = stop_reason

    @property
    def completed(self):
        return self.stop_reason is None

    def __repr__(self):
        return (
            'ShrinkResult(minimal=%r, shrink_steps=%d, calls=%d, '
            'shrink_duration=%.3f, stop_reason=%r)'
        ) % (
            self.minimal, self.shrink_steps, self.calls,
            self.shrink_duration, self.stop_reason,
        )


class Shrinker(object):
    """Common machinery for every search strategy.

    A Shrinker is built around a single failing value. Calling run(oracle)
    searches for a smaller value the oracle still accepts and returns a
    ShrinkResult. Subclasses implement search(initial), testing candidates
    through self.criterion, which wraps the oracle with a cache, the call
    and time budgets, and improvement tracking.

    A run ends early (without raising) when max_calls oracle calls have been
    made, when timeout seconds have passed, or when should_stop() returns
    True. These are only checked between oracle calls. Exceptions raised by
    the oracle itself propagate to the caller.
    """

    name = 'shrink'

    def __init__(
        self, initial, *,
        size=None, max_calls=None, timeout=None, should_stop=None,
        shrink_callback=None, printer=None, volume=Volume.quiet
    ):
        if not shrinkable(initial):
            raise ValueError(
                'Cannot shrink %r: expected a number or a sequence' % (
                    initial,))
        self.initial = initial
        self.phase_name = None
        self.__size = size or size_of
        self.__max_calls = max_calls
        self.__timeout = timeout
        self.__should_stop = should_stop or (lambda: False)
        self.__shrink_callback = shrink_callback or (lambda s: None)
        self.__printer = printer or (lambda s: None)
        self.__volume = volume
        self.__reset()

    def __reset(self):
        self.__oracle = None
        self.__cache = {}
        self.__token = None
        self.started = None
        self.__deadline = None
        self.best = self.initial
        self.calls = 0
        self.shrinks = 0
        self.stop_reason = None

    def output(self, text):
        if self.__volume >= Volume.normal:
            self.__printer(text)

    def debug(self, text):
        if self.__volume >= Volume.debug:
            if self.phase_name is not None:
                text = "[%s] %s" % (self.phase_name, text)
            self.__printer(text)

    @contextmanager
    def in_phase(self, phase_name):
        original = self.phase_name
        if original is not None:
            phase_name = "%s > %s" % (original, phase_name)
        try:
            self.phase_name = phase_name
            yield
        finally:
            self.phase_name = original

    def size(self, value):
        return self.__size(value)

    def smaller(self, left, right):
        return self.size(left) < self.size(right)

    def stop(self, reason):
        raise Stop(reason, self.__token)

    def __check_budget(self):
        if self.__max_calls is not None and self.calls >= self.__max_calls:
            self.stop('budget')
        if self.__deadline is not None and time.time() >= self.__deadline:
            self.stop('timeout')
        if self.__should_stop():
            self.stop('cancelled')

    def criterion(self, candidate):
        """Ask the oracle about candidate, remembering the answer."""
        key = cache_key(candidate)
        if key is not None:
            try:
                return self.__cache[key]
            except KeyError:
                pass
        self.__check_budget()
        self.calls += 1
        result = bool(self.__oracle(candidate))
        if key is not None:
            self.__cache[key] = result
        if result and self.smaller(candidate, self.best):
            self.shrinks += 1
            deleted = self.size(self.best) - self.size(candidate)
            self.output('Shrink %d (%s): size %d (deleted %d)' % (
                self.shrinks, self.phase_name or self.name,
                self.size(candidate), deleted))
            self.best = candidate
            self.__shrink_callback(candidate)
        return result

    def search(self, initial):
        raise NotImplementedError()

    def begin(self, oracle):
        """Start a fresh run against oracle. Returns the token identifying
        Stop exceptions raised by this run."""
        self.__reset()
        self.__oracle = oracle
        self.__token = object()
        self.started = time.time()
        if self.__timeout is not None:
            self.__deadline = self.started + self.__timeout
        self.output('Initial example: size %d' % (self.size(self.initial),))
        return self.__token

    def end(self):
        self.__oracle = None

    def check_initial(self, initial):
        if not self.criterion(initial):
            raise ValueError('Initial example does not satisfy the oracle')

    def run(self, oracle):
        here = self.begin(oracle)
        initial = self.initial
        try:
            if self.size(initial) == 0:
                self.debug('Nothing to shrink')
                result = initial
            else:
                with self.in_phase(self.name):
                    self.check_initial(initial)
                    result = self.search(initial)
            reason = self.stop_reason
        except Stop as stop:
            if stop.args[1] is not here:
                raise
            result = self.best
            reason = stop.args[0]
        finally:
            self.end()

        elapsed = time.time() - self.started
        if reason is None:
            self.output('Converged at size %d after %d calls' % (
                self.size(result), self.calls))
        else:
            self.output(
                'Stopped early (%s) at size %d after %d calls; a smaller '
                'example may exist' % (reason, self.size(result), self.calls))
        return ShrinkResult(
            original=initial, minimal=result, shrink_steps=self.shrinks,
            calls=self.calls, shrink_duration=elapsed, stop_reason=reason,
        )


def shrink(initial, oracle, strategy='guided', max_depth=None, **kwargs):
    """Shrink initial against oracle with the named strategy and return a
    ShrinkResult.

    strategy is one of 'guided', 'delta', 'depth-first' or 'breadth-first';
    max_depth only applies to the last two. Remaining keyword arguments go
    to the shrinker's constructor.
    """
    from seqshrink.deltadebug import DeltaDebugShrinker
    from seqshrink.strategies import (
        ConfigurableShrinker, GuidedShrinker, ShrinkStrategy
    )

    if strategy == 'guided':
        shrinker = GuidedShrinker(initial, **kwargs)
    elif strategy == 'delta':
        shrinker = DeltaDebugShrinker(initial, **kwargs)
    elif strategy == 'depth-first':
        shrinker = ConfigurableShrinker(
            initial, ShrinkStrategy.DEPTH_FIRST, **kwargs)
    elif strategy == 'breadth-first':
        shrinker = ConfigurableShrinker(
            initial, ShrinkStrategy.BREADTH_FIRST, **kwargs)
    else:
        raise ValueError('Unknown strategy %r' % (strategy,))
    if max_depth is not None and strategy in ('depth-first', 'breadth-first'):
        shrinker.with_max_depth(max_depth)
    return shrinker.run(oracle)
