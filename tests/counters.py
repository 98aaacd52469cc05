from dataclasses import dataclass

from seqshrink import Operation


@dataclass
class Counter:
    value: int = 0


@dataclass(frozen=True)
class Increment(Operation):
    def execute(self, state):
        state.value += 1


@dataclass(frozen=True)
class Decrement(Operation):
    def execute(self, state):
        state.value -= 1

    def precondition(self, state):
        return state.value > 0


@dataclass(frozen=True)
class Add(Operation):
    n: int

    def execute(self, state):
        state.value += self.n


@dataclass(frozen=True)
class Reset(Operation):
    def execute(self, state):
        return Counter()
