from copy import deepcopy

from seqshrink.moves import drop_reductions


class Operation(object):
    """One step of a stateful test.

    execute(state) applies the operation. It may mutate state in place, or
    return a new state, which then replaces the old one. precondition(state)
    says whether the operation may legally run in state.
    """

    def execute(self, state):
        raise NotImplementedError()

    def precondition(self, state):
        return True

    def description(self):
        return repr(self)


def apply(operation, state):
    result = operation.execute(state)
    if result is not None:
        return result
    return state


class PreconditionFailed(Exception):

    def __init__(self, index, operation):
        super().__init__(
            'Precondition failed for operation %d: %s' % (
                index, operation.description()))
        self.index = index
        self.operation = operation


class OperationSequence(object):

    def __init__(self, operations=()):
        self.__operations = list(operations)

    def push(self, operation):
        self.__operations.append(operation)

    @property
    def operations(self):
        return list(self.__operations)

    def __len__(self):
        return len(self.__operations)

    def __iter__(self):
        return iter(self.__operations)

    def __getitem__(self, i):
        if isinstance(i, slice):
            return OperationSequence(self.__operations[i])
        return self.__operations[i]

    def __add__(self, other):
        return OperationSequence(self.__operations + list(other))

    def __eq__(self, other):
        if isinstance(other, OperationSequence):
            return self.__operations == other.operations
        return self.__operations == other

    def __ne__(self, other):
        return not self == other

    __hash__ = None

    def __repr__(self):
        return 'OperationSequence(%r)' % (self.__operations,)

    def descriptions(self):
        return [op.description() for op in self.__operations]

    def execute_all(self, state):
        for op in self.__operations:
            state = apply(op, state)
        return state

    def execute_with_preconditions(self, state):
        """Run every operation, raising PreconditionFailed at the first one
        whose precondition does not hold."""
        for i, op in enumerate(self.__operations):
            if not op.precondition(state):
                raise PreconditionFailed(i, op)
            state = apply(op, state)
        return state

    def satisfies_preconditions(self, initial_state):
        """Replay on a copy of initial_state and check every precondition
        holds when its operation would run."""
        try:
            self.execute_with_preconditions(deepcopy(initial_state))
        except PreconditionFailed:
            return False
        return True

    def shrink(self):
        """Smaller non-empty sequences: each single operation dropped, each
        half, and the first or last operation dropped."""
        return list(drop_reductions(self))


class Invariant(object):

    def __init__(self, name, check):
        self.name = name
        self.check = check

    def description(self):
        return self.name


class InvariantViolation(Exception):

    def __init__(self, description):
        super().__init__('Invariant violated: %s' % (description,))
        self.description = description


class InvariantSet(object):

    def __init__(self):
        self.__invariants = []

    def add(self, invariant):
        self.__invariants.append(invariant)

    def add_fn(self, name, check):
        self.add(Invariant(name, check))

    def check_all(self, state):
        for invariant in self.__invariants:
            if not invariant.check(state):
                raise InvariantViolation(invariant.description())

    def __len__(self):
        return len(self.__invariants)


class StatefulTestFailure(Exception):

    def __init__(
        self, violation, operation_index=None, operation=None,
        state_before=None
    ):
        self.violation = violation
        self.operation_index = operation_index
        self.operation = operation
        self.state_before = state_before
        lines = ['Stateful test failed: %s' % (violation,)]
        if operation_index is not None:
            lines.append('  At operation index: %d' % (operation_index,))
        if operation is not None:
            lines.append('  Operation: %s' % (operation,))
        if state_before is not None:
            lines.append('  State before: %s' % (state_before,))
        super().__init__('\n'.join(lines))


class ExecutionTrace(object):

    def __init__(self, initial_state):
        self.initial_state = initial_state
        self.steps = []

    def add_step(self, description, state):
        self.steps.append((description, state))

    @property
    def final_state(self):
        if not self.steps:
            return None
        return self.steps[-1][1]


class StatefulTest(object):
    """Runs operation sequences from a fixed initial state, checking
    preconditions before and invariants after every operation."""

    def __init__(self, initial_state):
        self.initial_state = initial_state
        self.invariants = InvariantSet()

    def invariant(self, name, check):
        self.invariants.add_fn(name, check)
        return self

    def __check(self, state, index=None, op=None, before=None):
        try:
            self.invariants.check_all(state)
        except InvariantViolation as e:
            raise StatefulTestFailure(
                e, operation_index=index,
                operation=None if op is None else op.description(),
                state_before=before,
            ) from e

    def run(self, sequence, trace=None):
        """Return the final state, or raise StatefulTestFailure."""
        state = deepcopy(self.initial_state)
        self.__check(state)
        for i, op in enumerate(sequence):
            before = repr(state)
            if not op.precondition(state):
                raise StatefulTestFailure(
                    InvariantViolation(
                        'Precondition failed for operation: %s' % (
                            op.description(),)),
                    operation_index=i, operation=op.description(),
                    state_before=before,
                )
            state = apply(op, state)
            if trace is not None:
                trace.add_step(op.description(), deepcopy(state))
            self.__check(state, i, op, before)
        return state

    def run_with_trace(self, sequence):
        trace = ExecutionTrace(deepcopy(self.initial_state))
        self.run(sequence, trace)
        return trace

    def fails(self, sequence):
        """Whether running sequence raises StatefulTestFailure. Suitable as
        a shrinking oracle."""
        try:
            self.run(sequence)
        except StatefulTestFailure:
            return True
        return False
