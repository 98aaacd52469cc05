from seqshrink.shrinker import Shrinker, ShrinkResult, Stop, Volume, shrink
from seqshrink.strategies import (
    CascadingShrinker, ConfigurableShrinker, GuidedShrinker, ShrinkStrategy
)
from seqshrink.deltadebug import DeltaDebugShrinker
from seqshrink.stateful import (
    ExecutionTrace, Invariant, InvariantSet, InvariantViolation, Operation,
    OperationSequence, PreconditionFailed, StatefulTest, StatefulTestFailure
)
from seqshrink.sequences import (
    DeltaDebugSequenceShrinker, SequenceShrinker, SmartSequenceShrinking
)
from seqshrink.targeted import TargetedShrinker, shrink_preserving

__all__ = [
    'CascadingShrinker', 'ConfigurableShrinker', 'DeltaDebugShrinker',
    'DeltaDebugSequenceShrinker', 'ExecutionTrace', 'GuidedShrinker',
    'Invariant', 'InvariantSet', 'InvariantViolation', 'Operation',
    'OperationSequence', 'PreconditionFailed', 'SequenceShrinker',
    'ShrinkResult', 'ShrinkStrategy', 'Shrinker', 'SmartSequenceShrinking',
    'StatefulTest', 'StatefulTestFailure', 'Stop', 'TargetedShrinker',
    'Volume', 'shrink', 'shrink_preserving',
]
