"""
dockrun Engine

- variables: VariableStore and `$NAME` / `${NAME}` expansion
- classifier: Line -> Instruction, in fixed precedence order
- continuation: Backslash-continued RUN aggregation
- context: Working directory, child environment and scoped directory changes
- args: ARG resolution and prompt providers
- interpreter: The driver tying them together
"""

from .variables import VariableStore, expand_vars
from .classifier import classify, MATCHERS
from .continuation import ContinuationAggregator, ContinuationState
from .context import ExecutionContext, pushd
from .args import (
    ArgResolver,
    ConsolePrompt,
    NonInteractivePrompt,
    ScriptedPrompt,
    detect_prompt,
)
from .interpreter import Interpreter

__all__ = [
    'VariableStore',
    'expand_vars',
    'classify',
    'MATCHERS',
    'ContinuationAggregator',
    'ContinuationState',
    'ExecutionContext',
    'pushd',
    'ArgResolver',
    'ConsolePrompt',
    'NonInteractivePrompt',
    'ScriptedPrompt',
    'detect_prompt',
    'Interpreter',
]
