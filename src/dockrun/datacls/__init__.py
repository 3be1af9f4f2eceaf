"""
dockrun Data Classes

- instructions: One model per recognized script line kind
- report: RunReport returned by the interpreter
"""

from .instructions import (
    Instruction,
    BaseInstruction,
    Blank,
    Comment,
    Run,
    MultiLineRunStart,
    Add,
    Env,
    Arg,
    Workdir,
    Unrecognized,
)
from .report import RunReport

__all__ = [
    'Instruction',
    'BaseInstruction',
    'Blank',
    'Comment',
    'Run',
    'MultiLineRunStart',
    'Add',
    'Env',
    'Arg',
    'Workdir',
    'Unrecognized',
    'RunReport',
]
