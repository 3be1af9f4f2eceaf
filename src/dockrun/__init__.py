"""
dockrun

Runs the steps of a Dockerfile-like build script directly on the host,
without a container runtime.

Main modules:
- engine: Interpreter, variable store, classifier, continuation and execution context
- io: Shell and URL fetch collaborators
- config: Configuration loading and validation
- datacls: Instruction and report models
- utils: Logging setup and helpers

Quick start example:
```python
from dockrun import Interpreter

report = Interpreter("Dockerfile").run()
print(report.variables)
```
"""

from .protocols import ShellProtocol, FetcherProtocol, PromptProtocol
from .config import RunnerConfig, load_config
from .engine import Interpreter, VariableStore, ExecutionContext, ScriptedPrompt
from .datacls import RunReport
from .exceptions import (
    DockrunError,
    ConfigurationError,
    ScriptError,
    CommandFailedError,
    MissingArgumentError,
    FetchError,
)

__version__ = "0.3.0"

__all__ = [
    # Version
    '__version__',
    # Protocols
    'ShellProtocol',
    'FetcherProtocol',
    'PromptProtocol',
    # Config
    'RunnerConfig',
    'load_config',
    # Engine
    'Interpreter',
    'VariableStore',
    'ExecutionContext',
    'ScriptedPrompt',
    'RunReport',
    # Exceptions
    'DockrunError',
    'ConfigurationError',
    'ScriptError',
    'CommandFailedError',
    'MissingArgumentError',
    'FetchError',
]
