from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Mapping
import logging
import subprocess

from ..utils.typing_compat import override
from ..exceptions import ShellUnavailableError

logger = logging.getLogger(__name__)


# --------------------
#
# Abstract Shell
#
# --------------------

class Shell(ABC):
    """dockrun Shell Abstract Base Class"""

    @abstractmethod
    def run(self, command: str, cwd: Path, env: Mapping[str, str]) -> int:
        """Run a command synchronously and return its exit status"""
        pass


# --------------------
#
# Subprocess Shell
#
# --------------------

class SubprocessShell(Shell):
    """
    Runs commands through `<executable> -c <command>`.

    Output is not captured; the child writes straight to the terminal.
    """

    def __init__(self, executable: str = "bash"):
        self.executable = executable

    def argv(self, command: str) -> List[str]:
        return [self.executable, "-c", command]

    @override
    def run(self, command: str, cwd: Path, env: Mapping[str, str]) -> int:
        logger.debug(f"[{self.executable}] Executing in {cwd}: {command}")
        try:
            result = subprocess.run(self.argv(command), cwd=str(cwd), env=dict(env))
        except FileNotFoundError as e:
            raise ShellUnavailableError(f"Shell '{self.executable}' could not be started: {e}") from e
        logger.debug(f"[{self.executable}] Exit status {result.returncode}")
        return result.returncode
