"""
dockrun Protocol Definitions

This module contains the Protocol definitions for the external collaborators
the interpreter talks to: the shell, the URL fetcher and the ARG prompt.

Protocols are the foundation layer with zero dependencies on other dockrun modules.
"""

from pathlib import Path
from typing import Protocol, Mapping, Optional, runtime_checkable


# ============================================================================
# Shell Protocol
# ============================================================================

@runtime_checkable
class ShellProtocol(Protocol):
    """
    Protocol for the command execution facility.

    A shell runs one command string synchronously and reports its exit status.
    """

    def run(self, command: str, cwd: Path, env: Mapping[str, str]) -> int:
        """
        Run `command` to completion.

        Args:
            command: Command text, already variable-expanded
            cwd: Directory the command runs in
            env: Complete environment for the child process

        Returns:
            Exit status, 0 on success
        """
        ...


# ============================================================================
# Fetcher Protocol
# ============================================================================

@runtime_checkable
class FetcherProtocol(Protocol):
    """
    Protocol for URL retrieval used by ADD.
    """

    def fetch(self, url: str, directory: Path) -> Path:
        """
        Save the resource at `url` into `directory` under its inferred name.

        Returns:
            Path of the written file
        """
        ...


# ============================================================================
# Prompt Protocol
# ============================================================================

@runtime_checkable
class PromptProtocol(Protocol):
    """
    Protocol for ARG value prompting.

    `interactive` tells the resolver whether asking is possible at all.
    """

    interactive: bool

    def ask(self, name: str, default: Optional[str]) -> str:
        """
        Ask for the value of ARG `name`, showing `default` when given.

        Returns:
            The raw answer, empty string when the user just pressed enter
        """
        ...
