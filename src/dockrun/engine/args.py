import logging
import sys
from typing import Iterable, List, Mapping, Optional

import click

from ..utils.typing_compat import override
from ..datacls.instructions import Arg
from ..exceptions import MissingArgumentError

logger = logging.getLogger(__name__)


# --------------------
#
# Prompt providers
#
# --------------------

class ConsolePrompt:
    """Asks on the attached terminal."""

    interactive = True

    def ask(self, name: str, default: Optional[str]) -> str:
        text = f"Enter value for ARG {name}"
        if default is not None:
            text += f" (default: {default})"
        answer = click.prompt(text, default="", show_default=False, prompt_suffix=": ")
        return answer.strip()


class NonInteractivePrompt:
    """Used when stdin is not a terminal; never asks."""

    interactive = False

    def ask(self, name: str, default: Optional[str]) -> str:
        raise RuntimeError(f"cannot prompt for ARG {name} without a terminal")


class ScriptedPrompt(ConsolePrompt):
    """Replays canned answers in order; an exhausted script answers with ''."""

    def __init__(self, responses: Iterable[str] = ()):
        self.responses: List[str] = list(responses)
        self.asked: List[str] = []

    @override
    def ask(self, name: str, default: Optional[str]) -> str:
        self.asked.append(name)
        if not self.responses:
            return ""
        return self.responses.pop(0).strip()


def detect_prompt(interactive: Optional[bool] = None):
    """Pick a prompt provider; `interactive=None` means ask only on a TTY."""
    if interactive is None:
        interactive = sys.stdin is not None and sys.stdin.isatty()
    return ConsolePrompt() if interactive else NonInteractivePrompt()


# --------------------
#
# ARG resolution
#
# --------------------

class ArgResolver:
    """
    Decides the value of an ARG instruction.

    Interactive: the shown default is the literal default, else the environment
    value; an empty answer takes the shown default, and no default at all is
    fatal. Non-interactive: environment, then literal default, else fatal.
    """

    def __init__(self, prompt):
        self.prompt = prompt

    def resolve(self, arg: Arg, environment: Mapping[str, str]) -> str:
        env_value = environment.get(arg.name)
        if self.prompt.interactive:
            return self._resolve_interactive(arg, env_value)
        return self._resolve_batch(arg, env_value)

    def _resolve_interactive(self, arg: Arg, env_value: Optional[str]) -> str:
        if arg.default is not None:
            shown = arg.default
            logger.debug(f"Found ARG with default value: {arg.name}={arg.default}")
        else:
            shown = env_value
            logger.debug(f"Found ARG without default value: {arg.name}")
            if env_value is not None:
                logger.debug(f"Found environment value: {env_value}")
        answer = self.prompt.ask(arg.name, shown)
        if answer:
            logger.debug(f"Using provided value: {answer}")
            return answer
        if shown is None:
            raise MissingArgumentError(arg.name, arg.lineno)
        logger.debug("Using default value")
        return shown

    def _resolve_batch(self, arg: Arg, env_value: Optional[str]) -> str:
        if env_value is not None:
            logger.debug(f"ARG {arg.name} taken from environment: {env_value}")
            return env_value
        if arg.default is not None:
            logger.debug(f"ARG {arg.name} using default value: {arg.default}")
            return arg.default
        raise MissingArgumentError(arg.name, arg.lineno)
