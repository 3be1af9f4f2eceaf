import logging
import re
from typing import Dict, Mapping, Optional

from .. import constants
from ..exceptions import InvalidVariableNameError

logger = logging.getLogger(__name__)

# `${NAME}` or `$NAME`; the bare form takes the longest identifier it can,
# so `$FOO_BAR` is always read as FOO_BAR and never as FOO followed by `_BAR`.
REFERENCE_PATTERN = re.compile(
    rf"\$(?:\{{(?P<braced>{constants.VAR_NAME})\}}|(?P<bare>{constants.VAR_NAME}))"
)


def expand_vars(
    text: str,
    bindings: Mapping[str, str],
    fallback: Optional[Mapping[str, str]] = None,
    keep_unbound: bool = False,
) -> str:
    """
    Substitute `$NAME` and `${NAME}` references in `text`.

    Lookup order is `bindings`, then `fallback`. A name found in neither is
    replaced with the empty string, or left verbatim when `keep_unbound` is set.
    The substituted text is not scanned again.
    """
    def _repl(m: re.Match) -> str:
        name = m.group("braced") or m.group("bare")
        if name in bindings:
            value = bindings[name]
            source = "store"
        elif fallback is not None and name in fallback:
            value = fallback[name]
            source = "environment"
        elif keep_unbound:
            logger.debug(f"[Expand] '{m.group(0)}' is unbound, left for the shell.")
            return m.group(0)
        else:
            logger.debug(f"[Expand] '{m.group(0)}' is unbound, replaced with ''.")
            return ""
        logger.debug(f"[Expand] '{m.group(0)}' -> '{value}' via {source}.")
        return value

    return REFERENCE_PATTERN.sub(_repl, text)


class VariableStore:
    """
    Live ARG/ENV bindings of one interpreter run.

    Bindings can be overwritten but never removed. Values are plain strings and
    are stored already expanded, so a later overwrite never changes text that
    was expanded earlier.
    """

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._vars: Dict[str, str] = {}
        for name, value in (initial or {}).items():
            self.set(name, value)

    def set(self, name: str, value: str) -> None:
        if not constants.VAR_NAME_PATTERN.match(name):
            raise InvalidVariableNameError(f"'{name}' is not a valid variable name")
        previous = self._vars.get(name)
        self._vars[name] = str(value)
        if previous is not None and previous != value:
            logger.debug(f"[Store] '{name}' overwritten: '{previous}' -> '{value}'.")
        else:
            logger.debug(f"[Store] '{name}' = '{value}'.")

    def get(self, name: str) -> Optional[str]:
        return self._vars.get(name)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._vars)

    def expand(
        self,
        text: str,
        fallback: Optional[Mapping[str, str]] = None,
        keep_unbound: bool = False,
    ) -> str:
        """Expand references in `text` against the current bindings. See `expand_vars`."""
        return expand_vars(text, self._vars, fallback=fallback, keep_unbound=keep_unbound)

    def __contains__(self, name: object) -> bool:
        return name in self._vars

    def __len__(self) -> int:
        return len(self._vars)

    def __repr__(self) -> str:
        return f"VariableStore({self._vars!r})"
