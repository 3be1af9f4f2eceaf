import logging
from enum import Enum
from typing import List, Optional

from ..exceptions import UnterminatedContinuationError
from .classifier import ends_with_marker, strip_marker

logger = logging.getLogger(__name__)


class ContinuationState(Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"


class ContinuationAggregator:
    """
    Joins a backslash-continued RUN into one command.

    Every marker-terminated fragment is stored without its marker and followed
    by a single space; the first line without a marker completes the command.
    """

    def __init__(self):
        self.state = ContinuationState.IDLE
        self._parts: List[str] = []
        self.start_lineno: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.state is ContinuationState.ACCUMULATING

    @property
    def buffer(self) -> str:
        return "".join(self._parts)

    def start(self, partial: str, lineno: int) -> None:
        """Open a block with the (already marker-stripped) first fragment."""
        if self.is_open:
            raise RuntimeError(f"continuation already open since line {self.start_lineno}")
        self._parts = [self._fragment(partial)]
        self.start_lineno = lineno
        self.state = ContinuationState.ACCUMULATING
        logger.debug(f"[Continuation] line {lineno}: starting multi-line RUN.")

    def feed(self, line: str) -> Optional[str]:
        """
        Append one raw line.

        Returns the completed command when `line` ends the block, otherwise None.
        """
        if not self.is_open:
            raise RuntimeError("feed() called with no open continuation")
        text = line.strip()
        if ends_with_marker(text):
            self._parts.append(self._fragment(strip_marker(text)))
            logger.debug("[Continuation] continuing multi-line RUN.")
            return None
        self._parts.append(text)
        command = self.buffer
        logger.debug(f"[Continuation] block from line {self.start_lineno} complete: {command}")
        self._reset()
        return command

    def close(self) -> None:
        """Signal end of input; an open block is a parse error."""
        if self.is_open:
            lineno, partial = self.start_lineno, self.buffer
            self._reset()
            raise UnterminatedContinuationError(
                f"multi-line RUN is not terminated before end of file: {partial.strip()}",
                lineno,
            )

    def _reset(self) -> None:
        self._parts = []
        self.start_lineno = None
        self.state = ContinuationState.IDLE

    @staticmethod
    def _fragment(text: str) -> str:
        return f"{text} " if text else ""
