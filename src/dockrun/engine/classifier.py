"""
Instruction classification.

A line is tested against an ordered table of matchers; the first one that
returns an instruction wins. The order is part of the contract: ENV before
WORKDIR before RUN before ADD before ARG, with anything else left unrecognized.
"""

import logging
import re
from typing import Callable, List, Optional, Tuple

from .. import constants
from ..datacls.instructions import (
    Instruction,
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

logger = logging.getLogger(__name__)

ENV_RE = re.compile(rf"^ENV\s+(?P<name>{constants.VAR_NAME})(?:\s*=\s*|\s+)(?P<value>.*)$")
WORKDIR_RE = re.compile(r"^WORKDIR\s+(?P<path>.+)$")
RUN_RE = re.compile(r"^RUN\s+(?P<command>.+)$")
ADD_RE = re.compile(r"^ADD\s+(?P<url>https?://\S+)\s+(?P<dest>\S.*)$")
ARG_RE = re.compile(rf"^ARG\s+(?P<name>{constants.VAR_NAME})(?:\s*=\s*(?P<default>.*))?$")
KEYWORD_RE = re.compile(r"^(\S+)")

Matcher = Callable[[str, int], Optional[Instruction]]


def strip_quotes(value: str) -> str:
    """Remove one pair of matching surrounding quotes."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def ends_with_marker(text: str) -> bool:
    return text.endswith(constants.CONTINUATION_MARKER)


def strip_marker(text: str) -> str:
    """Drop the trailing continuation marker and the whitespace before it."""
    return text[: -len(constants.CONTINUATION_MARKER)].rstrip()


def _match_blank(line: str, lineno: int) -> Optional[Instruction]:
    if not line:
        return Blank(lineno=lineno, line=line)
    return None


def _match_comment(line: str, lineno: int) -> Optional[Instruction]:
    if line.startswith(constants.COMMENT_PREFIX):
        return Comment(lineno=lineno, line=line)
    return None


def _match_env(line: str, lineno: int) -> Optional[Instruction]:
    m = ENV_RE.match(line)
    if not m:
        return None
    value = m.group("value").strip()
    # `ENV KEY` with nothing after it is not a binding
    if not value and "=" not in line[m.end("name"):]:
        return None
    return Env(lineno=lineno, line=line, name=m.group("name"), raw_value=strip_quotes(value))


def _match_workdir(line: str, lineno: int) -> Optional[Instruction]:
    m = WORKDIR_RE.match(line)
    if not m:
        return None
    return Workdir(lineno=lineno, line=line, path=strip_quotes(m.group("path").strip()))


def _match_run(line: str, lineno: int) -> Optional[Instruction]:
    m = RUN_RE.match(line)
    if not m:
        return None
    command = m.group("command")
    if ends_with_marker(command):
        return MultiLineRunStart(lineno=lineno, line=line, partial=strip_marker(command))
    return Run(lineno=lineno, line=line, command=command)


def _match_add(line: str, lineno: int) -> Optional[Instruction]:
    m = ADD_RE.match(line)
    if not m:
        return None
    return Add(lineno=lineno, line=line, url=m.group("url"), dest=m.group("dest").strip())


def _match_arg(line: str, lineno: int) -> Optional[Instruction]:
    m = ARG_RE.match(line)
    if not m:
        return None
    default = m.group("default")
    if default is not None:
        default = strip_quotes(default.strip())
    return Arg(lineno=lineno, line=line, name=m.group("name"), default=default)


# Precedence is the order of this table.
MATCHERS: List[Tuple[str, Matcher]] = [
    ("blank", _match_blank),
    ("comment", _match_comment),
    ("env", _match_env),
    ("workdir", _match_workdir),
    ("run", _match_run),
    ("add", _match_add),
    ("arg", _match_arg),
]


def classify(line: str, lineno: int = 0) -> Instruction:
    """
    Classify one raw script line.

    The line is trimmed first. Continuation lines of an open multi-line RUN must
    not be passed here; the interpreter feeds those to the aggregator instead.
    """
    text = line.strip()
    for name, matcher in MATCHERS:
        instruction = matcher(text, lineno)
        if instruction is not None:
            logger.debug(f"[Classify] line {lineno}: matched {name}.")
            return instruction
    keyword = KEYWORD_RE.match(text).group(1)
    logger.debug(f"[Classify] line {lineno}: '{keyword}' is not supported.")
    return Unrecognized(lineno=lineno, line=text, keyword=keyword)
