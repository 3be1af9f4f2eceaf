"""
dockrun Instruction Models

One frozen pydantic model per instruction kind. Instances are produced fresh
by the classifier for every line and are never persisted.
"""

from typing import Literal, Optional, Union
from pydantic import BaseModel, ConfigDict


class BaseInstruction(BaseModel):
    """Fields shared by every instruction: where it came from."""
    model_config = ConfigDict(frozen=True)

    lineno: int
    line: str


class Blank(BaseInstruction):
    kind: Literal["blank"] = "blank"


class Comment(BaseInstruction):
    kind: Literal["comment"] = "comment"


class Run(BaseInstruction):
    """A complete shell command, either single-line or joined from a continuation."""
    kind: Literal["run"] = "run"
    command: str


class MultiLineRunStart(BaseInstruction):
    """First line of a RUN ending in a continuation marker; `partial` has the marker stripped."""
    kind: Literal["multiline_run_start"] = "multiline_run_start"
    partial: str


class Add(BaseInstruction):
    kind: Literal["add"] = "add"
    url: str
    dest: str


class Env(BaseInstruction):
    """ENV binding; `raw_value` is not expanded yet."""
    kind: Literal["env"] = "env"
    name: str
    raw_value: str


class Arg(BaseInstruction):
    kind: Literal["arg"] = "arg"
    name: str
    default: Optional[str] = None


class Workdir(BaseInstruction):
    kind: Literal["workdir"] = "workdir"
    path: str


class Unrecognized(BaseInstruction):
    """Any other instruction (FROM, COPY, non-URL ADD, ...). Ignored by the interpreter."""
    kind: Literal["unrecognized"] = "unrecognized"
    keyword: str


Instruction = Union[Blank, Comment, Run, MultiLineRunStart, Add, Env, Arg, Workdir, Unrecognized]
