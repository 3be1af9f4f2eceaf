import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, Optional, Type

from ..config import RunnerConfig
from ..protocols import ShellProtocol, FetcherProtocol, PromptProtocol
from ..io import SubprocessShell, FsspecFetcher
from ..datacls.instructions import (
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
from ..datacls.report import RunReport
from ..exceptions import (
    CommandFailedError,
    ScriptError,
    ScriptNotFoundError,
    ScriptReadError,
)
from .args import ArgResolver, detect_prompt
from .classifier import classify
from .context import ExecutionContext
from .continuation import ContinuationAggregator
from .variables import VariableStore

logger = logging.getLogger(__name__)


@contextmanager
def at_line(lineno: int) -> Iterator[None]:
    """Tag script errors escaping the block with `lineno`."""
    try:
        yield
    except ScriptError as e:
        raise e.at_line(lineno)


class Interpreter:
    """
    Runs a Dockerfile-like script line by line on the host.

    Lines are processed strictly in order; every RUN and ADD blocks until it
    finishes. A failing RUN stops the run with `CommandFailedError`, a failing
    ADD is only logged.
    """

    def __init__(
        self,
        script_path: Path,
        config: Optional[RunnerConfig] = None,
        prompt: Optional[PromptProtocol] = None,
        shell: Optional[ShellProtocol] = None,
        fetcher: Optional[FetcherProtocol] = None,
        base_env: Optional[Dict[str, str]] = None,
    ):
        self.config = config or RunnerConfig()
        self.script_path = Path(script_path)
        self.store = VariableStore()
        self.resolver = ArgResolver(prompt or detect_prompt(self.config.interactive))
        self.aggregator = ContinuationAggregator()
        self.context = ExecutionContext(
            script_dir=self.script_path.resolve().parent,
            store=self.store,
            shell=shell or SubprocessShell(self.config.shell),
            fetcher=fetcher or FsspecFetcher(),
            base_env=base_env,
        )
        self.context.base_env.update(self.config.env)
        self.report = RunReport(workdir=self.context.workdir)

        self._handlers: Dict[Type[BaseInstruction], Callable] = {
            Blank: self._ignore,
            Comment: self._ignore,
            Env: self._handle_env,
            Workdir: self._handle_workdir,
            Run: self._handle_run,
            MultiLineRunStart: self._handle_multiline_start,
            Add: self._handle_add,
            Arg: self._handle_arg,
            Unrecognized: self._handle_unrecognized,
        }

    def read_script(self) -> str:
        logger.debug(f"Reading Dockerfile from: {self.script_path}")
        if not self.script_path.exists():
            raise ScriptNotFoundError(f"Dockerfile not found at: {self.script_path}")
        try:
            return self.script_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ScriptReadError(f"Failed to open Dockerfile '{self.script_path}': {e}") from e

    def run(self) -> RunReport:
        """Interpret the whole script file."""
        text = self.read_script()
        return self.execute_lines(text.splitlines())

    def execute_lines(self, lines: Iterable[str]) -> RunReport:
        """Interpret already-read lines; the working directory anchor stays the script directory."""
        for lineno, raw in enumerate(lines, start=1):
            line = raw.strip()
            logger.debug(f"Processing line {lineno}: {line}")
            if self.aggregator.is_open:
                start = self.aggregator.start_lineno
                command = self.aggregator.feed(line)
                if command is not None:
                    self._execute(command, start)
                continue
            self.dispatch(classify(line, lineno))
        self.aggregator.close()

        self.report.variables = self.store.as_dict()
        self.report.workdir = self.context.workdir
        logger.debug(
            f"Finished: {self.report.instructions} instructions, "
            f"{self.report.commands_run} commands, {len(self.report.ignored)} ignored."
        )
        return self.report

    def dispatch(self, instruction: BaseInstruction) -> None:
        handler = self._handlers[type(instruction)]
        if not isinstance(instruction, (Blank, Comment)):
            self.report.instructions += 1
        with at_line(instruction.lineno):
            handler(instruction)

    # --- handlers ---

    def _ignore(self, instruction: BaseInstruction) -> None:
        pass

    def _handle_unrecognized(self, instruction: Unrecognized) -> None:
        logger.debug(f"Ignoring unsupported instruction on line {instruction.lineno}: {instruction.line}")
        self.report.ignored.append(instruction.line)

    def _handle_env(self, instruction: Env) -> None:
        logger.debug(f"Setting environment variable: {instruction.name}={instruction.raw_value}")
        value = self.store.expand(instruction.raw_value, fallback=self.context.environment())
        logger.debug(f"Expanded value: {instruction.name}={value}")
        self.store.set(instruction.name, value)

    def _handle_workdir(self, instruction: Workdir) -> None:
        logger.debug(f"Setting working directory to: {instruction.path}")
        self.context.set_workdir(instruction.path)

    def _handle_run(self, instruction: Run) -> None:
        self._execute(instruction.command, instruction.lineno)

    def _handle_multiline_start(self, instruction: MultiLineRunStart) -> None:
        self.aggregator.start(instruction.partial, instruction.lineno)

    def _handle_add(self, instruction: Add) -> None:
        if instruction.dest not in (".", "./"):
            logger.debug(f"ADD destination '{instruction.dest}' ignored; the name comes from the URL.")
        if not self.context.fetch(instruction.url):
            logger.warning(f"Line {instruction.lineno}: ADD {instruction.url} failed, continuing.")
            self.report.fetch_failures.append(instruction.url)

    def _handle_arg(self, instruction: Arg) -> None:
        value = self.resolver.resolve(instruction, self.context.environment())
        logger.debug(f"Setting ARG variable: {instruction.name}={value}")
        self.store.set(instruction.name, value)

    def _execute(self, command: str, lineno: int) -> None:
        with at_line(lineno):
            status = self.context.run(command)
        self.report.commands_run += 1
        if status != 0:
            raise CommandFailedError(command, status, lineno)
