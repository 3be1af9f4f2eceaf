import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Mapping, Optional

from ..protocols import ShellProtocol, FetcherProtocol
from ..exceptions import FetchError, WorkdirError
from .variables import VariableStore

logger = logging.getLogger(__name__)


@contextmanager
def pushd(path: Path) -> Iterator[Path]:
    """
    Change into `path` for the duration of the block.

    The previous directory is restored on every exit path, including when the
    body raises.
    """
    previous = Path.cwd()
    try:
        os.chdir(path)
    except OSError as e:
        raise WorkdirError(f"Cannot enter directory '{path}': {e}") from e
    logger.debug(f"[pushd] {previous} -> {path}")
    try:
        yield Path(path)
    finally:
        os.chdir(previous)
        logger.debug(f"[popd] back to {previous}")


class ExecutionContext:
    """
    Working directory and environment every external invocation runs with.

    The child environment is materialized per call from the inherited
    environment snapshot overlaid with the current variable bindings, so
    ENV and ARG values reach the shell without touching `os.environ`.
    """

    def __init__(
        self,
        script_dir: Path,
        store: VariableStore,
        shell: ShellProtocol,
        fetcher: FetcherProtocol,
        base_env: Optional[Mapping[str, str]] = None,
    ):
        self.script_dir = Path(script_dir).resolve()
        self.workdir = self.script_dir
        self.store = store
        self.shell = shell
        self.fetcher = fetcher
        self.base_env: Dict[str, str] = dict(os.environ if base_env is None else base_env)

    def environment(self) -> Dict[str, str]:
        env = dict(self.base_env)
        env.update(self.store.as_dict())
        return env

    def run(self, command_text: str) -> int:
        """
        Expand and run one command in the tracked working directory.

        Only names bound by ENV or ARG are substituted. Everything else,
        inherited variables included, is left for the shell to expand
        (loop variables, `$PWD`, `$HOME` inside single quotes, ...).
        """
        env = self.environment()
        if "PWD" not in self.store:
            env["PWD"] = str(self.workdir)
        command = self.store.expand(command_text, keep_unbound=True)
        logger.debug(f"Executing command in {self.workdir}: {command}")
        with pushd(self.workdir):
            return self.shell.run(command, cwd=self.workdir, env=env)

    def set_workdir(self, path: str) -> Path:
        """
        Expand `path` and make it the working directory.

        Relative paths are anchored at the script directory, not at the current
        working directory. The directory is created when missing.
        """
        expanded = self.store.expand(path, fallback=self.environment())
        if not expanded:
            raise WorkdirError(f"WORKDIR '{path}' expands to an empty path")
        candidate = Path(expanded)
        if not candidate.is_absolute():
            candidate = self.script_dir / candidate
        try:
            candidate.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WorkdirError(f"Failed to create working directory '{candidate}': {e}") from e
        # must be enterable
        with pushd(candidate):
            pass
        self.workdir = candidate
        logger.debug(f"Changed working directory to {self.workdir}")
        return self.workdir

    def fetch(self, url: str) -> bool:
        """Download `url` into the working directory; failures are logged, not raised."""
        logger.debug(f"Downloading from URL: {url}")
        try:
            with pushd(self.workdir):
                self.fetcher.fetch(url, self.workdir)
        except FetchError as e:
            logger.error(f"Download failed: {e}")
            return False
        return True
