import logging
import os
import textwrap
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from dockrun.exceptions import FetchError
from dockrun.io.fetch import infer_filename


class RecordingShell:
    """Shell double: records every call and answers with queued exit statuses."""

    def __init__(self, statuses: Optional[List[int]] = None):
        self.statuses = list(statuses or [])
        self.calls: List[Dict] = []

    def run(self, command, cwd, env):
        self.calls.append({
            "command": command,
            "cwd": Path(cwd),
            "env": dict(env),
            "process_cwd": Path.cwd(),
        })
        return self.statuses.pop(0) if self.statuses else 0

    @property
    def commands(self) -> List[str]:
        return [c["command"] for c in self.calls]


class FakeFetcher:
    """Fetcher double: writes the URL into the inferred file, or fails."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: List[tuple] = []

    def fetch(self, url, directory):
        self.calls.append((url, Path(directory), Path.cwd()))
        if self.fail:
            raise FetchError(f"Failed to download '{url}': connection refused")
        target = Path(directory) / infer_filename(url)
        target.write_text(url)
        return target


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """setup_logger mutates the root logger; undo it after each test."""
    root = logging.getLogger()
    level = root.level
    handlers = list(root.handlers)
    yield
    root.setLevel(level)
    for handler in list(root.handlers):
        if handler not in handlers and type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()


@pytest.fixture
def clean_env() -> Dict[str, str]:
    """A minimal inherited environment: enough to find bash, nothing else."""
    return {"PATH": os.environ.get("PATH", "/usr/bin:/bin")}


@pytest.fixture
def write_dockerfile(tmp_path: Path):
    """A pytest fixture to create a Dockerfile from dedented text."""
    def _write(content: str, name: str = "Dockerfile", subdir: Optional[str] = None) -> Path:
        directory = tmp_path / subdir if subdir else tmp_path
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_text(textwrap.dedent(content).lstrip("\n"))
        return path
    return _write


@pytest.fixture
def recording_shell() -> RecordingShell:
    return RecordingShell()


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher()
