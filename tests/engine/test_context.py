import os
from pathlib import Path

import pytest

from dockrun.engine.context import ExecutionContext, pushd
from dockrun.engine.variables import VariableStore
from dockrun.exceptions import WorkdirError


@pytest.fixture
def script_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "project"
    directory.mkdir()
    return directory


@pytest.fixture
def context(script_dir, recording_shell, fake_fetcher, clean_env) -> ExecutionContext:
    return ExecutionContext(
        script_dir=script_dir,
        store=VariableStore(),
        shell=recording_shell,
        fetcher=fake_fetcher,
        base_env=clean_env,
    )


class TestPushd:
    """Tests for the scoped directory change."""

    def test_changes_and_restores(self, tmp_path):
        before = Path.cwd()
        with pushd(tmp_path) as entered:
            assert Path.cwd().resolve() == tmp_path.resolve()
            assert entered == tmp_path
        assert Path.cwd() == before

    def test_restores_when_body_raises(self, tmp_path):
        before = Path.cwd()
        with pytest.raises(ValueError):
            with pushd(tmp_path):
                raise ValueError("inner failure")
        assert Path.cwd() == before

    def test_missing_directory_raises_workdir_error(self, tmp_path):
        before = Path.cwd()
        with pytest.raises(WorkdirError, match="Cannot enter directory"):
            with pushd(tmp_path / "nope"):
                pass
        assert Path.cwd() == before


class TestExecutionContext:
    """Tests for command execution, WORKDIR and ADD handling."""

    def test_initial_workdir_is_script_dir(self, context, script_dir):
        assert context.workdir == script_dir.resolve()

    def test_run_expands_and_passes_cwd_and_env(self, context, recording_shell):
        context.store.set("GREETING", "hello")
        status = context.run("echo $GREETING ${GREETING}")
        assert status == 0
        call = recording_shell.calls[0]
        assert call["command"] == "echo hello hello"
        assert call["cwd"] == context.workdir
        assert call["env"]["GREETING"] == "hello"
        assert call["env"]["PATH"] == os.environ.get("PATH", "/usr/bin:/bin")

    def test_run_changes_process_cwd_only_for_the_call(self, context, recording_shell):
        before = Path.cwd()
        context.run("true")
        assert recording_shell.calls[0]["process_cwd"].resolve() == context.workdir.resolve()
        assert Path.cwd() == before

    def test_run_restores_cwd_after_failure_status(self, context, recording_shell):
        recording_shell.statuses = [2]
        before = Path.cwd()
        assert context.run("false") == 2
        assert Path.cwd() == before

    def test_run_leaves_unknown_references_for_shell(self, context, recording_shell):
        context.run("for f in *; do echo $f; done")
        assert recording_shell.commands == ["for f in *; do echo $f; done"]

    def test_run_leaves_inherited_variables_for_shell(self, script_dir, recording_shell, fake_fetcher):
        context = ExecutionContext(script_dir, VariableStore(), recording_shell, fake_fetcher,
                                   base_env={"HOME": "/home/builder", "PWD": "/launched/from"})
        context.set_workdir("stage")
        context.run("echo $HOME '$HOME' $PWD")
        call = recording_shell.calls[0]
        assert call["command"] == "echo $HOME '$HOME' $PWD"
        assert call["env"]["HOME"] == "/home/builder"
        assert call["env"]["PWD"] == str(context.workdir)

    def test_environment_overlays_store_without_touching_os_environ(self, context):
        context.store.set("DOCKRUN_CTX_ONLY", "1")
        env = context.environment()
        assert env["DOCKRUN_CTX_ONLY"] == "1"
        assert "DOCKRUN_CTX_ONLY" not in os.environ

    def test_relative_workdir_is_anchored_at_script_dir(self, context, script_dir):
        context.set_workdir("build")
        context.set_workdir("other")
        assert context.workdir == script_dir.resolve() / "other"
        assert (script_dir / "build").is_dir()
        assert (script_dir / "other").is_dir()

    def test_absolute_workdir_is_used_as_is(self, context, tmp_path):
        target = tmp_path / "abs" / "nested"
        assert context.set_workdir(str(target)) == target
        assert target.is_dir()

    def test_workdir_expands_variables(self, context, script_dir):
        context.store.set("VERSION", "1.2")
        context.set_workdir("out/$VERSION")
        assert context.workdir == script_dir.resolve() / "out" / "1.2"

    def test_workdir_expanding_to_empty_is_an_error(self, context):
        with pytest.raises(WorkdirError, match="empty path"):
            context.set_workdir("$UNSET_DIR")

    def test_workdir_over_a_file_is_an_error(self, context, script_dir):
        (script_dir / "taken").write_text("file")
        with pytest.raises(WorkdirError):
            context.set_workdir("taken")

    def test_fetch_runs_in_workdir(self, context, fake_fetcher, script_dir):
        context.set_workdir("downloads")
        assert context.fetch("https://example.com/file.txt") is True
        url, directory, process_cwd = fake_fetcher.calls[0]
        assert directory == script_dir.resolve() / "downloads"
        assert process_cwd.resolve() == directory.resolve()
        assert (directory / "file.txt").read_text() == url

    def test_fetch_failure_is_reported_not_raised(self, context, fake_fetcher):
        fake_fetcher.fail = True
        before = Path.cwd()
        assert context.fetch("https://example.com/file.txt") is False
        assert Path.cwd() == before

    def test_fetch_error_type_is_the_only_one_swallowed(self, script_dir, recording_shell):
        class Exploding:
            def fetch(self, url, directory):
                raise RuntimeError("bug")

        context = ExecutionContext(script_dir, VariableStore(), recording_shell, Exploding(), base_env={})
        with pytest.raises(RuntimeError):
            context.fetch("https://example.com/a.txt")
