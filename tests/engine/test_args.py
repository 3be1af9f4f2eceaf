import pytest

from dockrun.datacls.instructions import Arg
from dockrun.engine import args as args_module
from dockrun.engine.args import (
    ArgResolver,
    ConsolePrompt,
    NonInteractivePrompt,
    ScriptedPrompt,
    detect_prompt,
)
from dockrun.exceptions import MissingArgumentError


def make_arg(name="VERSION", default=None, lineno=1) -> Arg:
    line = f"ARG {name}" if default is None else f"ARG {name}={default}"
    return Arg(lineno=lineno, line=line, name=name, default=default)


class TestNonInteractiveResolution:
    """ARG resolution with no terminal: environment, then default, then error."""

    @pytest.fixture
    def resolver(self) -> ArgResolver:
        return ArgResolver(NonInteractivePrompt())

    def test_literal_default_without_environment(self, resolver):
        assert resolver.resolve(make_arg(default="1.0.0"), {}) == "1.0.0"

    def test_environment_wins_over_literal_default(self, resolver):
        assert resolver.resolve(make_arg(default="1.0.0"), {"VERSION": "2.0.0"}) == "2.0.0"

    def test_environment_used_without_default(self, resolver):
        assert resolver.resolve(make_arg(), {"VERSION": "3.1"}) == "3.1"

    def test_empty_literal_default_is_a_value(self, resolver):
        assert resolver.resolve(make_arg(default=""), {}) == ""

    def test_missing_everything_is_fatal(self, resolver):
        with pytest.raises(MissingArgumentError, match="line 5: no value provided for ARG TOKEN") as excinfo:
            resolver.resolve(make_arg(name="TOKEN", lineno=5), {})
        assert excinfo.value.name == "TOKEN"

    def test_never_prompts(self, resolver):
        with pytest.raises(RuntimeError):
            resolver.prompt.ask("X", None)


class TestInteractiveResolution:
    """ARG resolution with a prompt."""

    def test_empty_answer_takes_literal_default(self):
        prompt = ScriptedPrompt([""])
        assert ArgResolver(prompt).resolve(make_arg(default="1.0.0"), {}) == "1.0.0"
        assert prompt.asked == ["VERSION"]

    def test_answer_overrides_default(self):
        prompt = ScriptedPrompt(["  9.9.9 "])
        assert ArgResolver(prompt).resolve(make_arg(default="1.0.0"), {}) == "9.9.9"

    def test_literal_default_shown_before_environment(self):
        shown = []

        class Recording(ScriptedPrompt):
            def ask(self, name, default):
                shown.append(default)
                return ""

        resolver = ArgResolver(Recording())
        assert resolver.resolve(make_arg(default="literal"), {"VERSION": "env"}) == "literal"
        assert shown == ["literal"]

    def test_environment_is_default_for_arg_without_literal(self):
        assert ArgResolver(ScriptedPrompt([""])).resolve(make_arg(), {"VERSION": "from-env"}) == "from-env"

    def test_empty_answer_without_any_default_is_fatal(self):
        with pytest.raises(MissingArgumentError):
            ArgResolver(ScriptedPrompt([""])).resolve(make_arg(), {})


class TestPrompts:
    def test_console_prompt_text(self, monkeypatch):
        seen = {}

        def fake_prompt(text, **kwargs):
            seen["text"] = text
            seen.update(kwargs)
            return " typed "

        monkeypatch.setattr(args_module.click, "prompt", fake_prompt)
        assert ConsolePrompt().ask("VERSION", "1.0.0") == "typed"
        assert seen["text"] == "Enter value for ARG VERSION (default: 1.0.0)"
        assert seen["default"] == ""

    def test_console_prompt_without_default(self, monkeypatch):
        seen = {}
        monkeypatch.setattr(args_module.click, "prompt", lambda text, **kw: seen.setdefault("text", text) and "")
        ConsolePrompt().ask("TOKEN", None)
        assert seen["text"] == "Enter value for ARG TOKEN"

    @pytest.mark.parametrize("flag, expected", [(True, ConsolePrompt), (False, NonInteractivePrompt)])
    def test_detect_prompt_honours_explicit_flag(self, flag, expected):
        assert isinstance(detect_prompt(flag), expected)

    def test_detect_prompt_without_tty(self, monkeypatch):
        class NotATty:
            def isatty(self):
                return False

        monkeypatch.setattr(args_module.sys, "stdin", NotATty())
        assert isinstance(detect_prompt(), NonInteractivePrompt)
