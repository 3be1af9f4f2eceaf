from typing import Optional


class DockrunError(Exception):
    """Base exception for all application-specific errors."""

    pass


# --- 1. Errors related to loading and parsing the configuration file ---
class ConfigurationError(DockrunError):
    """Base class for errors encountered while finding, reading, or parsing config files."""

    pass


class ConfigFileMissingError(ConfigurationError):
    """Raised when the configuration file cannot be found."""

    pass


class ConfigParsingError(ConfigurationError):
    """Raised when a YAML configuration file is syntactically incorrect."""

    pass


class ConfigValidationError(ConfigurationError):
    """Raised when the configuration fails structural validation (e.g., Pydantic)."""

    pass


# --- 2. Errors related to the build script itself ---
class ScriptError(DockrunError):
    """
    Base class for errors tied to the build script.

    When the error can be traced to a line, `lineno` holds it and the
    message is prefixed with it.
    """

    def __init__(self, message: str, lineno: Optional[int] = None):
        self.lineno = lineno
        self.detail = message
        if lineno is not None:
            message = f"line {lineno}: {message}"
        super().__init__(message)

    def at_line(self, lineno: int) -> "ScriptError":
        """Attach a line number to an error raised below the interpreter."""
        if self.lineno is None:
            self.lineno = lineno
            self.args = (f"line {lineno}: {self.detail}",)
        return self


class ScriptNotFoundError(ScriptError):
    """Raised when the script file does not exist."""

    pass


class ScriptReadError(ScriptError):
    """Raised when the script file exists but cannot be read."""

    pass


class ScriptParseError(ScriptError):
    """Raised for malformed script structure."""

    pass


class UnterminatedContinuationError(ScriptParseError):
    """Raised when the script ends inside a multi-line RUN."""

    pass


# --- 3. Errors that occur while executing instructions ---
class ExecutionError(ScriptError):
    """Base class for errors raised while executing an instruction."""

    pass


class CommandFailedError(ExecutionError):
    """Raised when a RUN command exits with a non-zero status."""

    def __init__(self, command: str, status: int, lineno: Optional[int] = None):
        self.command = command
        self.status = status
        super().__init__(f"command exited with status {status}: {command}", lineno)


class ShellUnavailableError(ExecutionError):
    """Raised when the shell executable cannot be started."""

    pass


class WorkdirError(ExecutionError):
    """Raised when a WORKDIR cannot be created or entered."""

    pass


# --- 4. Errors related to variables ---
class VariableError(ScriptError):
    """Base class for ARG/ENV variable errors."""

    pass


class InvalidVariableNameError(VariableError):
    """Raised when a variable name is not a valid identifier."""

    pass


class MissingArgumentError(VariableError):
    """Raised when an ARG has no value from input, environment or default."""

    def __init__(self, name: str, lineno: Optional[int] = None):
        self.name = name
        super().__init__(f"no value provided for ARG {name}", lineno)


# --- 5. Errors related to remote retrieval ---
class FetchError(DockrunError):
    """Raised when an ADD source cannot be retrieved. Never fatal for a run."""

    pass
