import yaml
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union
from pydantic import BaseModel, Field, ValidationError, ConfigDict, field_validator

from . import constants
from .exceptions import (
    ConfigParsingError,
    ConfigFileMissingError,
    ConfigValidationError,
)

logger = logging.getLogger(__name__)


class RunnerConfig(BaseModel):
    """
        Class Config-Validation Model for a dockrun invocation.

        `interactive=None` means decide from whether stdin is a terminal.
        `env` entries are added to the environment every command sees.
    """
    dockerfile: str = constants.DOCKERFILE_NAME
    debug: bool = False
    shell: str = constants.DEFAULT_SHELL
    interactive: Optional[bool] = None
    env: Dict[str, str] = Field(default_factory=dict)
    log_levels: Optional[str] = None
    log_file: Optional[str] = None
    model_config = ConfigDict(extra="forbid")

    @field_validator('env', mode='before')
    @classmethod
    def stringify_env(cls, value: Any) -> Any:
        """YAML turns `1.0` or `yes` into non-strings; the environment only holds strings."""
        if isinstance(value, dict):
            return {str(k): "" if v is None else str(v) for k, v in value.items()}
        return value

    @field_validator('env')
    @classmethod
    def check_env_names(cls, value: Dict[str, str]) -> Dict[str, str]:
        for name in value:
            if not constants.VAR_NAME_PATTERN.match(name):
                raise ValueError(f"'{name}' is not a valid environment variable name")
        return value

    @field_validator('shell')
    @classmethod
    def check_shell(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("shell must not be empty")
        return value

    def merged(self, **overrides: Any) -> "RunnerConfig":
        """Copy with every override that is not None applied (CLI flags win over file values)."""
        updates = {k: v for k, v in overrides.items() if v is not None}
        try:
            return self.model_validate({**self.model_dump(), **updates})
        except ValidationError as e:
            raise ConfigValidationError(f"Invalid option:\n{e}")


def load_config(config_path: Union[str, Path]) -> RunnerConfig:
    """
    Loads and validates a YAML config file.
    """
    path = Path(config_path)
    logger.info(f"Loading configuration from '{path}'...")
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigFileMissingError(f"Configuration file not found at: {path}")
    except OSError as e:
        raise ConfigParsingError(f"Cannot read configuration file '{path}': {e}")

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigParsingError(f"Error parsing YAML file: {e}")
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigParsingError("Configuration file must be a YAML document containing a dictionary.")
    logger.debug(f"Successfully parsed YAML from '{path}'.")

    try:
        config = RunnerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Configuration validation failed:\n{e}")
    logger.debug(f"Configuration model validated successfully: \n{config.model_dump_json(indent=2)}")
    return config
