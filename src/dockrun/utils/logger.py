import logging
import sys
import os
from typing import Dict, Optional

import colorlog

from .. import constants

# Console handler installed by setup_logger, if any
_console_handler: Optional[logging.StreamHandler] = None


def setup_logger(debug: bool = False, module_levels: Optional[Dict[str, str]] = None, log_file: Optional[str] = None):
    """
    Configures the root logger for the application with colored output.

    Safe to call again once the configuration file has been read: the level,
    the console stream and the module levels are updated in place, and a log
    file is attached if it is not attached already.

    Args:
        debug: Enable debug logging level (traces parsing and dispatch decisions).
               The trace goes to stdout, alongside the commands' own output;
               otherwise console logging goes to stderr.
        module_levels: Per-module log levels
        log_file: Optional path to log file. If provided, logs will be written to this file.
    """
    global _console_handler
    logger = logging.getLogger()
    level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(level)
    stream = sys.stdout if debug else sys.stderr

    if _console_handler is not None and _console_handler in logger.handlers:
        _console_handler.setStream(stream)
    # Prevent duplicate handlers if another owner already configured the root logger
    elif not logger.handlers:
        _console_handler = _make_console_handler(stream)
        logger.addHandler(_console_handler)

    if log_file:
        _attach_file_handler(logger, log_file)

    _apply_module_levels(module_levels)


def _make_console_handler(stream) -> logging.StreamHandler:
    # Respect NO_COLOR env var (https://no-color.org/)
    use_colors = stream.isatty() and not os.environ.get("NO_COLOR")

    console_handler = logging.StreamHandler(stream)
    console_handler.setLevel(logging.NOTSET)

    if use_colors:
        console_formatter = colorlog.ColoredFormatter(
            '%(log_color)s[%(levelname).4s]%(reset)s %(cyan)s%(name)s%(reset)s: %(message)s',
            log_colors={
                'DEBUG': 'cyan',
                'INFO': 'green',
                'WARNING': 'yellow',
                'ERROR': 'red',
                'CRITICAL': 'red,bg_white',
            },
            reset=True,
            style='%'
        )
    else:
        console_formatter = logging.Formatter('[%(levelname).4s] %(name)s: %(message)s')

    console_handler.setFormatter(console_formatter)
    return console_handler


def _attach_file_handler(logger: logging.Logger, log_file: str):
    target = os.path.abspath(log_file)
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == target:
            return
    try:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.NOTSET)
        file_formatter = logging.Formatter(
            '%(asctime)s [%(levelname).4s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)
        logging.info(f"Logging to file: {log_file}")
    except OSError as e:
        logging.error(f"Failed to create log file handler for '{log_file}': {e}")


def parse_module_levels(levels: Optional[str]) -> Optional[Dict[str, str]]:
    """Parse 'ctx=DEBUG,vars=INFO' into a mapping; blank or malformed pairs are skipped."""
    if not levels:
        return None
    module_levels = {}
    for pair in levels.split(','):
        pair = pair.strip()
        if not pair or '=' not in pair:
            continue
        name, lvl = pair.split('=', 1)
        module_levels[name.strip()] = lvl.strip().upper()
    return module_levels


def _apply_module_levels(module_levels: Optional[Dict[str, str]]):
    """Apply per-module logger levels from mapping or env var DOCKRUN_LOG_LEVELS.

    module_levels format: {"dockrun.engine.context": "DEBUG", "dockrun.engine.variables": "INFO"}
    Env var example: DOCKRUN_LOG_LEVELS="ctx=DEBUG,vars=INFO"
    """
    if module_levels is None:
        module_levels = parse_module_levels(os.environ.get(constants.LOG_LEVELS_ENV))

    if not module_levels:
        return

    for name, lvl_str in module_levels.items():
        lvl = getattr(logging, lvl_str.upper(), None)
        if not isinstance(lvl, int):
            logging.warning(f"Ignoring unknown log level '{lvl_str}' for '{name}'")
            continue
        logging.getLogger(_normalize_module_name(name)).setLevel(lvl)


def _normalize_module_name(name: str) -> str:
    """Normalize provided module name with alias and auto-prefix.

    - If name is an alias, expand to full module path.
    - If name ends with '.*', treat it as base logger (strip the wildcard).
    - If name does not start with 'dockrun.' and begins with a known top module, prefix 'dockrun.'.
    """
    if name in constants.LOG_ALIAS_MAP:
        return constants.LOG_ALIAS_MAP[name]
    if name.endswith('.*'):
        name = name[:-2]
    if not name.startswith('dockrun.'):
        first = name.split('.', 1)[0]
        if first in constants.KNOWN_TOP_MODULES:
            name = f'dockrun.{name}'
    return name
