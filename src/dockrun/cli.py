import click
import logging
import traceback
from functools import wraps
from pathlib import Path

from .config import RunnerConfig, load_config
from .engine import Interpreter
from .utils import setup_logger, parse_module_levels
from .exceptions import (
    DockrunError,
    ConfigurationError,
    ScriptNotFoundError,
    ScriptError,
    MissingArgumentError,
)
from . import constants
from . import __version__


def setup_logging(debug: bool, log_levels: str = None, log_file: str = None):
    """Setup logger with debug and module-level configuration"""
    setup_logger(debug=debug, module_levels=parse_module_levels(log_levels), log_file=log_file)


def _fail(message: str):
    logging.error(message)
    ctx = click.get_current_context()
    if ctx.obj.get('debug'):
        traceback.print_exc()
    raise click.Abort()


def handle_errors(func):
    """Decorator to handle common exceptions"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ConfigurationError as e:
            _fail(f"Configuration error: {e}")
        except ScriptNotFoundError as e:
            logging.error(f"{e}")
            logging.info(
                "Hint: Make sure the Dockerfile exists in the specified path "
                "or use -f/--file to specify a different path."
            )
            _fail("No instructions were run.")
        except MissingArgumentError as e:
            _fail(f"Missing build argument: {e}")
        except ScriptError as e:
            _fail(f"Build step failed: {e}")
        except DockrunError as e:
            _fail(f"An unexpected application error occurred: {e}")
    return wrapper


@handle_errors
def do_run(config: RunnerConfig):
    """Execute the script named by the config"""
    script = Path(config.dockerfile)
    interpreter = Interpreter(script, config=config)
    report = interpreter.run()
    logging.debug(
        f"Ran {report.commands_run} command(s) from {script}; final workdir {report.workdir}."
    )
    if report.fetch_failures:
        logging.warning(f"{len(report.fetch_failures)} ADD download(s) failed: {', '.join(report.fetch_failures)}")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option('-f', '--file', 'dockerfile', type=click.Path(), default=None,
              help=f'Path to the Dockerfile. Default to {constants.DOCKERFILE_NAME} in current directory.')
@click.option('-d', '--debug', is_flag=True, default=False, help='Trace parsing and dispatch to stdout')
@click.option('-c', '--config', 'config_file', envvar=constants.CONFIG_ENV, type=click.Path(),
              help=f'YAML config file (also read from ${constants.CONFIG_ENV})')
@click.option('--shell', default=None, help=f'Shell used for RUN (default: {constants.DEFAULT_SHELL})')
@click.option('--interactive/--no-interactive', default=None,
              help='Force or disable ARG prompts (default: prompt only on a terminal)')
@click.option('-l', '--log-levels', help="Comma-separated per-module log levels (e.g., 'ctx=DEBUG,vars=INFO')")
@click.option('--log-file', help='Path to log file')
@click.version_option(version=__version__, prog_name='dockrun')
@click.pass_context
def cli(ctx, dockerfile, debug, config_file, shell, interactive, log_levels, log_file):
    """Runs a Dockerfile as a bash script

    \b
    Supported instructions: RUN, ENV, ARG, WORKDIR and ADD <url>.
    Everything else is ignored.

    \b
    Examples:
      dockrun                      Run ./Dockerfile
      dockrun -f build/Dockerfile  Run another file
      VERSION=2.0 dockrun          Answer ARG VERSION from the environment
    """
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug
    setup_logging(debug, log_levels, log_file)

    config = _build_config(config_file, dockerfile=dockerfile, debug=debug or None,
                           shell=shell, interactive=interactive,
                           log_levels=log_levels, log_file=log_file)
    ctx.obj['debug'] = config.debug
    setup_logging(config.debug, config.log_levels, config.log_file)
    do_run(config)


@handle_errors
def _build_config(config_file, **overrides) -> RunnerConfig:
    base = load_config(config_file) if config_file else RunnerConfig()
    return base.merged(**overrides)
