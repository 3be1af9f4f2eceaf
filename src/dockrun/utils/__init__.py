"""
dockrun Utils Module

- logger: Logging setup and configuration
- typing_compat: Type compatibility utilities

Usage:
    from dockrun.utils import setup_logger, override
"""

from .logger import setup_logger, parse_module_levels
from .typing_compat import override

__all__ = [
    'setup_logger',
    'parse_module_levels',
    'override',
]
