"""
dockrun IO Module

- Shell: Abstract command execution interface
- SubprocessShell: Runs commands through `bash -c`
- Fetcher: Abstract URL retrieval interface
- FsspecFetcher: http(s) retrieval through fsspec
- infer_filename: Name a URL is saved under

Usage:
    from dockrun.io import SubprocessShell, FsspecFetcher

    status = SubprocessShell().run("echo hi", cwd=Path("."), env=os.environ)
"""

from .shell import Shell, SubprocessShell
from .fetch import Fetcher, FsspecFetcher, infer_filename

__all__ = [
    'Shell',
    'SubprocessShell',
    'Fetcher',
    'FsspecFetcher',
    'infer_filename',
]
