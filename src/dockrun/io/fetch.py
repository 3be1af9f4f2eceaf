from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from urllib.parse import urlparse, unquote
import logging

import fsspec

from ..utils.typing_compat import override
from .. import constants
from ..exceptions import FetchError

logger = logging.getLogger(__name__)


def infer_filename(url: str) -> str:
    """
    File name a download of `url` is saved under: the last path segment,
    like `curl -O`.
    """
    parsed = urlparse(url)
    if parsed.scheme not in constants.FETCH_PROTOCOLS:
        raise FetchError(f"Unsupported URL scheme '{parsed.scheme}' in '{url}'")
    name = PurePosixPath(unquote(parsed.path)).name
    if not name:
        raise FetchError(f"Cannot infer a file name from URL '{url}'")
    return name


# --------------------
#
# Abstract Fetcher
#
# --------------------

class Fetcher(ABC):
    """dockrun Fetcher Abstract Base Class"""

    @abstractmethod
    def fetch(self, url: str, directory: Path) -> Path:
        """Download url into directory, returning the written path"""
        pass


# --------------------
#
# fsspec Fetcher
#
# --------------------

class FsspecFetcher(Fetcher):
    """Fetches http(s) resources through fsspec's HTTP filesystem"""

    def __init__(self, **storage_options):
        self.storage_options = storage_options

    @override
    def fetch(self, url: str, directory: Path) -> Path:
        target = Path(directory) / infer_filename(url)
        protocol = urlparse(url).scheme
        logger.debug(f"[{protocol}FS] Downloading {url} -> {target}")
        try:
            fs = fsspec.filesystem(protocol, **self.storage_options)
            fs.get(url, str(target))
        except FetchError:
            raise
        except Exception as e:
            # fsspec surfaces aiohttp and OS errors as-is
            raise FetchError(f"Failed to download '{url}': {e}") from e
        logger.info(f"Downloaded {url} to {target}")
        return target
