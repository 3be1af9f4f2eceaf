try:
    # Python 3.12+
    from typing import override  # type: ignore
except ImportError:
    from typing_extensions import override  # type: ignore

__all__ = ["override"]
