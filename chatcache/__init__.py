# =============================================================================
# chatcache - event-driven conversation cache
# =============================================================================
"""
Version is read from the installed distribution metadata.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version


def _get_version() -> str:
    try:
        return version("chatcache")
    except PackageNotFoundError:
        return "0.0.0+unknown"


__version__: str = _get_version()
__description__: str = "Materialized-view cache of chats, contacts, groups and messages"

__all__ = [
    "__version__",
    "__description__",
]
