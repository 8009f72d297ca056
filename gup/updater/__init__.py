"""
Go toolchain update pipeline.
"""

from .pipeline import GoUpdater, UpdateResult
from .resolver import build_download_url, fetch_latest_version, resolve_filename

__all__ = [
    "GoUpdater",
    "UpdateResult",
    "build_download_url",
    "fetch_latest_version",
    "resolve_filename",
]
