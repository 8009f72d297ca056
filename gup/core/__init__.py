"""
Core functionality for gup.

This package contains the network, filesystem and progress primitives the
update pipeline is built from.
"""

from .exceptions import (
    GupError,
    ConfigurationError,
    NetworkError,
    VersionLookupError,
    DownloadError,
    FilesystemError,
    InstallError,
    ArchiveError,
)

__all__ = [
    "GupError",
    "ConfigurationError",
    "NetworkError",
    "VersionLookupError",
    "DownloadError",
    "FilesystemError",
    "InstallError",
    "ArchiveError",
]
