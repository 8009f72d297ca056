"""
Centralized exception hierarchy for gup.

Stages raise these instead of terminating the process; the CLI driver
catches ``GupError`` and turns it into a single error line and exit code.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class GupError(Exception):
    """Base exception for all gup errors."""

    pass


class ConfigurationError(GupError):
    """Invalid command-line or YAML configuration."""

    pass


# ============================================================================
# Network Exceptions
# ============================================================================


class NetworkError(GupError):
    """Transport failure or HTTP status >= 400."""

    def __init__(self, message: str, status_code: int = 0):
        self.status_code = status_code
        super().__init__(message)


class VersionLookupError(NetworkError):
    """Raised when the latest version cannot be fetched."""

    pass


class DownloadError(NetworkError):
    """Raised when the toolchain archive cannot be downloaded."""

    pass


# ============================================================================
# Filesystem / Archive Exceptions
# ============================================================================


class FilesystemError(GupError):
    """Create, open, read, write or remove failure."""

    pass


class InstallError(FilesystemError):
    """Raised when the installation directory cannot be replaced."""

    pass


class ArchiveError(GupError):
    """Malformed gzip or tar stream."""

    pass


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
