"""
Version resolution: turn a version selector into an archive filename.
"""

import logging
from typing import Optional

import requests

from gup.config.parser import LATEST_SENTINEL, UpdaterConfig
from gup.core.download import fetch_text
from gup.core.exceptions import VersionLookupError

logger = logging.getLogger(__name__)


def fetch_latest_version(
    config: UpdaterConfig, session: Optional[requests.Session] = None
) -> str:
    """
    Query the latest-version endpoint and return its body verbatim.

    Raises:
        VersionLookupError: On transport failure or status >= 400
    """
    logger.debug(f"Looking up latest version at {config.latest_url}")
    return fetch_text(
        config.latest_url,
        timeout=config.timeout,
        session=session,
        error_class=VersionLookupError,
    )


def resolve_filename(
    version: str,
    config: UpdaterConfig,
    session: Optional[requests.Session] = None,
) -> str:
    """
    Build the archive filename for a version selector.

    The ``latest`` sentinel is resolved remotely and the endpoint's body is
    used as-is (it already carries the ``go`` prefix). Any other value is
    wrapped in the configured prefix and suffix without validation.

    Args:
        version: Version string (e.g. "1.21.0") or "latest"
        config: Updater configuration
        session: Optional requests session for the lookup

    Returns:
        Archive filename, e.g. "go1.21.0.linux-amd64.tar.gz"

    Raises:
        VersionLookupError: If the latest version cannot be fetched

    Example:
        >>> resolve_filename("1.21.0", UpdaterConfig())
        'go1.21.0.linux-amd64.tar.gz'
    """
    if version == LATEST_SENTINEL:
        return fetch_latest_version(config, session=session) + config.platform_suffix
    return config.filename_prefix + version + config.platform_suffix


def build_download_url(filename: str, config: UpdaterConfig) -> str:
    """Return the download URL for an archive filename."""
    return config.download_url + filename


__all__ = ["fetch_latest_version", "resolve_filename", "build_download_url"]
