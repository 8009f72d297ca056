"""
Update pipeline orchestration.

This module runs the stages of an update in order:
1. Resolve the archive filename
2. Download the archive into memory
3. Store it in a fresh scratch directory
4. Extract it inside the scratch directory
5. Replace the installation directory with the extracted tree

Each stage raises a ``GupError`` on failure; the first failure ends the run
and nothing is rolled back. The scratch directory is always left on disk.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import requests

from gup.config.parser import LATEST_SENTINEL, UpdaterConfig
from gup.core.download import fetch_bytes
from gup.core.exceptions import ConfigurationError, DownloadError
from gup.core.filesystem import (
    create_scratch_dir,
    extract_archive,
    replace_installation,
    store_archive,
)
from gup.core.progress import NullReporter, ProgressReporter, run_with_reporter
from gup.updater.resolver import build_download_url, resolve_filename

logger = logging.getLogger(__name__)


@dataclass
class UpdateResult:
    """Result of a completed update."""

    filename: str
    """Resolved archive filename"""

    url: str
    """URL the archive was downloaded from"""

    scratch_dir: Path
    """Scratch directory holding the archive and extracted tree"""

    archive_path: Path
    """Path of the stored archive"""

    goroot: Path
    """Replaced installation directory"""

    bytes_downloaded: int
    """Size of the downloaded archive"""

    files_installed: int
    """Number of regular files copied into goroot"""

    directories_installed: int
    """Number of directories created below goroot"""


class GoUpdater:
    """
    Replaces a Go installation with a downloaded release.

    Example:
        >>> updater = GoUpdater(UpdaterConfig())
        >>> result = updater.update("1.21.0", Path("/usr/local/go"))
        >>> print(f"Installed {result.files_installed} files")
    """

    def __init__(
        self,
        config: Optional[UpdaterConfig] = None,
        reporter: Optional[ProgressReporter] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize updater.

        Args:
            config: Endpoints and naming rules. If None, uses defaults.
            reporter: Progress indicator bracketing slow stages.
            session: Optional requests session shared by all HTTP calls.
        """
        self.config = config or UpdaterConfig()
        self.reporter = reporter or NullReporter()
        self.session = session

    def update(
        self, version: str = LATEST_SENTINEL, goroot: Union[str, Path] = ""
    ) -> UpdateResult:
        """
        Run the full update.

        Args:
            version: Version to install, or "latest"
            goroot: Installation directory to replace

        Returns:
            UpdateResult describing the installation

        Raises:
            ConfigurationError: If goroot is empty
            VersionLookupError: If the latest version cannot be resolved
            DownloadError: If the archive cannot be downloaded
            FilesystemError: If a scratch, extraction or install step fails
            ArchiveError: If the archive is malformed
        """
        if not str(goroot):
            raise ConfigurationError("goroot must be set to the installation directory")
        goroot = Path(goroot)

        filename = resolve_filename(version, self.config, session=self.session)
        url = build_download_url(filename, self.config)

        scratch_dir = create_scratch_dir(self.config.scratch_prefix)

        content = self.download(url)

        logger.info(
            f"downloaded {len(content)} bytes successfully.\n"
            f"saving file to {scratch_dir / filename}"
        )
        archive_path = store_archive(content, scratch_dir, filename)

        logger.info(f"reading tar and saving to: {scratch_dir}/")
        run_with_reporter(
            lambda: extract_archive(archive_path, scratch_dir), self.reporter
        )

        logger.info(f"installing new go files to: {str(goroot)!r}")
        stats = run_with_reporter(
            lambda: replace_installation(
                scratch_dir / self.config.archive_root, goroot
            ),
            self.reporter,
        )

        return UpdateResult(
            filename=filename,
            url=url,
            scratch_dir=scratch_dir,
            archive_path=archive_path,
            goroot=goroot,
            bytes_downloaded=len(content),
            files_installed=stats.files,
            directories_installed=stats.directories,
        )

    def download(self, url: str) -> bytes:
        """
        Download an archive into memory with the reporter running.

        Raises:
            DownloadError: On transport failure or status >= 400
        """
        logger.info(f"downloading go tar from {url}\nplease wait")
        result = run_with_reporter(
            lambda: fetch_bytes(
                url,
                timeout=self.config.timeout,
                session=self.session,
                error_class=DownloadError,
            ),
            self.reporter,
        )
        return result.content


__all__ = ["GoUpdater", "UpdateResult"]
