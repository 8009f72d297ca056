"""
File system operations for gup.

This module provides the on-disk stages of an update:
- Scratch directory creation and archive storage
- Streaming tar.gz iteration and extraction
- Lexical directory walking
- Installation directory replacement (remove, recreate, copy)

Every failure is raised as a ``GupError`` subclass; nothing here exits the
process.
"""

import enum
import gzip
import logging
import os
import shutil
import tarfile
import tempfile
import zlib
from contextlib import closing
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Tuple, Union

from gup.core.exceptions import ArchiveError, FilesystemError, InstallError

logger = logging.getLogger(__name__)

DIR_MODE = 0o755
ARCHIVE_FILE_MODE = 0o644
INSTALLED_FILE_MODE = 0o777

COPY_CHUNK_SIZE = 64 * 1024

# Raised by tarfile/zlib on malformed or truncated archive data
ARCHIVE_READ_ERRORS = (tarfile.TarError, gzip.BadGzipFile, zlib.error, EOFError)


# ============================================================================
# Scratch Directory / Archive Store
# ============================================================================


def create_scratch_dir(prefix: str = "gup", parent: Optional[Path] = None) -> Path:
    """
    Create a uniquely named scratch directory under the system temp root.

    The directory is never removed by gup; it is left behind for inspection.

    Args:
        prefix: Prefix for the directory name
        parent: Parent directory (default: system temp directory)

    Returns:
        Path to the new directory

    Raises:
        FilesystemError: If the directory cannot be created
    """
    try:
        scratch_dir = Path(tempfile.mkdtemp(prefix=prefix, dir=parent))
        if not scratch_dir.exists():
            scratch_dir.mkdir(mode=DIR_MODE, parents=True)
    except OSError as e:
        raise FilesystemError(f"failed to create new temp dir: {e}") from e

    logger.debug(f"Scratch directory: {scratch_dir}")
    return scratch_dir


def store_archive(content: bytes, scratch_dir: Path, filename: str) -> Path:
    """
    Write a downloaded payload verbatim into the scratch directory.

    Args:
        content: Archive bytes
        scratch_dir: Scratch directory
        filename: Resolved archive filename

    Returns:
        Path to the written archive

    Raises:
        FilesystemError: If the file cannot be written
    """
    archive_path = Path(scratch_dir) / filename
    try:
        _write_bytes(archive_path, content, ARCHIVE_FILE_MODE)
    except OSError as e:
        raise FilesystemError(f"failed to save archive to {archive_path}: {e}") from e
    return archive_path


def _write_bytes(path: Path, content: bytes, mode: int) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    with os.fdopen(fd, "wb") as f:
        f.write(content)


# ============================================================================
# Archive Iteration
# ============================================================================


class EntryKind(enum.Enum):
    """How an archive entry is handled during extraction."""

    DIRECTORY = "directory"
    FILE = "file"
    OTHER = "other"


@dataclass
class ArchiveEntry:
    """One member of a tar stream."""

    name: str
    kind: EntryKind
    mode: int
    stream: Optional[BinaryIO] = None
    """Content of a FILE entry; only readable until the next entry is requested"""


@dataclass
class ExtractionStats:
    """Counts of entries handled by extract_archive()."""

    directories: int = 0
    files: int = 0
    skipped: int = 0


def _entry_kind(member: tarfile.TarInfo) -> EntryKind:
    if member.isdir():
        return EntryKind.DIRECTORY
    if member.isreg():
        return EntryKind.FILE
    return EntryKind.OTHER


def iter_archive_entries(fileobj: BinaryIO) -> Iterator[ArchiveEntry]:
    """
    Lazily iterate the entries of a gzip-compressed tar stream.

    The sequence is forward-only and cannot be restarted. Both the
    decompression stream and fileobj are closed once iteration finishes,
    fails or is abandoned.

    Args:
        fileobj: Binary file object positioned at the start of the gzip data;
            ownership passes to the iterator

    Yields:
        ArchiveEntry for each member, in stream order

    Raises:
        ArchiveError: If the gzip or tar data is malformed
    """
    try:
        with tarfile.open(fileobj=fileobj, mode="r|gz") as tar:
            for member in tar:
                kind = _entry_kind(member)
                stream = tar.extractfile(member) if kind is EntryKind.FILE else None
                yield ArchiveEntry(
                    name=member.name, kind=kind, mode=member.mode, stream=stream
                )
    except ARCHIVE_READ_ERRORS as e:
        raise ArchiveError(f"failed to read entry in tar: {e}") from e
    finally:
        fileobj.close()


def entry_target(destination: Path, name: str) -> Path:
    """
    Join an archive entry name onto the extraction root.

    Leading slashes are dropped and the result is cleaned lexically. Entry
    names are not checked for ``..`` segments escaping the root.

    Example:
        >>> entry_target(Path("/tmp/gup1"), "go/bin/")
        PosixPath('/tmp/gup1/go/bin')
    """
    return Path(os.path.normpath(os.path.join(str(destination), name.lstrip("/"))))


# ============================================================================
# Archive Extraction
# ============================================================================


def extract_archive(
    archive_path: Union[str, Path], destination: Union[str, Path]
) -> ExtractionStats:
    """
    Extract a .tar.gz archive into destination.

    Directory entries are created if missing, regular files are written
    with the entry's permission mode, and any other entry type (symlinks,
    hard links, devices, fifos) is skipped.

    Args:
        archive_path: Path to the stored archive
        destination: Directory to extract into

    Returns:
        ExtractionStats with counts of handled entries

    Raises:
        ArchiveError: If the archive is malformed
        FilesystemError: If a directory or file cannot be written

    Example:
        >>> extract_archive('/tmp/gup123/go1.21.0.linux-amd64.tar.gz', '/tmp/gup123')
    """
    archive_path = Path(archive_path)
    destination = Path(destination)
    stats = ExtractionStats()

    try:
        archive = open(archive_path, "rb")
    except OSError as e:
        raise FilesystemError(f"could not open tar file: {e}") from e

    with archive, closing(iter_archive_entries(archive)) as entries:
        for entry in entries:
            target = entry_target(destination, entry.name)

            if entry.kind is EntryKind.DIRECTORY:
                _extract_directory(target)
                stats.directories += 1
            elif entry.kind is EntryKind.FILE:
                _extract_file(target, entry)
                stats.files += 1
            else:
                logger.debug(f"Skipping non-regular entry: {entry.name}")
                stats.skipped += 1

    logger.debug(
        f"Extracted {stats.files} files and {stats.directories} directories "
        f"({stats.skipped} skipped)"
    )
    return stats


def _extract_directory(target: Path) -> None:
    if target.exists():
        return
    try:
        target.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"failed to make tar directory: {e}") from e


def _extract_file(target: Path, entry: ArchiveEntry) -> None:
    try:
        target.parent.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
        fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, entry.mode)
    except OSError as e:
        raise FilesystemError(f"failed to open file: {e}") from e

    with os.fdopen(fd, "wb") as f:
        try:
            shutil.copyfileobj(entry.stream, f, COPY_CHUNK_SIZE)
        except ARCHIVE_READ_ERRORS as e:
            raise ArchiveError(f"failed to read {entry.name} from tar: {e}") from e
        except OSError as e:
            raise FilesystemError(f"failed to write file {target}: {e}") from e


# ============================================================================
# Installation
# ============================================================================


@dataclass
class InstallStats:
    """Counts of entries copied by install_tree()."""

    directories: int = 0
    files: int = 0


def safe_rmtree(path: Union[str, Path]) -> None:
    """
    Remove a directory tree (or single file); a missing path is a no-op.

    Raises:
        ValueError: If path is empty
        FilesystemError: If deletion fails
    """
    if not str(path):
        raise ValueError("Refusing to remove an empty path")

    path = Path(path)

    if not path.exists() and not path.is_symlink():
        return

    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except OSError as e:
        raise FilesystemError(f"failed to remove files: {e}") from e


def recreate_directory(path: Union[str, Path]) -> Path:
    """
    Create a single directory that must not already exist.

    Raises:
        InstallError: If the directory exists or cannot be created
    """
    path = Path(path)
    try:
        path.mkdir(mode=DIR_MODE)
    except OSError as e:
        raise InstallError(f"failed to recreate {path}: {e}") from e
    return path


def walk_tree(root: Union[str, Path]) -> Iterator[Tuple[Path, bool]]:
    """
    Walk a directory tree depth-first in lexical order.

    The root itself is yielded first. Symlinks are reported as files and are
    not followed.

    Yields:
        (path, is_dir) tuples

    Raises:
        OSError: If a directory cannot be listed
    """
    root = Path(root)
    is_dir = root.is_dir() and not root.is_symlink()
    yield root, is_dir
    if not is_dir:
        return
    for name in sorted(os.listdir(root)):
        yield from walk_tree(root / name)


def install_tree(
    source_root: Union[str, Path], destination: Union[str, Path]
) -> InstallStats:
    """
    Copy every directory and file below source_root into destination.

    Directories are created one level at a time; files are read in full and
    written verbatim. The first error aborts the copy.

    Raises:
        InstallError: If the source cannot be walked or a copy fails
    """
    source_root = Path(source_root)
    destination = Path(destination)
    stats = InstallStats()

    if not source_root.is_dir():
        raise InstallError(f"extracted tree not found: {source_root}")

    try:
        for path, is_dir in walk_tree(source_root):
            rel_path = path.relative_to(source_root)
            if rel_path == Path("."):
                continue

            target = destination / rel_path
            if is_dir:
                target.mkdir(mode=DIR_MODE)
                stats.directories += 1
            else:
                _write_bytes(target, path.read_bytes(), INSTALLED_FILE_MODE)
                stats.files += 1
    except OSError as e:
        raise InstallError(f"filepath walking failed: {e}") from e

    return stats


def replace_installation(
    source_root: Union[str, Path], install_dir: Union[str, Path]
) -> InstallStats:
    """
    Replace install_dir with the contents of source_root.

    The existing directory is removed, recreated empty and then filled. There
    is no merge and no atomic swap. install_dir is left untouched when
    source_root is missing.

    Raises:
        FilesystemError: If removal fails
        InstallError: If source_root is missing, or recreation or copying fails
    """
    if not Path(source_root).is_dir():
        raise InstallError(f"extracted tree not found: {source_root}")

    safe_rmtree(install_dir)
    recreate_directory(install_dir)
    return install_tree(source_root, install_dir)


__all__ = [
    "DIR_MODE",
    "ARCHIVE_FILE_MODE",
    "INSTALLED_FILE_MODE",
    "create_scratch_dir",
    "store_archive",
    "EntryKind",
    "ArchiveEntry",
    "ExtractionStats",
    "iter_archive_entries",
    "entry_target",
    "extract_archive",
    "InstallStats",
    "safe_rmtree",
    "recreate_directory",
    "walk_tree",
    "install_tree",
    "replace_installation",
]
