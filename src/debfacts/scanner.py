"""Discover candidate package archives under a directory tree."""

import logging
from collections.abc import Iterator
from pathlib import Path

from debfacts.constants import ARCHIVE_SUFFIX

logger = logging.getLogger(__name__)


def _log_walk_error(error: OSError) -> None:
    logger.warning(f"Skipping unreadable entry {error.filename}: {error.strerror or error}")


def scan_archives(root: Path, suffix: str = ARCHIVE_SUFFIX) -> Iterator[Path]:
    """Lazily yield every file under ``root`` whose name ends with ``suffix``.

    Directories that cannot be listed are logged and skipped; the walk carries
    on with the rest of the tree. Symlinked directories are not followed.
    Ordering is whatever the filesystem returns.

    Args:
        root: Top of the tree to scan, e.g. a mirror's ``pool/`` directory
        suffix: Archive file extension to match

    Yields:
        Paths of candidate archives
    """
    root = Path(root)
    if not root.is_dir():
        logger.warning(f"Scan root {root} is not a directory")
        return

    for dirpath, _dirnames, filenames in root.walk(on_error=_log_walk_error):
        for filename in filenames:
            if filename.endswith(suffix):
                yield dirpath / filename
