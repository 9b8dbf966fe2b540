from __future__ import annotations

import logging
import os
import time
from collections.abc import Collection, Iterable

from .config import Settings

logger = logging.getLogger(__name__)


def _raise(exc: OSError) -> None:
    raise exc


def list_files(root: str) -> list[str]:
    """Recursively collect absolute paths of every regular file under ``root``."""
    files: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames.sort()
        for name in sorted(filenames):
            path = os.path.join(dirpath, name)
            if os.path.isfile(path):
                files.append(os.path.abspath(path))
    return files


def is_excluded(
    path: str,
    excluded_extensions: Collection[str],
    excluded_directories: Iterable[str],
) -> bool:
    """Return True if any exclusion rule matches ``path``.

    ``excluded_extensions`` must already be lower-cased.
    """
    name = os.path.basename(path)
    if name.startswith("."):
        return True

    ext = os.path.splitext(name)[1].lower()
    if ext and ext in excluded_extensions:
        return True

    directory = os.path.dirname(path)
    return any(item in directory for item in excluded_directories)


def filter_files(
    files: Iterable[str],
    excluded_extensions: Iterable[str],
    excluded_directories: Iterable[str],
) -> list[str]:
    extensions = {item.lower() for item in excluded_extensions}
    directories = list(excluded_directories)
    kept = []
    for path in files:
        try:
            path.encode("utf-8")
        except UnicodeEncodeError:
            # Undecodable file names cannot be put into an image URL.
            logger.warning("skipping file with a non UTF-8 name: %r", path)
            continue
        if not is_excluded(path, extensions, directories):
            kept.append(path)
    return kept


def load_all_images(settings: Settings) -> tuple[str, ...]:
    """Scan the image root once and return the filtered, immutable file list.

    Scan errors are logged and produce an empty list so the server can still
    start with nothing to show.
    """
    started = time.perf_counter()
    try:
        files = list_files(settings.image_directory)
    except OSError as exc:
        logger.error("failed to scan %s: %s", settings.image_directory, exc)
        return ()

    images = filter_files(files, settings.excluded_extensions, settings.excluded_directories)
    elapsed = time.perf_counter() - started
    logger.info(
        "loaded %d images (%d files scanned) from %s in %.3fs",
        len(images),
        len(files),
        settings.image_directory,
        elapsed,
    )
    return tuple(images)
