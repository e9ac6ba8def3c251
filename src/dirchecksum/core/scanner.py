"""Directory listing in canonical (ordinal name) order."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dirchecksum.core.errors import EntryNotFoundError, translate_os_error
from dirchecksum.core.hasher import name_bytes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Entry:
    """A child of a directory, identified by its base name."""

    name: str
    path: Path
    is_dir: bool


def _classify(item: os.DirEntry) -> bool | None:
    """Return True for directories, False for files, None for anything else."""
    if item.is_dir():
        return True
    if item.is_file():
        return False
    return None


def list_entries(directory: Path) -> list[Entry]:
    """List the immediate children of a directory, sorted by name.

    Files and subdirectories share one list. Sockets, FIFOs and dangling
    symlinks are skipped.
    """
    directory = Path(directory)
    entries = []

    try:
        with os.scandir(directory) as it:
            for item in it:
                kind = _classify(item)
                if kind is None:
                    logger.debug("Skipping special entry %s", item.path)
                    continue
                entries.append(Entry(item.name, directory / item.name, kind))
    except NotADirectoryError as exc:
        raise EntryNotFoundError(directory, "Not a directory") from exc
    except OSError as exc:
        raise translate_os_error(directory, exc) from exc

    # Byte order of the encoded names, which also covers undecodable POSIX names
    entries.sort(key=lambda e: name_bytes(e.name))
    logger.debug("Listed %d entries in %s", len(entries), directory)
    return entries
