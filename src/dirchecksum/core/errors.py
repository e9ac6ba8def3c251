"""Errors raised while hashing files and directory trees."""

import errno
from pathlib import Path


class HashError(Exception):
    """Base class for hashing failures."""

    def __init__(self, path: Path, message: str):
        super().__init__(f"{message}: {path}")
        self.path = path


class EntryNotFoundError(HashError):
    """A file or directory that was expected to exist is missing."""

    def __init__(self, path: Path, message: str = "No such file or directory"):
        super().__init__(path, message)


class HashIOError(HashError):
    """Reading or listing failed for a reason other than absence."""


def translate_os_error(path: Path, exc: OSError) -> HashError:
    """Map an OSError onto the hashing error taxonomy."""
    if isinstance(exc, FileNotFoundError) or exc.errno == errno.ENOENT:
        return EntryNotFoundError(path)
    return HashIOError(path, exc.strerror or str(exc))
