"""Leaf hashing: digest of a single file from its name and content."""

import hashlib
import logging
from pathlib import Path

from dirchecksum.core.errors import HashIOError, translate_os_error

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192
DEFAULT_ALGORITHM = "md5"


def new_hash(algorithm: str = DEFAULT_ALGORITHM):
    """Create a hash object, rejecting unknown algorithms early."""
    try:
        return hashlib.new(algorithm)
    except (ValueError, TypeError) as exc:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}") from exc


def digest_size(algorithm: str = DEFAULT_ALGORITHM) -> int:
    """Width in bytes of digests produced by ``algorithm``."""
    return new_hash(algorithm).digest_size


def name_bytes(name: str) -> bytes:
    # surrogateescape keeps undecodable POSIX names hashable
    return name.encode("utf-8", errors="surrogateescape")


def file_digest(path: Path, algorithm: str = DEFAULT_ALGORITHM) -> bytes:
    """Compute H(UTF8(name) ++ content) for a file.

    The content is streamed in CHUNK_SIZE pieces, which is equivalent to
    hashing the concatenated buffer.

    Raises:
        EntryNotFoundError: the file does not exist.
        HashIOError: the file could not be read.
    """
    path = Path(path)
    h = new_hash(algorithm)
    h.update(name_bytes(path.name))

    try:
        with open(path, "rb") as f:
            while chunk := f.read(CHUNK_SIZE):
                h.update(chunk)
    except IsADirectoryError as exc:
        raise HashIOError(path, "Is a directory") from exc
    except OSError as exc:
        raise translate_os_error(path, exc) from exc

    logger.debug("Hashed file %s", path)
    return h.digest()


def combine(name: str, child_digests, algorithm: str = DEFAULT_ALGORITHM) -> bytes:
    """Compute H(UTF8(name) ++ d_1 ++ ... ++ d_n) for a directory.

    ``child_digests`` must already be in canonical order.
    """
    h = new_hash(algorithm)
    h.update(name_bytes(name))
    for digest in child_digests:
        h.update(digest)
    return h.digest()


def digest_to_hex(digest: bytes) -> str:
    """Render a digest as uppercase hex with no separators."""
    return bytes(digest).hex().upper()
