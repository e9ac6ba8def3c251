"""dirchecksum - deterministic content fingerprints for directory trees."""

from dirchecksum.core.errors import EntryNotFoundError, HashError, HashIOError
from dirchecksum.core.hasher import digest_to_hex, file_digest
from dirchecksum.core.tree import Mode, directory_digest, directory_digest_async

__version__ = "0.1.0"

__all__ = [
    "EntryNotFoundError",
    "HashError",
    "HashIOError",
    "Mode",
    "digest_to_hex",
    "directory_digest",
    "directory_digest_async",
    "file_digest",
]
