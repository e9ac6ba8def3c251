"""Directory tree reduction, sequential or concurrent.

A directory's digest is H(UTF8(name) ++ D(c_1) ++ ... ++ D(c_n)) where the
children are sorted by name. Both modes apply the same rule and return
byte-identical digests for the same tree.
"""

import asyncio
import logging
import os
import stat
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from dirchecksum.core.errors import EntryNotFoundError, translate_os_error
from dirchecksum.core.hasher import DEFAULT_ALGORITHM, combine, file_digest, new_hash
from dirchecksum.core.scanner import Entry, list_entries

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    """How the children of each directory are reduced."""

    SEQUENTIAL = "sequential"
    CONCURRENT = "concurrent"


@dataclass
class _Pending:
    """A directory whose children are still being reduced."""

    name: str
    children: list[Entry]
    digests: list[bytes] = field(default_factory=list)


def resolve_root(path: Path) -> Path:
    """Return the absolute directory to hash, checking it up front.

    Raises:
        EntryNotFoundError: ``path`` does not exist or is not a directory.
        HashIOError: the platform rejected the path (too long, permission).
    """
    # abspath normalizes "." and trailing separators without following symlinks
    root = Path(os.path.abspath(Path(path).expanduser()))
    try:
        mode = root.stat().st_mode
    except NotADirectoryError as exc:
        raise EntryNotFoundError(root, "Directory does not exist") from exc
    except OSError as exc:
        raise translate_os_error(root, exc) from exc

    if not stat.S_ISDIR(mode):
        raise EntryNotFoundError(root, "Directory does not exist")
    return root


def _sequential_digest(root: Path, algorithm: str) -> bytes:
    # Explicit stack instead of recursion so depth is bounded by the
    # filesystem, not the interpreter's recursion limit.
    stack = [_Pending(root.name, list_entries(root))]

    while True:
        frame = stack[-1]
        index = len(frame.digests)

        if index < len(frame.children):
            child = frame.children[index]
            if child.is_dir:
                stack.append(_Pending(child.name, list_entries(child.path)))
            else:
                frame.digests.append(file_digest(child.path, algorithm))
            continue

        stack.pop()
        digest = combine(frame.name, frame.digests, algorithm)
        if not stack:
            return digest
        stack[-1].digests.append(digest)


async def _concurrent_digest(root: Path, algorithm: str, executor: ThreadPoolExecutor) -> bytes:
    loop = asyncio.get_running_loop()

    async def reduce_file(entry: Entry) -> bytes:
        return await loop.run_in_executor(executor, file_digest, entry.path, algorithm)

    async def reduce_directory(name: str, path: Path) -> bytes:
        children = await loop.run_in_executor(executor, list_entries, path)
        try:
            # Leaving the group cancels the remaining siblings on the first failure
            async with asyncio.TaskGroup() as group:
                tasks = [
                    group.create_task(reduce_directory(c.name, c.path) if c.is_dir else reduce_file(c))
                    for c in children
                ]
        except ExceptionGroup as failures:
            # Each level unwraps its group, so children only ever raise plain errors
            raise failures.exceptions[0]
        # Results are taken in dispatch order, whatever order the tasks finished in
        return combine(name, [task.result() for task in tasks], algorithm)

    return await reduce_directory(root.name, root)


async def directory_digest_async(
    path: Path,
    algorithm: str = DEFAULT_ALGORITHM,
    max_workers: int | None = None,
) -> bytes:
    """Concurrent-mode digest for callers already running an event loop.

    Every child of every directory becomes its own task; listings and file
    reads run on a thread pool of ``max_workers`` threads, which bounds the
    number of files open at once. No task outlives the call, whether it
    returns or raises.
    """
    new_hash(algorithm)
    root = resolve_root(path)
    logger.debug("Hashing %s (concurrent, max_workers=%s)", root, max_workers)

    executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="dirchecksum")
    try:
        return await _concurrent_digest(root, algorithm, executor)
    finally:
        # Queued reads of an aborted tree are dropped; reads already running
        # are waited for off the event loop.
        await asyncio.to_thread(executor.shutdown, wait=True, cancel_futures=True)


def directory_digest(
    path: Path,
    mode: Mode = Mode.SEQUENTIAL,
    algorithm: str = DEFAULT_ALGORITHM,
    max_workers: int | None = None,
) -> bytes:
    """Compute the digest of a directory tree.

    Args:
        path: Directory to hash. Its base name is part of the digest.
        mode: Sequential or concurrent reduction. Both give the same result.
        algorithm: Any hashlib algorithm name.
        max_workers: Thread pool size for concurrent mode.

    Raises:
        ValueError: ``algorithm`` is not supported.
        EntryNotFoundError: ``path`` is not an existing directory, or an
            entry vanished while the tree was being read.
        HashIOError: a listing or read failed for another reason.
    """
    mode = Mode(mode)

    if mode is Mode.CONCURRENT:
        return asyncio.run(directory_digest_async(path, algorithm, max_workers))

    new_hash(algorithm)
    root = resolve_root(path)
    logger.debug("Hashing %s (sequential)", root)
    return _sequential_digest(root, algorithm)
