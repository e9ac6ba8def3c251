"""Checksum commands for directory trees and single files."""

import time
from enum import Enum
from pathlib import Path

import typer
from rich.markup import escape

from dirchecksum.core.errors import EntryNotFoundError, HashError
from dirchecksum.core.hasher import digest_size, digest_to_hex, file_digest
from dirchecksum.core.tree import Mode, directory_digest, resolve_root
from dirchecksum.utils.config import get_config
from dirchecksum.utils.console import console, format_elapsed

app = typer.Typer(help="Compute and check checksums")


class RunMode(str, Enum):
    SEQUENTIAL = "sequential"
    CONCURRENT = "concurrent"
    BOTH = "both"


MODE_LABELS = {
    Mode.SEQUENTIAL: "Sequential",
    Mode.CONCURRENT: "Concurrent",
}


def _modes(run_mode: RunMode) -> list[Mode]:
    if run_mode is RunMode.BOTH:
        return [Mode.SEQUENTIAL, Mode.CONCURRENT]
    return [Mode(run_mode.value)]


def _resolve_settings(mode, algorithm, workers):
    """Fill unset options from the user config and validate them."""
    config = get_config()
    mode = mode or config.get("hash", "mode", "both")
    algorithm = algorithm or config.get("hash", "algorithm", "md5")
    workers = workers or config.get("concurrency", "max_workers")

    try:
        mode = RunMode(mode)
    except ValueError:
        choices = ", ".join(m.value for m in RunMode)
        console.print(f"[error]Invalid mode: {escape(str(mode))} (expected one of {choices})[/error]", soft_wrap=True)
        raise typer.Exit(1)

    if workers is not None and (isinstance(workers, bool) or not isinstance(workers, int) or workers < 1):
        console.print(f"[error]Invalid max_workers: {escape(str(workers))} (expected a positive integer)[/error]", soft_wrap=True)
        raise typer.Exit(1)

    try:
        digest_size(algorithm)
    except ValueError as e:
        console.print(f"[error]{escape(str(e))}[/error]", soft_wrap=True)
        raise typer.Exit(1)

    return mode, algorithm, workers


def _timed_digest(target: Path, mode: Mode, algorithm: str, workers) -> tuple[bytes, float]:
    """Hash a tree, reporting hashing errors and exiting on failure."""
    start = time.perf_counter()
    try:
        digest = directory_digest(target, mode, algorithm=algorithm, max_workers=workers)
    except HashError as e:
        console.print(f"[error]{escape(str(e))}[/error]", soft_wrap=True)
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[warning]Operation cancelled by user[/warning]")
        raise typer.Exit(130)
    return digest, time.perf_counter() - start


def _require_directory(path: Path) -> Path:
    try:
        return resolve_root(path)
    except EntryNotFoundError:
        console.print(f"[error]Directory not found: {escape(str(path))}[/error]", soft_wrap=True)
        raise typer.Exit(1)
    except HashError as e:
        console.print(f"[error]{escape(str(e))}[/error]", soft_wrap=True)
        raise typer.Exit(1)


@app.command()
def tree(
    path: Path = typer.Argument(None, help="Directory to hash"),
    mode: RunMode = typer.Option(None, "--mode", "-m", help="sequential, concurrent or both"),
    algorithm: str = typer.Option(None, "--algorithm", "-a", help="hashlib algorithm name"),
    workers: int = typer.Option(None, "--workers", "-w", min=1, help="Threads for concurrent mode"),
):
    """Compute the checksum of a directory tree and time each mode."""
    if path is None:
        console.print("Usage: dirchecksum hash tree <directory path>")
        return

    try:
        target = resolve_root(path)
    except EntryNotFoundError:
        console.print(f"[warning]The specified directory '{escape(str(path))}' does not exist.[/warning]", soft_wrap=True)
        return
    except HashError as e:
        console.print(f"[error]{escape(str(e))}[/error]", soft_wrap=True)
        raise typer.Exit(1)

    mode, algorithm, workers = _resolve_settings(mode, algorithm, workers)

    digests = []
    for run in _modes(mode):
        digest, elapsed = _timed_digest(target, run, algorithm, workers)
        digests.append(digest)

        label = MODE_LABELS[run]
        console.print(f"{label} checksum: [digest]{digest_to_hex(digest)}[/digest]", soft_wrap=True)
        console.print(f"{label} computation time: {format_elapsed(elapsed)}")

    if len(set(digests)) > 1:
        console.print("[warning]Warning: Sequential and concurrent checksums differ![/warning]")


@app.command(name="file")
def hash_file(
    path: Path = typer.Argument(..., help="File to hash"),
    algorithm: str = typer.Option(None, "--algorithm", "-a", help="hashlib algorithm name"),
):
    """Compute the checksum of a single file (name and content)."""
    _, algorithm, _ = _resolve_settings(RunMode.SEQUENTIAL, algorithm, None)

    try:
        digest = file_digest(Path(path).expanduser(), algorithm)
    except HashError as e:
        console.print(f"[error]{escape(str(e))}[/error]", soft_wrap=True)
        raise typer.Exit(1)

    console.print(f"[digest]{digest_to_hex(digest)}[/digest]", soft_wrap=True)


@app.command()
def verify(
    path: Path = typer.Argument(..., help="Directory to check"),
    expected: str = typer.Argument(..., help="Expected checksum (hex)"),
    mode: RunMode = typer.Option(RunMode.CONCURRENT, "--mode", "-m", help="sequential or concurrent"),
    algorithm: str = typer.Option(None, "--algorithm", "-a", help="hashlib algorithm name"),
    workers: int = typer.Option(None, "--workers", "-w", min=1, help="Threads for concurrent mode"),
):
    """Check a directory tree against a previously recorded checksum."""
    target = _require_directory(path)
    mode, algorithm, workers = _resolve_settings(mode, algorithm, workers)

    expected = expected.strip().upper()
    width = digest_size(algorithm) * 2
    if len(expected) != width:
        console.print(f"[warning]Expected checksum has {len(expected)} characters, {algorithm} gives {width}[/warning]")

    # Verification needs one answer; either mode gives the same one
    digest, _ = _timed_digest(target, _modes(mode)[-1], algorithm, workers)
    actual = digest_to_hex(digest)

    if actual != expected:
        console.print("[error]Checksum mismatch[/error]")
        console.print(f"  Expected: {escape(expected)}", soft_wrap=True)
        console.print(f"  Actual:   {actual}", soft_wrap=True)
        raise typer.Exit(1)

    console.print(f"[success]Checksum OK:[/success] [digest]{actual}[/digest]", soft_wrap=True)


@app.command()
def compare(
    left: Path = typer.Argument(..., help="First directory"),
    right: Path = typer.Argument(..., help="Second directory"),
    mode: RunMode = typer.Option(RunMode.CONCURRENT, "--mode", "-m", help="sequential or concurrent"),
    algorithm: str = typer.Option(None, "--algorithm", "-a", help="hashlib algorithm name"),
    workers: int = typer.Option(None, "--workers", "-w", min=1, help="Threads for concurrent mode"),
):
    """Compare two directory trees by checksum.

    Root directory names are part of the checksum, so trees stored under
    different names never match.
    """
    left_dir = _require_directory(left)
    right_dir = _require_directory(right)
    mode, algorithm, workers = _resolve_settings(mode, algorithm, workers)
    run = _modes(mode)[-1]

    left_digest, _ = _timed_digest(left_dir, run, algorithm, workers)
    right_digest, _ = _timed_digest(right_dir, run, algorithm, workers)

    console.print(f"Left:  [digest]{digest_to_hex(left_digest)}[/digest]", soft_wrap=True)
    console.print(f"Right: [digest]{digest_to_hex(right_digest)}[/digest]", soft_wrap=True)

    if left_digest != right_digest:
        console.print("[warning]Trees differ[/warning]")
        raise typer.Exit(1)

    console.print("[success]Trees are identical[/success]")
