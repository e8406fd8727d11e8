"""
Filesystem calls used by the tools.

Each function wraps exactly one OS operation and translates OSError into
the tool error taxonomy, so no raw platform exception reaches a tool body.
"""

import os
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from bcoder_tools.tools.exceptions import (
    PathExistsError,
    PathNotFoundError,
    ToolIOError,
)


@contextmanager
def os_errors(path: Path, action: str) -> Iterator[None]:
    """
    Translate OSError raised inside the block.

    Args:
        path: Path the operation acts on (used in messages)
        action: Short verb phrase, e.g. "read file"
    """
    try:
        yield
    except FileNotFoundError:
        raise PathNotFoundError(str(path))
    except FileExistsError:
        raise PathExistsError(str(path))
    except OSError as e:
        reason = e.strerror or str(e)
        raise ToolIOError(f"Failed to {action}: {reason}", path=str(path)) from e


def exists(path: Path) -> bool:
    # lexists: a dangling symlink still occupies the name
    return os.path.lexists(path)


def stat(path: Path) -> os.stat_result:
    with os_errors(path, "stat path"):
        return path.stat()


def read_text(path: Path, encoding: str = "utf-8") -> tuple[str, int]:
    """
    Read a whole file as text.

    Returns:
        Tuple of (content, size in bytes)
    """
    with os_errors(path, "read file"):
        raw = path.read_bytes()
    try:
        return raw.decode(encoding), len(raw)
    except UnicodeDecodeError as e:
        raise ToolIOError(
            f"Failed to read file: content is not valid {encoding} ({e.reason})",
            path=str(path),
        )


def read_text_lenient(path: Path, encoding: str = "utf-8") -> str:
    """Read a file as text, replacing undecodable bytes."""
    with os_errors(path, "read file"):
        return path.read_text(encoding=encoding, errors="replace")


def write_text(path: Path, content: str, encoding: str = "utf-8") -> int:
    """
    Create or overwrite a file.

    Returns:
        Number of bytes written
    """
    data = content.encode(encoding)
    with os_errors(path, "write file"):
        path.write_bytes(data)
    return len(data)


def make_directory(path: Path, parents: bool) -> None:
    with os_errors(path, "create directory"):
        path.mkdir(parents=parents, exist_ok=False)


def rename(source: Path, destination: Path) -> None:
    with os_errors(source, "move path"):
        os.rename(source, destination)


def remove_file(path: Path) -> None:
    with os_errors(path, "delete file"):
        path.unlink()


def remove_directory(path: Path) -> None:
    """Remove an empty directory."""
    with os_errors(path, "delete directory"):
        path.rmdir()


def remove_tree(path: Path) -> None:
    with os_errors(path, "delete directory"):
        shutil.rmtree(path)


def list_entries(path: Path) -> list[os.DirEntry]:
    """List a directory's entries sorted by name."""
    with os_errors(path, "read directory"):
        with os.scandir(path) as it:
            entries = list(it)
    return sorted(entries, key=lambda entry: entry.name)


def is_empty_directory(path: Path) -> bool:
    with os_errors(path, "read directory"):
        with os.scandir(path) as it:
            return next(it, None) is None
