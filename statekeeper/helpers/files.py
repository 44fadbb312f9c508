"""
File system helpers for the state directory.

All state files are small, so every helper works on whole files. Failures
surface as OSError; callers decide how loud to be about them.
"""

from __future__ import annotations

import os
from pathlib import Path


def atomic_write_text(path: Path, content: str, tmp_path: Path | None = None) -> None:
    """
    Write content to a temporary file, then rename it over path.

    Readers of path only ever see the old or the new content, never a
    partially written file.

    Args:
        path: Final destination
        content: Text to write (UTF-8)
        tmp_path: Staging file; defaults to "<path>.tmp". Must live on the
            same filesystem as path.

    Raises:
        OSError: If writing or renaming fails
    """
    if tmp_path is None:
        tmp_path = path.with_name(path.name + ".tmp")
    tmp_path.write_text(content, encoding="utf-8")
    os.replace(tmp_path, path)


def create_or_touch(path: Path, mtime_ns: int) -> bool:
    """
    Create an empty marker file, or bump its mtime if it already exists.

    Args:
        path: Marker file
        mtime_ns: Modification time to set on an existing file (epoch ns)

    Returns:
        True if the file was created, False if an existing file was touched

    Raises:
        OSError: If neither creating nor touching works
    """
    try:
        with open(path, "x", encoding="utf-8"):
            pass
        return True
    except FileExistsError:
        os.utime(path, ns=(mtime_ns, mtime_ns))
        return False


def delete_if_exists(path: Path) -> bool:
    """
    Delete path if present.

    Returns:
        True if a file was deleted, False if there was nothing to delete

    Raises:
        OSError: For any failure other than the file being absent
    """
    try:
        path.unlink()
        return True
    except FileNotFoundError:
        return False


def read_first_line(path: Path) -> str | None:
    """
    Read the first line of a text file.

    Undecodable bytes are replaced rather than raising, so garbage content
    still comes back as a (garbage) string.

    Returns:
        The first line without its line terminator, or None for an empty file.
        A file holding only a newline yields "".

    Raises:
        OSError: If the file cannot be opened or read
    """
    # Universal newlines turn "\r\n" and "\r" into "\n"; no other character ends a line.
    content = path.read_text(encoding="utf-8", errors="replace")
    if not content:
        return None
    return content.split("\n", 1)[0]
