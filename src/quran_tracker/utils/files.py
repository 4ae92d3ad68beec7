"""File handling utilities."""

import os
import re
import tempfile
import unicodedata
from pathlib import Path


def ensure_dir(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists

    Returns:
        The path (for chaining)
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def safe_filename(name: str, max_length: int = 120) -> str:
    """Convert a student name to a safe filename stem.

    Args:
        name: Original name
        max_length: Maximum length of the resulting stem

    Returns:
        Safe filename string
    """
    name = unicodedata.normalize("NFKD", name)
    name = name.encode("ascii", "ignore").decode("ascii")
    name = re.sub(r"\s+", "_", name.strip())
    name = re.sub(r'[<>:"/\\|?*\x00-\x1f]', "", name)
    name = name.strip("._")

    if len(name) > max_length:
        name = name[:max_length]

    return name or "student"


def atomic_write_text(path: Path, content: str, encoding: str = "utf-8") -> None:
    """Write text to a file so readers see either the old or the new content.

    The content goes to a temporary file in the same directory which then
    replaces the target. On failure the temporary file is removed and the
    original file is left untouched.

    Args:
        path: Destination file
        content: Text to write
        encoding: Text encoding

    Raises:
        OSError: If the directory is not writable or the replace fails
    """
    ensure_dir(path.parent)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding=encoding) as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
