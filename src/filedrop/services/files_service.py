"""Directory listing for the destination directory."""
from __future__ import annotations
import os
from pathlib import Path
from filedrop.domain.exceptions import StorageError


def list_relative_files(root: Path) -> list[str]:
    """Return every regular file under *root*, as sorted POSIX paths relative to it."""
    root = Path(root)
    if not root.is_dir():
        raise StorageError(f"Upload directory {root} does not exist")

    def _raise(err: OSError) -> None:
        raise err

    files: list[str] = []
    try:
        for dirpath, _dirnames, filenames in os.walk(root, onerror=_raise):
            for name in filenames:
                files.append((Path(dirpath) / name).relative_to(root).as_posix())
    except OSError as exc:
        raise StorageError(f"Failed to list files in {root}: {exc}") from exc
    return sorted(files)
