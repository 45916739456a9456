"""Local filesystem implementation of LocalStore."""

import contextlib
import os
import tempfile
from pathlib import Path
from typing import BinaryIO

from stage_file_proxy.exceptions import WriteError

# Offloaded files are public assets served by the webserver.
FILE_MODE = 0o644


class LocalFileStore:
    """Public file tree rooted at a local directory.

    Writes go to a temporary file next to the target and are renamed into
    place, so readers never observe a partially written file. Concurrent
    writers to the same path are last-writer-wins.
    """

    def __init__(self, root: Path | str) -> None:
        root = Path(root)
        root.mkdir(parents=True, exist_ok=True)
        self._root = root.resolve()

    @property
    def root(self) -> Path:
        return self._root

    def exists(self, local_path: Path) -> bool:
        canonical = Path(local_path).resolve()
        if not canonical.is_relative_to(self._root):
            return False
        return canonical.is_file()

    def write(self, local_path: Path, content: bytes) -> None:
        target = Path(local_path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=target.parent, prefix=f".{target.name}.", suffix=".part"
            )
        except OSError as e:
            raise WriteError(str(target), e.strerror or str(e)) from e

        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(content)
                handle.flush()
                os.fsync(handle.fileno())
            os.chmod(tmp_name, FILE_MODE)
            os.replace(tmp_name, target)
        except OSError as e:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_name)
            raise WriteError(str(target), e.strerror or str(e)) from e

    def open(self, local_path: Path, mode: str = "rb") -> BinaryIO:
        return open(local_path, mode)

    def health_check(self) -> bool:
        return self._root.is_dir() and os.access(self._root, os.R_OK)
