"""Local storage protocol.

Defines the interface for the local public file tree the proxy
serves from and offloads into.
"""

from pathlib import Path
from typing import BinaryIO, Protocol, runtime_checkable


@runtime_checkable
class LocalStore(Protocol):
    """Protocol for local file storage backends."""

    @property
    def root(self) -> Path:
        """Return the canonical storage root."""
        ...

    def exists(self, local_path: Path) -> bool:
        """Check whether a regular file exists at the path.

        Args:
            local_path: Absolute path inside the storage root

        Returns:
            True if the file exists, False otherwise
        """
        ...

    def write(self, local_path: Path, content: bytes) -> None:
        """Persist bytes at the path, creating parent directories.

        Args:
            local_path: Absolute path inside the storage root
            content: The bytes to write

        Raises:
            WriteError: If the file cannot be written
        """
        ...

    def open(self, local_path: Path, mode: str = "rb") -> BinaryIO:
        """Open a file in the store.

        Args:
            local_path: Absolute path inside the storage root
            mode: File mode, as for the builtin open()

        Returns:
            The open file handle
        """
        ...

    def health_check(self) -> bool:
        """Check if the storage root is usable.

        Returns:
            True if healthy, False otherwise
        """
        ...
