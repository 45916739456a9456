"""Resolved path domain entity."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ResolvedPath:
    """A logical path mapped onto local storage and the remote origin.

    Attributes:
        logical_path: The path as requested (may carry a ``scheme://`` prefix)
        relative_path: Sanitized target relative to the storage root
        local_path: Absolute location inside the storage root
        remote_url: Where the remote origin serves the same file
    """

    logical_path: str
    relative_path: str
    local_path: Path
    remote_url: str
