"""Actions chosen by the decision policy."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ServeLocal:
    """The file is available in local storage."""

    local_path: Path


@dataclass(frozen=True)
class RedirectRemote:
    """The file should be served by the remote origin directly."""

    remote_url: str


@dataclass(frozen=True)
class FetchAndOffload:
    """The file should be fetched once and persisted locally."""

    remote_url: str
    local_path: Path


Action = ServeLocal | RedirectRemote | FetchAndOffload
