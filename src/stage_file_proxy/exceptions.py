"""Exception hierarchy for the stage file proxy."""


class StageFileProxyError(Exception):
    """Base class for all stage file proxy errors."""


class InvalidPathError(StageFileProxyError):
    """Raised when a logical path is malformed or escapes the storage root.

    Always raised before any filesystem or network access.
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid path {path!r}: {reason}")


class FetchError(StageFileProxyError):
    """Raised when the remote origin cannot deliver a file."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")


class WriteError(StageFileProxyError):
    """Raised when a fetched file cannot be persisted to local storage."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write {path}: {reason}")
