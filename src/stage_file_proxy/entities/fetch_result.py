"""Remote fetch result entities."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Found:
    """The remote origin returned the file.

    Attributes:
        url: The fetched URL
        content: Raw file bytes
    """

    url: str
    content: bytes


@dataclass(frozen=True)
class NotFound:
    """The remote origin could not deliver the file.

    Attributes:
        url: The requested URL
        reason: Why the fetch missed (HTTP status, transport error, timeout)
    """

    url: str
    reason: str


FetchResult = Found | NotFound
