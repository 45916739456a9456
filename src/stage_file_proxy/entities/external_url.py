"""External URL domain entity."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class ExternalUrl:
    """URL a client should use to download a public file.

    Attributes:
        url: Local serving URL or remote origin URL
        source: "local" if served from local storage, "remote" otherwise
    """

    url: str
    source: Literal["local", "remote"]
