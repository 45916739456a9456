"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .actions import Action, FetchAndOffload, RedirectRemote, ServeLocal
from .external_url import ExternalUrl
from .fetch_result import FetchResult, Found, NotFound
from .resolved_path import ResolvedPath

__all__ = [
    "Action",
    "ServeLocal",
    "RedirectRemote",
    "FetchAndOffload",
    "ExternalUrl",
    "FetchResult",
    "Found",
    "NotFound",
    "ResolvedPath",
]
