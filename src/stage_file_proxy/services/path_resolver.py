"""Maps logical public file paths onto local storage and the remote origin."""

import re
from pathlib import Path
from urllib.parse import quote

from stage_file_proxy.entities import ResolvedPath
from stage_file_proxy.exceptions import InvalidPathError

SCHEME_PREFIX = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://")


def encode_path(path: str) -> str:
    """Percent-encode a URL path, keeping "/" separators intact.

    Args:
        path: Slash-separated path

    Returns:
        The path with every character except unreserved ones and "/" encoded
    """
    return quote(path, safe="/")


def sanitize_target(logical_path: str) -> str:
    """Normalise a logical path into a safe relative target.

    Strips an optional ``scheme://`` prefix and surrounding slashes, drops
    empty and "." segments. Performs no I/O.

    Args:
        logical_path: e.g. "public://styles/logo.png" or "sites/default/files/a.png"

    Returns:
        The relative target, e.g. "styles/logo.png"

    Raises:
        InvalidPathError: If the path is empty or contains traversal segments,
            backslashes or NUL bytes
    """
    target = SCHEME_PREFIX.sub("", logical_path, count=1).strip("/\\")

    if "\x00" in target:
        raise InvalidPathError(logical_path, "contains a NUL byte")
    if "\\" in target:
        raise InvalidPathError(logical_path, "contains a backslash")

    segments = [segment for segment in target.split("/") if segment not in ("", ".")]
    if ".." in segments:
        raise InvalidPathError(logical_path, "contains a '..' segment")
    if not segments:
        raise InvalidPathError(logical_path, "does not name a file")

    return "/".join(segments)


class PathResolver:
    """Computes the local path and remote URL for a logical path.

    The configured root is kept as given for local paths and remote URLs, so a
    webroot-relative root such as "sites/default/files" mirrors the public path
    on the origin. The canonical root is only used for the containment check.

    Example:
        ```python
        resolver = PathResolver("/var/www/public", "https://prod.example.com")
        resolved = resolver.resolve("sites/default/files/img.png")
        resolved.local_path
        # PosixPath('/var/www/public/sites/default/files/img.png')
        resolved.remote_url
        # 'https://prod.example.com/var/www/public/sites/default/files/img.png'
        ```
    """

    def __init__(self, storage_root: Path | str, remote_origin: str) -> None:
        self._root = Path(storage_root)
        self._canonical_root = self._root.resolve()
        self._remote_origin = remote_origin.rstrip("/")

    @property
    def storage_root(self) -> Path:
        """Canonical storage root."""
        return self._canonical_root

    @property
    def configured_root(self) -> Path:
        return self._root

    @property
    def remote_origin(self) -> str:
        return self._remote_origin

    def resolve(self, logical_path: str) -> ResolvedPath:
        """Resolve a logical path.

        Lexical checks run first so unsafe input is rejected before touching
        the filesystem. The result is then canonicalised to catch symlinks
        pointing out of the storage root.

        Args:
            logical_path: The requested file

        Returns:
            ResolvedPath with local path and remote URL

        Raises:
            InvalidPathError: If the path is unsafe or leaves the storage root
        """
        relative = sanitize_target(logical_path)
        local_path = self._root.joinpath(*relative.split("/"))

        canonical = local_path.resolve()
        if canonical == self._canonical_root or not canonical.is_relative_to(self._canonical_root):
            raise InvalidPathError(logical_path, "resolves outside the storage root")

        return ResolvedPath(
            logical_path=logical_path,
            relative_path=relative,
            local_path=local_path,
            remote_url=self.remote_url_for(local_path),
        )

    def remote_url_for(self, local_path: Path) -> str:
        """Build the remote origin URL mirroring a local path."""
        return f"{self._remote_origin}/{encode_path(local_path.as_posix().lstrip('/'))}"
