"""Decides how a request for a public file is satisfied."""

from pathlib import Path

from stage_file_proxy.entities import Action, FetchAndOffload, RedirectRemote, ServeLocal
from stage_file_proxy.protocols import LocalStore


class DecisionPolicy:
    """Chooses between local serving, redirecting and offloading.

    Stateless apart from the offload flag fixed at construction:
    1. File exists locally -> ServeLocal
    2. Offloading disabled -> RedirectRemote
    3. Otherwise -> FetchAndOffload
    """

    def __init__(self, store: LocalStore, offload: bool = False) -> None:
        self._store = store
        self._offload = offload

    @property
    def offload(self) -> bool:
        return self._offload

    def decide(self, local_path: Path, remote_url: str) -> Action:
        if self._store.exists(local_path):
            return ServeLocal(local_path=local_path)
        if not self._offload:
            return RedirectRemote(remote_url=remote_url)
        return FetchAndOffload(remote_url=remote_url, local_path=local_path)
