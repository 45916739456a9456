"""Service layer for business logic.

This layer contains the core business logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from stage_file_proxy.services import StageFileProxyService

    # Using factory method (recommended)
    proxy = StageFileProxyService.create()
    proxy = StageFileProxyService.create(settings=Settings(offload=True))

    # Or manual creation
    proxy = StageFileProxyService(
        resolver=resolver, store=store, fetcher=fetcher, policy=policy
    )
    ```
"""

from .decision_policy import DecisionPolicy
from .path_resolver import PathResolver, encode_path, sanitize_target
from .proxy_service import StageFileProxyService

__all__ = [
    "DecisionPolicy",
    "PathResolver",
    "StageFileProxyService",
    "encode_path",
    "sanitize_target",
]
