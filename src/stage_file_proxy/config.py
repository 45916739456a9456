import os
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import urlparse

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables.

    Loaded once at startup. A changed configuration requires building a new
    service (and a new app) from a new Settings instance.
    """

    # Remote origin
    remote_instance: str = os.getenv("REMOTE_INSTANCE", "")
    offload: bool = os.getenv("OFFLOAD", "false").lower() in ("1", "true", "yes")
    fetch_timeout: float = float(os.getenv("FETCH_TIMEOUT", "10.0"))

    # Local storage
    storage_root: str = os.getenv("STORAGE_ROOT", "./public")
    public_base_url: str = os.getenv("PUBLIC_BASE_URL", "/files")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def remote_origin(self) -> str:
        """Remote instance base URL without a trailing slash."""
        return self.remote_instance.rstrip("/")

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.fetch_timeout <= 0:
            raise ValueError("FETCH_TIMEOUT must be a positive number of seconds")

        if self.remote_instance:
            parsed = urlparse(self.remote_instance)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                raise ValueError(
                    f"REMOTE_INSTANCE must be an http(s) URL, got {self.remote_instance!r}"
                )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
