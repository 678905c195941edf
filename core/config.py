"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for Samunu happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. identity_service_url -> IDENTITY_SERVICE_URL).

  @model_validator(mode="after"): Cross-field checks after all fields are
      resolved. A bad identity URL or a non-positive timeout is a startup
      failure, not a runtime surprise on the first sign-in.

Layer rule: core/ is the kernel. This module may not import from api/, web/,
or auth/.
"""

import logging
from functools import lru_cache
from urllib.parse import urlparse

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("samunu.config")


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    app_name: str = "Samunu"

    # ------------------------------------------------------------------
    # Identity service
    # ------------------------------------------------------------------

    identity_service_url: str = "http://localhost:3000"
    identity_base_path: str = "/api/auth"
    # Per-request httpx timeout (connect + read).
    identity_timeout_seconds: float = 10.0
    # Upper bound on one form submission. A hung identity call must not leave
    # the form in "submitting" forever.
    submission_timeout_seconds: float = 15.0

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    cors_origins: list[str] = ["http://localhost", "http://localhost:3000", "http://127.0.0.1"]

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_identity_service(self) -> "Settings":
        """Refuse to start with an unusable identity service configuration.

        The URL must be absolute http(s); both timeouts must be positive.
        Plain http is allowed but logged outside debug mode, since credentials
        travel over this connection.
        """
        parsed = urlparse(self.identity_service_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(
                "IDENTITY_SERVICE_URL must be an absolute http(s) URL, " f"got {self.identity_service_url!r}."
            )
        if self.identity_timeout_seconds <= 0 or self.submission_timeout_seconds <= 0:
            raise ValueError("IDENTITY_TIMEOUT_SECONDS and SUBMISSION_TIMEOUT_SECONDS must be positive.")
        if parsed.scheme == "http" and not self.debug and parsed.hostname not in ("localhost", "127.0.0.1"):
            logger.warning("WARNING: identity service %s is not using TLS.", parsed.netloc)
        if not self.identity_base_path.startswith("/"):
            self.identity_base_path = "/" + self.identity_base_path
        return self

    @property
    def identity_base_url(self) -> str:
        """Absolute URL of the identity service's auth routes."""
        return self.identity_service_url.rstrip("/") + self.identity_base_path.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
