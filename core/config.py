"""
core/config.py -- Centralized library configuration via pydantic-settings.

All environment variable reads for credfile happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  BaseSettings (pydantic-settings): Reads values from CREDFILE_* environment
      variables and an optional .env file automatically. Field names map to
      env var names with the prefix (e.g. bcrypt_rounds -> CREDFILE_BCRYPT_ROUNDS).

  @model_validator(mode="after"): Cross-field validation once all fields are
      resolved. Rejects bcrypt costs the backend would refuse and TTLs that
      would expire every session on issue.

The store and the session pool still take their path and TTL explicitly.
Settings only feed the from_settings() constructors and the default bcrypt
cost used by auth.passwords.

Layer rule: core/ is the kernel. This module may not import from auth/ or
sessions/.
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("credfile.config")

# bcrypt accepts cost factors 4..31; below 10 is only sensible in tests.
_MIN_ROUNDS = 4
_MAX_ROUNDS = 31
_WARN_ROUNDS = 10


class Settings(BaseSettings):
    """Library settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated without any
    environment at all.
    """

    model_config = SettingsConfigDict(
        env_prefix="CREDFILE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Credential store
    # ------------------------------------------------------------------

    store_path: Path = Path("credentials.suc")
    # Off by default: remove() truncates and rewrites in place. When true,
    # remove() writes a temp file and renames it over the store.
    atomic_rewrite: bool = False

    # ------------------------------------------------------------------
    # Password hashing
    # ------------------------------------------------------------------

    bcrypt_rounds: int = 12

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    session_ttl_seconds: int = 3600

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_limits(self) -> "Settings":
        """Reject values the hashing backend or the session pool cannot use."""
        if not _MIN_ROUNDS <= self.bcrypt_rounds <= _MAX_ROUNDS:
            raise ValueError(f"bcrypt_rounds must be between {_MIN_ROUNDS} and {_MAX_ROUNDS}.")
        if self.bcrypt_rounds < _WARN_ROUNDS:
            logger.warning("bcrypt_rounds=%d is below %d. Use only for tests.", self.bcrypt_rounds, _WARN_ROUNDS)
        if self.session_ttl_seconds <= 0:
            raise ValueError("session_ttl_seconds must be positive.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the library Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
