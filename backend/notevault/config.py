from __future__ import annotations

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# bcrypt accepts log2 work factors in this range only
MIN_PASSWORD_HASH_COST = 4
MAX_PASSWORD_HASH_COST = 31


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    domain: str = "localhost"
    db_url: str = "sqlite:///./notevault.db"

    session_lifetime_days: int = 30
    session_cookie_name: str = "id"
    session_cookie_secure: bool = False
    session_sweep_interval_seconds: int = 3600

    # Iteration count handed out by presignin when no account matches the email
    default_kdf_iteration: int = 100000
    password_hash_cost: int = 10

    @model_validator(mode="after")
    def _check_auth_settings(self) -> Settings:
        if self.session_lifetime_days <= 0:
            raise ValueError(
                f"SESSION_LIFETIME_DAYS must be > 0, got {self.session_lifetime_days}"
            )
        if self.default_kdf_iteration <= 0:
            raise ValueError(
                f"DEFAULT_KDF_ITERATION must be > 0, got {self.default_kdf_iteration}"
            )
        if not MIN_PASSWORD_HASH_COST <= self.password_hash_cost <= MAX_PASSWORD_HASH_COST:
            raise ValueError(
                "PASSWORD_HASH_COST must be between "
                f"{MIN_PASSWORD_HASH_COST} and {MAX_PASSWORD_HASH_COST}, "
                f"got {self.password_hash_cost}"
            )
        if not self.session_cookie_name.strip():
            raise ValueError("SESSION_COOKIE_NAME must not be empty")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
