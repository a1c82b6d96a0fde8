# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_PLACEHOLDER_SECRETS = frozenset({"", "dev", "development", "test", "changeme"})


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///passport.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    # Upper bound for any single store call; expiry surfaces as store_unavailable.
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", validate_by_name=True)


class HashingConfig(BaseSettings):
    method: str = Field("scrypt", alias="PASSWORD_HASH_METHOD")
    salt_length: int = Field(16, ge=8, alias="PASSWORD_SALT_LENGTH")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", validate_by_name=True)


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    secret_key: str = Field("dev", alias="SECRET_KEY")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    hashing: HashingConfig = Field(default_factory=HashingConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("debug_logging", "enable_hsts", mode="before")
    @classmethod
    def _parse_flag(cls, value: object) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in _TRUTHY
        return bool(value)

    @model_validator(mode="after")
    def _refuse_insecure_production(self) -> "AppConfig":
        if self.is_production() and self.secret_key in _PLACEHOLDER_SECRETS:
            print(
                "FATAL: APP_ENV is production but SECRET_KEY is a placeholder; "
                "set SECRET_KEY to a long random value.",
                file=sys.stderr,
            )
            sys.exit(1)
        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()


__all__ = ["AppConfig", "DatabaseConfig", "HashingConfig", "load_config"]
