# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_INSECURE_SECRETS = ("dev", "development", "test", "secret", "")


def _settings_config() -> SettingsConfigDict:
    return SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_by_name=True,
    )


def _parse_bool(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///authme.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")
    echo: bool = Field(False, alias="DATABASE_ECHO")

    model_config = _settings_config()

    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    def is_memory(self) -> bool:
        return self.url in ("sqlite://", "sqlite:///:memory:")


class JwtConfig(BaseSettings):
    secret: str = Field("dev", alias="JWT_SECRET")
    # seconds
    expires_in: int = Field(604800, ge=1, alias="JWT_EXPIRES_IN")
    algorithm: str = Field("HS256", alias="JWT_ALGORITHM")

    model_config = _settings_config()


class SecurityConfig(BaseSettings):
    # CORS, only mounted outside production
    allowed_origins: Annotated[list[str], NoDecode] = Field(["*"], alias="ALLOWED_ORIGINS")

    # CSRF protection
    enable_csrf: bool = Field(True, alias="ENABLE_CSRF")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    # Signup conflict reporting: per-field messages or one generic message
    generic_signup_conflicts: bool = Field(False, alias="GENERIC_SIGNUP_CONFLICTS")

    model_config = _settings_config()

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator(
        "enable_csrf", "enable_hsts", "generic_signup_conflicts", mode="before"
    )
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        return _parse_bool(value)


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    frontend_build_dir: Path = Field(Path("frontend/build"), alias="FRONTEND_BUILD_DIR")

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    jwt: JwtConfig = Field(default_factory=JwtConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_by_name=True,
        validate_assignment=True,
        arbitrary_types_allowed=True,
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    @field_validator("log_level", mode="after")
    @classmethod
    def _normalise_level(cls, value: Any) -> str:
        return str(value).upper()

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        if self.jwt.secret in _INSECURE_SECRETS:
            print(
                "\n❌ CRITICAL SECURITY ERROR: Insecure JWT_SECRET detected in production!\n"
                "   JWT_SECRET must be a strong random value in production.\n"
                "   Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(32))\"\n",
                file=sys.stderr,
            )
            sys.exit(1)

        warnings = []
        if not self.security.enable_csrf:
            warnings.append("⚠️  CSRF protection is DISABLED")
        if not self.security.enable_hsts:
            warnings.append("⚠️  HSTS is DISABLED (recommended for HTTPS)")

        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)
            print(
                "   Consider enabling these security features in production.\n",
                file=sys.stderr,
            )

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")

    def cookie_options(self) -> dict[str, Any]:
        """Cookie flags shared by the session and CSRF cookies."""
        if self.is_production():
            return {"secure": True, "samesite": "Lax"}
        return {"secure": False, "samesite": None}


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = ["AppConfig", "DatabaseConfig", "JwtConfig", "SecurityConfig", "load_config"]
