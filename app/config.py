"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"

DEFAULT_SIGNED_MENTION_TEMPLATE = (
    "Ce document a été signé numériquement ({signed_at}) par certificat P12"
)


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    port: int = Field(default=3000, description="HTTP port used by main.py", gt=0)
    database_url: str = Field(
        default="sqlite:///./documents.db",
        description="Database connection URL used by SQLAlchemy for document records",
        min_length=1,
    )
    credentials_path: Path = Field(
        description="Path to the Google service-account JSON credentials",
    )
    p12_certificate: Path = Field(
        description="Path to the PKCS#12 bundle used to stamp signed PDFs",
    )
    p12_password: SecretStr = Field(
        description="Passphrase unlocking the PKCS#12 bundle",
    )
    documents_dir: Path = Field(
        default=Path("documents"),
        description="Directory receiving exported PDFs and staged signature images",
    )
    public_base_url: str = Field(
        default="http://localhost:3000",
        description="Base URL used to build the signing link",
    )
    provider_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout applied to every request sent to the document provider",
        gt=0,
    )
    signature_image_width: int = Field(default=150, gt=0)
    signature_image_height: int = Field(default=150, gt=0)
    signing_reason: str = Field(default="Signature process end.")
    signature_bytes_reserved: int | None = Field(
        default=None,
        description="Fixed size reserved for the CMS signature; estimated from the certificate when unset",
        gt=0,
    )
    signed_mention_template: str = Field(default=DEFAULT_SIGNED_MENTION_TEMPLATE)
    otp_ttl_minutes: int | None = Field(
        default=None,
        description="Minutes after which a one-time code stops being accepted",
        gt=0,
    )
    otp_single_use: bool = Field(
        default=False,
        description="Reject signing requests for documents that are already signed",
    )
    sign_lock_timeout_seconds: float = Field(default=60.0, gt=0)
    app_timezone: str = Field(default="Europe/Paris")
    log_level: str = Field(default="INFO")
    cors_allow_origins: str = Field(
        default="http://localhost:3000",
        description="Comma separated list of origins allowed by CORS",
    )

    @field_validator("signature_bytes_reserved")
    @classmethod
    def _validate_bytes_reserved(cls, value: int | None) -> int | None:
        if value is not None and value % 2 == 1:
            raise ValueError("SIGNATURE_BYTES_RESERVED must be an even number")
        return value

    @field_validator("signed_mention_template")
    @classmethod
    def _validate_mention_template(cls, value: str) -> str:
        if "{signed_at}" not in value:
            raise ValueError("SIGNED_MENTION_TEMPLATE must contain '{signed_at}'")
        return value

    @property
    def cors_origins(self) -> list[str]:
        return [
            origin.strip()
            for origin in self.cors_allow_origins.split(",")
            if origin.strip()
        ]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
