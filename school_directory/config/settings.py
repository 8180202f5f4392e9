from typing import Optional
from urllib.parse import quote_plus

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseSettings):
    """Database configuration"""

    host: str = "localhost"
    port: int = 3306
    username: str = Field(
        default="root",
        validation_alias=AliasChoices("DB_USER", "DB_USERNAME"),
    )
    password: SecretStr = Field(default=SecretStr(""))
    database: str = Field(
        default="school_directory",
        validation_alias=AliasChoices("DB_NAME", "DB_DATABASE"),
    )
    ssl: bool = Field(
        default=True,
        description="Request TLS without verifying the server certificate.",
    )
    serverless: bool = Field(
        default=True,
        description="If true, disable connection pooling so every operation opens its own connection.",
    )
    url_override: Optional[str] = Field(
        default=None,
        validation_alias="DATABASE_URL",
    )

    @property
    def url(self) -> str:
        """Get database URL"""
        if self.url_override:
            return self.url_override
        username = quote_plus(self.username)
        password = quote_plus(self.password.get_secret_value())
        return (
            "mysql+aiomysql://"
            f"{username}:{password}"
            f"@{self.host}:{self.port}/{self.database}"
        )

    @property
    def is_mysql(self) -> bool:
        return self.url.startswith("mysql")

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class UploadConfig(BaseSettings):
    """Public image upload configuration."""

    directory: str = "public/schoolImages"
    url_prefix: str = "/schoolImages"
    max_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=1,
        description="Advisory size limit; oversize uploads are logged but still stored.",
    )
    filename_token: str = "school"
    extension_aliases: dict[str, str] = Field(
        default_factory=lambda: {
            "jpg": "jpeg",
            "pjpeg": "jpeg",
            "x-png": "png",
            "svg+xml": "svg",
        }
    )
    known_extensions: list[str] = Field(
        default_factory=lambda: [
            "jpeg",
            "png",
            "gif",
            "webp",
            "bmp",
            "svg",
            "avif",
            "tiff",
        ]
    )
    default_extension: str = "jpeg"

    model_config = SettingsConfigDict(
        env_prefix="UPLOAD_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "School Directory"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_file: str = "logs/app.log"

    # Database
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    # Uploads
    uploads: UploadConfig = Field(default_factory=UploadConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
