"""Application settings and configuration.

This module defines all configuration options for the chat backend. Settings
are loaded from environment variables (or an `.env` file). Values without a
default are required: importing this module without them aborts startup with
a pydantic `ValidationError`.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PROFILE_PICTURE = (
    "https://www.shutterstock.com/image-vector/"
    "avatar-gender-neutral-silhouette-vector-600nw-2470054311.jpg"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application metadata
    app_name: str = Field(default="Chat App", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    port: int = Field(default=3000, alias="PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: str = Field(default="logs", alias="LOG_DIR")

    # Database configuration
    database_url: str = Field(alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # JWT authentication settings
    secret_key: str = Field(alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 30,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )
    auth_cookie_name: str = Field(default="auth_token", alias="AUTH_COOKIE_NAME")
    auth_cookie_secure: bool = Field(default=False, alias="AUTH_COOKIE_SECURE")

    # Cloudinary media hosting
    cloudinary_cloud_name: str = Field(alias="CLOUDINARY_CLOUD_NAME")
    cloudinary_api_key: str = Field(alias="CLOUDINARY_API_KEY")
    cloudinary_api_secret: str = Field(alias="CLOUDINARY_API_SECRET")
    media_folder: str = Field(default="graphql-chatapp", alias="MEDIA_FOLDER")
    media_upload_timeout_seconds: float = Field(
        default=30.0,
        alias="MEDIA_UPLOAD_TIMEOUT_SECONDS",
    )
    default_profile_picture: str = Field(
        default=DEFAULT_PROFILE_PICTURE,
        alias="DEFAULT_PROFILE_PICTURE",
    )

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["http://localhost:5173"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def access_token_max_age(self) -> int:
        """Cookie lifetime in seconds, matching the token expiry."""
        return self.access_token_expire_minutes * 60


settings = Settings()  # type: ignore[call-arg]
