"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://catalog:catalog_dev_password@db:5432/catalog"
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Authentication (identity provider signing keys)
    jwks_uri: str = "http://auth-service:5501/.well-known/jwks.json"
    jwt_algorithms: list[str] = ["RS256"]
    access_token_cookie: str = "accessToken"

    # Object storage
    s3_bucket: str = "catalog-images"
    s3_region: str = "us-east-1"
    s3_endpoint_url: str | None = None
    s3_public_base_url: str | None = None
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None

    # Uploads
    max_image_size: int = 500 * 1024

    # Message broker
    redis_url: str = "redis://redis:6379/0"
    product_topic: str = "product"
    topping_topic: str = "topping"
    broker_stream_max_length: int = 100_000

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()
