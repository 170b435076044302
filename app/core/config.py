import os
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Echelon Room Backend API"
    app_version: str = "1.0.0"
    app_description: str = "Marketplace API for the Echelon Room NFT vault"
    node_env: str = os.getenv("NODE_ENV", "development")

    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./echelon.db")
    database_echo: bool = False

    # Security
    secret_key: str = os.getenv("JWT_SECRET", "your-secret-key-here")
    access_token_expire_minutes: int = 60 * 24 * 7
    nonce_ttl_seconds: int = 300
    dev_login_enabled: bool = True

    # Feed
    feed_retention: int = 200
    feed_default_limit: int = 100

    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
