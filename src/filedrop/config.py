"""Runtime configuration, read from the environment and an optional .env file."""
from __future__ import annotations
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # --- Directories ---
    UPLOAD_DIR: Path = Path("uploads")
    STAGING_DIR: Path = Path("data/staging")

    # --- Database ---
    DATABASE_URL: str = "sqlite:///data/filedrop.db"

    # --- Server ---
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    RELOCATION_WORKERS: int = 4

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def upload_dir(self) -> Path:
        return self.UPLOAD_DIR.expanduser()

    @property
    def staging_dir(self) -> Path:
        return self.STAGING_DIR.expanduser()


settings = Settings()
