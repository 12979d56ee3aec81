from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "TalentDesk"
    app_env: str = "development"
    app_host: str = "127.0.0.1"
    app_port: int = 5000
    log_level: str = "INFO"

    database_url: str = "sqlite:///./data/talentdesk.db"
    data_dir: Path = Path("./data")
    upload_dir: Path = Path("./data/uploads")

    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    jwt_ttl_min: int = 60 * 24 * 30

    google_client_id: str = ""
    google_certs_url: str = "https://www.googleapis.com/oauth2/v3/certs"

    cors_origins: str = "http://localhost:5173"
    page_size: int = 10
    resume_max_bytes: int = 5 * 1024 * 1024
    resume_extensions: str = ".pdf,.doc,.docx"

    api_base_url: str = "http://127.0.0.1:5000/api"
    client_storage_dir: Path = Path("./data/client")
    client_request_timeout_sec: int = 30
    client_edit_timeout_sec: int = 5

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, value: str) -> str:
        allowed = {"development", "staging", "production", "test"}
        if value not in allowed:
            raise ValueError(f"app_env must be one of {sorted(allowed)}")
        return value

    @field_validator("page_size", "jwt_ttl_min")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("value must be positive")
        return value

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def resume_extension_set(self) -> set[str]:
        return {ext.strip().lower() for ext in self.resume_extensions.split(",") if ext.strip()}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
