from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Core
    APP_NAME: str = "IPFS Vault"

    # Pinata
    PINATA_JWT: str | None = None
    GATEWAY_URL: str | None = None     # hostname only, e.g. example.mypinata.cloud
    PINATA_API_URL: str = "https://api.pinata.cloud"
    PINATA_PAGE_LIMIT: int = 1000
    PINATA_TIMEOUT_SECONDS: float | None = None

    # Upload defaults
    DEFAULT_CONTENT_TYPE: str = "application/octet-stream"
    DEFAULT_UPLOAD_FILENAME: str = "uploaded-file"

    @field_validator("GATEWAY_URL")
    @classmethod
    def _strip_gateway(cls, value: str | None) -> str | None:
        if value is None:
            return None
        host = value.strip()
        for scheme in ("https://", "http://"):
            if host.startswith(scheme):
                host = host[len(scheme):]
        return host.rstrip("/") or None

    @property
    def is_configured(self) -> bool:
        return bool(self.PINATA_JWT) and bool(self.GATEWAY_URL)

settings = Settings()

def get_settings() -> Settings:
    return settings
