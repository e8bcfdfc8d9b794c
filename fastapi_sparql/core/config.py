from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    SPARQL_ENDPOINT_URL: str
    # Falls back to SPARQL_ENDPOINT_URL
    SPARQL_UPDATE_URL: Optional[str] = None
    REQUEST_TIMEOUT: float = 30.0
    QUERY_ROUTES_FILE: Optional[Path] = None
    LOG_LEVEL: str = "INFO"

    # This tells Pydantic to read from the .env file
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @model_validator(mode="after")
    def default_update_url(self):
        if not self.SPARQL_UPDATE_URL:
            self.SPARQL_UPDATE_URL = self.SPARQL_ENDPOINT_URL
        return self


# One settings instance for the whole process, built on first use
@lru_cache
def get_settings() -> Settings:
    return Settings()
