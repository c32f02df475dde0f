from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Runtime
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # CORS (comma separated)
    CORS_ALLOW_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"

    # OCR API
    # Echo the submitted text back in responses (debug only; it may hold a full card number)
    ECHO_RAW_TEXT: bool = False
    MAX_REQUEST_TEXT_CHARS: int = 20000

    @property
    def cors_origins(self) -> List[str]:
        return [item.strip() for item in self.CORS_ALLOW_ORIGINS.split(",") if item.strip()]

    @property
    def is_dev(self) -> bool:
        return self.ENVIRONMENT != "production"

settings = Settings()
