"""
Application configuration using Pydantic Settings
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
import json
from pathlib import Path
from pydantic import field_validator


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables
    """

    # Application
    APP_NAME: str = "Hearing Relay"
    DEBUG: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = ""  # blank = console only

    # Storage (flat JSON files on local disk)
    DATA_DIR: str = "data"
    TEMPLATES_SUBDIR: str = "questions"
    SESSIONS_SUBDIR: str = "sessions"

    # AWS Configuration (hosted LLM credential)
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    AWS_REGION: str = "ap-south-1"

    # Hosted LLM
    # LLM_MODEL overrides the model for every request that has no
    # template-level ai_model; LLM_FALLBACK_MODEL is used when both are unset.
    LLM_MODEL: str = ""
    LLM_FALLBACK_MODEL: str = "anthropic.claude-3-haiku-20240307-v1:0"
    LLM_MAX_TOKENS: int = 2048
    LLM_TEMPERATURE: float = 0.5
    LLM_READ_TIMEOUT_SECONDS: int = 300

    @field_validator("LLM_MODEL", "LLM_FALLBACK_MODEL", mode="before")
    @classmethod
    def strip_model_id(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip()
        return v

    # Chat relay
    CHAT_CHAR_DELAY_MS: int = 5  # 0 disables pacing

    # Summaries
    SUMMARY_MAX_CHARS: int = 4000
    SUMMARIZE_MAX_CHARS: int = 10000
    SUMMARY_LANGUAGE: str = "Japanese"
    AUTO_SUMMARIZE_ON_SAVE: bool = True

    # CORS
    CORS_ORIGINS: str = '["http://localhost:3000"]'

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from string to list"""
        try:
            if isinstance(self.CORS_ORIGINS, str):
                return json.loads(self.CORS_ORIGINS)
            return self.CORS_ORIGINS
        except json.JSONDecodeError:
            return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def templates_dir(self) -> Path:
        return Path(self.DATA_DIR) / self.TEMPLATES_SUBDIR

    @property
    def sessions_dir(self) -> Path:
        return Path(self.DATA_DIR) / self.SESSIONS_SUBDIR


# Create settings instance
settings = Settings()
