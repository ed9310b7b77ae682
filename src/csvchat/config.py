"""Application settings and the per-call chat configuration."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

ReingestPolicy = Literal["append", "replace", "reject"]


class ChatConfig(BaseModel):
    """Immutable configuration passed into the pipeline on every question."""

    model_config = ConfigDict(frozen=True)

    port: int = Field(default=1234, ge=1, le=65535)
    model: str = "t2sql"
    api_key: str = "EMPTY"
    show_sql: bool = True
    show_thinking: bool = True


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite://"

    # Model server (OpenAI-compatible chat completions)
    LLM_HOST: str = "localhost"
    LLM_PORT: int = 1234
    LLM_MODEL: str = "t2sql"
    LLM_API_KEY: SecretStr = SecretStr("EMPTY")
    LLM_TIMEOUT_SECONDS: float = 60.0
    LLM_MAX_TOKENS: int = 1024

    # Display
    SHOW_SQL: bool = True
    SHOW_THINKING: bool = True

    REINGEST_POLICY: ReingestPolicy = "append"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def chat_config(self) -> ChatConfig:
        """Default ChatConfig; override fields with ``model_copy(update=...)``."""
        return ChatConfig(
            port=self.LLM_PORT,
            model=self.LLM_MODEL,
            api_key=self.LLM_API_KEY.get_secret_value(),
            show_sql=self.SHOW_SQL,
            show_thinking=self.SHOW_THINKING,
        )


settings = Settings()
