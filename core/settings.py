from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, PostgresDsn, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CustomSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


class AppSettings(CustomSettings):
    ENVIRONMENT: Literal["local", "dev", "prod"] = Field(default="local")
    LOG_LEVEL: str = Field(default="INFO")
    JSON_LOGS: bool = Field(default=False)
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3000)
    PROD_ORIGINS: list[str] = Field(default=["https://your-frontend-domain.com"])
    LOCAL_ORIGINS: list[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:3001",
            "http://localhost:5173",
            "http://localhost:8501",
        ]
    )

    @property
    def cors_origins(self) -> list[str]:
        return self.PROD_ORIGINS if self.ENVIRONMENT == "prod" else self.LOCAL_ORIGINS


class DatabaseSettings(CustomSettings):
    """Conversation store connection.

    Set via env vars:
    - STORE_BACKEND ("postgres" or "sqlite"; inferred from DATABASE_URL when empty)
    - DATABASE_URL, or the POSTGRES_* parts
    - SQLITE_PATH (used when STORE_BACKEND=sqlite and no DATABASE_URL is given)
    """

    STORE_BACKEND: Literal["postgres", "sqlite", ""] = Field(default="")
    POSTGRES_ENGINE: str = Field(default="postgresql+asyncpg")
    POSTGRES_USER: str = Field(default="postgres")
    POSTGRES_PASSWORD: SecretStr = Field(default="postgres")
    POSTGRES_DB: str = Field(default="ai_chat")
    POSTGRES_HOST: str = Field(default="localhost")
    POSTGRES_PORT: int = Field(default=5432)
    SQLITE_PATH: str = Field(default="./ai_chat.db")
    DATABASE_URL: PostgresDsn | str = Field(default="")

    @model_validator(mode="before")
    def validate_database_url(cls, data: dict):
        if not isinstance(data, dict):
            return data
        url = str(data.get("DATABASE_URL") or "")
        backend = data.get("STORE_BACKEND") or ""
        if not url:
            if backend == "sqlite":
                url = f"sqlite+aiosqlite:///{data.get('SQLITE_PATH', './ai_chat.db')}"
            else:
                password = data.get("POSTGRES_PASSWORD", "postgres")
                if isinstance(password, SecretStr):
                    password = password.get_secret_value()
                url = PostgresDsn.build(
                    scheme=data.get("POSTGRES_ENGINE", "postgresql+asyncpg"),
                    username=data.get("POSTGRES_USER", "postgres"),
                    password=password,
                    host=data.get("POSTGRES_HOST", "localhost"),
                    port=int(data.get("POSTGRES_PORT", 5432)),
                    path=data.get("POSTGRES_DB", "ai_chat"),
                ).unicode_string()
            data["DATABASE_URL"] = url
        if not backend:
            data["STORE_BACKEND"] = "sqlite" if url.startswith("sqlite") else "postgres"
        return data


class OpenAISettings(CustomSettings):
    OPENAI_API_KEY: SecretStr = Field(default="")
    OPENAI_MODEL: str = Field(default="gpt-4o-mini")
    OPENAI_BASE_URL: str = Field(default="https://api.openai.com/v1")
    OPENAI_TIMEOUT: float = Field(default=60.0)


class ChatSettings(CustomSettings):
    """Limits applied to a single chat turn.

    Set via env vars (optional):
    - MAX_MESSAGE_LENGTH
    - MAX_PROMPT_CHARS
    - MAX_HISTORY_MESSAGES
    - MAX_TOKENS
    - TEMPERATURE
    - SUPPORT_EMAIL
    """

    MAX_MESSAGE_LENGTH: int = Field(default=2000)
    MAX_PROMPT_CHARS: int = Field(default=1000)
    MAX_HISTORY_MESSAGES: int = Field(default=10)
    MAX_TOKENS: int = Field(default=500)
    TEMPERATURE: float = Field(default=0.7)
    SUPPORT_EMAIL: str = Field(default="support@techstore.com")


class UiSettings(CustomSettings):
    """Configuration for the Streamlit chat widget to reach API endpoints.

    Set via env vars:
    - API_BASE_URL
    - ENDPOINT_CHAT_MESSAGE
    - ENDPOINT_CHAT_HISTORY
    """

    API_BASE_URL: str = Field(default="http://localhost:3000")
    ENDPOINT_CHAT_MESSAGE: str = Field(default="/api/chat/message")
    ENDPOINT_CHAT_HISTORY: str = Field(default="/api/chat/history")


class Settings(BaseModel):
    APP: AppSettings = Field(default_factory=AppSettings)
    DATABASE: DatabaseSettings = Field(default_factory=DatabaseSettings)
    OPENAI: OpenAISettings = Field(default_factory=OpenAISettings)
    CHAT: ChatSettings = Field(default_factory=ChatSettings)
    UI: UiSettings = Field(default_factory=UiSettings)


@lru_cache
def get_settings() -> Settings:
    return Settings()


SETTINGS = get_settings()
