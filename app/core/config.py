"""Configuration management for WriteFlow Engine."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file (only if accessible)
try:
    load_dotenv()
except (PermissionError, OSError):
    # In sandboxed environments, .env might not be accessible
    # Environment variables should be set directly
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Supabase configuration (required)
    SUPABASE_URL: str = Field(..., description="Supabase project URL")
    SUPABASE_SERVICE_ROLE_KEY: str = Field(..., description="Supabase service role key")

    # OpenAI configuration (required)
    OPENAI_API_KEY: str = Field(..., description="OpenAI API key")
    OPENAI_MODEL: str = Field(default="gpt-4o", description="Model for all synthesis operations")

    # Serper web search (optional; search endpoints fail without it)
    SERPER_API_KEY: str | None = Field(default=None, description="Serper.dev API key")
    SERPER_TIMEOUT: int = Field(default=20, description="Serper request timeout in seconds")

    # Environment
    WRITEFLOW_ENV: str = Field(default="dev", description="Environment: dev, staging, prod")

    # Context window limits
    NOTES_CONTEXT_CHARS: int = Field(
        default=1500, description="Max characters of joined notes sent as chat context"
    )
    CHAT_HISTORY_TURNS: int = Field(
        default=8, description="Conversation turns visible to follow-up generation"
    )
    DIGEST_WINDOW_DAYS: int = Field(
        default=7, description="Trailing window of idea cards included in a digest"
    )
    SEARCH_RESULT_COUNT: int = Field(
        default=6, description="Max articles returned by a web search"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance

    Raises:
        ValidationError: If required environment variables are missing
    """
    return Settings()
