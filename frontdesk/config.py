"""Configuration management using pydantic-settings."""

from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=7788, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")

    # Storage Configuration
    database_path: str = Field(default="./data/frontdesk.db", description="DuckDB database file")

    # Completion Provider (Perplexity) Configuration
    perplexity_api_key: Optional[str] = Field(default=None, description="Perplexity API key")
    perplexity_api_base: str = Field(default="https://api.perplexity.ai", description="Perplexity API base URL")
    perplexity_model: str = Field(default="sonar", description="Perplexity model")
    perplexity_timeout: float = Field(default=20.0, description="Completion request timeout in seconds")
    intent_max_tokens: int = Field(default=500, description="Max tokens for intent classification")

    # Telegram Configuration
    telegram_api_base: str = Field(default="https://api.telegram.org", description="Telegram Bot API base URL")
    telegram_reply_mode: str = Field(
        default="webhook",
        description="'webhook' answers in the HTTP response, 'send' calls sendMessage"
    )

    # Google Business Configuration
    google_client_id: Optional[str] = Field(default=None, description="Google OAuth client ID")
    google_client_secret: Optional[str] = Field(default=None, description="Google OAuth client secret")
    google_token_url: str = Field(default="https://oauth2.googleapis.com/token", description="Google OAuth token endpoint")

    # Quota Configuration
    action_minute_limit: int = Field(default=5, description="Actions allowed per project per minute")
    action_daily_limit: int = Field(default=100, description="Actions allowed per project per 24h")
    llm_daily_limit: int = Field(default=300, description="Completion calls allowed per project per 24h")

    # Conversation Configuration
    transcript_max_turns: int = Field(default=20, description="Turns kept per conversation")
    history_window: int = Field(default=10, description="Turns sent to the completion provider")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_file: str = Field(default="./logs/app.log", description="Log file path")

    def missing_required(self) -> List[str]:
        """Get names of critical settings that are not configured."""
        required = {
            "PERPLEXITY_API_KEY": self.perplexity_api_key,
            "GOOGLE_CLIENT_ID": self.google_client_id,
            "GOOGLE_CLIENT_SECRET": self.google_client_secret,
        }
        return [name for name, value in required.items() if not value]


# Global settings instance
settings = Settings()
