"""Configuration management using pydantic-settings."""

from typing import Optional
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
    port: int = Field(default=3000, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")

    # Database Configuration
    database_path: str = Field(default="./data/sales_assistant.db", description="DuckDB database file")

    # Language Generation Configuration
    adapter: str = Field(default="openai", description="Text adapter to use (openai, offline)")
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    openai_base_url: Optional[str] = Field(default=None, description="OpenAI-compatible API base URL")
    openai_model: str = Field(default="gpt-4o-mini", description="Chat completion model")
    adapter_timeout: float = Field(default=30.0, gt=0, description="Adapter call timeout in seconds")

    # Conversation Configuration
    default_title: str = Field(default="New Conversation", description="Title used when title generation fails")
    max_content_length: int = Field(default=5000, gt=0, description="Maximum message length")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_file: Optional[str] = Field(default="./logs/app.log", description="Log file path")

    def get_adapter_config(self) -> dict:
        """Get configuration for the selected text adapter."""
        adapter = self.adapter.lower()
        if adapter == "openai":
            config = {
                "model": self.openai_model,
                "timeout": self.adapter_timeout,
            }
            # Only add optional values when set
            if self.openai_api_key:
                config["api_key"] = self.openai_api_key
            if self.openai_base_url:
                config["base_url"] = self.openai_base_url
            return config
        elif adapter == "offline":
            return {}
        else:
            raise ValueError(f"Unknown adapter: {self.adapter}")


# Global settings instance
settings = Settings()
