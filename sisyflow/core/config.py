"""Configuration management for Sisyflow."""

from typing import Optional, Literal, List
from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import Field, SecretStr

DEFAULT_SECRET_KEY = "sisyflow-dev-secret-change-me"


class LLMConfig(BaseSettings):
    """OpenRouter language-model configuration."""

    provider: Literal["openrouter"] = Field(
        default="openrouter",
        description="LLM provider to use for ticket suggestions",
    )
    api_key: Optional[SecretStr] = Field(
        default=None,
        description="OpenRouter API key",
    )
    base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        description="OpenAI-compatible base URL of the provider",
    )
    model: str = Field(
        default="mistralai/mistral-7b-instruct",
        description="Model used to analyze tickets",
    )
    temperature: float = Field(
        default=0.6,
        ge=0.0,
        le=2.0,
        description="Temperature for LLM responses",
    )
    max_tokens: int = Field(
        default=1024,
        ge=1,
        description="Maximum tokens for LLM responses",
    )
    timeout: float = Field(
        default=60.0,
        gt=0,
        description="Request timeout in seconds",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        description="Attempts for transient upstream errors",
    )

    model_config = {"env_prefix": "OPENROUTER_", "extra": "ignore"}


class DatabaseConfig(BaseSettings):
    """Database configuration."""

    database_path: Path = Field(
        default=Path("sisyflow.db"),
        description="Path to SQLite database",
    )
    echo: bool = Field(
        default=False,
        description="Echo SQL statements",
    )

    model_config = {"env_prefix": "", "extra": "ignore"}


class AuthConfig(BaseSettings):
    """Session authentication configuration."""

    secret_key: SecretStr = Field(
        default=SecretStr(DEFAULT_SECRET_KEY),
        description="Key used to sign session tokens",
    )
    algorithm: str = Field(
        default="HS256",
        description="JWT signing algorithm",
    )
    session_cookie_name: str = Field(
        default="sisyflow_session",
        description="Name of the session cookie",
    )
    session_ttl_minutes: int = Field(
        default=60 * 24 * 7,
        ge=1,
        description="Session lifetime in minutes",
    )
    cookie_secure: bool = Field(
        default=False,
        description="Only send the session cookie over HTTPS",
    )

    model_config = {"env_prefix": "AUTH_", "extra": "ignore"}


class ServerConfig(BaseSettings):
    """HTTP server configuration."""

    host: str = Field(
        default="0.0.0.0",
        description="Host to bind the server",
    )
    port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the server",
    )
    enable_cors: bool = Field(
        default=True,
        description="Enable CORS",
    )
    cors_origins: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed CORS origins",
    )

    model_config = {"env_prefix": "SERVER_", "extra": "ignore"}


class Settings(BaseSettings):
    """Main settings combining all configurations."""

    # Sub-configurations
    llm: LLMConfig = Field(default_factory=LLMConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    # General settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @classmethod
    def load(cls) -> "Settings":
        """Load settings from environment and files."""
        from dotenv import load_dotenv
        load_dotenv()
        return cls()

    def validate_for_runtime(self) -> None:
        """Check settings that only matter for a real deployment.

        Raises:
            ValueError: If the LLM API key is missing or the default
                session secret is used outside debug mode
        """
        if self.llm.api_key is None or not self.llm.api_key.get_secret_value():
            raise ValueError("OPENROUTER_API_KEY must be set for AI suggestions")
        if not self.debug and self.auth.secret_key.get_secret_value() == DEFAULT_SECRET_KEY:
            raise ValueError("AUTH_SECRET_KEY must be changed outside debug mode")


# Global settings instance
settings = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global settings
    if settings is None:
        settings = Settings.load()
    return settings


def reload_settings():
    """Reload settings from environment."""
    global settings
    settings = Settings.load()
    return settings
