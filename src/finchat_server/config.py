"""Configuration module for finchat-server using pydantic-settings."""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class FinchatServerSettings(BaseSettings):
    """Main configuration settings for finchat-server.

    All settings can be overridden via environment variables with the FINCHAT_ prefix.
    For example, FINCHAT_NEWS_API_KEY will set the news_api_key setting.
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Ollama
    ollama_host: str = "http://localhost:11434"
    model: str = "llama3.2:latest"
    system_prompt: str | None = None

    # Timeouts (seconds)
    model_timeout: float = 60.0
    tool_timeout: float = 30.0

    # Tool provider credentials
    news_api_key: SecretStr | None = None
    alpha_vantage_api_key: SecretStr | None = None
    exchange_rate_api_key: SecretStr | None = None

    # Tool provider endpoints
    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    news_api_base_url: str = "https://newsapi.org/v2"
    alpha_vantage_base_url: str = "https://www.alphavantage.co"
    exchange_rate_base_url: str = "https://v6.exchangerate-api.com/v6"

    # CORS
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="FINCHAT_")
