"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./finpilot.db"
    database_auto_create: bool = True

    # Remote summary service (OpenAI-compatible chat completions)
    summary_api_url: str = "http://localhost:8003/v1/chat/completions"
    summary_api_key: str = ""  # Empty disables the remote summary
    summary_model: str = "google/gemini-3-flash-preview"
    summary_max_retries: int = 3
    summary_backoff_base: float = 0.5  # Exponential backoff base in seconds

    # Service
    service_name: str = "finpilot"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 10.0


settings = Settings()
