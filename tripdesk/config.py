"""
Configuration management for TripDesk.
Supports multiple LLM providers: OpenAI, OpenRouter, Ollama and an offline mock.
"""
from pydantic_settings import BaseSettings
from typing import Literal


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "TripDesk"
    app_url: str = "http://localhost:8000"

    # Server Configuration
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = True
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./tripdesk.db"

    # Session token (JWT)
    jwt_secret: str = "change-me-in-prod"
    jwt_algorithm: str = "HS256"
    session_max_age_seconds: int = 30 * 24 * 60 * 60
    session_cookie_name: str = "tripdesk_session"

    # Agency approval links
    admin_notification_email: str = "admin@tripdesk.local"
    approval_links_require_token: bool = True
    approval_link_max_age_seconds: int = 14 * 24 * 60 * 60
    password_reset_max_age_seconds: int = 60 * 60
    agency_status_poll_seconds: int = 30

    # SMTP
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_from: str = "TripDesk <noreply@tripdesk.local>"
    smtp_starttls: bool = True

    # File storage
    storage_dir: str = "./storage"

    # LLM Configuration
    llm_provider: Literal["openai", "openrouter", "ollama", "mock"] = "mock"
    llm_api_key: str = ""
    llm_base_url: str = ""
    llm_temperature: float = 0.7

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# Global settings instance
settings = Settings()


def get_llm_config() -> dict:
    """Get LLM configuration based on provider."""
    config = {
        "api_key": settings.llm_api_key or "not-needed",
        "temperature": settings.llm_temperature,
    }

    # Set base URL based on provider
    if settings.llm_provider == "ollama":
        config["base_url"] = settings.llm_base_url or "http://localhost:11434/v1"
    elif settings.llm_provider == "openrouter":
        config["base_url"] = settings.llm_base_url or "https://openrouter.ai/api/v1"
    else:  # openai
        config["base_url"] = settings.llm_base_url or "https://api.openai.com/v1"

    return config
