"""Configuration management using Pydantic Settings"""

from typing import List, Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "vividpulse-insights"
    log_level: str = "INFO"

    # Remote augmentation provider
    ai_provider: Literal["gemini", "openai"] = "gemini"
    gemini_api_base: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_model: str = "gemini-2.5-flash"
    openai_api_base: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o-mini"

    # Credential lookup order (first non-empty variable wins)
    credential_env_vars: List[str] = [
        "VIVIDPULSE_AI_API_KEY",
        "GEMINI_API_KEY",
        "API_KEY",
        "OPENAI_API_KEY",
    ]

    # Remote call bounds
    remote_timeout_seconds: float = 12.0
    max_remote_transactions: int = 50

    # Presentation
    currency_symbol: str = "₱"


settings = Settings()
