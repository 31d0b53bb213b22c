"""Configuration management using Pydantic Settings"""

from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Result store
    redis_url: str = "redis://localhost:6379/0"
    calculation_ttl_seconds: int = 60 * 60 * 24
    store_timeout_seconds: float = 10.0

    # LLM (Gemini REST API)
    gemini_api_key: Optional[str] = None
    gemini_model: Optional[str] = None
    gemini_api_base: str = "https://generativelanguage.googleapis.com/v1beta"
    chat_max_output_tokens: int = 500
    chat_temperature: float = 0.7
    chat_prompt_max_length: int = 200

    # Chat rate limiting (per client IP)
    chat_rate_limit_requests: int = 10
    chat_rate_limit_window_seconds: int = 300

    # Service
    service_name: str = "tax-gateway"
    log_level: str = "INFO"
    max_body_bytes: int = 10 * 1024
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:4000"]

    # HTTP Client
    http_timeout_seconds: float = 30.0


settings = Settings()
