from pydantic_settings import BaseSettings
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    database_url: str = "sqlite:///./knowledge_hub.db"
    # LLM Provider settings
    llm_provider: Optional[str] = None  # "openrouter" or "openai". Auto-detected if None
    # OpenRouter settings
    openrouter_api_key: Optional[str] = None
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    # OpenAI settings
    openai_api_key: Optional[str] = None
    openai_base_url: str = "https://api.openai.com/v1"
    # Chat completion settings
    chat_model: str = "meta-llama/llama-3.2-3b-instruct:free"
    chat_max_tokens: int = 1000
    chat_temperature: float = 0.7
    chat_max_attempts: int = 3
    chat_backoff_base_ms: int = 1000
    chat_default_retry_after_ms: int = 3000
    chat_context_document_limit: int = 10
    chat_context_char_limit: int = 2000
    # Sent to OpenRouter as HTTP-Referer / X-Title
    app_url: str = "http://localhost:3000"
    app_title: str = "AI Knowledge Hub"
    # Uploads
    upload_dir: str = "./secure-uploads"
    max_upload_bytes: int = 10 * 1024 * 1024
    # Security
    jwt_secret_key: Optional[str] = None
    jwt_algorithm: str = "HS256"
    jwt_expiration_hours: int = 24
    # Logging
    log_level: str = "INFO"
    debug: bool = False
    # Telemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    # CORS
    cors_origins: list = ["http://localhost:3000"]
    # LLM Rate Limiting
    llm_max_concurrent_requests: int = 10  # Max concurrent API calls

    class Config:
        env_file = ".env"
        case_sensitive = False


def validate_settings(settings: Settings) -> None:
    """Validate required settings"""
    errors = []

    # The provider key is optional at startup; /chat reports it as missing
    if settings.llm_provider and settings.llm_provider not in ("openrouter", "openai"):
        errors.append(f"LLM_PROVIDER must be 'openrouter' or 'openai', got '{settings.llm_provider}'")

    if settings.chat_max_attempts < 1:
        errors.append("CHAT_MAX_ATTEMPTS must be at least 1")

    # Security
    if not settings.jwt_secret_key:
        errors.append("JWT_SECRET_KEY is required")

    if errors:
        error_message = "Configuration errors:\n" + "\n".join(f"  - {error}" for error in errors)
        raise ValueError(error_message)


settings = Settings()
validate_settings(settings)
logger.info("Settings loaded and validated successfully")
