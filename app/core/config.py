"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here.
"""

from decimal import Decimal
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SYSTEM_PROMPT = (
    "You are the support assistant for a managed forex and gold trading "
    "service. Clients apply with a minimum capital of $20, are approved by "
    "the operator, and their accounts are activated on Sundays. Profits "
    "are split 50/50: the client keeps half of the net profit and sends "
    "the other half to the operator, then uploads a payment screenshot "
    "from their dashboard. Answer briefly and politely. Never ask for "
    "passwords in the chat and never promise returns."
)


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_default: Default rate limit for all endpoints.
        rate_limit_heavy: Rate limit for uploads and the assistant.
        rate_limit_enabled: Turn rate limiting off (local development).
        rate_limit_storage_uri: slowapi storage backend for the counters.
        database_url: SQLAlchemy URL of the record store.
        auto_create_schema: Create missing tables at startup.
        jwt_secret: HMAC key for bearer tokens. Override in production.
        jwt_algorithm: JWT signing algorithm.
        session_ttl_minutes: Lifetime of a sign-in session.
        blob_dir: Directory holding uploaded payment screenshots.
        blob_public_url: URL prefix under which blob_dir is served.
        max_upload_bytes: Largest accepted screenshot.
        notifier_webhook_url: Operator messaging webhook. Empty disables it.
        notifier_timeout_seconds: Timeout for one webhook call.
        auto_approve_min_balance: Balance at which applications are
            approved on submission. Unset means every applicant is reviewed.
        assistant_url: OpenAI-compatible chat completions URL.
        assistant_api_key: Bearer key for the assistant endpoint.
        assistant_model: Model identifier sent to the endpoint.
        assistant_system_prompt: Prepended to every conversation.
        assistant_timeout_seconds: Timeout for the streaming request.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "Profitshare"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    rate_limit_default: str = "60/minute"
    rate_limit_heavy: str = "10/minute"
    rate_limit_enabled: bool = True
    rate_limit_storage_uri: str = "memory://"

    database_url: str = "sqlite:///./profitshare.db"
    auto_create_schema: bool = True

    jwt_secret: str = "dev-secret-change-me"
    jwt_algorithm: str = "HS256"
    session_ttl_minutes: int = 720

    blob_dir: str = "./uploads"
    blob_public_url: str = "/uploads"
    max_upload_bytes: int = 5_242_880  # 5 MB

    notifier_webhook_url: Optional[str] = None
    notifier_timeout_seconds: float = 10.0
    auto_approve_min_balance: Optional[Decimal] = None

    assistant_url: Optional[str] = None
    assistant_api_key: Optional[str] = None
    assistant_model: str = "google/gemini-2.5-flash"
    assistant_system_prompt: str = DEFAULT_SYSTEM_PROMPT
    assistant_timeout_seconds: float = 30.0


settings = Settings()
