from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.
    """

    # API Keys
    anthropic_api_key: str = ""
    resend_api_key: str = ""

    # State store: "memory" for local runs, "supabase" for a deployment
    state_backend: str = "memory"
    supabase_url: str = ""
    supabase_key: str = ""

    # Extraction: "claude" for model extraction, "pattern" for offline phrase matching
    extractor: str = "claude"
    llm_model: str = "claude-sonnet-4-20250514"
    llm_max_tokens: int = 2000
    llm_temperature: float = 0.3

    # Email
    email_from: str = "TeamSync <onboarding@resend.dev>"
    email_timeout_seconds: float = 10.0
    default_reminder_recipient: str = "reminders@example.com"
    assignee_emails: dict[str, str] = {}
    reminder_send_interval_seconds: float = 0.5  # Resend free tier: 2 emails/second

    # Reminder cron (daily at 09:00 by default)
    reminder_cron_enabled: bool = False
    reminder_cron_hour: int = 9
    reminder_cron_minute: int = 0

    # App config
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()
