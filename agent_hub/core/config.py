from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    database_url: str

    @property
    def async_database_url(self) -> str:
        """Return database URL with asyncpg driver for SQLAlchemy async."""
        url = self.database_url
        if url.startswith("postgresql://"):
            return url.replace("postgresql://", "postgresql+asyncpg://", 1)
        if url.startswith("postgres://"):
            return url.replace("postgres://", "postgresql+asyncpg://", 1)
        return url

    # Redis
    redis_url: str = "redis://localhost:6379/0"

    # LLM API Keys
    anthropic_api_key: str = ""
    openai_api_key: str = ""

    # Langfuse
    langfuse_secret_key: str = ""
    langfuse_public_key: str = ""
    langfuse_host: str = "http://localhost:3000"

    # Focus briefings
    focus_model: str = "claude-sonnet-4-5"
    focus_fallback_model: str = "gpt-4.1-mini"  # empty string disables provider fallback
    focus_max_tokens: int = 4096
    prioritization_timeout_s: float = 90.0
    daily_briefing_time: str = "06:00"  # HH:MM, local to `timezone`
    timezone: str = "America/Sao_Paulo"
    default_language: str = "en"
    currency: str = "BRL"
    high_value_threshold: int = 500_000  # cents
    urgent_days_threshold: int = 3

    # App
    app_env: str = "development"
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def daily_briefing_hour_minute(self) -> tuple[int, int]:
        """Parse ``daily_briefing_time`` into (hour, minute)."""
        hour, minute = self.daily_briefing_time.split(":")
        return int(hour), int(minute)


settings = Settings()
