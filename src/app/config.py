from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).parent.parent.parent / ".env"),
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Database
    database_url: str = "sqlite+aiosqlite:///./finance.db"
    db_echo: bool = False
    create_tables: bool = True

    # Shared state (sessions, login throttle, rate limits): "memory" or "database"
    state_backend: str = "memory"

    # Sessions
    session_cookie_name: str = "session_id"
    session_cookie_secure: bool = False
    session_ttl_hours: int = 24
    remember_ttl_days: int = 30

    # Login throttle
    login_max_attempts: int = 5
    login_lockout_minutes: int = 15

    # API rate limiting
    rate_limit_enabled: bool = True
    rate_limit_requests: int = 100
    auth_rate_limit_requests: int = 50
    rate_limit_window_seconds: int = 900

    # Ledger
    transfer_max_amount: int = 50000
    savings_streak_threshold: int = 50


settings = Settings()
