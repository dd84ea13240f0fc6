"""Query manager configuration — loaded from environment / .env file."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="QM_", extra="ignore")

    env: str = "development"
    log_level: str = "INFO"

    # Template + audit store
    database_url: str = "sqlite+aiosqlite:///./query_manager.db"

    # Relational backend the templates run against (defaults to the store DB)
    backend_url: str | None = None
    backend_timeout_seconds: float = 30.0

    # Caller identity / permission gate
    anonymous_user: str = "anonymous"
    authorized_users: list[str] = []  # empty = everyone is authorized

    # Execution log paging
    logs_default_limit: int = 50
    logs_max_limit: int = 500

    @property
    def effective_backend_url(self) -> str:
        return self.backend_url or self.database_url


settings = Settings()
