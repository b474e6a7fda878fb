
from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application configuration loaded from environment variables / .env file."""

    app_name: str = "Auto Transport Logistics API"
    app_env: str = "development"
    app_port: int = 8000
    frontend_url: str = "http://localhost:3000"

    # Database (PostgreSQL via asyncpg, or SQLite via aiosqlite for local dev)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./logistics_dev.db",
        alias="DATABASE_URL",
    )
    db_pool_size: int = Field(default=10, alias="DB_POOL_SIZE")
    db_pool_timeout_seconds: float = Field(default=10.0, alias="DB_POOL_TIMEOUT_SECONDS")
    db_timeout_seconds: float = Field(
        default=15.0, alias="DB_TIMEOUT_SECONDS",
    )  # Upper bound for any single statement issued by a repository

    # Schema migrations
    migrate_on_startup: bool = Field(default=True, alias="MIGRATE_ON_STARTUP")
    migration_lock_id: int = Field(default=72_160_001, alias="MIGRATION_LOCK_ID")

    # Auth
    jwt_secret: str = Field(default="dev-secret-change-in-production", alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # Tenant onboarding through the public /auth/register endpoint
    allow_registration: bool = Field(default=True, alias="ALLOW_REGISTRATION")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "populate_by_name": True,
        "extra": "ignore",
    }

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

settings = Settings()
