from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./mascate.db"
    DB_POOL_SIZE: int = 10
    DB_POOL_TIMEOUT: int = 10  # seconds waiting for a pooled connection
    DB_STATEMENT_TIMEOUT_MS: int = 30000  # PostgreSQL only

    # JWT
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # CORS - comma separated list, "*" allows any origin
    CORS_ORIGINS: str = "*"

    # Activity log retention
    ACTIVITY_LOG_MAX_ENTRIES: int = 1000
    ACTIVITY_LOG_RETENTION_DAYS: int = 90

    # First superadmin created by scripts/init_db.py
    INITIAL_ADMIN_EMAIL: Optional[str] = None
    INITIAL_ADMIN_PASSWORD: Optional[str] = None

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # "text" or "json"
    LOG_REQUEST_ID: bool = True

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
