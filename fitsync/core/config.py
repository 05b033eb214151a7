import os
from dotenv import load_dotenv
from urllib.parse import quote_plus

load_dotenv()

class Settings:
    # Environment setting
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

    # Clerk Configuration
    CLERK_SECRET_KEY = os.getenv("CLERK_SECRET_KEY")

    # db creds
    DB_HOST = os.getenv("DB_HOST", "localhost")
    DB_USER = os.getenv("DB_USER", "postgres")
    DB_PASSWORD = os.getenv("DB_PASSWORD", "")
    DB_NAME = os.getenv("DB_NAME", "fitforge")
    DB_PORT = os.getenv("DB_PORT", "5432")

    # Full URL override, e.g. sqlite+aiosqlite:///./fitforge.db for local runs
    DATABASE_URL_OVERRIDE = os.getenv("DATABASE_URL")

    # Comma separated list of allowed frontend origins
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv(
            "CORS_ORIGINS",
            "http://localhost:3000,http://127.0.0.1:3000,http://localhost:8080,http://localhost:8000"
        ).split(",")
        if origin.strip()
    ]

    # In-progress sync sessions older than this are reported as failed
    SYNC_SESSION_STALE_MINUTES = int(os.getenv("SYNC_SESSION_STALE_MINUTES", "15"))

    LOG_DIR = os.getenv("LOG_DIR", "logs")

    # Build URL with SSL requirement based on environment
    def _build_database_url(self):
        return f"postgresql+asyncpg://{self.DB_USER}:{quote_plus(self.DB_PASSWORD)}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @property
    def DATABASE_URL(self):
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return self._build_database_url()

    @property
    def IS_DEVELOPMENT(self):
        return self.ENVIRONMENT == "development"

settings = Settings()
