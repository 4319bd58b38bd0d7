import os
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: Optional[str]) -> bool:
    return str(value).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Runtime configuration read from the environment (or a .env file)."""

    def __init__(self):
        self.host = os.getenv("HOST", "0.0.0.0")
        self.port = int(os.getenv("PORT", "3000"))

        self.database_url_override = os.getenv("DATABASE_URL")
        self.mysql_user = os.getenv("MYSQL_USER", "api_user")
        self.mysql_password = os.getenv("MYSQL_PASSWORD")
        self.mysql_host = os.getenv("MYSQL_HOST", "localhost")
        self.mysql_port = os.getenv("MYSQL_PORT", "3306")
        self.mysql_db = os.getenv("MYSQL_DB", "chat_store")
        self.sql_echo = _as_bool(os.getenv("SQL_ECHO", "false"))

        self.allowed_origins = os.getenv("ALLOWED_ORIGINS", "*")
        self.request_timeout_seconds = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))
        self.log_level = os.getenv("LOG_LEVEL", "INFO")

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        if not self.mysql_password:
            raise ValueError("MYSQL_PASSWORD environment variable is not set (or provide DATABASE_URL)!")
        return (
            f"mysql+pymysql://{self.mysql_user}:{self.mysql_password}"
            f"@{self.mysql_host}:{self.mysql_port}/{self.mysql_db}"
        )

    @property
    def cors_origins_list(self) -> List[str]:
        if self.allowed_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
