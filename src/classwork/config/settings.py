# File: src/classwork/config/settings.py
import os
import logging
from enum import Enum
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError, field_validator

from src.classwork.exceptions import ValidationFailed

logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()


class BackendKind(str, Enum):
    REMOTE = "remote"
    LOCAL = "local"
    JSON = "json"


class Settings(BaseModel):
    backend: BackendKind = BackendKind.JSON
    database_url: Optional[str] = None
    local_db_path: str = "classwork-local.db"
    json_snapshot_path: Optional[str] = "data/dummy-data.json"
    json_flush_delay: Optional[float] = 1.0
    sql_echo: bool = False
    log_level: str = "INFO"
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    @field_validator("backend", mode="before")
    @classmethod
    def _lower(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    @classmethod
    def from_env(cls) -> "Settings":
        """Read the process configuration once, at startup."""
        raw = {
            "backend": os.getenv("CLASSWORK_BACKEND"),
            "database_url": os.getenv("DATABASE_URL"),
            "local_db_path": os.getenv("LOCAL_DB_PATH"),
            "json_snapshot_path": os.getenv("JSON_SNAPSHOT_PATH"),
            "sql_echo": os.getenv("SQL_ECHO"),
            "log_level": os.getenv("LOG_LEVEL"),
        }
        values = {key: value for key, value in raw.items() if value is not None}

        flush_delay = os.getenv("JSON_FLUSH_DELAY")
        if flush_delay is not None:
            values["json_flush_delay"] = flush_delay.strip() or None

        origins = os.getenv("CORS_ORIGINS")
        if origins:
            values["cors_origins"] = [origin.strip() for origin in origins.split(",") if origin.strip()]

        try:
            settings = cls(**values)
        except ValidationError as e:
            logger.error(f"Invalid classwork configuration: {e}")
            raise ValidationFailed(f"Invalid configuration: {e}") from e

        if settings.backend == BackendKind.REMOTE and not settings.database_url:
            logger.error("Missing required configuration: DATABASE_URL")
            raise ValidationFailed("DATABASE_URL is required for the remote backend")
        return settings
