import uuid
from datetime import datetime
from typing import Any

from pydantic import field_validator
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field

from src.classwork.utils.time import utc_now, as_naive_utc


def new_id() -> str:
    return str(uuid.uuid4())


class NaiveUtcModel(SQLModel):
    # Snapshots and some drivers hand back aware datetimes; keep everything naive UTC.
    @field_validator("*", mode="after")
    @classmethod
    def _naive_utc(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return as_naive_utc(value)
        return value


class TimestampedModel(NaiveUtcModel):
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
