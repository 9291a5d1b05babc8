"""ORM table definitions."""
from datetime import datetime, timezone
from enum import Enum
from sqlalchemy import String
from sqlmodel import Field, SQLModel


class UploadStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not UploadStatus.PENDING


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Upload(SQLModel, table=True):
    __tablename__ = "uploads"

    id: int | None = Field(default=None, primary_key=True)
    filename: str
    source_path: str
    destination_path: str
    upload_time: datetime = Field(default_factory=_utcnow)
    # Stored as the plain value ("pending") so rows stay readable from raw SQL.
    status: UploadStatus = Field(default=UploadStatus.PENDING, sa_type=String(16), index=True)
    error_message: str = Field(default="")
