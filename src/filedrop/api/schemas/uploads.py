"""Upload DTOs — pure Pydantic, zero ORM imports."""
from __future__ import annotations
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field


class UploadStatusDTO(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


class UploadRead(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    filename: str
    source_path: str
    destination_path: str
    upload_time: datetime
    status: UploadStatusDTO
    error_message: str = ""


class UploadAccepted(BaseModel):
    model_config = {"populate_by_name": True}

    message: str = "File uploaded successfully. Processing in the background."
    upload_id: int = Field(alias="uploadID")
