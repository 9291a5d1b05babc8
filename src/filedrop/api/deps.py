"""FastAPI dependencies. Everything hangs off ``app.state``; nothing is global."""
from __future__ import annotations
from fastapi import Request
from filedrop.config import Settings
from filedrop.services.upload_store import UploadStore
from filedrop.services.uploads_service import UploadsService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> UploadStore:
    return request.app.state.store


def get_uploads_service(request: Request) -> UploadsService:
    return request.app.state.uploads_service
