"""Upload record store: durable id → lifecycle state mapping.

Every call runs in its own UnitOfWork so the store can be shared between the
request thread and relocation workers. Database faults surface as
``StorageError``; callers never see SQLAlchemy exceptions.
"""
from __future__ import annotations
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from filedrop.domain.exceptions import NotFoundError, StorageError, ValidationError
from filedrop.infra.db.uow import UnitOfWork
from filedrop.infra.db.repositories.upload_repository import UploadRepository
from filedrop.logging import logger
from filedrop.models import Upload, UploadStatus


class UploadStore:
    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def create(self, filename: str, staging_path: str, destination_path: str) -> int:
        """Insert a ``pending`` record and return its id (committed on return)."""
        try:
            with UnitOfWork(self._engine) as uow:
                upload = UploadRepository(uow.session).create(
                    filename=filename,
                    source_path=staging_path,
                    destination_path=destination_path,
                )
                uow.commit()
                return upload.id
        except SQLAlchemyError as exc:
            logger.error("Error inserting upload record for %s: %s", filename, exc)
            raise StorageError(f"Failed to create upload record: {exc}") from exc

    def set_terminal_status(
        self, upload_id: int, status: UploadStatus, error_message: str = "",
    ) -> None:
        """Record the outcome of a relocation.

        ``failed`` requires a non-empty message and ``success`` an empty one.
        A record that already reached a terminal status is left untouched.
        """
        status = UploadStatus(status)
        if not status.is_terminal:
            raise ValidationError(f"{status.value!r} is not a terminal status")
        if status is UploadStatus.FAILED and not error_message:
            raise ValidationError("A failed upload needs an error message")
        if status is UploadStatus.SUCCESS and error_message:
            raise ValidationError("A successful upload cannot carry an error message")

        try:
            with UnitOfWork(self._engine) as uow:
                repo = UploadRepository(uow.session)
                upload = repo.get_by_id(upload_id)
                if upload is None:
                    raise StorageError(f"Upload {upload_id} does not exist")
                current = UploadStatus(upload.status)
                if current.is_terminal:
                    logger.warning(
                        "Upload %s is already %s; ignoring transition to %s",
                        upload_id, current.value, status.value,
                    )
                    return
                repo.set_status(upload, status, error_message)
        except SQLAlchemyError as exc:
            logger.error("Error updating status of upload %s: %s", upload_id, exc)
            raise StorageError(f"Failed to update upload {upload_id}: {exc}") from exc

    def get(self, upload_id: int) -> Upload:
        try:
            with UnitOfWork(self._engine) as uow:
                upload = UploadRepository(uow.session).get_by_id(upload_id)
        except OverflowError:
            # Outside the 64-bit INTEGER range, so no row can have this id.
            upload = None
        except SQLAlchemyError as exc:
            logger.error("Error getting upload %s: %s", upload_id, exc)
            raise StorageError(f"Failed to retrieve upload {upload_id}") from exc
        if upload is None:
            raise NotFoundError(f"Upload {upload_id} not found")
        return upload

    def list_by_status(
        self, status: UploadStatus | None = None, *, limit: int = 100, offset: int = 0,
    ) -> list[Upload]:
        try:
            with UnitOfWork(self._engine) as uow:
                return UploadRepository(uow.session).list_by_status(
                    status, limit=limit, offset=offset,
                )
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to list uploads: {exc}") from exc
