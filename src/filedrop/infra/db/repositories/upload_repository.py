"""Repository for Upload records. No business logic; caller owns the transaction."""
from __future__ import annotations
from sqlmodel import Session, select, desc
from filedrop.models import Upload, UploadStatus


class UploadRepository:
    def __init__(self, session: Session) -> None:
        self._s = session

    def get_by_id(self, upload_id: int) -> Upload | None:
        return self._s.get(Upload, upload_id)

    def list_by_status(
        self, status: UploadStatus | None = None, *, limit: int = 100, offset: int = 0,
    ) -> list[Upload]:
        stmt = select(Upload)
        if status is not None:
            stmt = stmt.where(Upload.status == status.value)
        stmt = stmt.order_by(desc(Upload.upload_time)).offset(offset).limit(limit)
        return list(self._s.exec(stmt).all())

    def create(self, *, filename: str, source_path: str, destination_path: str) -> Upload:
        upload = Upload(
            filename=filename,
            source_path=source_path,
            destination_path=destination_path,
            status=UploadStatus.PENDING.value,
            error_message="",
        )
        self._s.add(upload)
        self._s.flush()  # get generated PK without committing
        return upload

    def set_status(self, upload: Upload, status: UploadStatus, error_message: str) -> Upload:
        upload.status = status.value
        upload.error_message = error_message
        self._s.add(upload)
        self._s.flush()
        return upload
