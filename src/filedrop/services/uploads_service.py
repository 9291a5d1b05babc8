"""Upload lifecycle use-case: stage bytes, create the record, hand off relocation.

The service returns as soon as the record is committed; relocation runs on
whatever scheduler was injected (a worker pool in the app, a manual queue in
tests).
"""
from __future__ import annotations
import os
import shutil
import uuid
from collections.abc import Callable
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Any, BinaryIO
from filedrop.domain.exceptions import StorageError, ValidationError
from filedrop.logging import logger
from filedrop.models import UploadStatus
from filedrop.services.relocation import RelocationTask
from filedrop.services.upload_store import UploadStore

Scheduler = Callable[..., Any]


def clean_filename(filename: str | None) -> str:
    """Strip any directory part a client sent along with the filename."""
    name = PureWindowsPath(PurePosixPath(filename or "").name).name.strip()
    if name in ("", ".", ".."):
        raise ValidationError("Upload is missing a usable filename")
    return name


class UploadsService:
    def __init__(
        self,
        store: UploadStore,
        *,
        upload_dir: Path,
        staging_dir: Path,
        schedule: Scheduler,
    ) -> None:
        self._store = store
        self._upload_dir = Path(upload_dir)
        self._staging_dir = Path(staging_dir)
        self._schedule = schedule
        self._relocation = RelocationTask(store)

    def destination_for(self, filename: str) -> Path:
        # Same filename → same destination; the last relocation wins.
        return self._upload_dir / filename

    def stage(self, filename: str, source: BinaryIO) -> Path:
        """Copy *source* in chunks to a unique file in the staging directory."""
        staging_path = self._staging_dir / f"{uuid.uuid4().hex}_{filename}"
        try:
            self._staging_dir.mkdir(parents=True, exist_ok=True)
            with staging_path.open("wb") as fh:
                shutil.copyfileobj(source, fh)
        except OSError as exc:
            _remove_quietly(staging_path)
            raise StorageError(f"Failed to save file to temporary location: {exc}") from exc
        return staging_path

    def accept(self, filename: str, staging_path: Path) -> int:
        """Record a fully staged upload and schedule its relocation.

        Returns the new upload id while the record is still ``pending``.
        """
        destination_path = self.destination_for(filename)
        try:
            upload_id = self._store.create(filename, str(staging_path), str(destination_path))
        except StorageError:
            _remove_quietly(staging_path)
            raise

        try:
            self._schedule(
                self._relocation.run, upload_id, str(staging_path), str(destination_path),
            )
        except RuntimeError as exc:
            logger.error("Could not schedule relocation for upload %s: %s", upload_id, exc)
            try:
                self._store.set_terminal_status(
                    upload_id, UploadStatus.FAILED, f"Relocation could not be scheduled: {exc}",
                )
            finally:
                _remove_quietly(staging_path)
            raise StorageError(f"Relocation could not be scheduled: {exc}") from exc

        logger.info("Accepted upload %s (%s), relocation scheduled", upload_id, filename)
        return upload_id

    def submit(self, filename: str | None, source: BinaryIO) -> int:
        name = clean_filename(filename)
        staging_path = self.stage(name, source)
        return self.accept(name, staging_path)


def _remove_quietly(path: Path) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.error("Error removing temporary file %s: %s", path, exc)
