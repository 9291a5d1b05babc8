"""Relocation task: moves one staged file to its destination and records the outcome."""
from __future__ import annotations
import os
from filedrop.domain.exceptions import RelocationError, StorageError
from filedrop.logging import logger
from filedrop.models import UploadStatus
from filedrop.services.upload_store import UploadStore


def move_file(source_path: str, destination_path: str) -> None:
    """Atomically rename *source_path* onto *destination_path*.

    Overwrites an existing destination. Fails across filesystems.
    """
    try:
        os.replace(source_path, destination_path)
    except OSError as exc:
        raise RelocationError(
            f"Failed to move {source_path} to {destination_path}: {exc}"
        ) from exc


class RelocationTask:
    """Single-attempt relocation of one upload.

    ``run`` always ends with exactly one terminal status write, whatever
    happens inside the move, so no record is left ``pending`` by a task that
    has exited.
    """

    def __init__(self, store: UploadStore) -> None:
        self._store = store

    def run(self, upload_id: int, staging_path: str, destination_path: str) -> None:
        status = UploadStatus.FAILED
        error_message = "relocation exited before reporting an outcome"
        try:
            move_file(staging_path, destination_path)
            status, error_message = UploadStatus.SUCCESS, ""
            logger.info("Upload %s relocated to %s", upload_id, destination_path)
        except RelocationError as exc:
            logger.error("Error moving file for upload %s: %s", upload_id, exc.message)
            error_message = exc.message
        except Exception as exc:
            logger.exception("Unexpected fault while relocating upload %s", upload_id)
            error_message = f"Unexpected fault during relocation: {exc!r}"
        finally:
            self._record(upload_id, status, error_message)

    def _record(self, upload_id: int, status: UploadStatus, error_message: str) -> None:
        try:
            self._store.set_terminal_status(upload_id, status, error_message)
        except StorageError as exc:
            logger.error(
                "Could not record %s for upload %s: %s", status.value, upload_id, exc.message,
            )
