"""Tests for the relocation task's terminal-write guarantee."""
import pytest
from filedrop.domain.exceptions import RelocationError, StorageError
from filedrop.models import UploadStatus
from filedrop.services import relocation
from filedrop.services.relocation import RelocationTask, move_file


@pytest.fixture
def staged(tmp_path):
    staging = tmp_path / "staging"
    uploads = tmp_path / "uploads"
    staging.mkdir()
    uploads.mkdir()
    src = staging / "abc_report.txt"
    src.write_bytes(b"payload")
    return src, uploads / "report.txt"


def _pending(store, src, dest) -> int:
    return store.create("report.txt", str(src), str(dest))


def test_successful_move(store, staged):
    src, dest = staged
    upload_id = _pending(store, src, dest)

    RelocationTask(store).run(upload_id, str(src), str(dest))

    upload = store.get(upload_id)
    assert upload.status == UploadStatus.SUCCESS
    assert upload.error_message == ""
    assert dest.read_bytes() == b"payload"
    assert not src.exists()


def test_move_overwrites_existing_destination(store, staged):
    src, dest = staged
    dest.write_bytes(b"older upload")
    upload_id = _pending(store, src, dest)

    RelocationTask(store).run(upload_id, str(src), str(dest))

    assert store.get(upload_id).status == UploadStatus.SUCCESS
    assert dest.read_bytes() == b"payload"


def test_missing_staged_file_marks_failed(store, staged):
    src, dest = staged
    src.unlink()
    upload_id = _pending(store, src, dest)

    RelocationTask(store).run(upload_id, str(src), str(dest))

    upload = store.get(upload_id)
    assert upload.status == UploadStatus.FAILED
    assert str(src) in upload.error_message


def test_permission_error_marks_failed(store, staged, monkeypatch):
    src, dest = staged
    upload_id = _pending(store, src, dest)

    def _denied(a, b):
        raise PermissionError(13, "Permission denied", b)

    monkeypatch.setattr(relocation.os, "replace", _denied)
    RelocationTask(store).run(upload_id, str(src), str(dest))

    upload = store.get(upload_id)
    assert upload.status == UploadStatus.FAILED
    assert "Permission denied" in upload.error_message
    assert src.exists()


def test_unexpected_fault_marks_failed(store, staged, monkeypatch):
    src, dest = staged
    upload_id = _pending(store, src, dest)

    def _boom(a, b):
        raise RuntimeError("filesystem driver exploded")

    monkeypatch.setattr(relocation, "move_file", _boom)
    RelocationTask(store).run(upload_id, str(src), str(dest))

    upload = store.get(upload_id)
    assert upload.status == UploadStatus.FAILED
    assert "Unexpected fault" in upload.error_message
    assert "filesystem driver exploded" in upload.error_message


def test_interrupt_still_writes_terminal_status(store, staged, monkeypatch):
    src, dest = staged
    upload_id = _pending(store, src, dest)

    def _interrupted(a, b):
        raise KeyboardInterrupt

    monkeypatch.setattr(relocation, "move_file", _interrupted)
    with pytest.raises(KeyboardInterrupt):
        RelocationTask(store).run(upload_id, str(src), str(dest))

    upload = store.get(upload_id)
    assert upload.status == UploadStatus.FAILED
    assert upload.error_message


def test_store_failure_on_terminal_write_is_contained(staged, caplog):
    src, dest = staged

    class _BrokenStore:
        def set_terminal_status(self, *args):
            raise StorageError("database is gone")

    RelocationTask(_BrokenStore()).run(7, str(src), str(dest))

    assert dest.exists()
    assert "database is gone" in caplog.text


def test_move_file_wraps_os_errors(tmp_path):
    with pytest.raises(RelocationError) as excinfo:
        move_file(str(tmp_path / "nope"), str(tmp_path / "dest"))
    assert "nope" in excinfo.value.message
