import pytest
from filedrop.domain.exceptions import StorageError
from filedrop.services.files_service import list_relative_files


def test_lists_nested_files_relative_to_root(tmp_path):
    (tmp_path / "b").mkdir()
    (tmp_path / "b" / "c.txt").write_text("c")
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / "empty").mkdir()

    assert list_relative_files(tmp_path) == ["a.txt", "b/c.txt"]


def test_empty_directory_lists_nothing(tmp_path):
    assert list_relative_files(tmp_path) == []


def test_missing_directory_raises(tmp_path):
    with pytest.raises(StorageError):
        list_relative_files(tmp_path / "missing")
