from pathlib import Path
from filedrop.config import Settings


def test_defaults(monkeypatch):
    for name in ("UPLOAD_DIR", "STAGING_DIR", "DATABASE_URL", "PORT", "HOST"):
        monkeypatch.delenv(name, raising=False)
    s = Settings(_env_file=None)
    assert s.upload_dir == Path("uploads")
    assert s.PORT == 8080
    assert s.DATABASE_URL.startswith("sqlite:///")


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "final"))
    monkeypatch.setenv("PORT", "9090")
    s = Settings(_env_file=None)
    assert s.upload_dir == tmp_path / "final"
    assert s.PORT == 9090


def test_dotenv_file_is_read(tmp_path, monkeypatch):
    monkeypatch.delenv("PORT", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("PORT=7000\nUNRELATED=1\n")
    s = Settings(_env_file=env_file)
    assert s.PORT == 7000
