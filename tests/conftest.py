"""Shared test fixtures.

  settings   — Settings pointing every path at tmp_path (no .env).
  engine     — initialized temp-file SQLite engine.
  store      — UploadStore over that engine.
  scheduler  — ManualScheduler; relocation only runs on scheduler.run_all().
  client     — FastAPI TestClient wired to the above.
"""
import pytest
from filedrop.config import Settings
from filedrop.infra.db.engine import init_db, make_engine
from filedrop.services.upload_store import UploadStore


class ManualScheduler:
    """Queues scheduled calls so tests can observe the pending state."""

    def __init__(self) -> None:
        self.jobs: list[tuple] = []

    def __call__(self, fn, *args):
        self.jobs.append((fn, args))

    def run_all(self) -> int:
        ran = 0
        while self.jobs:
            fn, args = self.jobs.pop(0)
            fn(*args)
            ran += 1
        return ran


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        UPLOAD_DIR=tmp_path / "uploads",
        STAGING_DIR=tmp_path / "staging",
        DATABASE_URL=f"sqlite:///{tmp_path / 'test_filedrop.db'}",
        RELOCATION_WORKERS=2,
    )


@pytest.fixture
def engine(settings):
    test_engine = make_engine(settings.DATABASE_URL)
    init_db(test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def store(engine):
    return UploadStore(engine)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def client(settings, scheduler):
    """FastAPI TestClient whose relocations wait for scheduler.run_all()."""
    from fastapi.testclient import TestClient
    from filedrop.api.app import create_app

    app = create_app(settings, schedule=scheduler)
    with TestClient(app) as c:
        yield c
