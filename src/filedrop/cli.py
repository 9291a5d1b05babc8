import os
import sys
import typer
from pathlib import Path
from filedrop.config import settings
from filedrop.logging import logger, configure_logging

app = typer.Typer(no_args_is_help=True)

@app.callback()
def main():
    """
    filedrop upload service CLI.
    """
    configure_logging(settings.LOG_LEVEL)

@app.command(name="serve")
def serve(
    host: str | None = typer.Option(None, help="Bind address (defaults to HOST)"),
    port: int | None = typer.Option(None, help="Port (defaults to PORT)"),
):
    """
    Run the HTTP API with uvicorn.
    """
    import uvicorn
    from filedrop.api.app import create_app

    bind_host = host or settings.HOST
    bind_port = port or settings.PORT
    logger.info("Server listening on %s:%s", bind_host, bind_port)
    uvicorn.run(create_app(settings), host=bind_host, port=bind_port, log_level=settings.LOG_LEVEL.lower())

@app.command(name="doctor")
def doctor():
    """
    Check directories, database and stuck uploads.
    """
    logger.info("Running doctor check...")

    failures: list[str] = []
    passed = 0

    print("\n🩺 filedrop doctor\n")

    # ── Check 1: Environment / Interpreter ──────────────────────────────────
    print("[Environment]")
    print(f"  Python: {sys.version.split()[0]}")
    print(f"  Prefix: {sys.prefix}")
    passed += 1

    # ── Check 2: Directories ────────────────────────────────────────────────
    print("\n[Directories]")
    for label, path in (("UPLOAD_DIR", settings.upload_dir), ("STAGING_DIR", settings.staging_dir)):
        if path.is_dir() and os.access(path, os.W_OK):
            print(f"  {label:<12} ✅ Writable: {path.absolute()}")
            passed += 1
        elif path.exists():
            print(f"  {label:<12} ❌ Not a writable directory: {path.absolute()}")
            failures.append(f"{label} {path} is not a writable directory")
        else:
            print(f"  {label:<12} ⚠️  Missing (created at startup): {path.absolute()}")
            passed += 1

    if settings.upload_dir.is_dir() and settings.staging_dir.is_dir():
        if _same_device(settings.upload_dir, settings.staging_dir):
            print("  Same filesystem             ✅ Relocation is an atomic rename")
            passed += 1
        else:
            print("  Same filesystem             ❌ STAGING_DIR and UPLOAD_DIR differ")
            failures.append("STAGING_DIR and UPLOAD_DIR are on different filesystems — every relocation will fail")

    # ── Check 3: Database ───────────────────────────────────────────────────
    print("\n[Database]")
    from filedrop.infra.db.engine import make_engine
    from filedrop.models import UploadStatus
    from filedrop.services.upload_store import UploadStore
    from filedrop.domain.exceptions import StorageError

    engine = make_engine(settings.DATABASE_URL)
    try:
        pending = UploadStore(engine).list_by_status(UploadStatus.PENDING, limit=1000)
        print(f"  {settings.DATABASE_URL:<28} ✅ Reachable")
        passed += 1
        if pending:
            print(f"  Pending uploads             ⚠️  {len(pending)} (may be stuck if the server is idle)")
            for upload in pending[:10]:
                print(f"    #{upload.id} {upload.filename} since {upload.upload_time}")
        else:
            print("  Pending uploads             ✅ None")
    except StorageError as e:
        print(f"  {settings.DATABASE_URL:<28} ❌ {e.message}")
        failures.append("Database is not reachable or not initialized — run `filedrop db init`")
    finally:
        engine.dispose()

    # ── Summary ──────────────────────────────────────────────────────────────
    total = passed + len(failures)
    print(f"\n{'─' * 50}")
    if failures:
        print(f"Result: {passed}/{total} checks passed\n")
        for msg in failures:
            print(f"  ❌ {msg}")
        print()
        raise typer.Exit(code=1)
    else:
        print(f"Result: {passed}/{total} checks passed — all good ✅")
        print()


def _same_device(a: Path, b: Path) -> bool:
    return os.stat(a).st_dev == os.stat(b).st_dev


db_app = typer.Typer(help="Database management commands.")
app.add_typer(db_app, name="db")

@db_app.command("init")
def init():
    """Create the uploads table and apply compatibility upgrades."""
    from sqlalchemy.exc import SQLAlchemyError
    from filedrop.infra.db.engine import init_db, make_engine
    engine = make_engine(settings.DATABASE_URL)
    try:
        init_db(engine)
        logger.info("Database initialized successfully.")
        print("✅ Database initialized.")
    except SQLAlchemyError as e:
        logger.error("Failed to initialize database: %s", e)
        print(f"❌ Failed: {e}")
        raise typer.Exit(code=1)
    finally:
        engine.dispose()

@db_app.command("uploads")
def uploads(
    status: str | None = typer.Option(None, help="Filter by status: pending, success or failed"),
    limit: int = typer.Option(20, help="Maximum rows to show"),
):
    """List recent uploads, newest first."""
    from filedrop.infra.db.engine import make_engine
    from filedrop.models import UploadStatus
    from filedrop.services.upload_store import UploadStore
    from filedrop.domain.exceptions import StorageError

    try:
        wanted = UploadStatus(status) if status else None
    except ValueError:
        print(f"❌ Unknown status {status!r}")
        raise typer.Exit(code=1)

    engine = make_engine(settings.DATABASE_URL)
    try:
        rows = UploadStore(engine).list_by_status(wanted, limit=limit)
    except StorageError as e:
        print(f"❌ Failed: {e.message}")
        raise typer.Exit(code=1)
    finally:
        engine.dispose()

    if not rows:
        print("No uploads found.")
        return

    for row in rows:
        line = f"#{row.id} [{row.status}] {row.filename} → {row.destination_path}"
        if row.error_message:
            line += f" ({row.error_message})"
        print(line)

if __name__ == "__main__":
    app()
