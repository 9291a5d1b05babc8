"""FastAPI application factory."""
from __future__ import annotations
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from filedrop.config import Settings
from filedrop.domain.exceptions import NotFoundError, StorageError, ValidationError
from filedrop.logging import logger
from filedrop.services.uploads_service import Scheduler


def create_app(settings: Settings | None = None, schedule: Scheduler | None = None) -> FastAPI:
    """Build the app. *schedule* overrides the relocation worker pool (tests)."""
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        from filedrop.infra.db.engine import init_db, make_engine
        from filedrop.services.background import BackgroundRunner
        from filedrop.services.upload_store import UploadStore
        from filedrop.services.uploads_service import UploadsService

        settings.upload_dir.mkdir(parents=True, exist_ok=True)
        settings.staging_dir.mkdir(parents=True, exist_ok=True)

        engine = make_engine(settings.DATABASE_URL)
        init_db(engine)
        store = UploadStore(engine)

        runner = None
        if schedule is None:
            runner = BackgroundRunner(max_workers=settings.RELOCATION_WORKERS)

        app.state.settings = settings
        app.state.store = store
        app.state.uploads_service = UploadsService(
            store,
            upload_dir=settings.upload_dir,
            staging_dir=settings.staging_dir,
            schedule=schedule or runner.submit,
        )
        logger.info("Serving uploads into %s", settings.upload_dir.absolute())
        try:
            yield
        finally:
            if runner is not None:
                runner.shutdown(wait=True)
            engine.dispose()

    app = FastAPI(
        title="filedrop",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Import routers inside create_app() to avoid circular imports at module load time
    from filedrop.api.routers.uploads import router as uploads_router

    app.include_router(uploads_router)

    @app.exception_handler(RequestValidationError)
    def _bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": _describe(exc)})

    @app.exception_handler(ValidationError)
    def _invalid(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": exc.message})

    @app.exception_handler(NotFoundError)
    def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.message})

    @app.exception_handler(StorageError)
    def _storage(request: Request, exc: StorageError) -> JSONResponse:
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=500, content={"detail": exc.message})

    @app.get("/health", tags=["ops"])
    def health() -> dict:
        return {"status": "ok"}

    return app


def _describe(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query"))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"
