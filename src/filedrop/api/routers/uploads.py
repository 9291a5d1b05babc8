"""Uploads router."""
from fastapi import APIRouter, Depends, File, Query, UploadFile
from starlette.concurrency import run_in_threadpool
from filedrop.api.deps import get_settings, get_store, get_uploads_service
from filedrop.api.schemas.uploads import UploadAccepted, UploadRead
from filedrop.config import Settings
from filedrop.services.files_service import list_relative_files
from filedrop.services.upload_store import UploadStore
from filedrop.services.uploads_service import UploadsService

router = APIRouter(tags=["uploads"])

SQLITE_INT_MIN = -(2**63)
SQLITE_INT_MAX = 2**63 - 1


@router.post(
    "/upload",
    response_model=UploadAccepted,
    response_model_by_alias=True,
    status_code=201,
)
async def upload_file(
    file: UploadFile = File(...),
    service: UploadsService = Depends(get_uploads_service),
) -> UploadAccepted:
    upload_id = await run_in_threadpool(service.submit, file.filename, file.file)
    return UploadAccepted(upload_id=upload_id)


@router.get("/upload_status", response_model=UploadRead)
def upload_status(
    upload_id: int = Query(..., alias="uploadID", ge=SQLITE_INT_MIN, le=SQLITE_INT_MAX),
    store: UploadStore = Depends(get_store),
) -> UploadRead:
    return UploadRead.model_validate(store.get(upload_id))


@router.get("/list_files", response_model=list[str])
def list_files(settings: Settings = Depends(get_settings)) -> list[str]:
    return list_relative_files(settings.upload_dir)
