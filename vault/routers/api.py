from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from ..config import Settings, get_settings
from ..deps import get_pinata_client
from ..models.pinned_file import PinnedFile
from ..services.pinata_service import PinataClient, PinataError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

UPSTREAM_ERROR = "Internal Server Error"

@router.get("/files", name="list_files", response_model=list[PinnedFile])
def list_files(client: PinataClient = Depends(get_pinata_client)):
    try:
        return client.list_pinned()
    except PinataError as exc:
        logger.error("Error fetching files: %s", exc)
        raise HTTPException(status_code=500, detail=UPSTREAM_ERROR) from exc

@router.post("/files", name="upload_file", response_model=str)
def upload_file(
    client: PinataClient = Depends(get_pinata_client),
    file: UploadFile | None = File(None),
):
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")

    try:
        cid = client.pin_file(file.file, filename=file.filename, content_type=file.content_type)
    except PinataError as exc:
        logger.error("Error uploading file %r: %s", file.filename, exc)
        raise HTTPException(status_code=500, detail=UPSTREAM_ERROR) from exc
    finally:
        file.file.close()

    return client.access_url(cid)

@router.get("/health", name="health")
def health(settings: Settings = Depends(get_settings)):
    return {
        "status": "healthy" if settings.is_configured else "degraded",
        "configured": settings.is_configured,
    }
