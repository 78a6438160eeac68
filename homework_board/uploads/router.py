from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request, Response
from fastapi.responses import FileResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from ..errors import InvalidFilename, PayloadTooLarge, StorageError, UploadNotFound
from ..homework.schemas import Attachment
from .store import UploadStore

logger = logging.getLogger(__name__)

# Room for multipart boundaries and part headers on top of the file itself.
MULTIPART_OVERHEAD = 64 * 1024


def _declared_length(request: Request) -> int | None:
    raw = request.headers.get("content-length")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def build_upload_router(store: UploadStore) -> APIRouter:
    router = APIRouter(tags=["Uploads"])
    prefix = store.url_prefix

    @router.post("/api/upload", response_model=Attachment, summary="Upload an attachment")
    async def upload_file(request: Request) -> Attachment:
        declared = _declared_length(request)
        # Without a length the multipart spool would grow unbounded before the
        # copy in UploadStore gets to enforce the ceiling.
        if declared is None:
            logger.info("Rejected upload without Content-Length")
            raise HTTPException(status_code=411, detail="Content-Length required")
        if declared > store.max_bytes + MULTIPART_OVERHEAD:
            logger.info(f"Rejected upload of {declared} bytes before parsing")
            raise HTTPException(status_code=413, detail="File too large")

        async with request.form() as form:
            upload = form.get("file")
            if not isinstance(upload, UploadFile):
                raise HTTPException(status_code=400, detail="Error retrieving file")
            try:
                return await run_in_threadpool(store.store, upload)
            except InvalidFilename as e:
                raise HTTPException(status_code=400, detail=str(e)) from e
            except PayloadTooLarge as e:
                raise HTTPException(status_code=413, detail="File too large") from e
            except StorageError as e:
                raise HTTPException(status_code=500, detail="Error saving file") from e

    @router.options("/api/upload", include_in_schema=False)
    def upload_preflight() -> Response:
        return Response(status_code=200)

    # GET would otherwise fall through to the static mount and answer 404.
    @router.get("/api/upload", include_in_schema=False)
    def upload_wrong_method() -> Response:
        raise HTTPException(
            status_code=405, detail="Method Not Allowed", headers={"Allow": "POST, OPTIONS"}
        )

    @router.get(prefix + "{filename:path}", summary="Download an uploaded file")
    def serve_file(filename: str) -> FileResponse:
        try:
            path = store.resolve(filename)
        except InvalidFilename as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        except UploadNotFound as e:
            raise HTTPException(status_code=404, detail="File not found") from e
        return FileResponse(path)

    return router
