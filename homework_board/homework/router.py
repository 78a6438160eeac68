from __future__ import annotations

import logging
from typing import Iterable

from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from ..errors import StorageError
from ..utils.dates import format_display_timestamp
from .schemas import HomeworkRecord, StatusResponse
from .store import RecordStore

logger = logging.getLogger(__name__)

HOMEWORK_PREFIX = "/api/homework/"

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
UNSUPPORTED_METHODS = ["HEAD", "PUT", "PATCH", "DELETE"]


def build_homework_router(subjects: Iterable[str], store: RecordStore) -> APIRouter:
    """
    Register ``/api/homework/{subject}`` for each configured subject.

    Paths are registered literally rather than through a path parameter. A
    slug outside ``subjects`` only reaches the trailing catch-all, which
    answers 404 for every verb.
    """
    router = APIRouter(tags=["Homework"])
    for subject in subjects:
        _register_subject(router, subject, store)

    # Must stay last: the static mount would answer 405 to non-GET verbs.
    def unknown_subject(rest: str) -> Response:
        raise HTTPException(status_code=404, detail="Not Found")

    router.add_api_route(
        HOMEWORK_PREFIX + "{rest:path}",
        unknown_subject,
        methods=ALL_METHODS,
        include_in_schema=False,
        name="unknown_subject",
    )
    return router


def _register_subject(router: APIRouter, subject: str, store: RecordStore) -> None:
    path = HOMEWORK_PREFIX + subject

    def get_homework() -> HomeworkRecord:
        try:
            return store.load(subject)
        except StorageError as e:
            raise HTTPException(status_code=500, detail="Error loading homework") from e

    async def post_homework(request: Request) -> StatusResponse:
        body = await request.body()
        try:
            record = HomeworkRecord.model_validate_json(body)
        except ValidationError as e:
            logger.info(f"Rejected homework update for '{subject}': {e.error_count()} error(s)")
            raise HTTPException(status_code=400, detail="Invalid JSON") from e

        record.updated_at = format_display_timestamp(record.updated_at)
        try:
            await run_in_threadpool(store.save, subject, record)
        except StorageError as e:
            raise HTTPException(status_code=500, detail="Error saving homework") from e
        return StatusResponse(status="success")

    def preflight() -> Response:
        return Response(status_code=200)

    def wrong_method() -> Response:
        raise HTTPException(
            status_code=405,
            detail="Method not allowed",
            headers={"Allow": "GET, POST, OPTIONS"},
        )

    router.add_api_route(
        path,
        get_homework,
        methods=["GET"],
        response_model=HomeworkRecord,
        name=f"get_homework_{subject}",
        summary=f"Get the current homework for {subject}",
    )
    router.add_api_route(
        path,
        post_homework,
        methods=["POST"],
        response_model=StatusResponse,
        name=f"post_homework_{subject}",
        summary=f"Replace the current homework for {subject}",
    )
    router.add_api_route(
        path,
        preflight,
        methods=["OPTIONS"],
        include_in_schema=False,
        name=f"preflight_homework_{subject}",
    )
    router.add_api_route(
        path,
        wrong_method,
        methods=UNSUPPORTED_METHODS,
        include_in_schema=False,
        name=f"wrong_method_homework_{subject}",
    )
