from __future__ import annotations

from typing import Iterable

from fastapi import APIRouter


def build_system_router(subjects: Iterable[str]) -> APIRouter:
    router = APIRouter(tags=["System"])
    subject_list = list(subjects)

    @router.get("/health")
    def health():
        return {"status": "ok"}

    @router.get("/api/subjects")
    def list_subjects():
        """Subjects with a homework endpoint, in configured order."""
        return {"subjects": list(subject_list)}

    return router
