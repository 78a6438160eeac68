from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class Attachment(BaseModel):
    type: str = ""
    url: str = ""
    # Accepted from clients but never persisted or returned.
    name: Optional[str] = Field(default=None, exclude=True)


class HomeworkRecord(BaseModel):
    text: str = ""
    files: List[Attachment] = Field(default_factory=list)
    updated_at: str = ""

    @field_validator("text", "updated_at", mode="before")
    @classmethod
    def _null_as_empty_string(cls, value):
        return "" if value is None else value

    @field_validator("files", mode="before")
    @classmethod
    def _null_as_empty_list(cls, value):
        return [] if value is None else value


class StatusResponse(BaseModel):
    status: str
