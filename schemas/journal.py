from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from schemas.base import CamelModel, to_aware_utc


class JournalFile(BaseModel):
    name: str
    type: Literal["image", "document"]
    url: str


class JournalEntry(CamelModel):
    id: Optional[int] = None
    title: str
    content: str = ""
    date: datetime
    file: Optional[JournalFile] = None

    @field_validator("date")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return to_aware_utc(v)
