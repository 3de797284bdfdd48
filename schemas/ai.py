# schemas/ai.py
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from schemas.base import CamelModel
from schemas.plant import FrequencyDays


class ChatMessage(BaseModel):
    role: Literal["user", "model"]
    text: str


class ChatRequest(BaseModel):
    prompt: str
    history: List[ChatMessage] = []


class ChatResponse(BaseModel):
    response: str


class IdentifyResponse(BaseModel):
    name: str
    match: int = Field(ge=0, le=100)

    @field_validator("match", mode="before")
    @classmethod
    def _percent(cls, v):
        # モデルが "95%" や 0.95 のような形で返してくることがある
        if isinstance(v, str):
            v = v.strip().rstrip("%")
        if isinstance(v, float) and 0 < v <= 1:
            v = v * 100
        try:
            return int(round(float(v)))
        except (TypeError, ValueError):
            raise ValueError(f"match must be a percentage, got {v!r}")


class AutofillResponse(CamelModel):
    name: Optional[str] = None
    scientific_name: str
    watering_frequency: FrequencyDays
    fertilizing_frequency: FrequencyDays
    sunlight: str
    humidity: str
    notes: str = ""


class FertilizerSuggestionRequest(CamelModel):
    name: str
    scientific_name: str = ""


class FertilizerSuggestionResponse(BaseModel):
    suggestion: str
