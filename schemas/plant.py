from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from schemas.base import CamelModel, to_aware_utc

LightLevel = Literal["Low", "Medium", "Bright"]
HealthStatus = Literal["healthy", "attention"]

LIGHT_LEVELS = ("Low", "Medium", "Bright")

# 頻度（日）は 1 日から 10 年まで
MAX_FREQUENCY_DAYS = 3650
FrequencyDays = Annotated[int, Field(gt=0, le=MAX_FREQUENCY_DAYS)]


class ActivityType(str, Enum):
    """ケア記録の種別（どの last_* を更新するか）"""
    WATER = "water"
    FERTILIZE = "fertilize"
    GROOM = "groom"


class PlantBase(CamelModel):
    name: str
    scientific_name: str = ""
    image: str = ""
    light: LightLevel = "Medium"
    health: HealthStatus = "healthy"
    location: str = ""
    watering_frequency: FrequencyDays
    last_watered: datetime
    fertilizing_frequency: FrequencyDays
    last_fertilized: datetime
    grooming_frequency: FrequencyDays
    last_groomed: datetime
    sunlight: str = ""
    humidity: str = ""
    notes: Optional[str] = None
    fertilizer_details: Optional[str] = None

    @field_validator("last_watered", "last_fertilized", "last_groomed")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return to_aware_utc(v)


class Plant(PlantBase):
    id: Optional[int] = None


class PlantDraft(CamelModel):
    """追加フォームの入力（AI 自動入力でも埋まる）"""
    name: str
    scientific_name: str = ""
    location: str = ""
    watering_frequency: FrequencyDays = 7
    fertilizing_frequency: FrequencyDays = 30
    grooming_frequency: FrequencyDays = 30
    sunlight: str = "Medium Light"
    humidity: str = "Medium Humidity"
    notes: str = ""
    fertilizer_details: Optional[str] = None


class PlantUpdate(CamelModel):
    """PUT /plants/{id}: 送られたフィールドだけ上書きする"""
    name: Optional[str] = None
    scientific_name: Optional[str] = None
    image: Optional[str] = None
    light: Optional[LightLevel] = None
    health: Optional[HealthStatus] = None
    location: Optional[str] = None
    watering_frequency: Optional[FrequencyDays] = None
    last_watered: Optional[datetime] = None
    fertilizing_frequency: Optional[FrequencyDays] = None
    last_fertilized: Optional[datetime] = None
    grooming_frequency: Optional[FrequencyDays] = None
    last_groomed: Optional[datetime] = None
    sunlight: Optional[str] = None
    humidity: Optional[str] = None
    notes: Optional[str] = None
    fertilizer_details: Optional[str] = None


class ActivityRequest(BaseModel):
    # Enum にしないのは、不正値を 422 ではなく 400 "Invalid activity" で返すため
    activity: Optional[str] = None
