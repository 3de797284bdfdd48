# schemas/auth.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from schemas.base import CamelModel, to_aware_utc


# 必須チェックはルーター側で 400 を返すため、ここでは全部 Optional
class SignInRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class SignUpRequest(BaseModel):
    fullname: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class TokenResponse(BaseModel):
    token: str


class UserRecord(CamelModel):
    id: Optional[int] = None
    fullname: str = ""
    email: str
    password_hash: str
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return to_aware_utc(v)


class TokenClaims(BaseModel):
    """トークンから取り出した利用者情報"""
    sub: str
    email: str
