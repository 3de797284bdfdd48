"""
認証トークンの発行と検証。

opaque: "plantpal:<user_id>:<email>" を base64url にしただけの仮トークン。
        署名も期限も無く、形が正しければ認証済みとみなす（本番では使わないこと）。
jwt:    python-jose の HS256 署名 + exp 付き。こちらは署名と期限を検証する。
"""
import base64
import binascii
import time

from jose import JWTError, jwt

from config import Settings
from schemas.auth import TokenClaims, UserRecord

OPAQUE_PREFIX = "plantpal"


class InvalidTokenError(Exception):
    pass


# -------------------------
# opaque
# -------------------------
def _encode_opaque(user: UserRecord) -> str:
    raw = f"{OPAQUE_PREFIX}:{user.id}:{user.email}".encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")


def _decode_opaque(token: str) -> TokenClaims:
    try:
        padded = token + "=" * (-len(token) % 4)
        raw = base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise InvalidTokenError(f"malformed token: {e}")

    parts = raw.split(":", 2)
    if len(parts) != 3 or parts[0] != OPAQUE_PREFIX or not parts[1] or not parts[2]:
        raise InvalidTokenError("malformed token")

    return TokenClaims(sub=parts[1], email=parts[2])


# -------------------------
# jwt
# -------------------------
def _encode_jwt(user: UserRecord, settings: Settings) -> str:
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "exp": int(time.time()) + 60 * settings.jwt_expire_minutes,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def _decode_jwt(token: str, settings: Settings) -> TokenClaims:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise InvalidTokenError(str(e))

    if not payload.get("sub") or not payload.get("email"):
        raise InvalidTokenError("Missing subject claim")
    return TokenClaims(sub=str(payload["sub"]), email=payload["email"])


# -------------------------
# public
# -------------------------
def issue_token(user: UserRecord, settings: Settings) -> str:
    if settings.auth_token_mode == "jwt":
        return _encode_jwt(user, settings)
    return _encode_opaque(user)


def decode_token(token: str, settings: Settings) -> TokenClaims:
    if not token:
        raise InvalidTokenError("empty token")
    if settings.auth_token_mode == "jwt":
        return _decode_jwt(token, settings)
    return _decode_opaque(token)
