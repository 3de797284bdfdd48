import logging
from typing import Optional

from auth.passwords import hash_password, verify_password
from auth.tokens import issue_token
from config import Settings
from schemas.auth import UserRecord
from schemas.base import utcnow
from services.errors import DuplicateAccountError, InvalidCredentialsError, ValidationError
from services.store import PlantPalStore

logger = logging.getLogger(__name__)


def _normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def sign_up(
    store: PlantPalStore,
    settings: Settings,
    fullname: Optional[str],
    email: Optional[str],
    password: Optional[str],
) -> str:
    """ユーザーを作ってトークンを返す。同じメールが居れば失敗（トークンは出さない）"""
    email = _normalize_email(email)
    if not (fullname or "").strip() or not email or not password:
        raise ValidationError("Full name, email, and password are required.")

    if store.users.find_one(email=email) is not None:
        raise DuplicateAccountError("An account with this email already exists.")

    user = store.users.put(
        UserRecord(
            fullname=fullname.strip(),
            email=email,
            password_hash=hash_password(password),
            created_at=utcnow(),
        )
    )
    logger.info("new user registered: id=%s", user.id)
    return issue_token(user, settings)


def sign_in(
    store: PlantPalStore,
    settings: Settings,
    email: Optional[str],
    password: Optional[str],
) -> str:
    email = _normalize_email(email)
    if not email or not password:
        raise ValidationError("Email and password are required.")

    user = store.users.find_one(email=email)
    if user is None or not verify_password(password, user.password_hash):
        raise InvalidCredentialsError("Invalid email or password.")

    return issue_token(user, settings)
