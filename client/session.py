import json
import logging
import os
from enum import Enum
from typing import Optional

from client.api import ApiClient, ApiError

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_PATH = os.path.join(os.path.expanduser("~"), ".plantpal", "session.json")
TOKEN_KEY = "authToken"


class AuthState(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


class TokenStorage:
    """再起動しても残るトークン置き場（ブラウザの localStorage 相当）"""

    def __init__(self, path: str = DEFAULT_TOKEN_PATH):
        self.path = path

    def load(self) -> Optional[str]:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f).get(TOKEN_KEY) or None
        except (OSError, ValueError, AttributeError) as e:
            logger.warning("could not read stored session %s: %s", self.path, e)
            return None

    def save(self, token: str) -> None:
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({TOKEN_KEY: token}, f)

    def clear(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)


class AuthSession:
    """
    anonymous -> authenticating -> authenticated、ログアウトで anonymous に戻る。

    保存済みトークンは「あるかどうか」だけで復元する（中身は検証しない）。
    """

    def __init__(self, api: ApiClient, storage: TokenStorage):
        self.api = api
        self.storage = storage
        self.state = AuthState.ANONYMOUS
        self.token: Optional[str] = None
        self.error: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.state == AuthState.AUTHENTICATED

    def restore(self) -> bool:
        token = self.storage.load()
        if token:
            self.token = token
            self.state = AuthState.AUTHENTICATED
        return self.is_authenticated

    async def sign_in(self, email: str, password: str) -> bool:
        if not email or not password:
            self.error = "Email and password are required."
            return False
        return await self._authenticate(self.api.sign_in(email, password))

    async def sign_up(self, fullname: str, email: str, password: str) -> bool:
        if not fullname or not email or not password:
            self.error = "Full name, email, and password are required."
            return False
        return await self._authenticate(self.api.sign_up(fullname, email, password))

    async def _authenticate(self, request) -> bool:
        self.state = AuthState.AUTHENTICATING
        self.error = None
        try:
            token = await request
        except ApiError as e:
            logger.info("authentication failed: %s", e.message)
            self.error = e.message or "Failed to authenticate. Please try again."
            self.state = AuthState.ANONYMOUS
            return False

        self.storage.save(token)
        self.token = token
        self.state = AuthState.AUTHENTICATED
        return True

    def logout(self) -> None:
        self.storage.clear()
        self.token = None
        self.state = AuthState.ANONYMOUS
