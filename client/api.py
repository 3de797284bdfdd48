"""
PlantPal API への薄いラッパー。

すべてのリクエストに Bearer トークンを付け、JSON とフォーム（multipart）を
出し分ける。2xx 以外は ApiError、204 は None。リトライはしない。
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from schemas.ai import AutofillResponse, ChatMessage, IdentifyResponse
from schemas.article import Article
from schemas.journal import JournalEntry
from schemas.plant import Plant, PlantDraft

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass
class UploadFile:
    """送信するファイル（写真・添付）"""
    name: str
    content: bytes
    content_type: str = "application/octet-stream"

    def as_httpx(self):
        return (self.name, self.content, self.content_type)


class ApiClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        http: Optional[httpx.AsyncClient] = None,
    ):
        self._http = http or httpx.AsyncClient(base_url=base_url, transport=transport)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()

    # -------------------------
    # request helper
    # -------------------------
    async def _request(
        self,
        method: str,
        endpoint: str,
        token: Optional[str] = None,
        json: Any = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> Any:
        headers = {}
        if token is not None:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._http.request(
                method, endpoint, headers=headers, json=json, data=data, files=files
            )
        except httpx.HTTPError as e:
            # 通信エラーもサーバーの 500 と同じ扱い
            logger.warning("%s %s failed: %s", method, endpoint, e)
            raise ApiError(f"Network error: {e}")

        if response.is_error:
            try:
                error_body = response.json()
            except ValueError:
                error_body = None
            message = error_body.get("message") if isinstance(error_body, dict) else None
            raise ApiError(message or f"HTTP error! status: {response.status_code}", response.status_code)

        if response.status_code == 204:
            return None
        try:
            return response.json()
        except ValueError:
            logger.warning("%s %s returned a non-JSON body", method, endpoint)
            raise ApiError("Unexpected response from the server.", response.status_code)

    @staticmethod
    def _parse(model, body: Any):
        """2xx でも形が違えば ApiError にする"""
        try:
            return model.model_validate(body)
        except PydanticValidationError as e:
            logger.warning("unexpected %s payload: %s", model.__name__, e)
            raise ApiError("Unexpected response from the server.")

    def _parse_list(self, model, body: Any) -> list:
        if not isinstance(body, list):
            raise ApiError("Unexpected response from the server.")
        return [self._parse(model, item) for item in body]

    @staticmethod
    def _field(body: Any, key: str) -> Any:
        if not isinstance(body, dict) or key not in body:
            raise ApiError("Unexpected response from the server.")
        return body[key]

    # -------------------------
    # auth
    # -------------------------
    async def sign_in(self, email: str, password: str) -> str:
        body = await self._request("POST", "/auth/signin", json={"email": email, "password": password})
        return self._field(body, "token")

    async def sign_up(self, fullname: str, email: str, password: str) -> str:
        body = await self._request(
            "POST", "/auth/signup", json={"fullname": fullname, "email": email, "password": password}
        )
        return self._field(body, "token")

    # -------------------------
    # plants
    # -------------------------
    async def get_plants(self, token: str) -> List[Plant]:
        return self._parse_list(Plant, await self._request("GET", "/plants", token))

    async def add_plant(self, draft: PlantDraft, token: str, photo: Optional[UploadFile] = None) -> Plant:
        fields = draft.model_dump(by_alias=True, exclude_none=True)
        files = {"photo": photo.as_httpx()} if photo else None
        body = await self._request(
            "POST", "/plants", token, data={k: str(v) for k, v in fields.items()}, files=files
        )
        return self._parse(Plant, body)

    async def update_plant(self, plant: Plant, token: str) -> Plant:
        payload = plant.model_dump(mode="json", by_alias=True, exclude={"id"})
        return self._parse(Plant, await self._request("PUT", f"/plants/{plant.id}", token, json=payload))

    async def delete_plant(self, plant_id: int, token: str) -> None:
        await self._request("DELETE", f"/plants/{plant_id}", token)

    async def update_plant_activity(self, plant_id: int, activity: str, token: str) -> Plant:
        body = await self._request("POST", f"/plants/{plant_id}/activity", token, json={"activity": activity})
        return self._parse(Plant, body)

    # -------------------------
    # journal / articles
    # -------------------------
    async def get_journal_entries(self, token: str) -> List[JournalEntry]:
        return self._parse_list(JournalEntry, await self._request("GET", "/journal", token))

    async def add_journal_entry(
        self, title: str, content: str, token: str, file: Optional[UploadFile] = None
    ) -> JournalEntry:
        files = {"file": file.as_httpx()} if file else None
        body = await self._request(
            "POST", "/journal", token, data={"title": title, "content": content}, files=files
        )
        return self._parse(JournalEntry, body)

    async def delete_journal_entry(self, entry_id: int, token: str) -> None:
        await self._request("DELETE", f"/journal/{entry_id}", token)

    async def get_articles(self, token: str) -> List[Article]:
        return self._parse_list(Article, await self._request("GET", "/articles", token))

    # -------------------------
    # ai
    # -------------------------
    async def ask_ai_chat(self, prompt: str, history: List[ChatMessage], token: str) -> str:
        body = await self._request(
            "POST",
            "/ai/chat",
            token,
            json={"prompt": prompt, "history": [m.model_dump() for m in history]},
        )
        return self._field(body, "response")

    async def identify_plant(self, image: UploadFile, token: str) -> IdentifyResponse:
        body = await self._request("POST", "/ai/identify", token, files={"image": image.as_httpx()})
        return self._parse(IdentifyResponse, body)

    async def autofill_plant_details(self, image: UploadFile, token: str) -> AutofillResponse:
        body = await self._request("POST", "/ai/autofill", token, files={"image": image.as_httpx()})
        return self._parse(AutofillResponse, body)

    async def get_fertilizer_suggestion(self, name: str, scientific_name: str, token: str) -> str:
        body = await self._request(
            "POST",
            "/ai/fertilizer-suggestion",
            token,
            json={"name": name, "scientificName": scientific_name},
        )
        return self._field(body, "suggestion")
