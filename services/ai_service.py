import base64
import json
import logging
from typing import List, Optional

from openai import OpenAI, OpenAIError
from pydantic import ValidationError as PydanticValidationError

from schemas.ai import AutofillResponse, ChatMessage, IdentifyResponse
from services.errors import AIServiceError

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "The AI service is currently unavailable. Please try again later."

SYSTEM_PROMPT = (
    "You are PlantPal, a friendly houseplant care expert. "
    "Give practical, concise advice about watering, light, humidity, soil, pests and repotting. "
    "Use **bold** for key points and '*   ' bullets for lists."
)

IDENTIFY_PROMPT = """
Identify the plant species in this photo.

Output format (JSON only):
{
  "name": "<common name>",
  "match": <confidence as an integer percentage 0-100>
}
"""

AUTOFILL_PROMPT = """
Look at this plant photo and fill in its care details.

Output format (JSON only):
{
  "name": "<common name>",
  "scientificName": "<binomial name>",
  "wateringFrequency": <days between waterings, integer>,
  "fertilizingFrequency": <days between feedings, integer>,
  "sunlight": "Low Light" | "Medium Light" | "Bright Light",
  "humidity": "Low Humidity" | "Medium Humidity" | "High Humidity",
  "notes": "<one or two sentences of care notes>"
}
"""

FERTILIZER_PROMPT = (
    "In two or three sentences, suggest a fertilizer type, dilution and schedule for a "
    "{name} ({scientific_name}). Mention seasonal changes if relevant."
)


def encode_image(data: bytes, content_type: Optional[str]) -> str:
    """画像を data URL（base64）にする"""
    mime = content_type if (content_type or "").startswith("image/") else "image/jpeg"
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


class AIService:
    """
    外部の生成AI（OpenAI chat completions）へのプロキシ。

    ここでやるのはプロンプト/画像の整形とレスポンスの検証だけ。
    キー未設定・通信失敗・壊れた出力はすべて AIServiceError にする。
    """

    def __init__(self, api_key: Optional[str], model: str = "gpt-4o-mini", client=None):
        self.model = model
        self._client = client
        if self._client is None and api_key:
            self._client = OpenAI(api_key=api_key)

    # -------------------------
    # low level
    # -------------------------
    def _complete(self, messages: list, json_mode: bool = False) -> str:
        if self._client is None:
            logger.error("AI request rejected: OPENAI_API_KEY is not configured")
            raise AIServiceError(UNAVAILABLE_MESSAGE)

        kwargs = {"model": self.model, "messages": messages}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            resp = self._client.chat.completions.create(**kwargs)
        except OpenAIError as e:
            logger.exception("AI provider error: %s", e)
            raise AIServiceError(UNAVAILABLE_MESSAGE)

        text = (resp.choices[0].message.content or "") if resp.choices else ""
        if not text.strip():
            logger.error("AI provider returned an empty response")
            raise AIServiceError(UNAVAILABLE_MESSAGE)
        return text

    def _complete_json(self, messages: list) -> dict:
        text = self._complete(messages, json_mode=True)
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            logger.error("AI provider returned non-JSON output: %.200s", text)
            raise AIServiceError(UNAVAILABLE_MESSAGE)
        if not isinstance(data, dict):
            raise AIServiceError(UNAVAILABLE_MESSAGE)
        return data

    @staticmethod
    def _image_message(prompt: str, data_url: str) -> dict:
        return {
            "role": "user",
            "content": [
                {"type": "text", "text": prompt},
                {"type": "image_url", "image_url": {"url": data_url}},
            ],
        }

    # -------------------------
    # operations
    # -------------------------
    def chat(self, prompt: str, history: List[ChatMessage]) -> str:
        history = list(history)
        # フロントは今回の質問を含めた履歴を送ってくるので二重にしない
        if history and history[-1].role == "user" and history[-1].text == prompt:
            history = history[:-1]

        messages = [{"role": "system", "content": SYSTEM_PROMPT}]
        for m in history:
            messages.append({"role": "assistant" if m.role == "model" else "user", "content": m.text})
        messages.append({"role": "user", "content": prompt})

        return self._complete(messages).strip()

    def identify(self, image: bytes, content_type: Optional[str]) -> IdentifyResponse:
        data = self._complete_json([
            {"role": "system", "content": "You are a botanist. Output MUST be a JSON object."},
            self._image_message(IDENTIFY_PROMPT, encode_image(image, content_type)),
        ])
        try:
            return IdentifyResponse.model_validate(data)
        except PydanticValidationError as e:
            logger.error("malformed identify response: %s", e)
            raise AIServiceError(UNAVAILABLE_MESSAGE)

    def autofill(self, image: bytes, content_type: Optional[str]) -> AutofillResponse:
        data = self._complete_json([
            {"role": "system", "content": "You are a houseplant care expert. Output MUST be a JSON object."},
            self._image_message(AUTOFILL_PROMPT, encode_image(image, content_type)),
        ])
        try:
            return AutofillResponse.model_validate(data)
        except PydanticValidationError as e:
            logger.error("malformed autofill response: %s", e)
            raise AIServiceError(UNAVAILABLE_MESSAGE)

    def fertilizer_suggestion(self, name: str, scientific_name: str) -> str:
        prompt = FERTILIZER_PROMPT.format(name=name, scientific_name=scientific_name or "unknown species")
        return self._complete([
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]).strip()
