"""
ダッシュボードの状態管理。

plants / journal / articles をメモリに持ち、画面からの変更を API に流す。
- 作成系はサーバーの応答（採番された ID）を待ってから先頭に追加
- 削除・更新・ケア記録は先にローカルへ反映し、失敗したら
  変更前のコレクション丸ごとに戻す
失敗はここで捕まえてログに出し、error に1つだけメッセージを置く。
"""
import asyncio
import logging
from datetime import date
from typing import List, Optional

from client.api import ApiClient, ApiError, UploadFile
from client import views
from schemas.ai import AutofillResponse, ChatMessage, IdentifyResponse
from schemas.article import Article
from schemas.base import utcnow
from schemas.journal import JournalEntry
from schemas.plant import ActivityType, Plant, PlantDraft
from services.schedule import CYCLES

logger = logging.getLogger(__name__)

LOAD_ERROR = "Failed to fetch data from the server."
ADD_PLANT_ERROR = "Could not add the plant. Please try again."
CHAT_GREETING = "Hello! How can I help you with your plants today? Ask me anything or choose from a common question below."
CHAT_FALLBACK = "Sorry, I'm having trouble connecting right now. Please try again in a moment."
IDENTIFY_FALLBACK = "Sorry, I couldn't identify that plant. Please try another photo."
AUTOFILL_FALLBACK = "Sorry, we couldn't get AI suggestions. Please check your connection and try again."
FERTILIZER_FALLBACK = "Sorry, couldn't fetch a suggestion at this time."


def apply_autofill(draft: PlantDraft, ai_data: AutofillResponse) -> PlantDraft:
    """
    AI の推定値で下書きを埋める。
    名前が空なら学名の先頭の単語を使う（AI が name を返せばそちら）。
    """
    name = draft.name
    if not name:
        if ai_data.name:
            name = ai_data.name
        elif ai_data.scientific_name:
            name = ai_data.scientific_name.split(" ")[0]

    return draft.model_copy(update={
        "name": name,
        "scientific_name": ai_data.scientific_name or draft.scientific_name,
        "watering_frequency": ai_data.watering_frequency or draft.watering_frequency,
        "fertilizing_frequency": ai_data.fertilizing_frequency or draft.fertilizing_frequency,
        "sunlight": ai_data.sunlight or draft.sunlight,
        "humidity": ai_data.humidity or draft.humidity,
        "notes": ai_data.notes or draft.notes,
    })


class DashboardState:
    def __init__(self, api: ApiClient, token: str):
        self.api = api
        self.token = token

        self.plants: List[Plant] = []
        self.journal_entries: List[JournalEntry] = []
        self.articles: List[Article] = []

        self.is_loading = False
        self.error: Optional[str] = None
        self.chat_history: List[ChatMessage] = [ChatMessage(role="model", text=CHAT_GREETING)]

    # -------------------------
    # load
    # -------------------------
    async def load(self) -> bool:
        """3つを並行で取得。1つでも失敗したら全部空のまま失敗扱い"""
        self.is_loading = True
        self.error = None
        try:
            plants, entries, articles = await asyncio.gather(
                self.api.get_plants(self.token),
                self.api.get_journal_entries(self.token),
                self.api.get_articles(self.token),
            )
        except ApiError as e:
            logger.error("dashboard load failed: %s", e.message)
            self.plants, self.journal_entries, self.articles = [], [], []
            self.error = e.message or LOAD_ERROR
            return False
        finally:
            self.is_loading = False

        self.plants, self.journal_entries, self.articles = plants, entries, articles
        return True

    # -------------------------
    # plants
    # -------------------------
    async def add_plant(self, draft: PlantDraft, photo: Optional[UploadFile] = None) -> Optional[Plant]:
        try:
            plant = await self.api.add_plant(draft, self.token, photo=photo)
        except ApiError as e:
            logger.error("failed to add plant: %s", e.message)
            self.error = e.message or ADD_PLANT_ERROR
            return None

        self.plants = [plant] + self.plants
        return plant

    async def delete_plant(self, plant_id: int) -> bool:
        original = list(self.plants)
        self.plants = [p for p in self.plants if p.id != plant_id]
        try:
            await self.api.delete_plant(plant_id, self.token)
        except ApiError as e:
            logger.error("failed to delete plant %s: %s", plant_id, e.message)
            self.plants = original
            return False
        return True

    async def update_plant(self, plant: Plant) -> bool:
        original = list(self.plants)
        self.plants = [plant if p.id == plant.id else p for p in self.plants]
        try:
            await self.api.update_plant(plant, self.token)
        except ApiError as e:
            logger.error("failed to update plant %s: %s", plant.id, e.message)
            self.plants = original
            return False
        return True

    async def log_activity(self, plant_id: int, activity: str) -> bool:
        kind = ActivityType(activity)
        _, last_field = CYCLES[kind.value]

        original = list(self.plants)
        now = utcnow()
        self.plants = [
            p.model_copy(update={last_field: now}) if p.id == plant_id else p
            for p in self.plants
        ]
        try:
            updated = await self.api.update_plant_activity(plant_id, kind.value, self.token)
        except ApiError as e:
            logger.error("failed to log %s for plant %s: %s", kind.value, plant_id, e.message)
            self.plants = original
            return False

        # サーバーの値で置き換える
        self.plants = [updated if p.id == plant_id else p for p in self.plants]
        return True

    # -------------------------
    # journal
    # -------------------------
    async def add_journal_entry(self, title: str, content: str, file: Optional[UploadFile] = None) -> Optional[JournalEntry]:
        if not title.strip():
            return None
        try:
            entry = await self.api.add_journal_entry(title, content, self.token, file=file)
        except ApiError as e:
            logger.error("failed to save journal entry: %s", e.message)
            return None

        self.journal_entries = [entry] + self.journal_entries
        return entry

    async def delete_journal_entry(self, entry_id: int) -> bool:
        original = list(self.journal_entries)
        self.journal_entries = [e for e in self.journal_entries if e.id != entry_id]
        try:
            await self.api.delete_journal_entry(entry_id, self.token)
        except ApiError as e:
            logger.error("failed to delete journal entry %s: %s", entry_id, e.message)
            self.journal_entries = original
            return False
        return True

    # -------------------------
    # ai
    # -------------------------
    async def ask_assistant(self, question: str) -> str:
        question = question.strip()
        if not question:
            return ""

        self.chat_history = self.chat_history + [ChatMessage(role="user", text=question)]
        try:
            answer = await self.api.ask_ai_chat(question, self.chat_history, self.token)
        except ApiError as e:
            logger.error("chat request failed: %s", e.message)
            answer = CHAT_FALLBACK

        self.chat_history = self.chat_history + [ChatMessage(role="model", text=answer)]
        return answer

    async def identify_plant(self, image: UploadFile) -> Optional[IdentifyResponse]:
        self.error = None
        try:
            return await self.api.identify_plant(image, self.token)
        except ApiError as e:
            logger.error("identify request failed: %s", e.message)
            self.error = IDENTIFY_FALLBACK
            return None

    async def autofill(self, draft: PlantDraft, image: UploadFile) -> PlantDraft:
        """失敗したら下書きはそのまま、error にメッセージ"""
        self.error = None
        try:
            ai_data = await self.api.autofill_plant_details(image, self.token)
        except ApiError as e:
            logger.error("autofill request failed: %s", e.message)
            self.error = AUTOFILL_FALLBACK
            return draft
        return apply_autofill(draft, ai_data)

    async def fertilizer_suggestion(self, plant: Plant) -> str:
        try:
            return await self.api.get_fertilizer_suggestion(plant.name, plant.scientific_name, self.token)
        except ApiError as e:
            logger.error("fertilizer suggestion failed: %s", e.message)
            return FERTILIZER_FALLBACK

    # -------------------------
    # derived
    # -------------------------
    def visible_plants(self, query: Optional[views.PlantQuery] = None, today: Optional[date] = None) -> List[Plant]:
        return views.visible_plants(self.plants, query or views.PlantQuery(), today)

    def summary(self, today: Optional[date] = None) -> views.DashboardSummary:
        return views.summarize(self.plants, today)

    def statistics(self, today: Optional[date] = None) -> views.PlantStatistics:
        return views.statistics(self.plants, today)

    def location_options(self) -> List[str]:
        return views.location_options(self.plants)

    def light_options(self) -> List[str]:
        return views.light_options(self.plants)
