import logging
from dataclasses import dataclass

from config import Settings
from repositories.base import Repository
from repositories.memory import InMemoryRepository
from repositories.session_file import SessionFileRepository
from repositories.sql import SqlRepository
from schemas.article import Article
from schemas.auth import UserRecord
from schemas.journal import JournalEntry, JournalFile
from schemas.plant import Plant

logger = logging.getLogger(__name__)


@dataclass
class PlantPalStore:
    """
    アプリ全体のデータ置き場。

    ルーターは FastAPI の Depends で受け取り、必ずリポジトリのメソッド経由で
    読み書きする（保存先を差し替えても呼び出し側は変わらない）。
    """

    users: Repository[UserRecord]
    plants: Repository[Plant]
    journal: Repository[JournalEntry]
    articles: Repository[Article]


# -------------------------
# journal <-> ORM（添付だけ形が違う）
# -------------------------
def _journal_to_row(entry: JournalEntry) -> dict:
    return {
        "title": entry.title,
        "content": entry.content,
        "date": entry.date,
        "file_name": entry.file.name if entry.file else None,
        "file_type": entry.file.type if entry.file else None,
        "file_url": entry.file.url if entry.file else None,
    }


def _journal_to_record(row) -> JournalEntry:
    file = None
    if row.file_url:
        file = JournalFile(name=row.file_name or "", type=row.file_type or "document", url=row.file_url)
    return JournalEntry(id=row.id, title=row.title, content=row.content or "", date=row.date, file=file)


# -------------------------
# builders
# -------------------------
def memory_store() -> PlantPalStore:
    return PlantPalStore(
        users=InMemoryRepository(UserRecord),
        plants=InMemoryRepository(Plant),
        journal=InMemoryRepository(JournalEntry),
        articles=InMemoryRepository(Article),
    )


def session_store(directory: str) -> PlantPalStore:
    return PlantPalStore(
        users=SessionFileRepository(UserRecord, directory, "users"),
        plants=SessionFileRepository(Plant, directory, "plants"),
        journal=SessionFileRepository(JournalEntry, directory, "journal"),
        articles=SessionFileRepository(Article, directory, "articles"),
    )


def sql_store(database_url: str, echo: bool = False) -> PlantPalStore:
    from db.database import init_db, make_engine, make_session_factory
    from models.article import Article as ArticleRow
    from models.journal_entry import JournalEntry as JournalEntryRow
    from models.plant import Plant as PlantRow
    from models.user import User as UserRow

    engine = make_engine(database_url, echo=echo)
    # DBテーブル作成（import時ではなくストア生成時に回す）
    init_db(engine)
    factory = make_session_factory(engine)

    return PlantPalStore(
        users=SqlRepository(UserRecord, UserRow, factory),
        plants=SqlRepository(Plant, PlantRow, factory),
        journal=SqlRepository(
            JournalEntry,
            JournalEntryRow,
            factory,
            to_row=_journal_to_row,
            to_record=_journal_to_record,
        ),
        articles=SqlRepository(Article, ArticleRow, factory),
    )


def build_store(settings: Settings) -> PlantPalStore:
    backend = settings.store_backend
    if backend == "memory":
        store = memory_store()
    elif backend == "session":
        store = session_store(settings.session_store_dir)
    elif backend == "sql":
        store = sql_store(settings.database_url, echo=settings.sql_echo)
    else:
        raise RuntimeError(f"unknown STORE_BACKEND: {backend}")

    logger.info("store backend: %s", backend)
    return store
