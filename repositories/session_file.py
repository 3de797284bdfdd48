import json
import logging
import os
import threading
from typing import List, Optional

from repositories.base import Repository, T

logger = logging.getLogger(__name__)

KEY_PREFIX = "plantpal."


class SessionFileRepository(Repository[T]):
    """
    セッション用ディレクトリに JSON で保存する。

    固定キー（plantpal.plants など）のファイルに1コレクション分を丸ごと書く。
    操作のたびに読み直し、変更のたびに書き直す。ディレクトリを消せば消える。
    """

    def __init__(self, model: type, directory: str, key: str):
        self.model = model
        self.key = KEY_PREFIX + key
        self.path = os.path.join(directory, f"{self.key}.json")
        self._lock = threading.Lock()
        os.makedirs(directory, exist_ok=True)

    # -------------------------
    # file io
    # -------------------------
    def _load(self) -> List[T]:
        if not os.path.exists(self.path):
            return []
        with open(self.path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        return [self.model.model_validate(item) for item in raw]

    def _save(self, items: List[T]) -> None:
        tmp_path = self.path + ".tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(
                [item.model_dump(mode="json", by_alias=True) for item in items],
                f,
                ensure_ascii=False,
            )
        os.replace(tmp_path, self.path)
        logger.debug("wrote %d records to %s", len(items), self.path)

    # -------------------------
    # repository
    # -------------------------
    def get(self, record_id: int) -> Optional[T]:
        with self._lock:
            return next((i for i in self._load() if i.id == record_id), None)

    def list(self) -> List[T]:
        with self._lock:
            return sorted(self._load(), key=lambda i: i.id, reverse=True)

    def put(self, record: T) -> T:
        with self._lock:
            items = self._load()
            if record.id is None:
                record = record.model_copy(update={"id": max((i.id for i in items), default=0) + 1})
            items = [i for i in items if i.id != record.id]
            items.append(record)
            self._save(items)
            return record

    def delete(self, record_id: int) -> bool:
        with self._lock:
            items = self._load()
            kept = [i for i in items if i.id != record_id]
            if len(kept) == len(items):
                return False
            self._save(kept)
            return True
