import threading
from typing import Dict, List, Optional

from repositories.base import Repository, T


class InMemoryRepository(Repository[T]):
    """プロセス内の dict に保持する。再起動で消える"""

    def __init__(self, model: type):
        self.model = model
        self._items: Dict[int, T] = {}
        self._lock = threading.Lock()

    def get(self, record_id: int) -> Optional[T]:
        with self._lock:
            item = self._items.get(record_id)
            return item.model_copy(deep=True) if item is not None else None

    def list(self) -> List[T]:
        with self._lock:
            return [
                self._items[k].model_copy(deep=True)
                for k in sorted(self._items, reverse=True)
            ]

    def put(self, record: T) -> T:
        with self._lock:
            if record.id is None:
                record = record.model_copy(update={"id": max(self._items, default=0) + 1})
            self._items[record.id] = record.model_copy(deep=True)
            return record

    def delete(self, record_id: int) -> bool:
        with self._lock:
            return self._items.pop(record_id, None) is not None
