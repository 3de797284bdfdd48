from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class Repository(ABC, Generic[T]):
    """
    1コレクション分の保存先。

    レコードは `id` を持つ pydantic モデル。put() は id が None なら採番して追加、
    あれば上書きする。list() は新しいもの（id の大きいもの）から返す。
    """

    model: type

    @abstractmethod
    def get(self, record_id: int) -> Optional[T]:
        ...

    @abstractmethod
    def list(self) -> List[T]:
        ...

    @abstractmethod
    def put(self, record: T) -> T:
        ...

    @abstractmethod
    def delete(self, record_id: int) -> bool:
        ...

    def find_one(self, **fields) -> Optional[T]:
        """フィールド一致で1件探す（件数が少ない前提の線形探索）"""
        for record in self.list():
            if all(getattr(record, k, None) == v for k, v in fields.items()):
                return record
        return None

    def count(self) -> int:
        return len(self.list())
