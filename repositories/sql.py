from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from repositories.base import Repository, T


def _default_to_row(record) -> Dict[str, Any]:
    return record.model_dump(exclude={"id"})


class SqlRepository(Repository[T]):
    """
    SQLAlchemy の ORM モデル1つ分。

    pydantic レコードとの変換はデフォルトでフィールド名そのまま。
    形が違うもの（journal の添付など）は to_row / to_record を渡す。
    """

    def __init__(
        self,
        model: type,
        orm_model: type,
        session_factory: Callable[[], Session],
        to_row: Callable[[Any], Dict[str, Any]] = _default_to_row,
        to_record: Optional[Callable[[Any], Any]] = None,
    ):
        self.model = model
        self.orm_model = orm_model
        self._session_factory = session_factory
        self._to_row = to_row
        self._to_record = to_record or model.model_validate

    def get(self, record_id: int) -> Optional[T]:
        with self._session_factory() as db:
            row = db.get(self.orm_model, record_id)
            return self._to_record(row) if row is not None else None

    def list(self) -> List[T]:
        with self._session_factory() as db:
            rows = db.query(self.orm_model).order_by(self.orm_model.id.desc()).all()
            return [self._to_record(r) for r in rows]

    def put(self, record: T) -> T:
        values = self._to_row(record)
        with self._session_factory() as db:
            try:
                row = db.get(self.orm_model, record.id) if record.id is not None else None
                if row is None:
                    row = self.orm_model(**values)
                    if record.id is not None:
                        row.id = record.id
                    db.add(row)
                else:
                    for key, value in values.items():
                        setattr(row, key, value)
                db.commit()
                db.refresh(row)
            except Exception:
                db.rollback()
                raise
            return self._to_record(row)

    def delete(self, record_id: int) -> bool:
        with self._session_factory() as db:
            row = db.get(self.orm_model, record_id)
            if row is None:
                return False
            try:
                db.delete(row)
                db.commit()
            except Exception:
                db.rollback()
                raise
            return True
