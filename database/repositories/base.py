from typing import Any, Optional, Type

from sqlalchemy import select
from sqlalchemy.orm import Session


class BaseRepository:
    def __init__(self, db: Session):
        self.db = db

    def _get_by_pk(self, model: Type[Any], pk: Any) -> Optional[Any]:
        stmt = select(model).where(model.id == pk)
        return self.db.execute(stmt).scalar_one_or_none()

    def flush(self) -> None:
        self.db.flush()
