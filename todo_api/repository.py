from typing import Any, Mapping

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import UpdateValuesMissingError
from .models import TaskDB


class TaskRepository:
    """Generic CRUD access to the ``task`` table through one session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find(self) -> list[TaskDB]:
        return list(self.session.scalars(select(TaskDB).order_by(TaskDB.id)))

    def find_one(self, task_id: int) -> TaskDB | None:
        return self.session.get(TaskDB, task_id)

    def create(self, **fields: Any) -> TaskDB:
        # Not persisted until save().
        return TaskDB(**fields)

    def save(self, record: TaskDB) -> TaskDB:
        try:
            self.session.add(record)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self.session.refresh(record)
        return record

    def update(self, task_id: int, fields: Mapping[str, Any]) -> int:
        """Apply ``fields`` to the task with ``task_id``; return the affected row count."""
        if not fields:
            raise UpdateValuesMissingError()
        stmt = update(TaskDB).where(TaskDB.id == task_id).values(**fields)
        return self._execute(stmt)

    def delete(self, task_id: int) -> int:
        """Remove the task with ``task_id``; return the affected row count."""
        return self._execute(delete(TaskDB).where(TaskDB.id == task_id))

    def _execute(self, stmt) -> int:
        try:
            result = self.session.execute(stmt)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        return result.rowcount
