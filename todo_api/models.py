from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

Base = declarative_base()


# ---------- Database Models ----------
class TaskDB(Base):
    __tablename__ = "task"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(String, nullable=False)
    due_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    is_finished: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"Task(id: {self.id}, title: '{self.title}', is_finished: {self.is_finished})"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "due_date": self.due_date,
            "is_finished": self.is_finished,
        }


# ---------- Data Models ----------
TASK_EXAMPLE = {
    "id": 23,
    "title": "Workout at the gym",
    "description": "Jumping jacks, burpees, pushups, jump squats, high knees",
    "dueDate": "2024-02-28T03:00:00",
    "isFinished": False,
}


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Body fields stay nullable: NOT NULL columns are enforced by the store.
class TaskCreate(CamelModel):
    title: str | None = None
    description: str | None = None
    due_date: datetime | None = None

    @field_validator("due_date")
    @classmethod
    def due_date_as_utc(cls, value: datetime | None) -> datetime | None:
        # The column is naive; deadlines are stored as UTC wall time.
        if value is not None and value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class TaskUpdate(TaskCreate):
    is_finished: bool | None = None


class TaskOut(CamelModel):
    model_config = ConfigDict(json_schema_extra={"example": TASK_EXAMPLE})

    id: int
    title: str
    description: str
    due_date: datetime | None = None
    is_finished: bool = False
