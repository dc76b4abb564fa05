from datetime import datetime, timezone
from typing import Annotated, Any, Dict, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, StrictInt, StringConstraints, field_validator

from .models import TaskPriority, TaskStatus

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000


def _check_title(value: str) -> str:
    # length is checked on the trimmed text, the stored title is what was sent
    length = len(value.strip())
    if length < 1:
        raise ValueError("Title is required")
    if length > TITLE_MAX_LENGTH:
        raise ValueError("Title too long")
    return value


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _as_utc(value: datetime) -> datetime:
    # stored values are naive UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


Title = Annotated[str, AfterValidator(_check_title)]
Description = Annotated[str, StringConstraints(max_length=DESCRIPTION_MAX_LENGTH)]
Timestamp = Annotated[datetime, AfterValidator(_to_naive_utc)]
UtcTimestamp = Annotated[datetime, AfterValidator(_as_utc)]


class TaskCreate(BaseModel):
    title: Title
    description: Optional[Description] = None
    priority: TaskPriority = TaskPriority.medium
    due_date: Optional[Timestamp] = None


class TaskUpdate(BaseModel):
    """
    Partial update payload.

    Absent fields are left untouched. ``description`` and ``due_date``
    accept an explicit null to clear them; ``title``, ``status`` and
    ``priority`` do not.
    """

    id: StrictInt
    title: Optional[Title] = None
    description: Optional[Description] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[Timestamp] = None

    @field_validator("title", "status", "priority", mode="before")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

    def changes(self) -> Dict[str, Any]:
        """Fields the caller actually sent, explicit nulls included."""
        return self.model_dump(exclude_unset=True, exclude={"id"})


class TaskFilter(BaseModel):
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None


class TaskId(BaseModel):
    id: StrictInt


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[UtcTimestamp] = None
    created_at: UtcTimestamp
    updated_at: UtcTimestamp


class DeleteResult(BaseModel):
    success: bool = True


class HealthOut(BaseModel):
    status: str = "ok"
    timestamp: datetime
