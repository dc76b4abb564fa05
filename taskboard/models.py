import enum

from sqlalchemy import Column, DateTime, Enum, Index, Integer, Text

from .database import Base


class TaskStatus(str, enum.Enum):
    pending = "pending"
    completed = "completed"


class TaskPriority(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    status = Column(
        Enum(TaskStatus, name="task_status", values_callable=_enum_values),
        nullable=False,
        default=TaskStatus.pending,
    )
    priority = Column(
        Enum(TaskPriority, name="task_priority", values_callable=_enum_values),
        nullable=False,
        default=TaskPriority.medium,
    )
    due_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    __table_args__ = (
        Index("ix_tasks_status_priority", "status", "priority"),
        Index("ix_tasks_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"Task(id={self.id}, title={self.title!r}, status={self.status})"
