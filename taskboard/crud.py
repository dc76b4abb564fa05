import logging
from datetime import datetime, timedelta, timezone
from typing import Any, List, Mapping, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from . import models, schemas
from .errors import TaskNotFoundError

logger = logging.getLogger(__name__)

_TICK = timedelta(microseconds=1)

MUTABLE_FIELDS = frozenset({"title", "description", "status", "priority", "due_date"})


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column is stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def count_tasks(db: Session) -> int:
    return db.scalar(select(func.count()).select_from(models.Task)) or 0


def insert_task(db: Session, task_in: schemas.TaskCreate) -> models.Task:
    now = utcnow()
    task = models.Task(
        **task_in.model_dump(),
        status=models.TaskStatus.pending,
        created_at=now,
        updated_at=now,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.debug("Task inserted id=%s priority=%s", task.id, task.priority.value)
    return task


def find_task(db: Session, task_id: int) -> Optional[models.Task]:
    return db.get(models.Task, task_id)


def list_tasks(db: Session, task_filter: Optional[schemas.TaskFilter] = None) -> List[models.Task]:
    stmt = select(models.Task)
    if task_filter is not None:
        if task_filter.status is not None:
            stmt = stmt.where(models.Task.status == task_filter.status)
        if task_filter.priority is not None:
            stmt = stmt.where(models.Task.priority == task_filter.priority)
    stmt = stmt.order_by(models.Task.created_at.desc(), models.Task.id.desc())
    tasks = list(db.scalars(stmt))
    logger.debug("Tasks listed filter=%s count=%s", task_filter, len(tasks))
    return tasks


def replace_fields(db: Session, task_id: int, fields: Mapping[str, Any]) -> models.Task:
    """
    Overlay ``fields`` onto the stored task and bump ``updated_at``.

    Only keys present in ``fields`` are written; a present ``None`` clears
    the column. ``updated_at`` always moves forward, even when two writes
    land within the clock's resolution.
    """
    unknown = set(fields) - MUTABLE_FIELDS
    if unknown:
        raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

    task = find_task(db, task_id)
    if task is None:
        raise TaskNotFoundError(task_id)

    for field, value in fields.items():
        setattr(task, field, value)
    task.updated_at = max(utcnow(), task.updated_at + _TICK)
    db.commit()
    db.refresh(task)
    logger.debug("Task updated id=%s fields=%s", task_id, sorted(fields))
    return task


def delete_task(db: Session, task_id: int) -> None:
    task = find_task(db, task_id)
    if task is None:
        raise TaskNotFoundError(task_id)
    db.delete(task)
    db.commit()
    logger.debug("Task deleted id=%s", task_id)
