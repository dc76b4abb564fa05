"""Business rules between the API layer and the store."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from . import crud, models, schemas
from .errors import TaskNotFoundError
from .models import TaskStatus

logger = logging.getLogger(__name__)

# toggle is a fixed flip; more states would need more entries here
STATUS_TRANSITIONS = {
    TaskStatus.pending: TaskStatus.completed,
    TaskStatus.completed: TaskStatus.pending,
}


def next_status(current: TaskStatus) -> TaskStatus:
    return STATUS_TRANSITIONS[TaskStatus(current)]


def create_task(db: Session, task_in: schemas.TaskCreate) -> models.Task:
    return crud.insert_task(db, task_in)


def list_tasks(db: Session, task_filter: Optional[schemas.TaskFilter] = None) -> List[models.Task]:
    return crud.list_tasks(db, task_filter)


def get_task_by_id(db: Session, task_id: int) -> Optional[models.Task]:
    return crud.find_task(db, task_id)


def update_task(db: Session, task_in: schemas.TaskUpdate) -> models.Task:
    return crud.replace_fields(db, task_in.id, task_in.changes())


def toggle_task_status(db: Session, task_id: int) -> models.Task:
    task = crud.find_task(db, task_id)
    if task is None:
        raise TaskNotFoundError(task_id)
    new_status = next_status(task.status)
    logger.info("Toggling task id=%s %s -> %s", task_id, task.status.value, new_status.value)
    return crud.replace_fields(db, task_id, {"status": new_status})


def delete_task(db: Session, task_id: int) -> schemas.DeleteResult:
    crud.delete_task(db, task_id)
    return schemas.DeleteResult(success=True)
