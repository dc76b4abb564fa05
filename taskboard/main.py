import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import __version__, schemas, services
from .config import get_settings
from .database import dispose_db, get_db, init_db
from .errors import TaskNotFoundError
from .logging_setup import setup_logging
from .models import TaskPriority, TaskStatus

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_dir)
    init_db()
    logger.info("Taskboard API starting version=%s", __version__)
    yield
    dispose_db()


settings = get_settings()

app = FastAPI(title="Taskboard API", version=__version__, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TaskNotFoundError)
async def task_not_found_handler(request: Request, exc: TaskNotFoundError):
    logger.warning("%s path=%s", exc, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc), "code": exc.code},
    )


@app.exception_handler(SQLAlchemyError)
async def storage_failure_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Storage failure path=%s", request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Storage unavailable", "code": "STORAGE_FAILURE"},
    )


@app.get("/healthcheck", response_model=schemas.HealthOut)
def healthcheck():
    return schemas.HealthOut(status="ok", timestamp=datetime.now(timezone.utc))


@app.post("/createTask", response_model=schemas.TaskOut)
def create_task(task_in: schemas.TaskCreate, db: Session = Depends(get_db)):
    return services.create_task(db, task_in)


@app.get("/getTasks", response_model=List[schemas.TaskOut])
def get_tasks(
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    db: Session = Depends(get_db),
):
    return services.list_tasks(db, schemas.TaskFilter(status=status, priority=priority))


@app.get("/getTaskById", response_model=Optional[schemas.TaskOut])
def get_task_by_id(id: int, db: Session = Depends(get_db)):
    return services.get_task_by_id(db, id)


@app.post("/updateTask", response_model=schemas.TaskOut)
def update_task(task_in: schemas.TaskUpdate, db: Session = Depends(get_db)):
    return services.update_task(db, task_in)


@app.post("/deleteTask", response_model=schemas.DeleteResult)
def delete_task(task_in: schemas.TaskId, db: Session = Depends(get_db)):
    return services.delete_task(db, task_in.id)


@app.post("/toggleTaskStatus", response_model=schemas.TaskOut)
def toggle_task_status(task_in: schemas.TaskId, db: Session = Depends(get_db)):
    return services.toggle_task_status(db, task_in.id)


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run("taskboard.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
