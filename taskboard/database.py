import logging
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .config import get_settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def build_engine(url: str) -> Engine:
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(url, connect_args=connect_args, future=True)


engine = build_engine(get_settings().database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Engine = engine) -> None:
    from . import models  # noqa: F401  registers the tasks table

    Base.metadata.create_all(bind=bind)
    logger.info("Schema ready url=%s", bind.url.render_as_string(hide_password=True))


def dispose_db(bind: Engine = engine) -> None:
    bind.dispose()
    logger.info("Engine disposed url=%s", bind.url.render_as_string(hide_password=True))


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
