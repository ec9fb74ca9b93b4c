from __future__ import annotations

import logging
from typing import Iterator, List, Optional

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from .config import get_settings

logger = logging.getLogger(__name__)

TABLES = ("brands", "menu_items", "nutrition", "ingest_logs")


def _sqlite_connect_args(url: str) -> dict:
    # the ingest script and the API share the same SQLite file across threads
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


settings = get_settings()

engine = create_engine(
    settings.database_url,
    echo=settings.database_echo,
    connect_args=_sqlite_connect_args(settings.database_url),
)


def init_db(bind: Optional[Engine] = None) -> List[str]:
    """Create missing tables and return the table names now present."""
    from burgerlab import models  # noqa: F401  (registers the tables)

    target = bind if bind is not None else engine
    SQLModel.metadata.create_all(target)
    names = inspect(target).get_table_names()
    missing = [name for name in TABLES if name not in names]
    if missing:
        logger.warning("Tables missing after init_db: %s", ", ".join(missing))
    return names


def get_session() -> Iterator[Session]:
    with Session(engine) as session:
        yield session
