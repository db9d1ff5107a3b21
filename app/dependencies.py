from __future__ import annotations

from functools import lru_cache
from typing import Iterator

from fastapi import Depends
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.config import settings
from app.db.database import create_db_engine, create_session_factory
from app.application.graph_assembly_service import GraphAssemblyService
from app.application.graph_write_service import GraphWriteService


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Process-wide pooled engine, built on first use."""
    return create_db_engine(settings.DATABASE_URL)


@lru_cache(maxsize=1)
def get_session_factory() -> sessionmaker:
    return create_session_factory(get_engine())


def get_db() -> Iterator[Session]:
    """One session per request."""
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


def get_graph_assembly_service(db: Session = Depends(get_db)) -> GraphAssemblyService:
    return GraphAssemblyService(db)


def get_graph_write_service(db: Session = Depends(get_db)) -> GraphWriteService:
    return GraphWriteService(db)


def dispose_engine() -> None:
    """Close pooled connections; called at shutdown."""
    if get_engine.cache_info().currsize:
        get_engine().dispose()
    get_session_factory.cache_clear()
    get_engine.cache_clear()
