from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
import logging

from app.config import settings

logger = logging.getLogger(__name__)


def create_db_engine(database_url: str | None = None, echo: bool | None = None) -> Engine:
    """Create a pooled engine for the given URL (defaults to settings.DATABASE_URL)."""
    url = make_url(database_url or settings.DATABASE_URL)
    echo = settings.DB_ECHO if echo is None else echo

    if url.get_backend_name() == "sqlite":
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            # One shared connection, otherwise every checkout sees an empty database
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, echo=echo, **kwargs)

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_conn, _):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
    else:
        engine = create_engine(
            url, echo=echo, pool_size=settings.DB_POOL_SIZE, pool_pre_ping=True
        )

    logger.info("Database engine created for %s", url.render_as_string(hide_password=True))
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create a session factory bound to *engine*."""
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
