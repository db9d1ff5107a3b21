"""
Database initialization and migration utilities.
"""
import logging
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from app.db.models import Base
from app.db.database import create_db_engine
from app.config import get_db_components

logger = logging.getLogger(__name__)


def create_database_if_not_exists(database_url: str | None = None):
    """Create the database if it doesn't exist (PostgreSQL only)."""
    db_components = get_db_components(database_url)
    if make_url(db_components["db_url"]).get_backend_name() != "postgresql":
        logger.debug("Skipping database creation for non-PostgreSQL backend")
        return

    db_name = db_components["db_name"]
    engine = create_engine(db_components["db_url_without_name"], isolation_level="AUTOCOMMIT")

    with engine.connect() as conn:
        # Check if database exists
        result = conn.execute(
            text("SELECT 1 FROM pg_database WHERE datname = :db_name"),
            {"db_name": db_name}
        )

        if not result.fetchone():
            logger.info(f"Creating database: {db_name}")
            # Note: Database names cannot be parameterized in PostgreSQL
            # db_name is validated through get_db_components() parsing
            conn.execute(text(f'CREATE DATABASE "{db_name}"'))
            logger.info(f"Database {db_name} created successfully")
        else:
            logger.info(f"Database {db_name} already exists")

    engine.dispose()


def create_tables(engine: Engine | None = None):
    """Create the graphs, services and relations tables."""
    owned = engine is None
    engine = engine or create_db_engine()

    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("All tables created successfully")

    if owned:
        engine.dispose()


def drop_all_tables(engine: Engine | None = None):
    """Drop all tables (useful for testing)."""
    owned = engine is None
    engine = engine or create_db_engine()

    logger.info("Dropping database tables...")
    Base.metadata.drop_all(bind=engine)
    logger.info("All tables dropped successfully")

    if owned:
        engine.dispose()


def reset_database(engine: Engine | None = None):
    """Drop and recreate all tables."""
    logger.info("Resetting database...")
    drop_all_tables(engine)
    create_tables(engine)
    logger.info("Database reset complete")


def init_database(engine: Engine | None = None):
    """Complete database initialization."""
    logger.info("Initializing database...")
    if engine is None:
        create_database_if_not_exists()
    else:
        create_database_if_not_exists(engine.url.render_as_string(hide_password=False))
    create_tables(engine)
    logger.info("Database initialization complete")


def check_connection(engine: Engine | None = None) -> bool:
    """Return True if the database answers SELECT 1."""
    owned = engine is None
    engine = engine or create_db_engine()

    try:
        with engine.connect() as conn:
            ok = conn.execute(text("SELECT 1")).scalar() == 1
    except SQLAlchemyError:
        logger.exception("Database connection test failed")
        return False
    finally:
        if owned:
            engine.dispose()

    if ok:
        logger.info("Database connection test successful")
    return ok
