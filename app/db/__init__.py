from app.db.models import Base
from app.db.database import create_db_engine, create_session_factory

# Import the comprehensive initialization function
from app.db.init_db import init_database

__all__ = ["Base", "create_db_engine", "create_session_factory", "init_database"]
