"""
Test configuration and fixtures for service-graph-api tests.

Every test gets a fresh in-memory SQLite database. The API client is used
without entering the TestClient context manager so the startup hook (which
targets the configured PostgreSQL database) does not run.
"""
import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.config import settings
from app.db.database import create_db_engine, create_session_factory
from app.db.models import Base
from app.dependencies import get_db
from app.domain.events import event_publisher
from app.application.graph_write_service import GraphWriteService


@pytest.fixture
def engine():
    """In-memory SQLite engine with the schema created."""
    engine = create_db_engine("sqlite://", echo=False)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def db(session_factory):
    """A database session for direct repository/service tests."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def clean_event_subscribers():
    """Isolate tests from handlers registered elsewhere."""
    event_publisher.clear_subscribers()
    yield
    event_publisher.clear_subscribers()


@pytest.fixture
def client(session_factory):
    """Create test client bound to the test database."""
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def writer(db):
    return GraphWriteService(db)


@pytest.fixture
def sample_graph(writer):
    """Create graph 1, the default graph for item routes."""
    return writer.create_graph("Test Graph", graph_id=settings.DEFAULT_GRAPH_ID)
