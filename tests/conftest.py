"""Pytest configuration and shared fixtures"""

import pytest
from fastapi.testclient import TestClient

from designdesk.config import Settings
from designdesk.database import create_db_engine, create_session_factory, init_db
from designdesk.main import create_app
from designdesk.storage import MemoryStorage, RelationalStorage, StorageAdapter


@pytest.fixture
def memory_storage():
    """Fresh in-process backend"""
    return MemoryStorage()


@pytest.fixture
def db_engine():
    """In-memory SQLite engine with all tables created"""
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def relational_storage(db_engine):
    """Relational backend on in-memory SQLite"""
    return RelationalStorage(create_session_factory(db_engine))


@pytest.fixture(params=["memory", "relational"])
def backend(request):
    """Each backend in turn, for behaviour both must share"""
    if request.param == "memory":
        return request.getfixturevalue("memory_storage")
    return request.getfixturevalue("relational_storage")


@pytest.fixture
def storage(backend):
    """Repository facade over each backend"""
    return StorageAdapter(backend)


@pytest.fixture
def project(backend):
    """Sample project record"""
    return backend.create_project({"name": "Sharma Residence", "location": "Pune"})


@pytest.fixture
def test_settings():
    """Settings for an app served from memory"""
    return Settings(storage_backend="memory", cors_origins="http://testserver")


@pytest.fixture
def client(test_settings):
    """FastAPI test client over a fresh in-process backend"""
    app = create_app(settings=test_settings, storage=StorageAdapter(MemoryStorage()))
    return TestClient(app)
