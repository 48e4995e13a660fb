"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from typing import Generator, Optional
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

# Add src directory to Python path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from database.base import Base
from database import models  # noqa: F401
from services.generation_recorder import GenerationRecorder
from services.notifications import GenerationEvents
from services.project_store import ProjectStore


# ---------------------------------------------------------------------------
# Database Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def in_memory_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def db_session(in_memory_engine) -> Generator[Session, None, None]:
    """Create a database session for testing."""
    SessionLocal = sessionmaker(bind=in_memory_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


# ---------------------------------------------------------------------------
# Project Store Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def store() -> Generator[ProjectStore, None, None]:
    """A fresh project store, closed after the test."""
    project_store = ProjectStore()
    yield project_store
    project_store.close()


@pytest.fixture
def project_dir(tmp_path: Path, store: ProjectStore) -> Path:
    """An initialized (but not opened) project directory."""
    path = tmp_path / "MyProject"
    store.create(path)
    return path


@pytest.fixture
def open_project(store: ProjectStore, project_dir: Path) -> Path:
    """An initialized project that is the active one."""
    store.open(project_dir)
    return project_dir


@pytest.fixture
def recorder(store: ProjectStore) -> GenerationRecorder:
    return GenerationRecorder(store)


# ---------------------------------------------------------------------------
# Generation Fixtures
# ---------------------------------------------------------------------------

class FakeCredentials:
    """Credential collaborator returning a fixed key."""

    def __init__(self, api_key: Optional[str] = "sk-test"):
        self.api_key = api_key

    def get(self) -> Optional[str]:
        return self.api_key

    def set(self, api_key: str) -> None:
        self.api_key = api_key


@pytest.fixture
def credentials() -> FakeCredentials:
    return FakeCredentials()


@pytest.fixture
def fake_client() -> MagicMock:
    """Stability client stub returning PNG-looking bytes."""
    client = MagicMock()
    client.generate_image.return_value = b"\x89PNG\r\n\x1a\nfake-image"
    return client


@pytest.fixture
def events() -> GenerationEvents:
    return GenerationEvents()
