"""Shared test fixtures."""
import json
from pathlib import Path
from typing import Generator

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# Import all models so SQLModel.metadata knows about them
from healthnotes.models.sync import SyncLog  # noqa: F401
from healthnotes.config import Settings
from healthnotes.sync.notes import NoteUpdater
from healthnotes.sync.summary import RunSummary
from healthnotes.vault.locator import DocumentLocator
from healthnotes.vault.store import VaultStore

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine. Tables recreated fresh for each test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="test_session")
def test_session_fixture(engine) -> Generator[Session, None, None]:
    """Provides a DB session connected to in-memory SQLite."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="settings")
def settings_fixture(tmp_path: Path) -> Settings:
    """Settings pointing at an empty vault in tmp_path, isolated from env/.env."""
    return Settings(
        _env_file=None,
        vault_path=str(tmp_path),
        daily_note_folder="Daily",
        table_subfolder="Health",
        timezone="UTC",
    )


@pytest.fixture(name="store")
def store_fixture(tmp_path: Path) -> VaultStore:
    return VaultStore(tmp_path)


@pytest.fixture(name="summary")
def summary_fixture() -> RunSummary:
    return RunSummary()


@pytest.fixture(name="notes")
def notes_fixture(store: VaultStore, settings: Settings, summary: RunSummary) -> NoteUpdater:
    return NoteUpdater(DocumentLocator(store, settings), store, summary)


@pytest.fixture(name="snapshot_attributes")
def snapshot_attributes_fixture() -> dict:
    """Raw `attributes` object of a captured Health Connect sensor state."""
    return json.loads((FIXTURES_DIR / "sensor_snapshot.json").read_text())
