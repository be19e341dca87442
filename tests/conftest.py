"""Shared pytest fixtures for busledger tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal

import pytest

from busledger.database.factories import create_sqlite_database
from busledger.domain.automation import AutomationEngine
from busledger.domain.ledger import LedgerStore
from busledger.domain.objectives import ObjectiveLifecycle
from busledger.domain.summary import SummaryService
from busledger.sync.base import SyncPort


class RecordingSync(SyncPort):
    """Sync port that records every outbound call."""

    def __init__(self, fail: bool = False):
        self.calls = []
        self.fail = fail

    def _record(self, *call):
        self.calls.append(call)
        if self.fail:
            raise ConnectionError("remote unavailable")

    def push_entity(self, collection_name, entity):
        self._record("entity", collection_name, entity.id)

    def push_removal(self, collection_name, entity_id):
        self._record("removal", collection_name, entity_id)

    def push_settings(self, settings):
        self._record("settings", settings)

    def push_cash_balance(self, cash_balance):
        self._record("cash", cash_balance)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def recording_sync():
    """Create a sync port recording outbound calls."""
    return RecordingSync()


@pytest.fixture
def store(temp_db, recording_sync):
    """Create a LedgerStore backed by a temporary database."""
    return LedgerStore.open(temp_db, sync=recording_sync)


@pytest.fixture
def memory_store():
    """Create a LedgerStore without persistence."""
    return LedgerStore()


@pytest.fixture
def engine(store):
    """Create an AutomationEngine over the test store."""
    return AutomationEngine(store)


@pytest.fixture
def lifecycle(store):
    """Create an ObjectiveLifecycle over the test store."""
    return ObjectiveLifecycle(store)


@pytest.fixture
def summary_service(store):
    """Create a SummaryService over the test store."""
    return SummaryService(store)


@pytest.fixture
def sample_day():
    return date(2024, 3, 15)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def failing_sync():
    """Create a sync port whose every call raises."""
    return RecordingSync(fail=True)
