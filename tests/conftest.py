"""Shared test fixtures."""
import logging
import os

# Keep create_app() from touching a real database file during tests.
os.environ.setdefault('DATABASE_URL', 'sqlite:///:memory:')

import pytest
from unittest.mock import patch
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from apptracker.config import TrackerConfig
from apptracker.database import Base
from apptracker.services.decay import DecayEngine
from apptracker.services.history_store import HistoryStore


@pytest.fixture
def db_engine():
    """In-memory SQLite engine with schema created, one connection shared by all sessions."""
    engine = create_engine(
        'sqlite:///:memory:',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    import apptracker.models.app_history_entry
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    """Session factory bound to the in-memory engine."""
    return sessionmaker(bind=db_engine, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory):
    """Separate session for assertions. Rolls back after each test."""
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def tracker_config():
    return TrackerConfig()


@pytest.fixture
def store(session_factory, tracker_config):
    return HistoryStore(session_factory, tracker_config)


class FakeClock:
    """Millisecond clock that only moves when a test says so."""

    def __init__(self, now=0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def decay_engine(store, tracker_config, clock):
    return DecayEngine(store, tracker_config, clock=clock)


@pytest.fixture
def make_entries(store):
    """Factory fixture — inserts rows directly, then overrides fields for a test scenario."""
    def _make(*specs):
        entries = []
        with store.transaction() as session:
            for spec in specs:
                spec = dict(spec)
                package_name = spec.pop('package_name')
                process = spec.pop('process', package_name)
                entry = store.insert(package_name, process, spec.pop('now', 0), session=session)
                for field, value in spec.items():
                    setattr(entry, field, value)
                entries.append(entry)
        return entries
    return _make


@pytest.fixture
def app(decay_engine):
    """Flask test app with the shared decay engine swapped for the in-memory one."""
    from apptracker import create_app
    root = logging.getLogger()
    original_level, original_handlers = root.level, root.handlers[:]
    with patch('apptracker.extensions.decay_engine', decay_engine):
        app = create_app()
        app.config['TESTING'] = True
        yield app
    # create_app() reconfigures the root logger
    root.setLevel(original_level)
    root.handlers = original_handlers


@pytest.fixture
def client(app):
    """Flask test client."""
    with app.test_client() as c:
        yield c
