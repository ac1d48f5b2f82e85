"""Tests for the alembic revision that creates app_history_entries."""
import importlib.util
from pathlib import Path

import pytest
from alembic.runtime.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import create_engine, inspect

from apptracker.database import Base
import apptracker.models.app_history_entry  # noqa: F401

VERSIONS_DIR = Path(__file__).resolve().parents[2] / 'alembic' / 'versions'


def _load_revision():
    path = VERSIONS_DIR / '3f9a6c1d2e07_create_app_history_entries.py'
    spec = importlib.util.spec_from_file_location('create_app_history_entries', path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def migration_engine():
    engine = create_engine('sqlite:///:memory:')
    yield engine
    engine.dispose()


def _run(engine, fn):
    with engine.begin() as conn:
        ctx = MigrationContext.configure(conn)
        with Operations.context(ctx):
            fn()


class TestCreateAppHistoryEntries:

    def test_is_initial_revision(self):
        revision = _load_revision()
        assert revision.down_revision is None

    def test_upgrade_matches_model_columns(self, migration_engine):
        _run(migration_engine, _load_revision().upgrade)

        columns = {c['name'] for c in inspect(migration_engine).get_columns('app_history_entries')}
        model_columns = {c.name for c in Base.metadata.tables['app_history_entries'].columns}
        assert columns == model_columns

    def test_upgrade_creates_unique_pair_constraint(self, migration_engine):
        _run(migration_engine, _load_revision().upgrade)

        uniques = inspect(migration_engine).get_unique_constraints('app_history_entries')
        assert any(set(u['column_names']) == {'package_name', 'process'} for u in uniques)

    def test_downgrade_drops_table(self, migration_engine):
        revision = _load_revision()
        _run(migration_engine, revision.upgrade)
        _run(migration_engine, revision.downgrade)
        assert 'app_history_entries' not in inspect(migration_engine).get_table_names()
