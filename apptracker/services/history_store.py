"""
Entry Store — durable, queryable persistence of AppHistoryEntry rows.

Each operation is a single bounded statement. Pass `session=` to run it inside
a caller's transaction (see HistoryStore.transaction()); without one the
operation opens its own session, commits on success and rolls back on error.
Errors are never swallowed here — they propagate after rollback.
"""
import logging
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError

from apptracker.config import TrackerConfig, SORT_RECENT, SORT_MOST_USED, SORT_TIME_DECAY
from apptracker.database import get_session
from apptracker.models.app_history_entry import AppHistoryEntry

logger = logging.getLogger('services.history_store')

SORT_COLUMNS = {
    SORT_RECENT: AppHistoryEntry.last_access,
    SORT_MOST_USED: AppHistoryEntry.count,
    SORT_TIME_DECAY: AppHistoryEntry.decay_score,
}


class HistoryStoreError(Exception):
    """Base class for app history store failures."""


class EntryNotFoundError(HistoryStoreError):
    """Raised when a targeted update matches no row."""
    def __init__(self, key):
        self.key = key
        super().__init__(f"No app history entry for {key!r}")


class DuplicateEntryError(HistoryStoreError):
    """Raised when an insert would duplicate an existing (package_name, process) pair."""
    def __init__(self, package_name, process):
        self.package_name = package_name
        self.process = process
        super().__init__(f"App history entry already exists for {package_name}/{process}")


class HistoryStore:
    """
    Persistence for per-(package_name, process) usage records.

    Usage:
        store = HistoryStore(SessionLocal, TrackerConfig())
        entry = store.insert('com.example.app', 'com.example.app', now)
        store.list_ranked('time_decay', limit=20, offset=0)
    """

    def __init__(self, session_factory=None, config=None):
        self.session_factory = session_factory or get_session
        self.config = config or TrackerConfig()

    # ── Session scopes ────────────────────────────────────────────────

    @contextmanager
    def transaction(self):
        """One atomic unit: commit if the block finishes, roll back and re-raise otherwise."""
        session = self.session_factory()
        # Rows handed back to callers outlive this session; keep loaded attributes readable.
        session.expire_on_commit = False
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @contextmanager
    def _scope(self, session):
        if session is not None:
            yield session
            return
        with self.transaction() as own:
            yield own

    # ── Reads ─────────────────────────────────────────────────────────

    def find_by_key(self, package_name, process, session=None):
        """Exact lookup on the unique pair. Returns None when absent."""
        with self._scope(session) as s:
            return s.query(AppHistoryEntry).filter_by(
                package_name=package_name,
                process=process,
            ).first()

    def list_all(self, session=None):
        """Full unordered scan — only the decay recompute pass needs this."""
        with self._scope(session) as s:
            return s.query(AppHistoryEntry).all()

    def list_ranked(self, sort_order, limit, offset=0, session=None):
        """
        Installed, non-ignored entries ordered by `sort_order` descending.

        Ties fall back to id order so consecutive pages never overlap.
        """
        column = SORT_COLUMNS.get(sort_order)
        if column is None:
            raise ValueError(f"Unknown sort order: {sort_order!r}")
        if limit < 0 or offset < 0:
            raise ValueError(f"limit and offset must be non-negative (got {limit}, {offset})")

        with self._scope(session) as s:
            return s.query(AppHistoryEntry).filter(
                AppHistoryEntry.installed.is_(True),
                AppHistoryEntry.package_name.not_in(sorted(self.config.ignored_packages)),
            ).order_by(
                column.desc(),
                AppHistoryEntry.id.asc(),
            ).limit(limit).offset(offset).all()

    # ── Writes ────────────────────────────────────────────────────────

    def insert(self, package_name, process, now, session=None):
        """Create a fresh row: count=1, decay_score=1, installed, both timestamps = now."""
        entry = AppHistoryEntry(
            package_name=package_name,
            process=process,
            installed=True,
            count=1,
            last_access=now,
            decay_score=1.0,
            last_update=now,
        )
        with self._scope(session) as s:
            s.add(entry)
            try:
                s.flush()
            except IntegrityError as e:
                raise DuplicateEntryError(package_name, process) from e

        logger.debug("Inserted app history entry %s", entry)
        return entry

    def update_on_usage(self, package_name, process, now, session=None):
        """
        Record one usage event against an existing row in a single UPDATE.

        Adds a flat 1 to both count and decay_score and marks the row installed
        again (the app may have been re-installed since it was last seen).
        """
        with self._scope(session) as s:
            updated = s.query(AppHistoryEntry).filter_by(
                package_name=package_name,
                process=process,
            ).update({
                AppHistoryEntry.count: AppHistoryEntry.count + 1,
                AppHistoryEntry.last_access: now,
                AppHistoryEntry.decay_score: AppHistoryEntry.decay_score + 1,
                AppHistoryEntry.installed: True,
            }, synchronize_session=False)
            if updated == 0:
                raise EntryNotFoundError((package_name, process))

        logger.debug("Incremented app history entry %s/%s", package_name, process)

    def update_decay_score(self, entry_id, new_score, now, session=None):
        """Persist a recomputed decay score and advance last_update for one row."""
        with self._scope(session) as s:
            updated = s.query(AppHistoryEntry).filter_by(id=entry_id).update({
                AppHistoryEntry.decay_score: new_score,
                AppHistoryEntry.last_update: now,
            }, synchronize_session=False)
            if updated == 0:
                raise EntryNotFoundError(entry_id)

    def set_installed(self, entry_id, installed, session=None):
        with self._scope(session) as s:
            updated = s.query(AppHistoryEntry).filter_by(id=entry_id).update({
                AppHistoryEntry.installed: bool(installed),
            }, synchronize_session=False)
            if updated == 0:
                raise EntryNotFoundError(entry_id)

        logger.info("Marked app history entry %s installed=%s", entry_id, bool(installed))
