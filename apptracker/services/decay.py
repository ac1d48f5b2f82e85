"""
Decay Engine — exponential time-decay of accumulated app usage.

Two entry points share the store's transaction primitive:
  - record_usage()               → O(1) per event: +1 to count and raw decay score
  - recompute_all_decay_scores() → batched: fade every score forward to "now"

The fade is applied lazily: a score only moves toward zero when a recompute
pass runs. Callers that rank by time_decay should recompute first; rows that
have not been recomputed since their last usage keep a relatively inflated score.
"""
import logging
import math
import sys
import time

from apptracker.config import TrackerConfig, SORT_TIME_DECAY, DEFAULT_PAGE_SIZE
from apptracker.services.history_store import HistoryStore

logger = logging.getLogger('services.decay')

# Smallest positive normal double. Scores are floored here instead of underflowing to 0.0.
MIN_DECAY_SCORE = sys.float_info.min


def current_millis():
    """Wall clock in milliseconds since the epoch."""
    return int(time.time() * 1000)


def decayed_score(score, last_update, now, decay_constant):
    """
    S_new = S_prev * exp((now - last_update) / -K)

    One K of elapsed time multiplies the score by e^-1 (~0.368). A clock that
    reads earlier than last_update counts as zero elapsed time.
    """
    elapsed = max(0, now - last_update)
    return max(score * math.exp(elapsed / -decay_constant), MIN_DECAY_SCORE)


class DecayEngine:
    """
    Usage:
        engine = DecayEngine(HistoryStore(SessionLocal))
        engine.record_usage('com.example.app', 'com.example.app')
        engine.recompute_all_decay_scores()
        engine.list_ranked('time_decay', limit=20)
    """

    def __init__(self, store=None, config=None, clock=current_millis):
        self.config = config or (store.config if store is not None else TrackerConfig())
        self.store = store or HistoryStore(config=self.config)
        self.clock = clock

    @property
    def decay_constant(self):
        return self.config.decay_constant_ms

    def record_usage(self, package_name, process):
        """
        Count one usage of (package_name, process), creating its row on first sight.

        Identifiers are stripped of surrounding whitespace. Returns the entry as persisted.
        """
        package_name = (package_name or '').strip()
        process = (process or '').strip()
        if not package_name or not process:
            raise ValueError("package_name and process are required")

        now = self.clock()
        with self.store.transaction() as session:
            entry = self.store.find_by_key(package_name, process, session=session)
            if entry is None:
                logger.debug("Inserting new app history: %s, %s", package_name, process)
                return self.store.insert(package_name, process, now, session=session)

            logger.debug("Updating/incrementing app history: %s, %s", package_name, process)
            self.store.update_on_usage(package_name, process, now, session=session)
            session.refresh(entry)
            return entry

    def recompute_all_decay_scores(self):
        """
        Fade every entry's decay score forward to a single snapshot of "now".

        All rows advance together or not at all: any failure rolls back the
        whole pass so no row is decayed twice or skipped on the next attempt.
        Returns the number of entries updated.
        """
        now = self.clock()
        with self.store.transaction() as session:
            entries = self.store.list_all(session=session)
            logger.info("Updating all decay scores for %d entries", len(entries))

            for entry in entries:
                new_score = decayed_score(entry.decay_score, entry.last_update, now, self.decay_constant)
                self.store.update_decay_score(entry.id, new_score, now, session=session)

        return len(entries)

    def set_installed(self, entry_id, installed):
        self.store.set_installed(entry_id, installed)

    def list_ranked(self, sort_order=SORT_TIME_DECAY, limit=DEFAULT_PAGE_SIZE, offset=0):
        return self.store.list_ranked(sort_order, limit, offset)
