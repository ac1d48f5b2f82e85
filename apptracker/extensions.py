"""
Shared instances — the history store and decay engine used by the routes.

Built against the module-level session factory, so importing this module never
opens a connection. Tests patch `decay_engine` with one bound to their own DB.
"""
from apptracker.config import TrackerConfig
from apptracker.database import get_session
from apptracker.services.decay import DecayEngine
from apptracker.services.history_store import HistoryStore


tracker_config = TrackerConfig()

history_store = HistoryStore(get_session, tracker_config)

decay_engine = DecayEngine(history_store, tracker_config)
