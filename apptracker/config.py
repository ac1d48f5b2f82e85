"""
Centralized configuration — env vars, decay constant, ignore list, sort orders.
"""
import os
from dataclasses import dataclass, field


# ── Database ─────────────────────────────────────────────────────────────────
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///app_history.db')

# ── Decay model ──────────────────────────────────────────────────────────────
# Seven days, in the same unit as the stored timestamps (ms since epoch).
DECAY_CONSTANT_MS = 7 * 24 * 60 * 60 * 1000

# ── Packages never shown in ranked listings ─────────────────────────────────
IGNORED_PACKAGES = frozenset({
    'com.android.launcher',         # launcher
    'com.android.launcher2',        # launcher2
    'com.nolanlawson.apptracker',   # the tracker itself
    'com.android.contacts',         # contacts OR phone
    'com.android.phone',            # phone
    'com.android.browser',          # browser
    'com.android.mms',              # messaging
})

# ── Ranked listing ───────────────────────────────────────────────────────────
SORT_RECENT = 'recent'
SORT_MOST_USED = 'most_used'
SORT_TIME_DECAY = 'time_decay'

SORT_ORDERS = [
    SORT_RECENT,
    SORT_MOST_USED,
    SORT_TIME_DECAY,
]

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 200


@dataclass(frozen=True)
class TrackerConfig:
    """Static tracker parameters, passed explicitly into the store and decay engine."""
    decay_constant_ms: int = DECAY_CONSTANT_MS
    ignored_packages: frozenset = field(default=IGNORED_PACKAGES)

    def __post_init__(self):
        if self.decay_constant_ms <= 0:
            raise ValueError(f"decay_constant_ms must be positive, got {self.decay_constant_ms}")
        # Accept any iterable of package names
        object.__setattr__(self, 'ignored_packages', frozenset(self.ignored_packages))
