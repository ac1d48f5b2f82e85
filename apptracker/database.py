"""
Database engine + session factory.

Defaults to a local SQLite file; any SQLAlchemy URL works via DATABASE_URL.
get_session() always returns a real session.
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from apptracker.config import DATABASE_URL


class Base(DeclarativeBase):
    pass


# Some hosts inject postgres:// but SQLAlchemy 2.x requires postgresql://
url = DATABASE_URL.replace('postgres://', 'postgresql://', 1)

# SQLite needs different engine kwargs than Postgres
if url.startswith('sqlite'):
    engine = create_engine(url, connect_args={'check_same_thread': False})
else:
    engine = create_engine(url, pool_pre_ping=True, pool_size=5, max_overflow=10)

# Rows handed back to callers outlive their session; keep loaded attributes readable.
SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)


def get_session():
    """Return a new DB session."""
    return SessionLocal()


def init_db(bind=None):
    """Create the app history table if it does not exist yet."""
    import apptracker.models.app_history_entry  # noqa: F401  (registers the table)
    Base.metadata.create_all(bind or engine)
