"""
AppHistoryEntry model — one row per unique (package_name, process) pair.

Rows are never deleted; uninstalled apps keep their history with installed=False.
"""
from sqlalchemy import Column, Integer, BigInteger, Boolean, Float, Text, UniqueConstraint

from apptracker.database import Base


class AppHistoryEntry(Base):
    __tablename__ = 'app_history_entries'

    id = Column(Integer, primary_key=True, autoincrement=True)
    package_name = Column(Text, nullable=False)
    process = Column(Text, nullable=False)
    installed = Column(Boolean, nullable=False, default=True)
    count = Column(Integer, nullable=False, default=1)
    last_access = Column(BigInteger, nullable=False)   # ms since epoch
    decay_score = Column(Float, nullable=False, default=1.0)
    last_update = Column(BigInteger, nullable=False)   # ms since epoch of last decay recompute

    __table_args__ = (
        UniqueConstraint('package_name', 'process', name='uq_app_history_package_process'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'package_name': self.package_name,
            'process': self.process,
            'installed': self.installed,
            'count': self.count,
            'last_access': self.last_access,
            'decay_score': self.decay_score,
            'last_update': self.last_update,
        }

    def __repr__(self):
        return (
            f'<AppHistoryEntry id={self.id} {self.package_name}/{self.process} '
            f'count={self.count} decay_score={self.decay_score} '
            f'last_access={self.last_access} last_update={self.last_update} '
            f'installed={self.installed}>'
        )
