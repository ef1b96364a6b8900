"""
Database models for the dashboard service.
Raw sector overview snapshots kept between cache warms.
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, JSON

from src.core.database import Base


class SectorSnapshotModel(Base):
    """
    Raw upstream payloads for one sector overview
    (``{"sector": ..., "overview": ..., "recent": ...}``).

    Payloads are stored as fetched; adapters run on read.
    """
    __tablename__ = 'sector_snapshots'

    id = Column(Integer, primary_key=True, autoincrement=True)
    sector_id = Column(Integer, nullable=False, unique=True, index=True)
    payload = Column(JSON, nullable=False)
    fetched_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)

    def is_expired(self, now: datetime = None) -> bool:
        return self.expires_at <= (now or datetime.utcnow())

    def __repr__(self):
        return f"<SectorSnapshot(sector_id={self.sector_id}, expires_at={self.expires_at})>"
