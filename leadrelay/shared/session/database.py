"""Database-backed session store, shared by every worker process pointing at the same database."""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import create_engine, Column, String, Float, DateTime
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


class RelaySession(Base):
    """Last accepted lead per browser session."""
    __tablename__ = "relay_sessions"

    session_id = Column(String, primary_key=True)
    last_submission_at = Column(Float, nullable=False)  # seconds since epoch
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


def _normalize_url(url: str) -> str:
    # Heroku uses postgres:// but SQLAlchemy 2.0+ requires postgresql://
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


class SqlSessionStore:
    def __init__(self, url: str):
        url = _normalize_url(url)
        if url.startswith("sqlite"):
            # In-memory SQLite must share one connection across threads
            engine_kwargs = {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
        else:
            engine_kwargs = {
                "pool_pre_ping": True,  # Verify connections before using
                "pool_recycle": 3600,  # Recycle connections after 1 hour
            }
        self.engine = create_engine(url, **engine_kwargs)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        Base.metadata.create_all(bind=self.engine, checkfirst=True)
        logging.info("Relay session table ready")

    def get_last_submission(self, session_id: str) -> Optional[float]:
        db = self.SessionLocal()
        try:
            record = db.get(RelaySession, session_id)
            return record.last_submission_at if record else None
        finally:
            db.close()

    def record_submission(self, session_id: str, timestamp: float) -> None:
        db = self.SessionLocal()
        try:
            record = db.get(RelaySession, session_id)
            if record is None:
                db.add(RelaySession(session_id=session_id, last_submission_at=timestamp))
            else:
                record.last_submission_at = timestamp
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
