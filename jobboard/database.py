"""
Database schema and connection management.

Uses SQLite with SQLAlchemy to back the profile service.
"""

import asyncio
from datetime import datetime
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine, Column, String, DateTime
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from .logger import StructuredLogger, get_logger
from .models import DocumentRef, Profile
from .services import SaveError

Base = declarative_base()


class ProfileRecord(Base):
    """Saved profile, keyed by email."""

    __tablename__ = "profiles"

    email = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    phone_number = Column(String, nullable=False, default="")
    school = Column(String, nullable=False)
    resume = Column(String, nullable=True)
    certificate = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    def to_profile(self) -> Profile:
        return Profile(
            name=self.name,
            email=self.email,
            phone_number=self.phone_number or "",
            school=self.school,
            resume_ref=DocumentRef(self.resume) if self.resume else None,
            certificate_ref=DocumentRef(self.certificate) if self.certificate else None,
        )


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)


def get_session(db_path: Path):
    """
    Get database session.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy session
    """
    engine = create_engine(f"sqlite:///{db_path}")
    Session = sessionmaker(bind=engine)
    return Session()


def upsert_profile(db_path: Path, profile: Profile) -> None:
    session = get_session(db_path)
    try:
        record = session.get(ProfileRecord, profile.email)
        if record is None:
            record = ProfileRecord(email=profile.email)
            session.add(record)
        record.name = profile.name
        record.phone_number = profile.phone_number
        record.school = profile.school
        record.resume = profile.resume_ref.location if profile.resume_ref else None
        record.certificate = profile.certificate_ref.location if profile.certificate_ref else None
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        raise
    finally:
        session.close()


def load_profile(db_path: Path, email: str) -> Optional[Profile]:
    session = get_session(db_path)
    try:
        record = session.get(ProfileRecord, email)
        return record.to_profile() if record else None
    finally:
        session.close()


class DatabaseProfileService:
    """
    ProfileService backed by a local SQLite file.

    Args:
        db_path: Path to SQLite database file (created on first use)
        latency: Optional delay before writing, mirroring the simulated service
    """

    def __init__(self, db_path: Path, latency: float = 0.0, logger: Optional[StructuredLogger] = None):
        self.db_path = db_path
        self.latency = latency
        self._logger = logger or get_logger()
        self._initialized = False

    async def save(self, profile: Profile) -> None:
        await asyncio.sleep(self.latency)
        try:
            if not self._initialized:
                init_database(self.db_path)
                self._initialized = True
            upsert_profile(self.db_path, profile)
        except (SQLAlchemyError, OSError) as e:
            self._logger.error("Profile write failed", db=str(self.db_path), error=str(e))
            raise SaveError(f"Could not write profile to {self.db_path}: {e}") from e
