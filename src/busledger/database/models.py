"""SQLAlchemy models for busledger database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    String,
    DateTime,
    JSON,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class AppState(Base):
    """Serialized ledger aggregate, one row per application key."""

    __tablename__ = "app_state"

    key = Column(String, primary_key=True)
    payload = Column(JSON, nullable=False)
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
