"""SQLAlchemy models for key store state."""

from sqlalchemy import Column, DateTime, Integer, LargeBinary, String
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func


Base = declarative_base()


class SqlStoreState(Base):
    """SQLAlchemy model holding a serialized store state and its version."""

    __tablename__ = 'keyclaim_state'

    id = Column(String(255), primary_key=True)
    version = Column(Integer, nullable=False)
    data = Column(LargeBinary, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=func.now(), onupdate=func.now()
    )

    def __repr__(self):
        return f"<SqlStoreState(id='{self.id}', version={self.version})>"
