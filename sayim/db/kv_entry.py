from sqlalchemy import Column, DateTime, LargeBinary, String
from sqlalchemy.sql import func

from .database import Base


class KeyValueEntry(Base):
    """Opaque byte values under a well-known key (the pending count list)."""

    __tablename__ = "kv_entries"

    key = Column(String, primary_key=True)
    value = Column(LargeBinary, nullable=False)
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
