"""SQLAlchemy ORM models for CapyTimer."""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class StoredValue(Base):
    """One key-value pair.  A row holds either a number or a string."""

    __tablename__ = "stored_values"

    key = Column(String(128), primary_key=True)
    number_value = Column(Integer, nullable=True)
    text_value = Column(String, nullable=True)
    updated_at = Column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow,
    )

    def __repr__(self) -> str:
        value = self.number_value if self.number_value is not None else self.text_value
        return f"<StoredValue key={self.key} value={value!r}>"
