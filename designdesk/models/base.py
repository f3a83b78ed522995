"""Base model with common fields for all database models"""

from datetime import datetime, timezone
from typing import Any, Dict
from sqlalchemy import JSON, Column, DateTime, Integer
from sqlalchemy.dialects.postgresql import JSONB
from designdesk.database import Base

# JSONB on PostgreSQL, plain JSON everywhere else (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class BaseModel(Base):
    """Abstract base model with common fields"""

    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    @classmethod
    def column_attributes(cls) -> Dict[str, str]:
        """Map storage column names to ORM attribute names"""
        return {
            column.name: attr.key
            for attr in cls.__mapper__.column_attrs
            for column in attr.columns
        }

    def to_dict(self) -> Dict[str, Any]:
        """Plain snake_case record keyed by column name"""
        return {
            name: getattr(self, key)
            for name, key in self.column_attributes().items()
        }

    def __repr__(self):
        return f"<{self.__class__.__name__}(id={self.id})>"
