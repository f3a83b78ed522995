"""Moodboard model"""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text
from designdesk.models.base import BaseModel, JSONType


class Moodboard(BaseModel):
    """Moodboard with media items and client comments"""

    __tablename__ = "moodboards"

    client_id = Column(Integer, ForeignKey("clients.id"), nullable=True, index=True)
    name = Column(String(255), nullable=True)
    theme = Column(String(255), nullable=True)
    media = Column(JSONType, default=list, nullable=True)
    comments = Column(JSONType, default=list, nullable=True)
    shared_link = Column(Text, nullable=True)
    is_template = Column(Boolean, default=False, nullable=False)
