"""Activity model"""

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from designdesk.models.base import BaseModel, JSONType


class Activity(BaseModel):
    """Activity feed entry for a user, client or project"""

    __tablename__ = "activities"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    client_id = Column(
        Integer, ForeignKey("clients.id", ondelete="SET NULL"), nullable=True, index=True
    )
    project_id = Column(
        Integer, ForeignKey("projects.id", ondelete="SET NULL"), nullable=True, index=True
    )
    type = Column(String(50), nullable=False, index=True)
    description = Column(Text, nullable=False)
    # "metadata" is reserved on declarative classes
    meta = Column("metadata", JSONType, default=dict, nullable=True)
