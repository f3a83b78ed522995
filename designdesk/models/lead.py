"""Lead model"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from designdesk.models.base import BaseModel


class Lead(BaseModel):
    """
    Sales lead moving through the pipeline.
    Stages: new, contacted, qualified, proposal, won, lost
    """

    __tablename__ = "leads"

    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    source = Column(String(100), nullable=True)
    stage = Column(String(50), default="new", nullable=False, index=True)
    tag = Column(String(100), nullable=True)
    assigned_to = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    notes = Column(Text, nullable=True)
    follow_up_date = Column(DateTime, nullable=True, index=True)
