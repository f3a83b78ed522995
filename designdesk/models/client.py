"""Client model"""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from designdesk.models.base import BaseModel


class Client(BaseModel):
    """Client of the studio, optionally with portal access"""

    __tablename__ = "clients"

    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(50), nullable=True, index=True)
    address = Column(Text, nullable=True)
    company = Column(String(255), nullable=True)
    project_id = Column(Integer, nullable=True)
    portal_access = Column(Boolean, default=False, nullable=False)
    last_login = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(String(50), default="active", nullable=False)
    avatar = Column(Text, nullable=True)
