"""Proposal model"""

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from designdesk.models.base import BaseModel, JSONType


class Proposal(BaseModel):
    """Client proposal; the editor document is kept as JSON"""

    __tablename__ = "proposals"

    client_id = Column(Integer, ForeignKey("clients.id"), nullable=True, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    data_json = Column(JSONType, default=dict, nullable=True)
    pdf_url = Column(Text, nullable=True)
    status = Column(String(50), default="draft", nullable=False, index=True)
