"""Estimate model"""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, Text
from designdesk.models.base import BaseModel, JSONType


class Estimate(BaseModel):
    """Cost estimate; line items and options live in config_json"""

    __tablename__ = "estimates"

    client_id = Column(Integer, ForeignKey("clients.id"), nullable=True, index=True)
    lead_id = Column(Integer, ForeignKey("leads.id"), nullable=True, index=True)
    config_json = Column(JSONType, default=dict, nullable=True)
    total = Column(Integer, default=0, nullable=False)
    gst = Column(Integer, default=0, nullable=False)
    pdf_url = Column(Text, nullable=True)
    is_template = Column(Boolean, default=False, nullable=False)
