"""Project model"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from designdesk.models.base import BaseModel, JSONType


class Project(BaseModel):
    """
    Project model representing an interior-design job.

    Rooms, tasks, logs and photos are not rows of their own: each
    collection lives in a single JSON column and is always rewritten
    as a whole. The version column guards those read-modify-write
    cycles against concurrent writers.
    """

    __tablename__ = "projects"

    client_id = Column(Integer, ForeignKey("clients.id"), nullable=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    location = Column(Text, nullable=True)
    status = Column(String(50), default="planning", nullable=False, index=True)
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)
    budget = Column(Integer, nullable=True)
    progress = Column(Integer, default=0, nullable=False)

    # Embedded collections
    rooms = Column(JSONType, default=list, nullable=False)
    tasks = Column(JSONType, default=list, nullable=False)
    photos = Column(JSONType, default=list, nullable=False)
    logs = Column(JSONType, default=list, nullable=False)

    # Reporting
    report_settings = Column(JSONType, nullable=True)
    last_report_date = Column(DateTime, nullable=True)

    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self):
        return f"<Project(id={self.id}, name={self.name}, status={self.status})>"
